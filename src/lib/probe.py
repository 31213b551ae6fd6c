"""
Capability probing for optional tools

Tools are located the way the bundler itself would find them: starting
at a base directory, walk up through every ancestor and look for
node_modules/<name>. A miss is a normal outcome ("feature unavailable"),
never an error.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from .log import LOG


@dataclass(frozen=True)
class Capability:
    """
    Result of probing for one tool

    Attributes:
        name: Package name that was probed (e.g., "sass-loader")
        path: Resolved package directory, or None when absent
    """
    name: str
    path: Optional[Path] = None

    @property
    def present(self) -> bool:
        return self.path is not None


class ModuleResolver:
    """
    Resolves package names to installed package directories.

    Lookups start at the caller-supplied base directory; fallback_dirs are
    searched afterwards (the bundled toolchain, for instance).
    """

    def __init__(self, fallback_dirs: Iterable[Union[str, Path]] = ()) -> None:
        self.fallback_dirs = [Path(d) for d in fallback_dirs]

    def resolve(self, name: str, basedir: Union[str, Path]) -> Optional[Path]:
        """
        Resolve a package by name.

        Args:
            name: Package name, scoped names included ("@babel/runtime")
            basedir: Directory the lookup starts from

        Returns:
            Package directory, or None when it cannot be found
        """
        for start in [Path(basedir), *self.fallback_dirs]:
            found = self.packageDir_find(name, start)
            if found is not None:
                return found
        return None

    def packageDir_find(self, name: str, start: Path) -> Optional[Path]:
        """Walk up from start looking for node_modules/<name>/package.json"""
        try:
            current = start.resolve()
        except OSError:
            return None
        for directory in [current, *current.parents]:
            # start may itself be a node_modules directory
            roots = [directory] if directory.name == "node_modules" else []
            roots.append(directory / "node_modules")
            for root in roots:
                candidate = root / name
                if (candidate / "package.json").is_file():
                    return candidate
        return None

    def capability_check(self, name: str, basedir: Union[str, Path]) -> Capability:
        """
        Probe for an optional tool.

        Args:
            name: Package name
            basedir: Directory the lookup starts from

        Returns:
            Capability, present or absent
        """
        path = self.resolve(name, basedir)
        if path is None:
            LOG(f"Capability '{name}' not found from {basedir}", level=3)
        return Capability(name=name, path=path)


class StaticResolver(ModuleResolver):
    """
    Resolver backed by a fixed name -> path table.

    Useful when the set of installed tools is already known, e.g. in
    hermetic builds or in tests.
    """

    def __init__(self, installed: Optional[dict] = None) -> None:
        super().__init__()
        self.installed = {name: Path(path) for name, path in (installed or {}).items()}

    def resolve(self, name: str, basedir: Union[str, Path]) -> Optional[Path]:
        return self.installed.get(name)


def resolver_default() -> ModuleResolver:
    """Resolver that falls back to the bundled toolchain"""
    from ..config.settings import appsettings
    return ModuleResolver(fallback_dirs=[appsettings.toolchain_dir])
