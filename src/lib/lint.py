"""
Lint configuration resolver

Starts from the bundled lint defaults and applies two independent
project overrides, in order:

1. Engine: a project with eslint installed in its own tree gets that binary,
   so custom rule plugins run against the engine version they target.
2. Rules: a project rc file either replaces the defaults (it declares
   `extends`) or is shallow-merged over the default base config.

Every failure here degrades to the previous configuration.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from ..config.settings import appsettings
from ..models.descriptor import LintConfig, LintMergeStrategy
from ..models.state import SynthesisState
from .defaults import DEFAULT_LINT_BASE, LINT_FORMATTER
from .log import LOG
from .manifest import dependencies_declared
from .probe import ModuleResolver, resolver_default

LINT_ENGINE = 'eslint'

RC_FILENAMES: Tuple[str, ...] = (
    '.eslintrc',
    '.eslintrc.json',
    '.eslintrc.yaml',
    '.eslintrc.yml',
)

# Parsed as JSON with comments first, YAML second
JSON_RC_FILENAMES = frozenset(('.eslintrc', '.eslintrc.json'))


class LintRcError(Exception):
    """Raised when a project rc file cannot be parsed"""
    pass


def comments_strip(text: str) -> str:
    """Remove // and /* */ comments outside of JSON strings"""
    out = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == '\\' and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith('//', i):
            end = text.find('\n', i)
            i = n if end == -1 else end
        elif text.startswith('/*', i):
            end = text.find('*/', i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return ''.join(out)


def lintConfig_default() -> LintConfig:
    """Bundled lint configuration"""
    return LintConfig(
        formatter=LINT_FORMATTER,
        baseConfig=copy.deepcopy(DEFAULT_LINT_BASE),
        eslintPath=LINT_ENGINE,
        useEslintrc=False,
        ignore=False,
        strategy=LintMergeStrategy.DEFAULT,
    )


def rcFile_find(cwd: Union[str, Path]) -> Optional[Path]:
    """First rc file present in cwd, or None"""
    for name in RC_FILENAMES:
        candidate = Path(cwd) / name
        if candidate.is_file():
            return candidate
    return None


def rcFile_read(path: Path) -> Dict[str, Any]:
    """
    Parse an rc file.

    .eslintrc and .eslintrc.json are read as JSON with comments allowed;
    when that fails, and for the .yaml/.yml names, the text is read as YAML.

    Raises:
        LintRcError: If the file is unreadable or not a mapping
    """
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise LintRcError(f"Failed to read {path.name}: {e}")

    data: Any = None
    parsed = False
    if path.name in JSON_RC_FILENAMES:
        try:
            data = json.loads(comments_strip(text))
            parsed = True
        except ValueError:
            LOG(f"{path.name} is not JSON, trying YAML", level=3)
    if not parsed:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise LintRcError(f"Failed to parse {path.name}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LintRcError(f"{path.name} must contain a mapping")
    return data


def engine_isBundled(engine: Path) -> bool:
    """True when a resolved engine lives under the bundled toolchain"""
    try:
        return Path(engine).resolve().is_relative_to(appsettings.toolchain_dir.resolve())
    except OSError:
        return False


def engine_apply(
    config: LintConfig, cwd: Union[str, Path], resolver: ModuleResolver
) -> LintConfig:
    """
    Use the project's own lint engine when it has one installed.

    The engine may be a direct or a transitive dependency: any project
    that declares dependencies is probed, and an engine resolved from
    the project tree (not the bundled toolchain) wins.

    Returns:
        New LintConfig; unchanged copy when the project has no engine
    """
    if not dependencies_declared(cwd):
        return config

    engine = resolver.resolve(LINT_ENGINE, cwd)
    if engine is None:
        LOG("No project eslint installed, using bundled engine", level=2)
        return config
    if engine_isBundled(engine):
        LOG(f"eslint resolved from the toolchain: {engine}", level=3)
        return config

    LOG(f"Using project eslint: {engine}", level=2)
    resolved = copy.copy(config)
    resolved.eslintPath = str(engine)
    return resolved


def rc_merge(config: LintConfig, rc: Dict[str, Any]) -> LintConfig:
    """
    Combine a parsed rc file with the current configuration.

    An rc file declaring `extends` is authoritative: the default base
    config is dropped and the engine reads the rc file itself. Anything
    else is layered over the default base config.
    """
    merged = copy.copy(config)
    if rc.get('extends'):
        merged.strategy = LintMergeStrategy.REPLACE
        merged.useEslintrc = True
        merged.baseConfig = None
        merged.ignore = True
    else:
        merged.strategy = LintMergeStrategy.ADDITIVE
        # An empty `extends` must not blank out the default one
        additions = {k: v for k, v in rc.items() if k != 'extends'}
        merged.baseConfig = {**(config.baseConfig or {}), **additions}
    return merged


def rc_apply(config: LintConfig, cwd: Union[str, Path]) -> LintConfig:
    """
    Apply the project rc file, if any.

    Returns:
        Merged configuration; the input unchanged on any failure
    """
    rc_path = rcFile_find(cwd)
    if rc_path is None:
        return config

    try:
        rc = rcFile_read(rc_path)
    except LintRcError as e:
        LOG(f"Ignoring {rc_path}: {e}", level=3)
        return config

    LOG(f"userRc: {rc}", level=3)
    merged = rc_merge(config, rc)
    if merged.strategy is LintMergeStrategy.REPLACE:
        LOG(f"Using project lint config verbatim: {rc_path}", level=2)
    else:
        LOG(f"Extending default lint config with: {rc_path}", level=2)
    return merged


def lintConfig_resolve(inputstate: SynthesisState) -> SynthesisState:
    """
    Resolve the script-lint configuration.

    Args:
        inputstate: Normalized synthesis state

    Returns:
        SynthesisState with added field:
            - lintConfig: merged LintConfig
    """
    state = inputstate.copy()
    cwd = state.options.cwd
    resolver = state.resolver or resolver_default()

    config = lintConfig_default()
    config = engine_apply(config, cwd, resolver)
    config = rc_apply(config, cwd)

    state.lintConfig = config
    return state
