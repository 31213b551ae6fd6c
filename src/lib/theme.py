"""
Theme variable normalization for style preprocessing.

A project theme is a flat mapping of preprocessor variables
(e.g., {"primary-color": "#1DA57A"}) substituted into less sources. It can
be given inline, or as a path (relative to the project cwd) to a theme
file:
  - theme.yaml / theme.yml: YAML mapping
  - theme.json: JSON mapping (parsed as YAML, a JSON superset)
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union

from .log import LOG


class ThemeError(Exception):
    """Raised when theme loading or validation fails"""
    pass


class ThemeFile:
    """
    A theme variable file on disk.
    """

    def __init__(self, theme_path: Union[str, Path], cwd: Union[str, Path] = "."):
        """
        Load a theme file.

        Args:
            theme_path: Path to the theme file, absolute or relative to cwd
            cwd: Project working directory

        Raises:
            ThemeError: If the file doesn't exist or isn't a mapping
        """
        self.path = Path(cwd) / theme_path

        if not self.path.is_file():
            raise ThemeError(
                f"Theme file not found: {self.path}"
            )

        self.config = self._config_load()

    def _config_load(self) -> Dict[str, Any]:
        """Load and parse the theme file"""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ThemeError(f"Failed to parse {self.path.name}: {e}")
        except OSError as e:
            raise ThemeError(f"Failed to load {self.path.name}: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ThemeError(
                f"Theme file {self.path.name} must contain a mapping, "
                f"got {type(config).__name__}"
            )
        return config

    def variables_get(self) -> Dict[str, Any]:
        """Theme variables as a fresh mapping"""
        return dict(self.config)

    def __repr__(self) -> str:
        return f"ThemeFile(path='{self.path}')"


def theme_normalize(
    theme: Union[Dict[str, Any], str, None], cwd: Optional[Union[str, Path]] = None
) -> Dict[str, Any]:
    """
    Normalize a theme option into a variable mapping.

    Args:
        theme: Inline mapping, path to a theme file, or None
        cwd: Project working directory for relative theme paths

    Returns:
        Variable mapping; empty when no theme is configured or the theme
        file cannot be used
    """
    if theme is None:
        return {}

    if isinstance(theme, dict):
        return dict(theme)

    try:
        theme_file: ThemeFile = ThemeFile(theme, cwd or ".")
    except ThemeError as e:
        LOG(f"Ignoring theme: {e}", level=2)
        return {}

    LOG(f"Loaded theme variables from {theme_file.path}", level=2)
    return theme_file.variables_get()
