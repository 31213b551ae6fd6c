"""
Application settings and process environment flags

Uses pydantic-settings for type-safe configuration via environment variables.

Two models live here:
    - AppSettings: packsynth's own knobs, PACKSYNTH_ prefix
      (e.g., PACKSYNTH_TOOLCHAIN_DIR=/opt/toolchain). Can also be loaded
      from a .env file in the project root.
    - EnvFlags: the unprefixed process flags that steer a synthesis
      (NODE_ENV, DISABLE_ESLINT, ANALYZE, ...). Frozen, read once per
      synthesis and passed explicitly into the pipeline.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ANALYZE_PORT = 8888


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PACKSYNTH_ prefix.

    Examples:
        PACKSYNTH_TOOLCHAIN_DIR=/usr/lib/packsynth/toolchain
        PACKSYNTH_DEFAULT_VERBOSITY=2
    """

    model_config = SettingsConfigDict(
        env_prefix="PACKSYNTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    toolchain_dir: Path = Field(
        default=Path(__file__).resolve().parent.parent.parent / "toolchain",
        description="Install root of the bundled tools (contains node_modules/)",
    )

    default_verbosity: int = Field(
        default=1,
        description="Verbosity used when a synthesis does not specify one",
    )

    def toolchainModules_get(self) -> Path:
        """
        Get the bundled node_modules directory.

        Returns:
            Path to <toolchain_dir>/node_modules

        Example:
            >>> AppSettings(toolchain_dir=Path("/opt/tc")).toolchainModules_get()
            PosixPath('/opt/tc/node_modules')
        """
        return self.toolchain_dir / "node_modules"


class EnvFlags(BaseSettings):
    """
    Process-wide build flags.

    Field names map onto the bare environment variable names
    (node_env <- NODE_ENV, disable_eslint <- DISABLE_ESLINT, ...).
    Any NODE_ENV other than "development" means a production build. A
    boolean flag is set by any non-empty value; an unparseable
    ANALYZE_PORT falls back to the default port.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    node_env: str = Field(default="production", description="Build mode")
    disable_eslint: bool = Field(default=False, description="Drop the script lint pre-pass")
    disable_tslint: bool = Field(default=False, description="Drop the typed-script lint pre-pass")
    disable_babelrc: bool = Field(default=False, description="Ignore project .babelrc files")
    ts_typecheck: bool = Field(default=False, description="Run the forked type checker")
    no_compress: bool = Field(default=False, description="Skip minification")
    analyze: bool = Field(default=False, description="Serve the bundle analyzer")
    analyze_port: int = Field(default=DEFAULT_ANALYZE_PORT, description="Bundle analyzer port")
    socket_server: Optional[str] = Field(default=None, description="Socket server address to inline")
    public_path: Optional[str] = Field(default=None, description="Public path override")

    @field_validator(
        "disable_eslint",
        "disable_tslint",
        "disable_babelrc",
        "ts_typecheck",
        "no_compress",
        "analyze",
        mode="before",
    )
    @classmethod
    def flag_coerce(cls, value: Any) -> Any:
        # Any non-empty value sets a flag, "0" and "false" included
        if isinstance(value, str):
            return bool(value.strip())
        return value

    @field_validator("analyze_port", mode="before")
    @classmethod
    def port_coerce(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return DEFAULT_ANALYZE_PORT
        return value

    @field_validator("socket_server", "public_path", mode="before")
    @classmethod
    def text_coerce(cls, value: Any) -> Any:
        if isinstance(value, str) and not value:
            return None
        return value

    @property
    def isDev(self) -> bool:
        """True when NODE_ENV selects a development build"""
        return self.node_env == "development"

    @property
    def mode(self) -> str:
        """Resolved build mode: 'development' or 'production'"""
        return "development" if self.isDev else "production"


def envFlags_read() -> EnvFlags:
    """
    Snapshot the current process environment into an EnvFlags value.

    Returns:
        Fresh, frozen EnvFlags instance
    """
    return EnvFlags()


# Singleton instance - import this in your code
appsettings = AppSettings()
