"""
Configuration package for packsynth

Provides application settings and process build flags via environment
variables using pydantic-settings.
"""

from .settings import appsettings, AppSettings, EnvFlags, envFlags_read

__all__ = ["appsettings", "AppSettings", "EnvFlags", "envFlags_read"]
