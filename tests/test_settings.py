"""
Build flag and settings tests

Tests that process environment variables map onto EnvFlags.
"""

import pytest
from pathlib import Path
from pydantic import ValidationError

from packsynth.config.settings import AppSettings, EnvFlags, envFlags_read


class TestEnvFlagDefaults:
    """Defaults with a clean environment"""

    def test_defaults_are_production(self):
        """No NODE_ENV means a production build"""
        env = envFlags_read()
        assert env.isDev is False
        assert env.mode == "production"
        assert env.analyze_port == 8888
        assert env.socket_server is None
        assert env.public_path is None

    def test_only_exact_development_is_dev(self):
        """NODE_ENV values other than 'development' are production"""
        assert EnvFlags(node_env="development").isDev is True
        assert EnvFlags(node_env="test").isDev is False
        assert EnvFlags(node_env="dev").mode == "production"


class TestEnvFlagsFromEnvironment:
    """Reading flags from process environment variables"""

    def test_reads_uppercase_variables(self, monkeypatch):
        """Bare variable names populate the matching fields"""
        monkeypatch.setenv("NODE_ENV", "development")
        monkeypatch.setenv("DISABLE_ESLINT", "1")
        monkeypatch.setenv("ANALYZE", "true")
        monkeypatch.setenv("ANALYZE_PORT", "9999")
        monkeypatch.setenv("SOCKET_SERVER", "http://localhost:8000")

        env = envFlags_read()
        assert env.isDev is True
        assert env.disable_eslint is True
        assert env.disable_tslint is False
        assert env.analyze is True
        assert env.analyze_port == 9999
        assert env.socket_server == "http://localhost:8000"

    def test_empty_values_are_unset(self, monkeypatch):
        """Exported but empty variables read as false/unset"""
        monkeypatch.setenv("NO_COMPRESS", "")
        monkeypatch.setenv("PUBLIC_PATH", "")
        monkeypatch.setenv("ANALYZE_PORT", "")

        env = envFlags_read()
        assert env.no_compress is False
        assert env.public_path is None
        assert env.analyze_port == 8888

    @pytest.mark.parametrize("value", ["1", "true", "none", "0", "false", "yes"])
    def test_any_non_empty_value_sets_a_flag(self, monkeypatch, value):
        """Flags are presence switches, not parsed booleans"""
        monkeypatch.setenv("DISABLE_ESLINT", value)
        monkeypatch.setenv("NO_COMPRESS", value)

        env = envFlags_read()
        assert env.disable_eslint is True
        assert env.no_compress is True

    def test_unparseable_port_uses_default(self, monkeypatch):
        monkeypatch.setenv("ANALYZE_PORT", "auto")
        assert envFlags_read().analyze_port == 8888

    def test_port_whitespace_tolerated(self, monkeypatch):
        monkeypatch.setenv("ANALYZE_PORT", " 9001 ")
        assert envFlags_read().analyze_port == 9001

    def test_flags_are_frozen(self):
        """A flag snapshot cannot be mutated"""
        env = EnvFlags()
        with pytest.raises(ValidationError):
            env.node_env = "development"


class TestAppSettings:
    """packsynth's own settings"""

    def test_toolchain_override(self, monkeypatch):
        """PACKSYNTH_TOOLCHAIN_DIR moves the bundled toolchain"""
        monkeypatch.setenv("PACKSYNTH_TOOLCHAIN_DIR", "/opt/toolchain")
        settings = AppSettings()
        assert settings.toolchain_dir == Path("/opt/toolchain")
        assert settings.toolchainModules_get() == Path("/opt/toolchain/node_modules")
