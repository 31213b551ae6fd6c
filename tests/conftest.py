"""
Shared fixtures for synthesis tests
"""

import pytest

from packsynth.lib.probe import StaticResolver

BUILD_FLAGS = [
    "NODE_ENV",
    "DISABLE_ESLINT",
    "DISABLE_TSLINT",
    "DISABLE_BABELRC",
    "TS_TYPECHECK",
    "NO_COMPRESS",
    "ANALYZE",
    "ANALYZE_PORT",
    "SOCKET_SERVER",
    "PUBLIC_PATH",
]


@pytest.fixture(autouse=True)
def clean_build_flags(monkeypatch):
    """Keep the host environment out of every synthesis"""
    for name in BUILD_FLAGS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def toolchain_resolver():
    """Resolver where the optional preprocessors are installed"""
    return StaticResolver({
        "sass-loader": "/toolchain/node_modules/sass-loader",
        "@babel/runtime": "/toolchain/node_modules/@babel/runtime",
    })


@pytest.fixture
def bare_resolver():
    """Resolver where nothing optional is installed"""
    return StaticResolver({})
