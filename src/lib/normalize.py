"""
Option and environment normalization

First synthesis stage: validates the caller contract and derives the
baseline values every later stage reads (mode, theme, CSS options, hash
suffixes, output path).
"""

import os
from typing import Any, Dict

from ..models.state import SynthesisState
from .log import LOG
from .theme import theme_normalize

JS_HASH = '.[chunkhash:8]'
CSS_HASH = '.[contenthash:8]'

LOCAL_IDENT_NAME = '[local]___[hash:base64:5]'


class ConfigurationError(Exception):
    """Raised when synthesis options violate the caller contract"""
    pass


def cssOptions_make(isDev: bool, no_compress: bool, disable_source_map: bool) -> Dict[str, Any]:
    """
    Shared css-loader options.

    Minification and source maps are production concerns; in development
    neither key is present.
    """
    options: Dict[str, Any] = {'importLoaders': 1}
    if not isDev:
        options['minimize'] = not no_compress
        options['sourceMap'] = not disable_source_map
    return options


def cssModulesConfig_make(disabled: bool) -> Dict[str, Any]:
    """Class-name scoping options for project stylesheets"""
    if disabled:
        return {}
    return {
        'modules': True,
        'localIdentName': LOCAL_IDENT_NAME,
    }


def outputPath_resolve(cwd: str, output_path: Any) -> str:
    """Output directory, relative paths anchored at cwd"""
    if output_path:
        return os.path.normpath(os.path.join(cwd, output_path))
    return os.path.join(cwd, 'dist')


def options_normalize(inputstate: SynthesisState) -> SynthesisState:
    """
    Validate options and derive baseline values.

    Args:
        inputstate: Initial synthesis state with options and env

    Returns:
        SynthesisState with added fields:
            - isDev, mode: build mode from NODE_ENV
            - theme: normalized theme variables
            - cssOptions, cssModulesConfig: css-loader option groups
            - jsHash, cssHash: filename hash suffixes
            - outputPath: resolved output directory

    Raises:
        ConfigurationError: If options.cwd is missing
    """
    state = inputstate.copy()
    options = state.options

    if not options.cwd:
        raise ConfigurationError('options.cwd must be specified')

    state.isDev = state.env.isDev
    state.mode = state.env.mode
    LOG(f"Synthesizing {state.mode} pipeline for {options.cwd}", level=1)

    state.theme = theme_normalize(options.theme, options.cwd)
    state.cssOptions = cssOptions_make(
        state.isDev, state.env.no_compress, options.disableCSSSourceMap
    )
    state.cssModulesConfig = cssModulesConfig_make(options.disableCSSModules)

    hashed = options.hash and not state.isDev
    state.jsHash = JS_HASH if hashed else ''
    state.cssHash = CSS_HASH if hashed else ''
    if options.hash and state.isDev:
        LOG("Hashing requested but skipped in development", level=2)

    state.outputPath = outputPath_resolve(options.cwd, options.outputPath)
    return state
