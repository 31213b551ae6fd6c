"""
Bundled default configurations

Used whenever a project does not supply its own browser targets,
transformer options, or minifier options.
"""

from typing import Any, Dict, List

DEFAULT_BROWSERS: List[str] = [
    '>1%',
    'last 4 versions',
    'Firefox ESR',
    'not ie < 9',
]

DEFAULT_BABEL: Dict[str, Any] = {
    'presets': [
        ['babel-preset-env', {'targets': {'browsers': DEFAULT_BROWSERS}, 'modules': False}],
        'babel-preset-react',
        'babel-preset-stage-0',
    ],
    'plugins': [
        'babel-plugin-transform-decorators-legacy',
        ['babel-plugin-transform-runtime', {'helpers': False, 'polyfill': False, 'regenerator': True}],
    ],
}

DEFAULT_UGLIFY: Dict[str, Any] = {
    'uglifyOptions': {
        'compress': {
            'warnings': False,
            # Inlining comparisons breaks valid code on some minifier versions
            'comparisons': False,
        },
        'output': {
            'comments': False,
            # Emoji and regexes survive minification intact
            'ascii_only': True,
        },
    },
    'sourceMap': False,
}

DEFAULT_LINT_BASE: Dict[str, Any] = {
    'extends': ['eslint-config-umi'],
}

LINT_FORMATTER = 'react-dev-utils/eslintFormatter'

# Loader that exposes per-module build information
DEBUG_LOADER = 'packsynth/debug-loader'
