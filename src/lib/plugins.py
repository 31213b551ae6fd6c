"""
Plugin list assembler

Plugins come in two mutually exclusive base sets (development or
production) followed by the mode-independent plugins, each gated by its
own flag or option.
"""

import copy
import json
import os
from typing import Any, Dict, List, Mapping

from ..config.settings import appsettings
from ..models.descriptor import PluginCondition, PluginEntry
from ..models.state import SynthesisState
from .defaults import DEFAULT_UGLIFY
from .log import LOG

# Paths containing any of these are shown as internal:/// in dev source maps
INTERNAL_PATH_MARKERS = (
    '/koi-pkgs/packages',
    'packages/koi-core',
    'webpack/bootstrap',
    '/node_modules/',
)

ALWAYS = PluginCondition.ALWAYS
DEV = PluginCondition.DEVELOPMENT
PROD = PluginCondition.PRODUCTION
ANALYSIS = PluginCondition.ANALYSIS
FEATURE = PluginCondition.FEATURE


def moduleFilename_template(info: Any) -> str:
    """
    Source-map module path template.

    Args:
        info: Module info, a mapping or object with absoluteResourcePath

    Returns:
        internal:///<path> for toolchain and vendor modules, otherwise the
        normalized absolute path with forward slashes
    """
    if isinstance(info, Mapping):
        resource = info['absoluteResourcePath']
    else:
        resource = info.absoluteResourcePath

    if any(marker in resource for marker in INTERNAL_PATH_MARKERS):
        return f'internal:///{resource}'
    return os.path.abspath(resource).replace('\\', '/')


def define_stringify(values: Mapping[str, Any]) -> Dict[str, str]:
    """JSON-encode user constants so they inline as literals"""
    return {key: json.dumps(value) for key, value in values.items()}


def devPlugins_make(state: SynthesisState) -> List[PluginEntry]:
    plugins = [
        PluginEntry('HotModuleReplacementPlugin', {}, DEV),
        PluginEntry(
            'WatchMissingNodeModulesPlugin',
            {'nodeModulesPath': os.path.join(state.options.cwd, 'node_modules')},
            DEV,
        ),
        PluginEntry('SystemBellWebpackPlugin', {}, DEV),
    ]
    if not state.options.devtool:
        plugins.append(
            PluginEntry(
                'SourceMapDevToolPlugin',
                {
                    'columns': False,
                    'moduleFilenameTemplate': moduleFilename_template,
                },
                DEV,
            )
        )
    return plugins


def prodPlugins_make(state: SynthesisState) -> List[PluginEntry]:
    plugins = [
        PluginEntry('OccurrenceOrderPlugin', {}, PROD),
        PluginEntry('ModuleConcatenationPlugin', {}, PROD),
        PluginEntry(
            'ExtractTextPlugin',
            {'filename': f'[name]{state.cssHash}.css', 'allChunks': True},
            PROD,
        ),
    ]
    manifest = state.options.manifest
    if manifest:
        options: Dict[str, Any] = {'fileName': 'manifest.json'}
        if isinstance(manifest, dict):
            options.update(manifest)
        plugins.append(PluginEntry('ManifestPlugin', options, PROD))
    return plugins


def compressPlugins_make(state: SynthesisState) -> List[PluginEntry]:
    if state.isDev or state.env.no_compress:
        return []
    options = copy.deepcopy(DEFAULT_UGLIFY)
    if state.options.devtool:
        options['sourceMap'] = True
    return [PluginEntry('UglifyJsPlugin', options, PROD)]


def definePlugin_make(state: SynthesisState) -> PluginEntry:
    definitions: Dict[str, str] = {
        'process.env.NODE_ENV': json.dumps(state.mode),
    }
    if state.env.socket_server:
        definitions['process.env.SOCKET_SERVER'] = json.dumps(state.env.socket_server)
    definitions.update(define_stringify(state.options.define))
    return PluginEntry('DefinePlugin', definitions, ALWAYS)


def analyzePlugins_make(state: SynthesisState) -> List[PluginEntry]:
    if not state.env.analyze:
        return []
    return [
        PluginEntry(
            'BundleAnalyzerPlugin',
            {
                'analyzerMode': 'server',
                'analyzerPort': state.env.analyze_port,
                'openAnalyzer': True,
            },
            ANALYSIS,
        )
    ]


def copyPlugins_make(state: SynthesisState) -> List[PluginEntry]:
    plugins: List[PluginEntry] = []
    if state.options.copy:
        plugins.append(PluginEntry('CopyWebpackPlugin', list(state.options.copy), FEATURE))

    public_dir = os.path.join(state.options.cwd, 'public')
    if os.path.isdir(public_dir):
        LOG(f"Copying {public_dir} to {state.outputPath}", level=2)
        plugins.append(
            PluginEntry(
                'CopyWebpackPlugin',
                [{'from': public_dir, 'to': state.outputPath}],
                FEATURE,
            )
        )
    return plugins


def plugins_assemble(inputstate: SynthesisState) -> SynthesisState:
    """
    Assemble the plugin list.

    Args:
        inputstate: Normalized synthesis state

    Returns:
        SynthesisState with added field:
            - plugins: PluginEntry list in pipeline order
    """
    state = inputstate.copy()
    env = state.env
    options = state.options
    plugins: List[PluginEntry] = []

    plugins.extend(devPlugins_make(state) if state.isDev else prodPlugins_make(state))
    plugins.extend(compressPlugins_make(state))
    plugins.append(definePlugin_make(state))
    plugins.extend(analyzePlugins_make(state))
    plugins.append(PluginEntry('CaseSensitivePathsPlugin', {}, ALWAYS))
    plugins.append(
        PluginEntry(
            'LoaderOptionsPlugin',
            {'options': {'context': str(appsettings.toolchain_dir)}},
            ALWAYS,
        )
    )
    if env.ts_typecheck:
        plugins.append(PluginEntry('ForkTsCheckerWebpackPlugin', {}, FEATURE))
    if options.ignoreMomentLocale:
        plugins.append(
            PluginEntry(
                'IgnorePlugin',
                {'resourceRegExp': r'^\./locale$', 'contextRegExp': r'moment$'},
                FEATURE,
            )
        )
    plugins.extend(PluginEntry('CommonsChunkPlugin', dict(common), FEATURE) for common in options.commons)
    plugins.extend(copyPlugins_make(state))

    LOG(f"Assembled {len(plugins)} plugins", level=2)
    state.plugins = plugins
    return state
