"""
Output and hash scheme selection

Finalizes output naming, public path, module resolution, runtime
compatibility shims, and performance hints.
"""

from typing import Dict, List, Optional

from ..config.settings import appsettings
from ..models.descriptor import OutputSpec, ResolveSpec
from ..models.state import SynthesisState
from .log import LOG
from .probe import resolver_default

DEFAULT_EXTENSIONS: List[str] = [
    '.web.js',
    '.web.jsx',
    '.web.ts',
    '.web.tsx',
    '.js',
    '.json',
    '.jsx',
    '.ts',
    '.tsx',
]

# Runtime-only modules with no meaning in the browser target
NODE_SHIMS: Dict[str, str] = {
    'dgram': 'empty',
    'fs': 'empty',
    'net': 'empty',
    'tls': 'empty',
    'child_process': 'empty',
}

BABEL_RUNTIME = '@babel/runtime'


def lastSlash_strip(path: str) -> str:
    """Remove every trailing '/'"""
    return path.rstrip('/')


def publicPath_select(option: Optional[str], override: Optional[str]) -> Optional[str]:
    """
    Public path: explicit option, else the environment override with
    exactly one trailing slash, else unset.
    """
    if option:
        return option
    if override:
        return f'{lastSlash_strip(override)}/'
    return None


def outputSpec_make(state: SynthesisState) -> OutputSpec:
    return OutputSpec(
        path=state.outputPath,
        filename=f'[name]{state.jsHash}.js',
        chunkFilename=f'[name]{state.jsHash}.async.js',
        publicPath=publicPath_select(state.options.publicPath, state.env.public_path),
        # /* filename */ comments in generated requires
        pathinfo=state.isDev,
    )


def resolveSpec_make(state: SynthesisState) -> ResolveSpec:
    options = state.options
    alias: Dict[str, str] = {}

    # Pin the transformer runtime to the bundled copy
    resolver = state.resolver or resolver_default()
    runtime = resolver.capability_check(BABEL_RUNTIME, appsettings.toolchain_dir)
    if runtime.present:
        alias[BABEL_RUNTIME] = str(runtime.path)
    alias.update(options.alias)

    return ResolveSpec(
        modules=[
            str(appsettings.toolchainModules_get()),
            'node_modules',
            *options.extraResolveModules,
        ],
        extensions=[*options.extraResolveExtensions, *DEFAULT_EXTENSIONS],
        alias=alias,
    )


def output_select(inputstate: SynthesisState) -> SynthesisState:
    """
    Select the output naming scheme and resolution config.

    Args:
        inputstate: Normalized synthesis state

    Returns:
        SynthesisState with added fields:
            - output: OutputSpec
            - resolve: ResolveSpec
    """
    state = inputstate.copy()
    state.output = outputSpec_make(state)
    state.resolve = resolveSpec_make(state)
    LOG(f"Output: {state.output.path}/{state.output.filename}", level=2)
    return state


def performance_select(isDev: bool) -> Dict[str, bool]:
    """Performance hints are noise while developing"""
    if isDev:
        return {'hints': False}
    return {}
