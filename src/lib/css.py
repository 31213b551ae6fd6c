"""
CSS loader-chain builder

Builds a (project, dependency) style rule pair for each of plain CSS,
less, and sass. Chains run outermost first:

    injector -> css-loader -> postcss-loader [-> preprocessor loader]

The injector is the runtime style-loader in development and the
extraction wrapper in production. Dependency rules never scope class
names, since third-party stylesheets reference their own class names
verbatim.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models.descriptor import Loader, RuleTier, StyleLanguage, StyleRule, StyleScope, pattern_make
from ..models.state import SynthesisState
from .defaults import DEFAULT_BROWSERS
from .log import LOG
from .probe import ModuleResolver, resolver_default

STYLE_LOADER = 'style-loader'
EXTRACT_LOADER = 'extract-text-webpack-plugin/loader'
CSS_LOADER = 'css-loader'
POSTCSS_LOADER = 'postcss-loader'
LESS_LOADER = 'less-loader'
SASS_LOADER = 'sass-loader'

NODE_MODULES = pattern_make(r'node_modules')


@dataclass(frozen=True)
class StyleVariant:
    """Match pattern and preprocessor for one style language"""
    language: StyleLanguage
    test: str
    preprocessor: Optional[str] = None


STYLE_VARIANTS: List[StyleVariant] = [
    StyleVariant(StyleLanguage.CSS, r'\.css$'),
    StyleVariant(StyleLanguage.LESS, r'\.less$', LESS_LOADER),
    StyleVariant(StyleLanguage.SASS, r'\.(sass|scss)$', SASS_LOADER),
]


def injector_make(extract: bool) -> Loader:
    """Head of every style chain"""
    if extract:
        return Loader(EXTRACT_LOADER, {'remove': True})
    return Loader(STYLE_LOADER)


def postcssOptions_make(browsers: Optional[List[str]], extra_plugins: List[Any]) -> Dict[str, Any]:
    """Vendor-prefixing post-processor options"""
    return {
        # Needed for external CSS imports to resolve
        'ident': 'postcss',
        'plugins': [
            {'plugin': 'postcss-flexbugs-fixes'},
            {
                'plugin': 'autoprefixer',
                'options': {
                    'browsers': list(browsers or DEFAULT_BROWSERS),
                    'flexbox': 'no-2009',
                },
            },
            *extra_plugins,
        ],
    }


def styleChain_build(
    *,
    extract: bool,
    css_options: Dict[str, Any],
    modules_config: Dict[str, Any],
    postcss_options: Dict[str, Any],
    preprocessor: Optional[Loader] = None,
) -> List[Loader]:
    """
    Build one style loader chain.

    Args:
        extract: Start with the extraction wrapper instead of style-loader
        css_options: Shared css-loader options
        modules_config: Scoping options merged into css-loader options
                        (empty for dependency rules)
        postcss_options: postcss-loader options
        preprocessor: Trailing preprocessor loader, if any

    Returns:
        Loader chain, outermost first; option payloads are private copies
    """
    chain = [
        injector_make(extract),
        Loader(CSS_LOADER, copy.deepcopy({**css_options, **modules_config})),
        Loader(POSTCSS_LOADER, copy.deepcopy(postcss_options)),
    ]
    if preprocessor is not None:
        chain.append(preprocessor)
    return chain


def preprocessor_make(variant: StyleVariant, state: SynthesisState) -> Optional[Loader]:
    if variant.preprocessor == LESS_LOADER:
        return Loader(LESS_LOADER, {'modifyVars': dict(state.theme)})
    if variant.preprocessor == SASS_LOADER:
        return Loader(SASS_LOADER, dict(state.options.sass or {}))
    return None


def variant_available(variant: StyleVariant, state: SynthesisState) -> bool:
    """
    Probe for an optional preprocessor.

    less ships with the toolchain; sass is only wired in when sass-loader
    resolves.
    """
    if variant.preprocessor != SASS_LOADER:
        return True
    resolver: ModuleResolver = state.resolver or resolver_default()
    capability = resolver.capability_check(SASS_LOADER, state.options.cwd)
    if not capability.present:
        LOG("sass-loader not installed, skipping sass rules", level=2)
    return capability.present


def styleRules_build(inputstate: SynthesisState) -> SynthesisState:
    """
    Build all style rules.

    Args:
        inputstate: Normalized synthesis state

    Returns:
        SynthesisState with added field:
            - styleRules: project/dependency pair per available language
    """
    state = inputstate.copy()
    extract = not state.isDev
    postcss_options = postcssOptions_make(
        state.options.browserslist, state.options.extraPostCSSPlugins
    )

    rules: List[StyleRule] = []
    for variant in STYLE_VARIANTS:
        if not variant_available(variant, state):
            continue
        for scope in (StyleScope.PROJECT, StyleScope.DEPENDENCY):
            project = scope is StyleScope.PROJECT
            chain = styleChain_build(
                extract=extract,
                css_options=state.cssOptions,
                modules_config=state.cssModulesConfig if project else {},
                postcss_options=postcss_options,
                preprocessor=preprocessor_make(variant, state),
            )
            rules.append(
                StyleRule(
                    name=f"{variant.language.value}-{scope.value}",
                    tier=RuleTier.STYLE,
                    use=chain,
                    test=pattern_make(variant.test),
                    include=[] if project else [NODE_MODULES],
                    exclude=[NODE_MODULES] if project else [],
                    language=variant.language,
                    scope=scope,
                    extracted=extract,
                )
            )

    LOG(f"Built {len(rules)} style rules (extracted={extract})", level=2)
    state.styleRules = rules
    return state
