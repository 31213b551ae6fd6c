"""
Module rule assembler

Rules are contributed by named stages into fixed tiers (see RuleTier).
The final list is ordered by tier first and declaration order second,
so the position of a stage in this file never decides precedence.
"""

import copy
import os
from typing import Callable, Dict, Iterable, List, Tuple

from ..models.descriptor import Loader, Rule, RuleTier, pattern_make
from ..models.state import SynthesisState
from .css import NODE_MODULES
from .defaults import DEBUG_LOADER, DEFAULT_BABEL
from .log import LOG

SCRIPT_TEST = r'\.(js|jsx)$'
TYPED_TEST = r'\.(ts|tsx)$'
TYPED_LINT_TEST = r'\.tsx?$'
MARKUP_TEST = r'\.html$'

ASSET_EXCLUDES = [
    r'\.html$',
    r'\.json$',
    r'\.(js|jsx|ts|tsx)$',
    r'\.(css|less|scss|sass)$',
]

# Files below this size are inlined as data URIs
ASSET_INLINE_LIMIT = 10000
ASSET_NAME = 'static/[name].[hash:8].[ext]'

RuleStage = Callable[[SynthesisState], Iterable[Rule]]


class TierBuilder:
    """
    Collects rules from named stages and emits them in tier order.

    Example:
        builder = TierBuilder()
        builder.stage_add("markup", RuleTier.MARKUP, markupRules_make)
        builder.stage_add("lint", RuleTier.PRE_PASS, lintRules_make)
        rules = builder.rules(state)   # lint rules come first
    """

    def __init__(self) -> None:
        self.stages: List[Tuple[str, RuleTier, RuleStage]] = []

    def stage_add(self, name: str, tier: RuleTier, stage: RuleStage) -> "TierBuilder":
        """Register a stage contributing zero or more rules to one tier"""
        self.stages.append((name, tier, stage))
        return self

    def rules(self, state: SynthesisState) -> List[Rule]:
        """Run every stage and return its rules in tier order"""
        by_tier: Dict[RuleTier, List[Rule]] = {tier: [] for tier in RuleTier}
        for name, tier, stage in self.stages:
            contributed = list(stage(state))
            for rule in contributed:
                if rule.tier != tier:
                    raise ValueError(
                        f"Stage '{name}' produced rule '{rule.name}' for tier "
                        f"{rule.tier.name}, expected {tier.name}"
                    )
            LOG(f"Stage {name}: {len(contributed)} rule(s)", level=3)
            by_tier[tier].extend(contributed)

        ordered: List[Rule] = []
        for tier in sorted(by_tier):
            ordered.extend(by_tier[tier])
        return ordered


def scriptChain_make(state: SynthesisState) -> List[Loader]:
    """Script transform chain: debug loader, then the transpiler"""
    babel_options = copy.deepcopy(state.options.babel or DEFAULT_BABEL)
    babel_options['cacheDirectory'] = False
    babel_options['babelrc'] = not state.env.disable_babelrc
    return [
        Loader(DEBUG_LOADER),
        Loader('babel-loader', babel_options),
    ]


def lintRules_make(state: SynthesisState) -> List[Rule]:
    rules: List[Rule] = []
    cwd = state.options.cwd

    if not state.env.disable_tslint:
        rules.append(
            Rule(
                name='tslint',
                tier=RuleTier.PRE_PASS,
                test=pattern_make(TYPED_LINT_TEST),
                include=[cwd],
                exclude=[NODE_MODULES],
                enforce='pre',
                use=[Loader('tslint-loader', {'emitErrors': True})],
            )
        )

    if not state.env.disable_eslint:
        rules.append(
            Rule(
                name='eslint',
                tier=RuleTier.PRE_PASS,
                test=pattern_make(SCRIPT_TEST),
                include=[cwd],
                exclude=[NODE_MODULES],
                enforce='pre',
                use=[Loader('eslint-loader', state.lintConfig.loaderOptions_get())],
            )
        )
    return rules


def assetRules_make(state: SynthesisState) -> List[Rule]:
    return [
        Rule(
            name='asset',
            tier=RuleTier.ASSET_FALLBACK,
            exclude=[pattern_make(expression) for expression in ASSET_EXCLUDES],
            use=[Loader('url-loader', {'limit': ASSET_INLINE_LIMIT, 'name': ASSET_NAME})],
        )
    ]


def languageRules_make(state: SynthesisState) -> List[Rule]:
    """
    Script and typed-script transforms.

    The typed chain only strips types (transpileOnly); diagnostics come
    from the separately toggled type-checker plugin.
    """
    return [
        Rule(
            name='babel',
            tier=RuleTier.LANGUAGE,
            test=pattern_make(SCRIPT_TEST),
            exclude=[NODE_MODULES],
            use=scriptChain_make(state),
        ),
        Rule(
            name='typescript',
            tier=RuleTier.LANGUAGE,
            test=pattern_make(TYPED_TEST),
            exclude=[NODE_MODULES],
            use=[
                *scriptChain_make(state),
                Loader('awesome-typescript-loader', {'transpileOnly': True}),
            ],
        ),
    ]


def extraSourceRules_make(state: SynthesisState) -> List[Rule]:
    cwd = state.options.cwd
    return [
        Rule(
            name=f'babel-extra:{include}',
            tier=RuleTier.EXTRA_SOURCE,
            test=pattern_make(SCRIPT_TEST),
            include=[os.path.join(cwd, include)],
            use=scriptChain_make(state),
        )
        for include in state.options.extraBabelIncludes
    ]


def markupRules_make(state: SynthesisState) -> List[Rule]:
    return [
        Rule(
            name='html',
            tier=RuleTier.MARKUP,
            test=pattern_make(MARKUP_TEST),
            use=[Loader('file-loader', {'name': '[name].[ext]'})],
        )
    ]


def styleRules_collect(state: SynthesisState) -> List[Rule]:
    return list(state.styleRules)


def ruleBuilder_default() -> TierBuilder:
    """The standard set of rule stages"""
    return (
        TierBuilder()
        .stage_add('lint', RuleTier.PRE_PASS, lintRules_make)
        .stage_add('asset', RuleTier.ASSET_FALLBACK, assetRules_make)
        .stage_add('language', RuleTier.LANGUAGE, languageRules_make)
        .stage_add('extra-source', RuleTier.EXTRA_SOURCE, extraSourceRules_make)
        .stage_add('markup', RuleTier.MARKUP, markupRules_make)
        .stage_add('style', RuleTier.STYLE, styleRules_collect)
    )


def moduleRules_assemble(inputstate: SynthesisState) -> SynthesisState:
    """
    Assemble every transformation rule.

    Args:
        inputstate: State with styleRules and lintConfig

    Returns:
        SynthesisState with added field:
            - rules: all rules in tier order
    """
    state = inputstate.copy()
    state.rules = ruleBuilder_default().rules(state)
    LOG(f"Assembled {len(state.rules)} module rules", level=2)
    return state
