"""
Synthesizer for pipeline descriptors

Runs the synthesis stages over a SynthesisState and hands the finished
PipelineDescriptor to the override hook.
"""

from typing import Any, Dict, Optional, Union

from ..config.settings import EnvFlags, appsettings, envFlags_read
from ..models.descriptor import DescriptorHook, PipelineDescriptor
from ..models.options import Options
from ..models.state import SynthesisState, pipeline
from .css import styleRules_build
from .lint import lintConfig_resolve
from .log import LOG, state_connectToLogger
from .normalize import options_normalize
from .output import NODE_SHIMS, output_select, performance_select
from .plugins import plugins_assemble
from .probe import ModuleResolver, resolver_default
from .rules import moduleRules_assemble


def descriptor_finalize(inputstate: SynthesisState) -> SynthesisState:
    """
    Assemble the PipelineDescriptor from the stage outputs.

    Returns:
        SynthesisState with added field:
            - descriptor: PipelineDescriptor
    """
    state = inputstate.copy()
    options = state.options
    state.descriptor = PipelineDescriptor(
        mode=state.mode,
        bail=not state.isDev,
        devtool=options.devtool,
        entry=options.entry,
        output=state.output,
        resolve=state.resolve,
        rules=list(state.rules),
        plugins=list(state.plugins),
        externals=options.externals,
        node=dict(NODE_SHIMS),
        performance=performance_select(state.isDev),
    )
    return state


class Synthesizer:
    """
    Synthesizes a PipelineDescriptor from options and build flags

    Responsibilities:
    - Normalize options against the build flags
    - Build style chains and the lint configuration
    - Order transformation rules by tier
    - Assemble plugins and the output scheme
    - Apply the override hook
    """

    def __init__(
        self,
        options: Union[Options, Dict[str, Any]],
        env: Optional[EnvFlags] = None,
        resolver: Optional[ModuleResolver] = None,
        hook: Optional[DescriptorHook] = None,
        verbosity: Optional[int] = None,
    ) -> None:
        """
        Initialize synthesizer

        Args:
            options: Options, or a plain option mapping
            env: Build flags; read from the process environment when omitted
            resolver: Capability probe; defaults to node_modules lookup with
                      the bundled toolchain as fallback
            hook: Override applied to the finished descriptor
            verbosity: Logging verbosity (0-3)
        """
        if isinstance(options, dict):
            options = Options.options_createFromDict(options)
        self.options = options
        self.env = env if env is not None else envFlags_read()
        self.resolver = resolver if resolver is not None else resolver_default()
        self.hook = hook
        self.verbosity = appsettings.default_verbosity if verbosity is None else verbosity

    def synthesize(self) -> PipelineDescriptor:
        """
        Run every stage and return the descriptor

        Returns:
            PipelineDescriptor, after the override hook

        Raises:
            ConfigurationError: If options.cwd is missing
        """
        state = SynthesisState(
            options=self.options,
            env=self.env,
            resolver=self.resolver,
            verbosity=self.verbosity,
        )
        state_connectToLogger(state)

        final = pipeline(
            state,
            options_normalize,
            styleRules_build,
            lintConfig_resolve,
            moduleRules_assemble,
            plugins_assemble,
            output_select,
            descriptor_finalize,
        )

        descriptor = final.descriptor
        if self.hook is not None:
            LOG("Applying descriptor override hook", level=2)
            descriptor = self.hook(descriptor)
        return descriptor


def descriptor_synthesize(
    options: Union[Options, Dict[str, Any]],
    env: Optional[EnvFlags] = None,
    *,
    resolver: Optional[ModuleResolver] = None,
    hook: Optional[DescriptorHook] = None,
    verbosity: Optional[int] = None,
) -> PipelineDescriptor:
    """
    Synthesize a PipelineDescriptor.

    Example:
        descriptor = descriptor_synthesize(
            {"cwd": "/app", "hash": True},
            EnvFlags(node_env="production"),
        )
        descriptor.output.filename   # '[name].[chunkhash:8].js'
    """
    return Synthesizer(
        options, env=env, resolver=resolver, hook=hook, verbosity=verbosity
    ).synthesize()
