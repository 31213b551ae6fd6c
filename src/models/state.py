"""
Synthesis state model and pipeline helper

Defines SynthesisState dataclass for the functional pipeline pattern and
the pipeline() helper for composing synthesis stages.
"""

from typing import Any, Optional, TypeVar, List, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

from .options import Options
from .descriptor import (
    LintConfig,
    OutputSpec,
    PipelineDescriptor,
    PluginEntry,
    ResolveSpec,
    Rule,
    StyleRule,
)
from ..config.settings import EnvFlags

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from ..lib.probe import ModuleResolver


SS = TypeVar("SS", bound="SynthesisState")


@dataclass
class SynthesisState:
    """
    Central state container for the synthesis pipeline (state bus pattern).

    This dataclass carries all synthesis state through the functional
    pipeline, with each stage adding new fields as synthesis progresses.

    Pipeline stages and their state additions:
        - Initial: options, env, resolver, verbosity
        - options_normalize: isDev, mode, theme, cssOptions,
          cssModulesConfig, jsHash, cssHash, outputPath
        - styleRules_build: styleRules
        - lintConfig_resolve: lintConfig
        - moduleRules_assemble: rules
        - plugins_assemble: plugins
        - output_select: output, resolve
        - descriptor_finalize: descriptor

    Attributes:
        options: User-supplied project options
        env: Process build flags, read once
        resolver: Capability probe for optional tools
        verbosity: Logging verbosity level (0-3)
        isDev: Development build
        mode: "development" or "production"
        theme: Normalized theme variable mapping
        cssOptions: Shared css-loader options
        cssModulesConfig: Class-name scoping options (empty when disabled)
        jsHash: Script/chunk filename hash suffix
        cssHash: Stylesheet filename hash suffix
        outputPath: Resolved output directory
        styleRules: The style rule pairs, in language order
        lintConfig: Resolved script-lint configuration
        rules: All transformation rules, in tier order
        plugins: Plugin entries, in pipeline order
        output: Output naming scheme
        resolve: Module resolution configuration
        descriptor: Finished PipelineDescriptor
    """

    # Inputs
    options: Options = field(default_factory=Options)
    env: EnvFlags = field(default_factory=EnvFlags)
    resolver: Optional["ModuleResolver"] = field(default=None)
    verbosity: int = field(default=1)

    # Pipeline state
    isDev: bool = field(default=False)
    mode: str = field(default="production")
    theme: Dict[str, Any] = field(default_factory=dict)
    cssOptions: Dict[str, Any] = field(default_factory=dict)
    cssModulesConfig: Dict[str, Any] = field(default_factory=dict)
    jsHash: str = field(default="")
    cssHash: str = field(default="")
    outputPath: str = field(default="")
    styleRules: List[StyleRule] = field(default_factory=list)
    lintConfig: Optional[LintConfig] = field(default=None)
    rules: List[Rule] = field(default_factory=list)
    plugins: List[PluginEntry] = field(default_factory=list)
    output: Optional[OutputSpec] = field(default=None)
    resolve: Optional[ResolveSpec] = field(default=None)
    descriptor: Optional[PipelineDescriptor] = field(default=None)

    def copy(self: SS) -> SS:
        """
        Creates a shallow copy of the SynthesisState instance.

        Returns:
            A new SynthesisState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: SynthesisState, *stages: Callable[[SynthesisState], SynthesisState]
) -> SynthesisState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (SynthesisState) -> SynthesisState that
    receives the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting SynthesisState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final SynthesisState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            options_normalize,
            styleRules_build,
            lintConfig_resolve,
        )

    This is equivalent to:
        lintConfig_resolve(styleRules_build(options_normalize(initial_state)))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
