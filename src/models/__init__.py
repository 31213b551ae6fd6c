"""
Models package for packsynth

Contains data structures and type definitions for the synthesis pipeline.
"""

from .state import SynthesisState, pipeline
from .options import Options
from .descriptor import (
    Loader,
    Rule,
    RuleTier,
    StyleRule,
    StyleLanguage,
    StyleScope,
    PluginEntry,
    PluginCondition,
    LintConfig,
    LintMergeStrategy,
    OutputSpec,
    ResolveSpec,
    PipelineDescriptor,
    DescriptorHook,
)

__all__ = [
    "SynthesisState",
    "pipeline",
    "Options",
    "Loader",
    "Rule",
    "RuleTier",
    "StyleRule",
    "StyleLanguage",
    "StyleScope",
    "PluginEntry",
    "PluginCondition",
    "LintConfig",
    "LintMergeStrategy",
    "OutputSpec",
    "ResolveSpec",
    "PipelineDescriptor",
    "DescriptorHook",
]
