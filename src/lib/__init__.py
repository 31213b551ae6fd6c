"""
packsynth - Build pipeline descriptor synthesizer

Composes bundler rules, plugins, and output naming from project options
and process build flags.
"""

__version__ = "1.0.0"

from .synthesize import Synthesizer, descriptor_synthesize
from .normalize import ConfigurationError
from .probe import Capability, ModuleResolver, StaticResolver
from .theme import ThemeError
from .log import LOG, logging_disable, logging_enable, state_connectToLogger

__all__ = [
    "Synthesizer",
    "descriptor_synthesize",
    "ConfigurationError",
    "Capability",
    "ModuleResolver",
    "StaticResolver",
    "ThemeError",
    "LOG",
    "logging_enable",
    "logging_disable",
    "state_connectToLogger",
    "__version__",
]
