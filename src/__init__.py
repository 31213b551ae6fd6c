"""
packsynth - Build pipeline descriptor synthesizer

Turns a handful of project options and process build flags into a
complete, declarative bundler configuration.
"""

__version__ = "1.0.0"

from loguru import logger

from .lib import (
    Synthesizer,
    descriptor_synthesize,
    ConfigurationError,
    ModuleResolver,
    StaticResolver,
    LOG,
    logging_enable,
    logging_disable,
    state_connectToLogger,
)
from .config import EnvFlags, appsettings
from .models import Options, PipelineDescriptor

# Silent until the host application opts in
logger.disable("packsynth")

__all__ = [
    "Synthesizer",
    "descriptor_synthesize",
    "ConfigurationError",
    "ModuleResolver",
    "StaticResolver",
    "EnvFlags",
    "appsettings",
    "Options",
    "PipelineDescriptor",
    "LOG",
    "logging_enable",
    "logging_disable",
    "state_connectToLogger",
    "__version__",
]
