"""
Scientist: verify a replacement code path by running it alongside the
existing one in production and comparing their outcomes, without letting the
replacement affect the caller.
"""

from scientist.core import (
    AsyncMappingError,
    ConfigurationError,
    DuplicateBehaviorError,
    EventLoopRequiredError,
    Experiment,
    ExperimentListener,
    InvalidOptionError,
    Measurement,
    MissingControlError,
    Observation,
    Result,
    Scientist,
    ScientistError,
    StageError,
)
from scientist.config import Settings
from scientist.monitoring import ResultLogger

__all__ = [
    "AsyncMappingError",
    "ConfigurationError",
    "DuplicateBehaviorError",
    "EventLoopRequiredError",
    "Experiment",
    "ExperimentListener",
    "InvalidOptionError",
    "Measurement",
    "MissingControlError",
    "Observation",
    "Result",
    "ResultLogger",
    "Scientist",
    "ScientistError",
    "Settings",
    "StageError",
]

__version__ = "0.1.0"
