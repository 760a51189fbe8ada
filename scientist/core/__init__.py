"""Experiment execution engine."""

from scientist.core.exceptions import (
    AsyncMappingError,
    ConfigurationError,
    DuplicateBehaviorError,
    EventLoopRequiredError,
    InvalidOptionError,
    MissingControlError,
    ScientistError,
    StageError,
)
from scientist.core.comparison import deep_equal
from scientist.core.experiment import CONTROL, Experiment
from scientist.core.listener import ExperimentListener
from scientist.core.measurement import Measurement, Stopwatch
from scientist.core.observation import Observation
from scientist.core.options import ExperimentOptions
from scientist.core.result import Result
from scientist.core.scientist import Scientist

__all__ = [
    "AsyncMappingError",
    "CONTROL",
    "ConfigurationError",
    "DuplicateBehaviorError",
    "EventLoopRequiredError",
    "Experiment",
    "ExperimentListener",
    "ExperimentOptions",
    "InvalidOptionError",
    "Measurement",
    "MissingControlError",
    "Observation",
    "Result",
    "Scientist",
    "ScientistError",
    "StageError",
    "Stopwatch",
    "deep_equal",
]
