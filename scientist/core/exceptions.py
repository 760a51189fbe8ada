"""
Exception hierarchy for experiments.

Configuration errors are raised synchronously to whoever set up the
experiment. Stage errors are never raised to the caller of ``run``; they are
delivered to listeners through ``on_error``.
"""

from typing import Any, Dict, Optional


class ScientistError(Exception):
    """Base exception for all experiment-related errors."""

    pass


class ConfigurationError(ScientistError):
    """
    Raised for setup mistakes: bad options, missing control, invalid config files.

    These are programmer errors and are never isolated.
    """

    pass


class InvalidOptionError(ConfigurationError, TypeError):
    """Raised when a setter or registration receives a value of the wrong kind."""

    pass


class DuplicateBehaviorError(ConfigurationError):
    """Raised when a behavior name is registered twice on one experiment."""

    pass


class MissingControlError(ConfigurationError):
    """Raised when an experiment is run without a control behavior."""

    pass


class EventLoopRequiredError(ConfigurationError):
    """Raised when an async experiment is run outside of a running event loop."""

    pass


class AsyncMappingError(ScientistError, TypeError):
    """
    Raised when the mapper of an async experiment does not return an awaitable.

    Only ever raised inside the Map stage, so it reaches listeners as the
    cause of a StageError.
    """

    pass


class StageError(ScientistError):
    """
    An error raised by user code inside an isolated stage of a run.

    The message is prefixed with the stage label; the original exception is
    kept as ``original`` and chained as ``__cause__`` so its traceback is
    left unaltered.
    """

    def __init__(
        self,
        stage: str,
        original: BaseException,
        experiment: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(f"{stage} failed: {original}")
        self.stage = stage
        self.original = original
        self.experiment = experiment
        self.context = context if context is not None else {}
        self.__cause__ = original
