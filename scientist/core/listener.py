"""Notification interface for experiment lifecycle events."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scientist.core.exceptions import StageError
    from scientist.core.experiment import Experiment
    from scientist.core.result import Result


class ExperimentListener:
    """
    Receives skip, result and error events from experiments.

    Subclasses override the hooks they care about; every hook defaults to a
    no-op. Hooks are called synchronously, in subscription order.
    """

    def on_experiment(self, experiment: "Experiment") -> None:
        """Called by a Scientist when it creates an experiment."""

    def on_skip(self, experiment: "Experiment", reason: str) -> None:
        """Called when a run only executes the control."""

    def on_result(self, result: "Result") -> None:
        """Called with the classified result of a run."""

    def on_error(self, error: "StageError") -> None:
        """Called when user code fails inside an isolated stage."""
