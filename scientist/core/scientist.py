"""
Process-wide entry point for experiments.

A Scientist owns the sampler shared by every experiment it runs and
re-publishes the events of those experiments to its own listeners.
"""

from typing import TYPE_CHECKING, Any, Callable, List

from scientist.core.exceptions import InvalidOptionError
from scientist.core.experiment import Experiment
from scientist.core.listener import ExperimentListener

if TYPE_CHECKING:
    from scientist.config.settings import Settings


def _always(name: str) -> bool:
    return True


class _Forwarder(ExperimentListener):
    """Relays one experiment's events to the scientist's listeners."""

    def __init__(self, scientist: "Scientist"):
        self.scientist = scientist

    def on_skip(self, experiment, reason):
        for listener in self.scientist.listeners:
            listener.on_skip(experiment, reason)

    def on_result(self, result):
        for listener in self.scientist.listeners:
            listener.on_result(result)

    def on_error(self, error):
        for listener in self.scientist.listeners:
            listener.on_error(error)


class Scientist:
    """Creates, configures and runs experiments with a shared sampler."""

    def __init__(self, sampler: Callable[[str], Any] = _always):
        self._sampler = sampler
        self._listeners: List[ExperimentListener] = []
        self._forwarder = _Forwarder(self)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Scientist":
        """Build a scientist whose sampler follows the configured sampling rates."""
        return cls(sampler=settings.sampler())

    @property
    def sampler(self) -> Callable[[str], Any]:
        return self._sampler

    @property
    def listeners(self) -> List[ExperimentListener]:
        return list(self._listeners)

    def sample(self, sampler: Callable[[str], Any]) -> None:
        """Replace the sampler used by every subsequent experiment."""
        if not callable(sampler):
            raise InvalidOptionError(f"Expected function, got {sampler!r}")
        self._sampler = sampler

    def subscribe(self, listener: ExperimentListener) -> ExperimentListener:
        self._listeners.append(listener)
        return listener

    def science(self, name: str, setup: Callable[[Experiment], Any]) -> Any:
        """
        Set up and run an experiment, returning the control's outcome.

        Args:
            name: Experiment name, passed to the sampler
            setup: Called with the new experiment to register behaviors and options

        Returns:
            Whatever the control behavior returned (errors are re-raised)
        """
        experiment = Experiment(name)
        setup(experiment)

        for listener in self.listeners:
            listener.on_experiment(experiment)

        experiment.subscribe(self._forwarder)
        return experiment.run(self._sampler)
