"""Pytest configuration and fixtures."""

from unittest.mock import patch

import pytest

from scientist.core.experiment import Experiment
from scientist.core.listener import ExperimentListener


class FakeClock:
    """
    Frozen monotonic clock for the measurement module.

    Time only moves when ``tick(ms)`` is called, so durations are exact.
    """

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def tick(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def fake_clock():
    """Patch the clock used by Stopwatch and yield it."""
    clock = FakeClock()
    with patch("scientist.core.measurement.perf_counter", clock):
        yield clock


class RecordingListener(ExperimentListener):
    """Listener that records every event it receives."""

    def __init__(self):
        self.experiments = []
        self.skips = []
        self.results = []
        self.errors = []

    def on_experiment(self, experiment):
        self.experiments.append(experiment)

    def on_skip(self, experiment, reason):
        self.skips.append((experiment, reason))

    def on_result(self, result):
        self.results.append(result)

    def on_error(self, error):
        self.errors.append(error)


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def experiment(listener):
    experiment = Experiment("test")
    experiment.subscribe(listener)
    return experiment
