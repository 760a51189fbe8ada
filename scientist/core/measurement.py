"""Monotonic timing primitives used to measure behavior durations."""

from time import perf_counter
from typing import Any, Callable


class Stopwatch:
    """Mutable timer anchored at a start instant."""

    def __init__(self):
        self.reset()

    def reset(self) -> float:
        self._start = perf_counter()
        return self._start

    def time(self) -> int:
        """Milliseconds since the start instant, rounded to the nearest integer."""
        return round((perf_counter() - self._start) * 1000)


class Measurement:
    """
    Immutable elapsed time tied to a stopwatch.

    A measurement can be extended through another block with ``remeasure``
    (elapsed time keeps counting from the original start) or carried through
    a block untouched with ``preserve``.
    """

    __slots__ = ("_stopwatch", "elapsed")

    def __init__(self, stopwatch: Stopwatch):
        object.__setattr__(self, "_stopwatch", stopwatch)
        object.__setattr__(self, "elapsed", stopwatch.time())

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"Measurement(elapsed={self.elapsed})"

    @classmethod
    def benchmark(cls, block: Callable[[], Any]) -> "Measurement":
        """Run the block on a fresh stopwatch and measure it."""
        stopwatch = Stopwatch()
        block()
        return cls(stopwatch)

    def remeasure(self, block: Callable[[], Any]) -> "Measurement":
        """Run the block and measure from the original start to its end."""
        block()
        return Measurement(self._stopwatch)

    def preserve(self, block: Callable[[], Any]) -> "Measurement":
        """Run the block without counting it toward the elapsed time."""
        block()
        return self
