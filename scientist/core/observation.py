"""
Observation of a single behavior execution.

An observation runs its block exactly once, at construction, and captures
either the returned value or the raised exception together with the elapsed
time. Derived observations (settled or mapped) share the experiment options
and start time of the observation they came from.
"""

from __future__ import annotations

from datetime import datetime, timezone
from inspect import isawaitable
from typing import Any, Callable, Optional

from scientist.core.measurement import Measurement
from scientist.core.options import ExperimentOptions

_MISSING = object()


class Observation:
    """Captured outcome and timing of one behavior run."""

    def __init__(
        self,
        name: str,
        block: Callable[[], Any],
        options: Optional[ExperimentOptions] = None,
        measure: Callable[[Callable[[], Any]], Measurement] = Measurement.benchmark,
        start_time: Optional[datetime] = None,
    ):
        """
        Run the block and record its outcome.

        Args:
            name: Behavior name ("control" or a candidate name)
            block: Zero-argument callable to observe
            options: Experiment options (comparator, ignorers, cleaner)
            measure: Timing strategy; ``Measurement.benchmark`` for a fresh
                run, or a bound ``remeasure``/``preserve`` for derived
                observations
            start_time: Wall-clock start, carried over by derived observations
        """
        self.name = name
        self._options = options if options is not None else ExperimentOptions()
        self.start_time = start_time if start_time is not None else datetime.now(timezone.utc)
        self._value: Any = _MISSING
        self._error: Optional[Exception] = None

        self._time = measure(self._capture(block))
        self.duration = self._time.elapsed

    def _capture(self, block: Callable[[], Any]) -> Callable[[], None]:
        def run() -> None:
            try:
                self._value = block()
            except Exception as e:
                self._error = e

        return run

    @property
    def value(self) -> Any:
        """The returned value, or None if the block raised."""
        return None if self._value is _MISSING else self._value

    @property
    def error(self) -> Optional[Exception]:
        """The raised exception, or None if the block returned."""
        return self._error

    @property
    def options(self) -> ExperimentOptions:
        return self._options

    def evaluation(self) -> Any:
        """Replay the block's effect: return its value or re-raise its error."""
        if self.did_return():
            return self._value
        raise self._error

    async def settle(self) -> Observation:
        """
        Resolve an awaitable value into a new observation.

        A resolved awaitable becomes the value, a failed one becomes the
        error. The duration spans the original run plus the time spent
        awaiting.
        """
        try:
            value = self.evaluation()
            if isawaitable(value):
                value = await value
        except Exception as e:
            error = e

            def block():
                raise error

        else:

            def block():
                return value

        return Observation(
            self.name,
            block,
            self._options,
            measure=self._time.remeasure,
            start_time=self.start_time,
        )

    def map(self, f: Callable[[Any], Any]) -> Observation:
        """
        Return an observation whose value is ``f(value)``.

        Errors in ``f`` propagate. Observations that raised are returned
        unchanged, and the mapping time is not added to the duration.
        """
        if not self.did_return():
            return self

        mapped = f(self._value)
        return Observation(
            self.name,
            lambda: mapped,
            self._options,
            measure=self._time.preserve,
            start_time=self.start_time,
        )

    def did_return(self) -> bool:
        return self._error is None

    def ignores(self, other: Any) -> bool:
        """True if any configured ignorer excludes the other observation from comparison."""
        if not isinstance(other, Observation):
            return False

        if not self._options.ignorers:
            return False

        return any(predicate(self, other) for predicate in self._options.ignorers)

    def matches(self, other: Any) -> bool:
        """
        True if the other observation matches this one.

        Both must have returned (values go through the comparator) or both
        must have raised (errors compare by type and args).
        """
        if not isinstance(other, Observation):
            return False

        if self.did_return() and other.did_return():
            return bool(self._options.comparator(self._value, other._value))

        if not self.did_return() and not other.did_return():
            return self._compare_errors(self._error, other._error)

        return False

    @staticmethod
    def _compare_errors(a: Exception, b: Exception) -> bool:
        # Tracebacks are unreliable, so only the type and the args count.
        return type(a) is type(b) and a.args == b.args

    def inspect(self) -> str:
        """Readable rendering of the outcome; the cleaner applies to values only."""
        if self.did_return():
            return f"value: {self._options.cleaner(self._value)!r}"
        return f"error: [{type(self._error).__name__}] {str(self._error)!r}"

    def __repr__(self) -> str:
        return f"<Observation {self.name!r} {self.inspect()} duration={self.duration}ms>"
