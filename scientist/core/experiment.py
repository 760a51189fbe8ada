"""
Experiment execution engine.

An experiment runs a trusted control behavior alongside one or more
candidate behaviors, in random order, and always hands the caller the
control's own outcome. Candidate outcomes are compared against the control
out of band and reported to listeners; failures in user-supplied callbacks
(sampler, skipper, mapper, comparator, listeners) are isolated and reported
through ``on_error`` instead of reaching the caller.
"""

import asyncio
import random
from functools import wraps
from inspect import isawaitable
from typing import Any, Callable, Coroutine, Dict, List, Optional, Set

from scientist.core.exceptions import (
    AsyncMappingError,
    DuplicateBehaviorError,
    EventLoopRequiredError,
    InvalidOptionError,
    MissingControlError,
    StageError,
)
from scientist.core.listener import ExperimentListener
from scientist.core.observation import Observation
from scientist.core.options import ExperimentOptions
from scientist.core.result import Result
from scientist.utils.logger import get_logger

logger = get_logger(__name__)

CONTROL = "control"
DEFAULT_CANDIDATE = "candidate"

_CHECKS = {
    "boolean": lambda value: isinstance(value, bool),
    "function": callable,
}


def expects(kind: str):
    """Validate the single argument of an option setter before storing it."""
    check = _CHECKS[kind]

    def decorator(setter):
        @wraps(setter)
        def wrapper(self, value):
            if not check(value):
                raise InvalidOptionError(f"Expected {kind}, got {value!r}")
            setter(self, value)
            return self

        return wrapper

    return decorator


class Experiment:
    """
    A named comparison between a control behavior and its candidates.

    Configure it with the option setters, register behaviors with
    ``use_control``/``try_candidate``, subscribe listeners, then call
    ``run``.
    """

    def __init__(self, name: str):
        self.name = name
        self._behaviors: Dict[str, Callable[[], Any]] = {}
        self._options = ExperimentOptions()
        self._listeners: List[ExperimentListener] = []
        self._pending: Set[asyncio.Task] = set()

    def __repr__(self) -> str:
        return f"<Experiment {self.name!r} behaviors={sorted(map(str, self._behaviors))}>"

    @property
    def options(self) -> ExperimentOptions:
        return self._options

    @property
    def behaviors(self) -> Dict[str, Callable[[], Any]]:
        return dict(self._behaviors)

    @property
    def listeners(self) -> List[ExperimentListener]:
        return list(self._listeners)

    # Options

    @expects("boolean")
    def set_async(self, enabled: bool):
        """Settle awaitable outcomes before comparing them (default: False)."""
        self._options.run_async = enabled

    @expects("function")
    def skip_when(self, skipper: Callable[[], Any]):
        """Skip the experiment when the skipper returns truthy (default: never)."""
        self._options.skipper = skipper

    @expects("function")
    def map(self, mapper: Callable[[Any], Any]):
        """Transform values before comparison (default: identity)."""
        self._options.mapper = mapper

    @expects("function")
    def ignore(self, ignorer: Callable[[Observation, Observation], Any]):
        """Add a predicate that excludes a control/candidate pair from comparison."""
        self._options.ignorers.append(ignorer)

    @expects("function")
    def compare(self, comparator: Callable[[Any, Any], Any]):
        """Set the value comparator (default: ==)."""
        self._options.comparator = comparator

    @expects("function")
    def clean(self, cleaner: Callable[[Any], Any]):
        """Set the value cleaner used when rendering observations (default: identity)."""
        self._options.cleaner = cleaner

    def context(self, patch: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Merge ``patch`` into the context and return the whole context."""
        if patch:
            self._options.context.update(patch)
        return self._options.context

    # Behaviors

    def use_control(self, block: Callable[[], Any]) -> Callable[[], Any]:
        """Register the control behavior."""
        return self.try_candidate(block, name=CONTROL)

    def try_candidate(self, block: Callable[[], Any], name: Optional[str] = None) -> Callable[[], Any]:
        """Register a candidate behavior under ``name`` (default: "candidate")."""
        if name is None:
            name = DEFAULT_CANDIDATE

        if name in self._behaviors:
            raise DuplicateBehaviorError(f"Duplicate behavior: {name}")

        if not callable(block):
            raise InvalidOptionError(f"Invalid block: expected function, got {block!r}")

        self._behaviors[name] = block
        return block

    # Listeners

    def subscribe(self, listener: ExperimentListener) -> ExperimentListener:
        self._listeners.append(listener)
        return listener

    # Running

    def run(self, sampler: Callable[[str], Any]) -> Any:
        """
        Run the experiment and return (or raise) the control's outcome.

        Args:
            sampler: Called with the experiment name; falsy skips the experiment

        Returns:
            Whatever the control behavior returned

        Raises:
            MissingControlError: If no control behavior was registered
            EventLoopRequiredError: If an async run is attempted outside an event loop
            Exception: Whatever the control behavior raised
        """
        if CONTROL not in self._behaviors:
            raise MissingControlError("Expected control behavior to be defined")

        has_no_behaviors = len(self._behaviors) < 2
        should_not_sample = self._try("Sampler", lambda: not sampler(self.name))
        should_skip = self._try("Skipper", lambda: self._options.skipper())

        if has_no_behaviors:
            skip_reason = "No behaviors defined"
        elif should_not_sample:
            skip_reason = "Sampler returned false"
        elif should_skip:
            skip_reason = "Skipper returned true"
        else:
            skip_reason = None

        if skip_reason:
            logger.debug(f"Skipping experiment: {skip_reason}", operation="run", experiment=self.name)
            self._try("Skip handler", lambda: self._emit_skip(skip_reason))
            if _current_loop() is None:
                return self._behaviors[CONTROL]()
            return self._behavior(CONTROL)()

        loop = self._running_loop() if self._options.run_async else _current_loop()

        names = list(self._behaviors)
        random.shuffle(names)
        logger.debug("Running behaviors", operation="run", experiment=self.name, order=names)

        observed = [Observation(name, self._behavior(name), self._options) for name in names]
        control = next(o for o in observed if o.name == CONTROL)
        observations = [control] + [o for o in observed if o is not control]

        if loop is None:
            # No event loop to defer to: deliver before returning
            self._send_results(observations)
        elif self._options.run_async:
            self._schedule(loop, self._send_results_async(observations))
        else:
            self._schedule(loop, self._send_results_soon(observations))

        return control.evaluation()

    async def drain(self) -> None:
        """Wait until every scheduled result pipeline has finished."""
        while self._pending:
            await asyncio.gather(*self._pending)

    def _schedule(self, loop: asyncio.AbstractEventLoop, pipeline: Coroutine[Any, Any, None]) -> None:
        task = loop.create_task(pipeline)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _running_loop(self) -> asyncio.AbstractEventLoop:
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise EventLoopRequiredError(
                f"Async experiment {self.name!r} must be run inside a running event loop"
            ) from e

    def _behavior(self, name: str) -> Callable[[], Any]:
        block = self._behaviors[name]
        if not self._options.run_async:
            return block

        # A coroutine can only be awaited once; a task can be awaited by both
        # the caller and the settle pipeline.
        def shared():
            value = block()
            if asyncio.iscoroutine(value):
                return asyncio.ensure_future(value)
            return value

        return shared

    def _send_results(self, observations: List[Observation]) -> None:
        mapped = self._try("Map", lambda: [o.map(self._mapper) for o in observations])
        if not mapped:
            return
        self._compare(mapped)

    async def _send_results_soon(self, observations: List[Observation]) -> None:
        self._send_results(observations)

    async def _send_results_async(self, observations: List[Observation]) -> None:
        mapped = self._try("Map", lambda: [o.map(self._mapper) for o in observations])
        if not mapped:
            # Collect the outcomes nobody else will await
            pending = [o.value for o in observations if isawaitable(o.value)]
            await asyncio.gather(*pending, return_exceptions=True)
            return
        settled = await asyncio.gather(*(o.settle() for o in mapped))
        self._compare(list(settled))

    def _compare(self, observations: List[Observation]) -> None:
        control, *candidates = observations
        result = self._try("Comparison", lambda: Result(self, control, candidates))
        if result is None:
            return
        self._try("Result handler", lambda: self._emit_result(result))

    def _mapper(self, value: Any) -> Any:
        if not self._options.run_async:
            return self._options.mapper(value)

        mapped = self._options.mapper(_resolved(value))
        if not isawaitable(mapped):
            raise AsyncMappingError(f"Result of async mapping must be awaitable, got {mapped!r}")
        return mapped

    def _try(self, stage: str, block: Callable[[], Any]) -> Any:
        try:
            return block()
        except Exception as e:
            self._emit_error(self._decorate_error(e, stage))
            return None

    def _decorate_error(self, error: Exception, stage: str) -> StageError:
        return StageError(stage, error, experiment=self, context=dict(self.context()))

    def _emit_skip(self, reason: str) -> None:
        for listener in list(self._listeners):
            listener.on_skip(self, reason)

    def _emit_result(self, result: Result) -> None:
        for listener in list(self._listeners):
            listener.on_result(result)

    def _emit_error(self, error: StageError) -> None:
        if not self._listeners:
            logger.error(
                "Unhandled experiment error",
                operation=error.stage,
                context=error.context,
                error=str(error),
                experiment=self.name,
            )
            return

        for listener in list(self._listeners):
            try:
                listener.on_error(error)
            except Exception as e:
                logger.error(
                    "Error listener failed",
                    operation=error.stage,
                    error=f"{type(e).__name__}: {e}",
                    experiment=self.name,
                    original_error=str(error),
                )


def _current_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _resolved(value: Any) -> "asyncio.Future[Any]":
    """Wrap a value (or an awaitable) into a future on the running loop."""
    if isawaitable(value):
        return asyncio.ensure_future(value)
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future
