"""Per-experiment policy shared by an experiment and every observation it creates."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from scientist.core.comparison import deep_equal


def _identity(value: Any) -> Any:
    return value


def _never() -> bool:
    return False


@dataclass
class ExperimentOptions:
    """
    Configuration bundle of an experiment.

    Attributes:
        context: Free-form mapping merged by ``Experiment.context``
        run_async: Settle awaitable outcomes before comparison (default: False)
        skipper: Returns truthy to skip the experiment (default: never)
        mapper: Transforms values before comparison (default: identity)
        ignorers: Predicates ``(control, candidate) -> bool`` (default: none)
        comparator: Value equality (default: ``deep_equal``)
        cleaner: Transforms values for display (default: identity)
    """

    context: Dict[str, Any] = field(default_factory=dict)
    run_async: bool = False
    skipper: Callable[[], Any] = _never
    mapper: Callable[[Any], Any] = _identity
    ignorers: List[Callable[[Any, Any], Any]] = field(default_factory=list)
    comparator: Callable[[Any, Any], Any] = deep_equal
    cleaner: Callable[[Any], Any] = _identity
