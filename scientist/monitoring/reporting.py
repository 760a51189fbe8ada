"""
Experiment result reporting.

Turns results, skips and isolated errors into structured JSON log lines so
mismatches between control and candidates can be found with log queries.
"""

from typing import Any, Dict, List

from scientist.core.exceptions import StageError
from scientist.core.listener import ExperimentListener
from scientist.core.observation import Observation
from scientist.core.result import Result
from scientist.utils.logger import get_logger, log_operation

MAX_MISMATCH_DETAILS = 5


def describe_mismatch(control: Observation, candidate: Observation) -> str:
    """
    Describe how a candidate differs from the control.

    Args:
        control: The control observation
        candidate: A mismatched candidate observation

    Returns:
        Per-key differences when both returned dicts, otherwise both renderings
    """
    if (
        control.did_return()
        and candidate.did_return()
        and isinstance(control.value, dict)
        and isinstance(candidate.value, dict)
    ):
        mismatches = []
        for key in sorted(set(control.value) | set(candidate.value), key=str):
            old_value = control.value.get(key)
            new_value = candidate.value.get(key)
            if old_value != new_value:
                mismatches.append(f"{key}: {old_value!r} → {new_value!r}")
        return f"Mismatches: {', '.join(mismatches[:MAX_MISMATCH_DETAILS])}"

    return f"{control.inspect()} → {candidate.inspect()}"


def observation_to_dict(observation: Observation) -> Dict[str, Any]:
    """Convert an observation to a JSON-friendly dictionary."""
    return {
        "name": observation.name,
        "duration_ms": observation.duration,
        "start_time": observation.start_time.isoformat(),
        "returned": observation.did_return(),
        "outcome": observation.inspect(),
    }


def result_to_dict(result: Result) -> Dict[str, Any]:
    """Convert a result to a JSON-friendly dictionary."""
    candidates: List[Dict[str, Any]] = []
    for candidate in result.candidates:
        entry = observation_to_dict(candidate)
        if candidate in result.ignored:
            entry["status"] = "ignored"
        elif candidate in result.matched:
            entry["status"] = "matched"
        else:
            entry["status"] = "mismatched"
            entry["mismatch_details"] = describe_mismatch(result.control, candidate)
        candidates.append(entry)

    return {
        "experiment": result.experiment.name,
        "context": result.context,
        "control": observation_to_dict(result.control),
        "candidates": candidates,
        "ignored_count": len(result.ignored),
        "matched_count": len(result.matched),
        "mismatched_count": len(result.mismatched),
    }


class ResultLogger(ExperimentListener):
    """
    Structured logger for experiment events.

    Matched results are logged at INFO, mismatched ones at WARNING, isolated
    errors at ERROR. Each line carries an ``event_type`` field:
    ``experiment_result``, ``experiment_skip`` or ``experiment_error``.
    """

    def __init__(self, name: str = __name__):
        """
        Initialize result logger.

        Args:
            name: Logger name to publish under
        """
        self.logger = get_logger(name)

    @log_operation("publish_result")
    def on_result(self, result: Result) -> None:
        data = result_to_dict(result)
        if result.mismatched:
            self.logger.warning(
                f"Experiment {result.experiment.name} mismatched",
                operation="result",
                context=result.context,
                event_type="experiment_result",
                result=data,
            )
        else:
            self.logger.info(
                f"Experiment {result.experiment.name} matched",
                operation="result",
                context=result.context,
                event_type="experiment_result",
                result=data,
            )

    def on_skip(self, experiment, reason: str) -> None:
        self.logger.info(
            f"Experiment {experiment.name} skipped",
            operation="skip",
            context=dict(experiment.context()),
            event_type="experiment_skip",
            experiment=experiment.name,
            reason=reason,
        )

    def on_error(self, error: StageError) -> None:
        name = error.experiment.name if error.experiment is not None else None
        self.logger.error(
            f"Experiment {name} stage failed",
            operation=error.stage,
            context=error.context,
            error=str(error),
            event_type="experiment_error",
            experiment=name,
            error_type=type(error.original).__name__,
        )
