"""Reporting of experiment results through structured logs."""

from scientist.monitoring.reporting import (
    ResultLogger,
    describe_mismatch,
    observation_to_dict,
    result_to_dict,
)

__all__ = [
    "ResultLogger",
    "describe_mismatch",
    "observation_to_dict",
    "result_to_dict",
]
