"""Shared utilities."""

from scientist.utils.logger import StructuredLogger, get_logger, log_operation

__all__ = ["StructuredLogger", "get_logger", "log_operation"]
