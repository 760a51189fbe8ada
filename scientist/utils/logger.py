"""
Structured logging utility for experiments.

Provides JSON-formatted log lines over the standard logging module, with
experiment context injection and operation timing.
"""

import json
import logging
import time
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Optional


def _json_default(value: Any) -> str:
    """Fallback serializer for values json cannot encode (e.g. behavior results)."""
    return repr(value)


class StructuredLogger:
    """
    JSON-formatted logger with context injection and operation timing.

    Every record is a single JSON object so experiment output can be parsed
    by log tooling without custom formats.
    """

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__ from calling module)
        """
        self.logger = logging.getLogger(name)

        if not self.logger.handlers and not logging.getLogger().handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
        **fields: Any,
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Human-readable message
            operation: Operation name (e.g., "run", "publish_result")
            context: Experiment context dict
            duration_ms: Operation duration in milliseconds
            error: Error message if applicable
            **fields: Extra top-level fields (experiment name, event type, ...)

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }

        if operation:
            log_entry["operation"] = operation

        if context:
            log_entry["context"] = context

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        if error:
            log_entry["error"] = error

        log_entry.update(fields)

        return json.dumps(log_entry, ensure_ascii=False, default=_json_default)

    def debug(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        **fields: Any,
    ):
        """Log debug message."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_log("DEBUG", message, operation, context, **fields))

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        **fields: Any,
    ):
        """Log info message."""
        log_json = self._format_log("INFO", message, operation, context, duration_ms, **fields)
        self.logger.info(log_json)

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        **fields: Any,
    ):
        """Log warning message."""
        log_json = self._format_log("WARNING", message, operation, context, error=error, **fields)
        self.logger.warning(log_json)

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
        **fields: Any,
    ):
        """Log error message."""
        log_json = self._format_log(
            "ERROR", message, operation, context, duration_ms, error, **fields
        )
        self.logger.error(log_json)


def log_operation(operation_name: str):
    """
    Decorator to log an operation's completion or failure with its duration.

    Usage:
        @log_operation("publish_result")
        def on_result(self, result):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context = {"function": func.__name__}

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                logger.debug(
                    f"Completed {operation_name}",
                    operation=operation_name,
                    context=context,
                    duration_ms=(time.perf_counter() - start_time) * 1000,
                )
                return result
            except Exception as e:
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=str(e),
                    duration_ms=(time.perf_counter() - start_time) * 1000,
                )
                raise

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """
    Factory function to get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
