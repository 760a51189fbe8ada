"""Sampling configuration."""

from scientist.config.settings import SCHEMA_PATH, ConfigurationError, Settings

__all__ = ["ConfigurationError", "SCHEMA_PATH", "Settings"]
