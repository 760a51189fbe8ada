"""
Configuration loader for experiment sampling.

Reads feature flags from environment variables and per-experiment sampling
rates from a YAML file validated against a JSON schema. The resulting
sampler decides, per run, whether an experiment executes its candidates.
"""

import json
import logging
import os
import random
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import jsonschema
import yaml

from scientist.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "experiments.schema.json"

# Global kill switch: when false only control behaviors run
SCIENTIST_ENABLED = os.getenv("SCIENTIST_ENABLED", "true").lower() == "true"
SCIENTIST_CONFIG_FILE = os.getenv("SCIENTIST_CONFIG_FILE")


def _read_default_percent() -> float:
    """Return SCIENTIST_DEFAULT_PERCENT, falling back to 100 when unset or invalid."""
    raw = os.getenv("SCIENTIST_DEFAULT_PERCENT")
    if raw is None:
        return 100.0
    try:
        percent = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric SCIENTIST_DEFAULT_PERCENT={raw!r}")
        return 100.0
    return min(max(percent, 0.0), 100.0)


class Settings:
    """
    Sampling configuration for experiments.

    Experiments not listed in the configuration file run at the default
    percentage. A disabled experiment, or a disabled scientist, never
    samples.
    """

    def __init__(self, enabled: Optional[bool] = None, default_percent: Optional[float] = None):
        """
        Initialize settings from the environment.

        Args:
            enabled: Override of SCIENTIST_ENABLED
            default_percent: Override of SCIENTIST_DEFAULT_PERCENT
        """
        self.enabled = SCIENTIST_ENABLED if enabled is None else enabled
        self.default_percent = _read_default_percent() if default_percent is None else default_percent
        self.experiments: Dict[str, Dict[str, Any]] = {}
        self.schema: Dict[str, Any] = {}

    @classmethod
    def from_environment(cls) -> "Settings":
        """Build settings from environment variables, loading SCIENTIST_CONFIG_FILE if set."""
        settings = cls()
        if SCIENTIST_CONFIG_FILE:
            settings.load_experiments(SCIENTIST_CONFIG_FILE)
        return settings

    def is_enabled(self) -> bool:
        return self.enabled

    def load_experiments(self, config_path: str, schema_path: Optional[str] = None) -> None:
        """
        Load per-experiment sampling rates from YAML and validate them.

        Args:
            config_path: Path to the experiments YAML file
            schema_path: Path to the JSON schema (default: packaged schema)

        Raises:
            FileNotFoundError: If either file is missing
            ConfigurationError: If YAML/JSON is malformed or fails validation
        """
        schema_file = schema_path or str(SCHEMA_PATH)
        try:
            with open(schema_file, "r", encoding="utf-8") as f:
                self.schema = json.load(f)
                logger.debug(f"Loaded experiments schema from {schema_file}")
        except FileNotFoundError:
            logger.error(f"Experiments schema file not found: {schema_file}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in experiments schema: {e}")
            raise ConfigurationError(f"Invalid JSON in {schema_file}: {e}") from e

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            logger.error(f"Experiments configuration file not found: {config_path}")
            raise
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in experiments configuration: {e}")
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not config:
            logger.warning(f"Empty experiments configuration: {config_path}")
            self.experiments = {}
            return

        try:
            jsonschema.validate(instance=config, schema=self.schema)
        except jsonschema.ValidationError as e:
            logger.error(f"Experiments configuration failed schema validation: {e.message}")
            raise ConfigurationError(f"Experiments configuration validation failed: {e.message}") from e
        except jsonschema.SchemaError as e:
            logger.error(f"Experiments schema is invalid: {e.message}")
            raise ConfigurationError(f"Experiments schema is invalid: {e.message}") from e

        experiments: Dict[str, Dict[str, Any]] = {}
        for entry in config.get("experiments", []):
            name = entry["name"]
            if name in experiments:
                raise ConfigurationError(f"Duplicate experiment in {config_path}: {name}")
            experiments[name] = entry

        if "default_percent" in config:
            self.default_percent = float(config["default_percent"])
        self.experiments = experiments
        logger.info(f"Loaded sampling rules for {len(self.experiments)} experiments from {config_path}")

    def experiment_names(self) -> List[str]:
        return sorted(self.experiments)

    def is_experiment_enabled(self, name: str) -> bool:
        if not self.enabled:
            return False
        return bool(self.experiments.get(name, {}).get("enabled", True))

    def percent_for(self, name: str) -> float:
        """Sampling percentage for an experiment (0 when disabled)."""
        if not self.is_experiment_enabled(name):
            return 0.0
        return float(self.experiments.get(name, {}).get("percent", self.default_percent))

    def sampler(self, rng: Callable[[], float] = random.random) -> Callable[[str], bool]:
        """
        Build the sampling decision function.

        Args:
            rng: Source of uniform numbers in [0, 1)

        Returns:
            Callable taking an experiment name and returning whether to run it
        """

        def sample(name: str) -> bool:
            percent = self.percent_for(name)
            if percent <= 0:
                return False
            return rng() * 100 < percent

        return sample
