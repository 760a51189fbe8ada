#!/usr/bin/env python3
"""
Verification script to print the experiment sampling configuration.

Usage:
    python scripts/print_experiments.py [--config config/experiments.yaml]

Output:
    Summary of sampling configuration including:
    - Global enabled flag and default percentage
    - Each configured experiment with its effective sampling percentage
"""

import argparse
import logging
import sys

from scientist.config.settings import SCIENTIST_CONFIG_FILE, Settings
from scientist.core.exceptions import ConfigurationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def print_experiments_summary(settings: Settings) -> None:
    """Print summary of loaded sampling configuration."""
    print("\n" + "=" * 80)
    print("EXPERIMENT SAMPLING SUMMARY")
    print("=" * 80)

    names = settings.experiment_names()
    enabled = [name for name in names if settings.is_experiment_enabled(name)]

    print(f"\nScientist enabled: {settings.is_enabled()}")
    print(f"Default percent:   {settings.default_percent:g}%")
    print(f"\nConfigured Experiments: {len(names)}")
    print(f"  - Enabled:  {len(enabled)}")
    print(f"  - Disabled: {len(names) - len(enabled)}")

    print("\n" + "-" * 80)
    print("EXPERIMENTS DETAIL")
    print("-" * 80)

    for idx, name in enumerate(names, 1):
        entry = settings.experiments[name]
        status = "✓ ENABLED" if settings.is_experiment_enabled(name) else "✗ DISABLED"
        print(f"\n[{idx}] {name} [{status}]")
        print(f"    Description: {entry.get('description', 'No description')}")
        print(f"    Sampling:    {settings.percent_for(name):g}%")

    print("\n" + "=" * 80)
    print("✓ Sampling configuration loaded successfully")
    print("=" * 80 + "\n")


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Print experiment sampling configuration")
    parser.add_argument(
        "--config",
        default=SCIENTIST_CONFIG_FILE or "config/experiments.yaml",
        help="Path to the experiments YAML file",
    )
    parser.add_argument("--schema", default=None, help="Path to an alternative JSON schema")
    args = parser.parse_args(argv)

    try:
        logger.info(f"Loading experiments from: {args.config}")
        settings = Settings()
        settings.load_experiments(args.config, args.schema)
        print_experiments_summary(settings)
        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ConfigurationError as e:
        logger.error(f"Validation error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
