"""
Unit tests for configuration loader (scientist/config/settings.py)

Tests covering:
- Environment flags (kill switch, default percentage)
- YAML loading validated against the JSON schema
- Per-experiment sampling percentages
- Sampler decisions
"""

import importlib
import json

import pytest

from scientist.config import settings as settings_module
from scientist.config.settings import SCHEMA_PATH, ConfigurationError, Settings


def write_config(tmp_path, text):
    path = tmp_path / "experiments.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


VALID_CONFIG = """
default_percent: 10
experiments:
  - name: checkout-total
    description: New pricing
    percent: 25
  - name: search-ranking
    enabled: false
"""


class TestEnvironment:
    """Tests for environment-driven flags."""

    @pytest.fixture
    def reload_settings(self, monkeypatch):
        """Reload the settings module after changing the environment."""

        def reload(**env):
            for key, value in env.items():
                monkeypatch.setenv(key, value)
            return importlib.reload(settings_module)

        yield reload

        monkeypatch.undo()
        importlib.reload(settings_module)

    def test_enabled_by_default(self, monkeypatch, reload_settings):
        monkeypatch.delenv("SCIENTIST_ENABLED", raising=False)
        module = reload_settings()
        assert module.Settings().is_enabled() is True

    def test_kill_switch(self, reload_settings):
        """Test SCIENTIST_ENABLED=false disables every experiment."""
        module = reload_settings(SCIENTIST_ENABLED="false")
        settings = module.Settings()

        assert settings.is_enabled() is False
        assert settings.percent_for("anything") == 0.0
        assert settings.sampler(rng=lambda: 0.0)("anything") is False

    def test_default_percent_from_environment(self, monkeypatch):
        monkeypatch.setenv("SCIENTIST_DEFAULT_PERCENT", "5")
        assert Settings().default_percent == 5.0

    def test_default_percent_clamped(self, monkeypatch):
        monkeypatch.setenv("SCIENTIST_DEFAULT_PERCENT", "250")
        assert Settings().default_percent == 100.0

    def test_default_percent_invalid_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("SCIENTIST_DEFAULT_PERCENT", "lots")
        assert Settings().default_percent == 100.0
        assert "SCIENTIST_DEFAULT_PERCENT" in caplog.text

    def test_from_environment_loads_config_file(self, tmp_path, reload_settings):
        """Test SCIENTIST_CONFIG_FILE is loaded by from_environment()."""
        path = write_config(tmp_path, VALID_CONFIG)
        module = reload_settings(SCIENTIST_CONFIG_FILE=path, SCIENTIST_ENABLED="true")

        settings = module.Settings.from_environment()

        assert settings.experiment_names() == ["checkout-total", "search-ranking"]


class TestLoadExperiments:
    """Tests for Settings.load_experiments()."""

    def test_loads_valid_config(self, tmp_path):
        settings = Settings(enabled=True, default_percent=100)
        settings.load_experiments(write_config(tmp_path, VALID_CONFIG))

        assert settings.default_percent == 10.0
        assert settings.experiments["checkout-total"]["percent"] == 25
        assert settings.experiment_names() == ["checkout-total", "search-ranking"]

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Settings().load_experiments(str(tmp_path / "missing.yaml"))

    def test_missing_schema_file(self, tmp_path):
        path = write_config(tmp_path, VALID_CONFIG)
        with pytest.raises(FileNotFoundError):
            Settings().load_experiments(path, str(tmp_path / "missing.json"))

    def test_invalid_schema_json(self, tmp_path):
        schema = tmp_path / "schema.json"
        schema.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            Settings().load_experiments(write_config(tmp_path, VALID_CONFIG), str(schema))

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "experiments: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            Settings().load_experiments(path)

    def test_empty_config(self, tmp_path):
        """Test an empty file loads no experiments."""
        settings = Settings()
        settings.load_experiments(write_config(tmp_path, ""))
        assert settings.experiments == {}

    @pytest.mark.parametrize(
        "text",
        [
            "experiments:\n  - percent: 10\n",
            "experiments:\n  - name: a\n    percent: 101\n",
            "experiments:\n  - name: ''\n",
            "default_percent: -1\n",
            "unknown_key: true\n",
        ],
    )
    def test_schema_violations(self, tmp_path, text):
        """Test configurations that break the schema are rejected."""
        with pytest.raises(ConfigurationError, match="validation failed"):
            Settings().load_experiments(write_config(tmp_path, text))

    def test_duplicate_names(self, tmp_path):
        path = write_config(tmp_path, "experiments:\n  - name: a\n  - name: a\n")
        with pytest.raises(ConfigurationError, match="Duplicate experiment"):
            Settings().load_experiments(path)

    def test_packaged_schema_is_valid_json(self):
        with open(SCHEMA_PATH, encoding="utf-8") as f:
            schema = json.load(f)
        assert "experiments" in schema["properties"]


class TestSampling:
    """Tests for percent_for() and sampler()."""

    @pytest.fixture
    def settings(self, tmp_path):
        settings = Settings(enabled=True, default_percent=100)
        settings.load_experiments(write_config(tmp_path, VALID_CONFIG))
        return settings

    def test_percent_for_configured_experiment(self, settings):
        assert settings.percent_for("checkout-total") == 25.0

    def test_percent_for_unlisted_experiment_uses_default(self, settings):
        assert settings.percent_for("other") == 10.0

    def test_percent_for_disabled_experiment(self, settings):
        assert settings.is_experiment_enabled("search-ranking") is False
        assert settings.percent_for("search-ranking") == 0.0

    @pytest.mark.parametrize(
        "roll,expected",
        [(0.0, True), (0.2499, True), (0.25, False), (0.99, False)],
    )
    def test_sampler_compares_roll_with_percent(self, settings, roll, expected):
        sample = settings.sampler(rng=lambda: roll)
        assert sample("checkout-total") is expected

    def test_sampler_never_runs_disabled(self, settings):
        sample = settings.sampler(rng=lambda: 0.0)
        assert sample("search-ranking") is False

    def test_sampler_always_runs_at_full_percent(self):
        sample = Settings(enabled=True, default_percent=100).sampler(rng=lambda: 0.999)
        assert sample("anything") is True
