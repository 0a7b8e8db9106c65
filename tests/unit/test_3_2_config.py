"""
Unit tests for configuration (Subtask 3.2).

Tests cover:
- Defaults and derived survivor and offspring counts
- Validation of invalid values
- Environment loading
- JSON persistence
- Preset configurations and logfire setup
"""

import logfire
import pytest
from pydantic import ValidationError

from keen.core.config import (
    EvolutionParameters,
    KeenConfig,
    create_default_config,
    create_production_config,
    create_test_config
)
from keen.core.observability import configure_logfire


class TestKeenConfig:
    """Test suite for KeenConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = create_default_config()
        assert config.evolution.population_size == 50
        assert config.evolution.survival_rate == 0.4
        assert config.evolution.generations == 100
        assert config.logging.log_level == "INFO"
        assert not config.parallelization.enable_parallel
        assert config.random_seed is None
        assert not config.skip_checks

    @pytest.mark.parametrize(
        "population_size, survival_rate, survivors, offspring",
        [(10, 0.4, 4, 6), (7, 0.5, 4, 3), (10, 0.0, 0, 10), (10, 1.0, 10, 0), (100, 0.07, 7, 93)]
    )
    def test_survivor_and_offspring_counts(self, population_size, survival_rate, survivors, offspring):
        """Test that survivors round up and offspring fill the rest."""
        parameters = EvolutionParameters(population_size=population_size, survival_rate=survival_rate)
        assert parameters.survivors == survivors
        assert parameters.offspring == offspring

    @pytest.mark.parametrize(
        "field, value",
        [("population_size", 0), ("survival_rate", 1.5), ("survival_rate", -0.1), ("generations", 0)]
    )
    def test_invalid_evolution_parameters(self, field, value):
        """Test that out of range parameters are rejected."""
        with pytest.raises(ValidationError):
            EvolutionParameters(**{field: value})

    def test_assignment_is_validated(self):
        """Test validation on assignment."""
        config = KeenConfig()
        with pytest.raises(ValidationError):
            config.evolution.survival_rate = 2.0

    def test_unknown_fields_are_rejected(self):
        """Test that typos in configuration are reported."""
        with pytest.raises(ValidationError):
            KeenConfig(population_size=10)

    def test_from_env(self, monkeypatch):
        """Test loading configuration from environment variables."""
        monkeypatch.setenv("KEEN_POPULATION_SIZE", "30")
        monkeypatch.setenv("KEEN_SURVIVAL_RATE", "0.25")
        monkeypatch.setenv("KEEN_GENERATIONS", "12")
        monkeypatch.setenv("KEEN_LOG_LEVEL", "debug")
        monkeypatch.setenv("KEEN_NUM_WORKERS", "3")
        monkeypatch.setenv("KEEN_RANDOM_SEED", "99")
        monkeypatch.setenv("KEEN_SKIP_CHECKS", "true")

        config = KeenConfig.from_env()
        assert config.evolution.population_size == 30
        assert config.evolution.survival_rate == 0.25
        assert config.evolution.generations == 12
        assert config.logging.log_level == "DEBUG"
        assert config.parallelization.enable_parallel
        assert config.parallelization.num_workers == 3
        assert config.random_seed == 99
        assert config.skip_checks

    def test_from_env_without_variables(self, monkeypatch):
        """Test that an empty environment gives the defaults."""
        for name in ("KEEN_POPULATION_SIZE", "KEEN_SURVIVAL_RATE", "KEEN_GENERATIONS", "KEEN_LOG_LEVEL",
                     "KEEN_NUM_WORKERS", "KEEN_RANDOM_SEED", "KEEN_SKIP_CHECKS"):
            monkeypatch.delenv(name, raising=False)
        assert KeenConfig.from_env() == KeenConfig()

    def test_save_and_load(self, tmp_path):
        """Test JSON persistence."""
        config = create_test_config()
        path = tmp_path / "keen.json"
        config.save(str(path))
        assert KeenConfig.load(str(path)) == config

    def test_presets(self):
        """Test preset configurations."""
        test_config = create_test_config()
        assert test_config.evolution.population_size == 20
        assert test_config.random_seed == 42

        production = create_production_config()
        assert production.evolution.population_size == 500
        assert production.parallelization.enable_parallel
        assert production.to_dict()["parallelization"]["chunk_size"] == 25


class TestObservability:
    """Test suite for logfire setup."""

    def test_configure_logfire(self, monkeypatch):
        """Test the arguments passed to logfire."""
        captured = {}
        monkeypatch.setattr(logfire, "configure", lambda **kwargs: captured.update(kwargs))
        monkeypatch.delenv("LOGFIRE_TOKEN", raising=False)
        monkeypatch.delenv("LOGFIRE_SERVICE_NAME", raising=False)

        configure_logfire(send_to_logfire=False)
        assert captured["service_name"] == "keen"
        assert captured["send_to_logfire"] is False
        assert captured["token"] is None
