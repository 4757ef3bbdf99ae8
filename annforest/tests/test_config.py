"""
Unit Tests: Configuration

Tests:
    - ForestConfig validation
    - Environment variable overrides
"""

import pytest

from annforest.core.config import ForestConfig, LoggingConfig


class TestForestConfigValidation:
    """Tests for ForestConfig.validate."""

    def test_defaults_valid(self):
        config = ForestConfig()

        assert config.validate() is None
        assert config.num_trees == 10
        assert config.max_size == 16
        assert not config.sequential

    @pytest.mark.parametrize(
        "kwargs, fragment",
        [
            ({"num_trees": 0}, "num_trees"),
            ({"num_trees": -3}, "num_trees"),
            ({"max_size": 0}, "max_size"),
            ({"dimension": 0}, "dimension"),
            ({"max_workers": 0}, "max_workers"),
            ({"split_retries": -1}, "split_retries"),
            ({"max_depth": 0}, "max_depth"),
        ],
    )
    def test_invalid(self, kwargs, fragment):
        message = ForestConfig(**kwargs).validate()

        assert message is not None
        assert fragment in message

    def test_sequential(self):
        assert ForestConfig(max_workers=1).sequential


class TestConfigFromEnv:
    """Tests for environment-derived configuration."""

    def test_forest_from_env(self, monkeypatch):
        monkeypatch.setenv("ANNFOREST_NUM_TREES", "25")
        monkeypatch.setenv("ANNFOREST_MAX_SIZE", "8")
        monkeypatch.setenv("ANNFOREST_SEED", "123")
        monkeypatch.setenv("ANNFOREST_MAX_WORKERS", "2")

        config = ForestConfig.from_env()

        assert config.num_trees == 25
        assert config.max_size == 8
        assert config.seed == 123
        assert config.max_workers == 2

    def test_forest_from_env_defaults(self, monkeypatch):
        for name in (
            "ANNFOREST_NUM_TREES",
            "ANNFOREST_MAX_SIZE",
            "ANNFOREST_SEED",
            "ANNFOREST_MAX_WORKERS",
        ):
            monkeypatch.delenv(name, raising=False)

        assert ForestConfig.from_env() == ForestConfig()

    def test_logging_from_env(self, monkeypatch):
        monkeypatch.setenv("ANNFOREST_LOG_LEVEL", "debug")
        monkeypatch.setenv("ANNFOREST_LOG_JSON", "0")

        config = LoggingConfig.from_env()

        assert config.level == "DEBUG"
        assert config.json is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
