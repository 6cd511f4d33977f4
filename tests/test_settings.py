"""
Tests for environment-driven runtime settings
Run with: pytest tests/test_settings.py -v
"""

import pytest

from nfl_edge import settings


class TestDefaultIterations:
    """SIMULATION_ITERATIONS parsing and clamping"""

    def test_unset_uses_config_default(self, monkeypatch):
        monkeypatch.delenv("SIMULATION_ITERATIONS", raising=False)
        assert settings.default_iterations() == 10_000

    def test_in_range_value(self, monkeypatch):
        monkeypatch.setenv("SIMULATION_ITERATIONS", "2500")
        assert settings.default_iterations() == 2500

    def test_low_value_clamped(self, monkeypatch, caplog):
        monkeypatch.setenv("SIMULATION_ITERATIONS", "10")
        assert settings.default_iterations() == 100
        assert "outside" in caplog.text

    def test_high_value_clamped(self, monkeypatch):
        monkeypatch.setenv("SIMULATION_ITERATIONS", "500000")
        assert settings.default_iterations() == 10_000

    def test_garbage_raises(self, monkeypatch):
        monkeypatch.setenv("SIMULATION_ITERATIONS", "lots")
        with pytest.raises(ValueError):
            settings.default_iterations()


class TestSeedAndWorkers:
    """SIMULATION_SEED and SLATE_MAX_WORKERS"""

    def test_seed_unset(self, monkeypatch):
        monkeypatch.delenv("SIMULATION_SEED", raising=False)
        assert settings.default_seed() is None

    def test_seed_set(self, monkeypatch):
        monkeypatch.setenv("SIMULATION_SEED", "42")
        assert settings.default_seed() == 42

    def test_workers_default(self, monkeypatch):
        monkeypatch.delenv("SLATE_MAX_WORKERS", raising=False)
        assert settings.slate_max_workers() == 4

    def test_workers_floor(self, monkeypatch):
        monkeypatch.setenv("SLATE_MAX_WORKERS", "0")
        assert settings.slate_max_workers() == 1
