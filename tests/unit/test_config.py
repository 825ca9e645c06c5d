"""
Tests for configuration - config/settings.py and config/tolerances.py.

Verifies defaults, environment overrides, immutability and the tolerance
registry.
"""

import dataclasses

import pytest

from option_mc.config.settings import (
    SETTINGS,
    Settings,
    SimulationConfig,
    ValidationConfig,
)
from option_mc.config.tolerances import (
    ANTI_PATTERN_TOLERANCE,
    PUT_CALL_PARITY_TOLERANCE,
    TOLERANCE_REGISTRY,
    get_tolerance,
    mc_tolerance,
)


class TestSimulationConfig:
    """Tests for SimulationConfig defaults and env overrides."""

    def test_defaults(self, monkeypatch):
        for var in ("OPTION_MC_SEED", "OPTION_MC_RANDOM_SEED", "OPTION_MC_BATCH_SIZE"):
            monkeypatch.delenv(var, raising=False)
        config = SimulationConfig()

        assert config.default_seed == 0
        assert config.random_seed is False
        assert config.n_paths == 100_000
        assert config.batch_size == 100_000
        assert config.american_step_volatility == "per_period"

    def test_seed_from_env(self, monkeypatch):
        monkeypatch.setenv("OPTION_MC_SEED", "1234")
        assert SimulationConfig().default_seed == 1234

    def test_negative_seed_from_env(self, monkeypatch):
        monkeypatch.setenv("OPTION_MC_SEED", "-1")
        with pytest.raises(ValueError, match="OPTION_MC_SEED must be >= 0"):
            SimulationConfig()

    @pytest.mark.parametrize("value,expected", [
        ("1", True),
        ("true", True),
        ("YES", True),
        ("0", False),
        ("", False),
    ])
    def test_random_seed_from_env(self, monkeypatch, value, expected):
        monkeypatch.setenv("OPTION_MC_RANDOM_SEED", value)
        assert SimulationConfig().random_seed is expected

    def test_batch_size_from_env(self, monkeypatch):
        monkeypatch.setenv("OPTION_MC_BATCH_SIZE", "5000")
        assert SimulationConfig().batch_size == 5000

    def test_invalid_batch_size_from_env(self, monkeypatch):
        monkeypatch.setenv("OPTION_MC_BATCH_SIZE", "0")
        with pytest.raises(ValueError, match="OPTION_MC_BATCH_SIZE must be > 0"):
            SimulationConfig()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            SETTINGS.simulation.n_paths = 10


class TestSettings:
    """Tests for the master Settings object."""

    def test_singleton_composition(self):
        assert isinstance(SETTINGS, Settings)
        assert isinstance(SETTINGS.simulation, SimulationConfig)
        assert isinstance(SETTINGS.validation, ValidationConfig)

    def test_validation_defaults(self):
        config = ValidationConfig()
        assert config.confidence_z == pytest.approx(1.96)
        assert config.parity_sigmas > 0
        assert config.halt_on_parity_violation is False


class TestTolerances:
    """Tests for tolerance tiers and helpers."""

    def test_analytical_tolerances_tight(self):
        assert 0 < ANTI_PATTERN_TOLERANCE <= 1e-8
        assert 0 < PUT_CALL_PARITY_TOLERANCE <= 1e-6

    def test_mc_tolerance_scales_with_sqrt_n(self):
        """[T1] Tolerance ∝ 1/√N."""
        assert mc_tolerance(10_000) / mc_tolerance(40_000) == pytest.approx(2.0)
        assert mc_tolerance(10_000) == pytest.approx(0.006)

    def test_mc_tolerance_invalid(self):
        with pytest.raises(ValueError, match="n_paths must be > 0"):
            mc_tolerance(0)

    def test_registry_lookup(self):
        for name, value in TOLERANCE_REGISTRY.items():
            assert get_tolerance(name) == value

    def test_registry_tiers(self):
        assert set(TOLERANCE_REGISTRY) == {
            "anti_pattern",
            "put_call_parity",
            "deterministic",
            "parity_mc_sigmas",
            "reference_parity",
        }

    def test_registry_unknown(self):
        with pytest.raises(KeyError, match="Unknown tolerance"):
            get_tolerance("nope")
