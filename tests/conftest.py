"""
Centralized pytest fixtures for the option-mc test suite.

Fixture Categories:
1. Tolerance tiers
2. Model parameters - standard and reference scenarios
3. Engines and random sources
"""

from dataclasses import dataclass

import pytest

from option_mc.options.simulation.gbm import ModelParams
from option_mc.options.simulation.monte_carlo import MonteCarloEngine
from option_mc.options.simulation.random_source import NormalSource

# =============================================================================
# TOLERANCE TIERS
# =============================================================================


@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Mirrors option_mc.config.tolerances.
    """

    # Anti-pattern tests: Very tight (fundamental violations)
    anti_pattern: float = 1e-10

    # Deterministic limits (zero volatility, one-period paths)
    deterministic: float = 1e-9

    # Monte Carlo vs analytical, in standard errors
    mc_sigmas: float = 4.0


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MODEL PARAMETERS
# =============================================================================


@pytest.fixture
def standard_params() -> ModelParams:
    """ATM one-period parameters with non-zero drift and rate."""
    return ModelParams(
        expiry=1,
        strike=100.0,
        spot=100.0,
        drift=0.02,
        volatility=0.20,
        rate=0.05,
    )


@pytest.fixture
def reference_params() -> ModelParams:
    """Legacy reference scenario: both parity sides land near 111.9."""
    return ModelParams(
        expiry=1,
        strike=100.0,
        spot=100.0,
        drift=0.0,
        volatility=0.30,
        rate=0.0,
    )


@pytest.fixture
def long_dated_params() -> ModelParams:
    """Legacy long-dated scenario: ten periods, low volatility."""
    return ModelParams(
        expiry=10,
        strike=100.0,
        spot=100.0,
        drift=0.005,
        volatility=0.03,
        rate=0.003,
    )


@pytest.fixture
def model_params_dict() -> dict[str, float]:
    """Standard parameters as keyword arguments."""
    return {
        "expiry": 1,
        "strike": 100.0,
        "spot": 100.0,
        "drift": 0.02,
        "volatility": 0.20,
        "rate": 0.05,
    }


# =============================================================================
# ENGINES AND SOURCES
# =============================================================================


@pytest.fixture
def source() -> NormalSource:
    """Fresh deterministic source."""
    return NormalSource(seed=0)


@pytest.fixture
def engine() -> MonteCarloEngine:
    """Seeded engine, 50k paths."""
    return MonteCarloEngine(n_paths=50_000, seed=42)
