"""
Frozen configuration settings for Monte Carlo option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Environment variables are read once, when SETTINGS is built.
"""

import os
from dataclasses import dataclass, field

from option_mc.config.tolerances import PUT_CALL_PARITY_MC_SIGMAS

_TRUTHY = ("1", "true", "yes")


# =============================================================================
# Environment Resolvers
# =============================================================================

def _resolve_default_seed() -> int:
    """
    Resolve the default generator seed.

    Priority:
    1. OPTION_MC_SEED environment variable (if set)
    2. Default: 0 (deterministic, reproducible runs)

    Returns
    -------
    int
        Non-negative seed
    """
    env_seed = os.environ.get("OPTION_MC_SEED")
    if env_seed:
        seed = int(env_seed)
        if seed < 0:
            raise ValueError(f"CRITICAL: OPTION_MC_SEED must be >= 0, got {seed}")
        return seed
    return 0


def _resolve_random_seed() -> bool:
    """Seed from OS entropy only if OPTION_MC_RANDOM_SEED is truthy."""
    return os.environ.get("OPTION_MC_RANDOM_SEED", "").lower() in _TRUTHY


def _resolve_batch_size() -> int:
    """Rows simulated per batch. Override with OPTION_MC_BATCH_SIZE."""
    env_batch = os.environ.get("OPTION_MC_BATCH_SIZE")
    if env_batch:
        batch_size = int(env_batch)
        if batch_size <= 0:
            raise ValueError(f"CRITICAL: OPTION_MC_BATCH_SIZE must be > 0, got {batch_size}")
        return batch_size
    return 100_000


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable simulation configuration.

    Attributes
    ----------
    default_seed : int
        Seed used by NormalSource.from_settings() when random_seed is False
    random_seed : bool
        Seed the generator from OS entropy instead of default_seed
    n_paths : int
        Default number of Monte Carlo paths
    batch_size : int
        Paths simulated per vectorized batch (bounds memory use)
    american_step_volatility : str
        "per_period" (sigma per unit step) or "total" (sigma * sqrt(expiry)
        at every step, legacy-compatible). Both start from the moved spot,
        so neither reproduces the GBM terminal law (see StepVolatility)
    """

    default_seed: int = field(default_factory=_resolve_default_seed)
    random_seed: bool = field(default_factory=_resolve_random_seed)
    n_paths: int = 100_000
    batch_size: int = field(default_factory=_resolve_batch_size)
    american_step_volatility: str = "per_period"


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """
    Immutable validation configuration.

    Attributes
    ----------
    halt_on_parity_violation : bool
        Raise instead of warn when a put-call parity check fails
    confidence_z : float
        z-score for the reported confidence interval (1.96 = 95%)
    parity_sigmas : float
        Standard errors of slack allowed in MC put-call parity checks
    """

    halt_on_parity_violation: bool = False
    confidence_z: float = 1.96
    parity_sigmas: float = PUT_CALL_PARITY_MC_SIGMAS


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from option_mc.config.settings import SETTINGS
    >>> SETTINGS.simulation.default_seed
    0
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)


# Singleton instance - import this
SETTINGS = Settings()
