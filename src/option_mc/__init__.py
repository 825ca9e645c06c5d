"""
option-mc: simple Monte Carlo pricing of single-underlying options.

Quick Start
-----------
>>> from option_mc import ModelParams, MonteCarloEngine, ContractVariant
>>> params = ModelParams(expiry=1, strike=100, spot=100, drift=0.0, volatility=0.3, rate=0.0)
>>> engine = MonteCarloEngine(n_paths=100_000, seed=0)
>>> result = engine.price(params, ContractVariant.EUROPEAN_CALL)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Contracts
# =============================================================================
from option_mc.options.payoffs.base import ContractVariant, ExerciseStyle, OptionType

# =============================================================================
# Simulation
# =============================================================================
from option_mc.options.simulation import (
    MCResult,
    ModelParams,
    MonteCarloEngine,
    NormalSource,
    NumericalInstabilityError,
    ParityResult,
    ParityViolationError,
    StepVolatility,
    convergence_analysis,
    put_call_parity,
    simple_monte_carlo,
)

# =============================================================================
# Analytical Reference
# =============================================================================
from option_mc.options.pricing import (
    black_scholes_call,
    black_scholes_price,
    black_scholes_put,
)

# =============================================================================
# Configuration
# =============================================================================
from option_mc.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Contracts
    "ContractVariant",
    "ExerciseStyle",
    "OptionType",
    # Simulation
    "MCResult",
    "ModelParams",
    "MonteCarloEngine",
    "NormalSource",
    "NumericalInstabilityError",
    "ParityResult",
    "ParityViolationError",
    "StepVolatility",
    "convergence_analysis",
    "put_call_parity",
    "simple_monte_carlo",
    # Analytical
    "black_scholes_call",
    "black_scholes_price",
    "black_scholes_put",
    # Config
    "SETTINGS",
]
