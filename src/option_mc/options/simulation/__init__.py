"""
Monte Carlo simulation for option pricing.

Provides:
- Standard normal random source (seedable, spawnable)
- GBM terminal values and naive American paths
- Monte Carlo pricing engine, parity and convergence checks
"""

from option_mc.options.simulation.gbm import (
    DiffusionSetup,
    ModelParams,
    NumericalInstabilityError,
    StepVolatility,
    generate_american_path,
    generate_american_paths,
    generate_terminal_values,
    validate_terminal_distribution,
)
from option_mc.options.simulation.monte_carlo import (
    MCResult,
    MonteCarloEngine,
    ParityResult,
    ParityViolationError,
    convergence_analysis,
    put_call_parity,
    simple_monte_carlo,
)
from option_mc.options.simulation.random_source import NormalSource

__all__ = [
    # Random source
    "NormalSource",
    # GBM
    "DiffusionSetup",
    "ModelParams",
    "NumericalInstabilityError",
    "StepVolatility",
    "generate_american_path",
    "generate_american_paths",
    "generate_terminal_values",
    "validate_terminal_distribution",
    # Monte Carlo
    "MCResult",
    "MonteCarloEngine",
    "ParityResult",
    "ParityViolationError",
    "convergence_analysis",
    "put_call_parity",
    "simple_monte_carlo",
]
