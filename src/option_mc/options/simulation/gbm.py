"""
Geometric Brownian Motion (GBM) terminal values and discretized paths.

Implements the simulation stage of the simple Monte Carlo pricer:
- Exact one-shock terminal sampling for European contracts
- Naive per-period paths for American contracts

[T1] GBM SDE: dS = (μ + r)S dt + σS dW, integer periods t = 0..T
[T1] S(T) = S(0) * exp((μ + r)T - σ²T/2 + σ√T * Z)

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from option_mc.config.settings import SETTINGS
from option_mc.options.simulation.random_source import NormalSource


class NumericalInstabilityError(ArithmeticError):
    """Raised when a simulation intermediate overflows to inf or NaN."""

    pass


def _require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValueError(f"CRITICAL: {name} must be finite, got {value}")


def _scaled_exp(scale: float, exponent: float, what: str) -> float:
    """scale * exp(exponent), raising NumericalInstabilityError on overflow."""
    try:
        value = scale * math.exp(exponent)
    except OverflowError:
        value = math.inf
    if not math.isfinite(value):
        raise NumericalInstabilityError(
            f"CRITICAL: {what} overflows (scale={scale}, exponent={exponent})"
        )
    return value


@dataclass(frozen=True)
class ModelParams:
    """
    Parameters for one pricing call.

    Attributes
    ----------
    expiry : int
        Time to maturity as a positive whole number of periods
    strike : float
        Strike price
    spot : float
        Initial spot price
    drift : float
        Return rate of the underlying per period (any real)
    volatility : float
        Volatility per period
    rate : float
        Risk-free rate per period
    """

    expiry: int
    strike: float
    spot: float
    drift: float
    volatility: float
    rate: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        expiry = self.expiry
        if isinstance(expiry, bool) or not isinstance(expiry, (int, float, np.integer, np.floating)):
            raise ValueError(f"CRITICAL: expiry must be a whole number of periods, got {expiry!r}")
        if not math.isfinite(expiry) or float(expiry) != int(expiry):
            raise ValueError(f"CRITICAL: expiry must be a whole number of periods, got {expiry}")
        if expiry <= 0:
            raise ValueError(f"CRITICAL: expiry must be > 0, got {expiry}")
        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "expiry", int(expiry))

        for name in ("strike", "spot", "drift", "volatility", "rate"):
            _require_finite(name, getattr(self, name))

        if self.strike <= 0:
            raise ValueError(f"CRITICAL: strike must be > 0, got {self.strike}")
        if self.spot <= 0:
            raise ValueError(f"CRITICAL: spot must be > 0, got {self.spot}")
        if self.volatility < 0:
            raise ValueError(f"CRITICAL: volatility must be >= 0, got {self.volatility}")

    @property
    def forward(self) -> float:
        """Expected spot at expiry: S * exp((μ + r) * T)."""
        return _scaled_exp(self.spot, (self.drift + self.rate) * self.expiry, "forward")

    @property
    def discount_factor(self) -> float:
        """Discount factor to present value: exp(-r * T)."""
        return _scaled_exp(1.0, -self.rate * self.expiry, "discount factor")


class StepVolatility(Enum):
    """
    Per-step shock size for American paths.

    TOTAL reuses σ√T (the whole-expiry standard deviation) at every step,
    matching the legacy output exactly. PER_PERIOD uses σ√1, the standard
    deviation of one period.

    Neither policy gives the path GBM's terminal law. Step 0 is already
    moved_spot, which carries the full-expiry drift and Itô term, and only
    expiry-1 shocks follow it. Under PER_PERIOD the final step S_end has

        Var[log(S_end / S)] = σ²(T-1)
        E[S_end] = F * exp(-σ²/2),  F = S * exp((μ + r)T)

    so American prices are those of the naive policy on these paths, not
    of exercise on a GBM path.
    """

    TOTAL = "total"
    PER_PERIOD = "per_period"

    @classmethod
    def parse(cls, value: Union["StepVolatility", str, None]) -> "StepVolatility":
        """Coerce a policy or its name; None means the configured default."""
        if value is None:
            value = SETTINGS.simulation.american_step_volatility
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(v.value for v in cls)
            raise ValueError(
                f"CRITICAL: unknown step volatility {value!r}. Valid: {valid}"
            ) from None


@dataclass(frozen=True)
class DiffusionSetup:
    """
    Per-call precomputation shared by every simulated path.

    Attributes
    ----------
    expiry : int
        Number of periods
    volatility : float
        Volatility per period
    variance : float
        σ² * T
    root_variance : float
        σ√T
    ito_correction : float
        -σ²T/2
    moved_spot : float
        S * exp((μ + r)T - σ²T/2), the anchor every terminal value scales
    """

    expiry: int
    volatility: float
    variance: float
    root_variance: float
    ito_correction: float
    moved_spot: float

    @classmethod
    def from_params(cls, params: ModelParams) -> "DiffusionSetup":
        """
        Precompute variance terms and the Itô-corrected anchor.

        Raises
        ------
        NumericalInstabilityError
            If variance or the anchor overflow, or the anchor underflows to 0
        """
        try:
            variance = params.volatility**2 * params.expiry
        except OverflowError:
            variance = math.inf
        root_variance = math.sqrt(variance)
        ito_correction = -0.5 * variance

        exponent = (params.drift + params.rate) * params.expiry + ito_correction
        try:
            moved_spot = params.spot * math.exp(exponent)
        except OverflowError:
            moved_spot = math.inf

        if not (math.isfinite(variance) and math.isfinite(moved_spot)):
            raise NumericalInstabilityError(
                f"CRITICAL: non-finite diffusion setup (variance={variance}, "
                f"moved_spot={moved_spot}) for {params}"
            )
        if moved_spot == 0.0:
            raise NumericalInstabilityError(
                f"CRITICAL: moved_spot underflows to 0 (variance={variance}) for {params}"
            )

        return cls(
            expiry=params.expiry,
            volatility=params.volatility,
            variance=variance,
            root_variance=root_variance,
            ito_correction=ito_correction,
            moved_spot=moved_spot,
        )

    def step_root_variance(self, step_volatility: StepVolatility) -> float:
        """Standard deviation of the log shock applied at each American step."""
        if step_volatility == StepVolatility.TOTAL:
            return self.root_variance
        return self.volatility


def _check_finite(values: np.ndarray, what: str) -> None:
    if not np.all(np.isfinite(values)):
        raise NumericalInstabilityError(
            f"CRITICAL: {what} contain non-finite values; reduce volatility or expiry"
        )


def generate_terminal_values(
    setup: DiffusionSetup,
    source: NormalSource,
    n_paths: int,
) -> np.ndarray:
    """
    Generate terminal spot values (European mode).

    [T1] S(T) = moved_spot * exp(σ√T * Z), exact for the GBM terminal law.

    Parameters
    ----------
    setup : DiffusionSetup
        Per-call precomputation
    source : NormalSource
        Normal variates; one draw per path
    n_paths : int
        Number of terminal values

    Returns
    -------
    np.ndarray
        Terminal values, shape (n_paths,)
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")

    z = source.samples(n_paths)
    with np.errstate(over="ignore", invalid="ignore"):
        terminal = setup.moved_spot * np.exp(setup.root_variance * z)

    _check_finite(terminal, "terminal values")
    return terminal


def generate_american_paths(
    setup: DiffusionSetup,
    source: NormalSource,
    n_paths: int,
    step_volatility: Optional[StepVolatility] = None,
) -> np.ndarray:
    """
    Generate naive discretized paths (American mode).

    Step 0 is moved_spot; step j multiplies step j-1 by exp(s * Z_j), where
    s is chosen by step_volatility. Each path consumes expiry-1 draws in
    order, exactly as a one-path-at-a-time loop would.

    Parameters
    ----------
    setup : DiffusionSetup
        Per-call precomputation
    source : NormalSource
        Normal variates
    n_paths : int
        Number of paths
    step_volatility : StepVolatility, optional
        Per-step shock size (default from SETTINGS)

    Returns
    -------
    np.ndarray
        Paths, shape (n_paths, expiry)
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")

    step_sd = setup.step_root_variance(StepVolatility.parse(step_volatility))

    paths = np.empty((n_paths, setup.expiry))
    paths[:, 0] = setup.moved_spot
    if setup.expiry > 1:
        z = source.samples((n_paths, setup.expiry - 1))
        with np.errstate(over="ignore", invalid="ignore"):
            paths[:, 1:] = np.exp(step_sd * z)
            np.cumprod(paths, axis=1, out=paths)

    _check_finite(paths, "American paths")
    return paths


def generate_american_path(
    setup: DiffusionSetup,
    source: NormalSource,
    step_volatility: Optional[StepVolatility] = None,
) -> np.ndarray:
    """Generate one American path, shape (expiry,)."""
    return generate_american_paths(setup, source, 1, step_volatility)[0]


def validate_terminal_distribution(
    params: ModelParams,
    n_paths: int = 100000,
    seed: int = 42,
) -> dict:
    """
    Validate terminal sampling against theoretical moments.

    [T1] E[S(T)] = S(0) * exp((μ + r)T) (forward)
    [T1] Var[log(S(T)/S(0))] = σ²T

    Parameters
    ----------
    params : ModelParams
        Model parameters
    n_paths : int, default 100000
        Number of paths for validation
    seed : int, default 42
        Random seed

    Returns
    -------
    dict
        Validation results with theoretical vs simulated values
    """
    setup = DiffusionSetup.from_params(params)
    terminal = generate_terminal_values(setup, NormalSource(seed), n_paths)

    expected_mean = params.forward
    expected_log_var = setup.variance

    simulated_mean = terminal.mean()
    simulated_log_var = np.log(terminal / params.spot).var()
    se_mean = terminal.std() / np.sqrt(n_paths)

    return {
        "n_paths": n_paths,
        "theoretical_mean": expected_mean,
        "simulated_mean": simulated_mean,
        "mean_error": abs(simulated_mean - expected_mean),
        "mean_error_pct": abs(simulated_mean - expected_mean) / expected_mean * 100,
        "mean_se": se_mean,
        "mean_z_score": (simulated_mean - expected_mean) / se_mean if se_mean > 0 else 0.0,
        "theoretical_log_variance": expected_log_var,
        "simulated_log_variance": simulated_log_var,
        "validation_passed": abs(simulated_mean - expected_mean) / expected_mean < 0.01,
    }
