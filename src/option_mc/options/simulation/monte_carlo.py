"""
Monte Carlo option pricing engine.

Implements simple (plain) Monte Carlo for a single underlying:
- European call/put from exact terminal sampling
- American call/put from the naive backward path-wise maximum

Paths are simulated in fixed-size batches; only running moments are kept,
so memory does not grow with the number of paths.

[T1] MC converges to the expected discounted payoff at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from option_mc.config.settings import SETTINGS
from option_mc.config.tolerances import ANTI_PATTERN_TOLERANCE
from option_mc.options.payoffs.base import (
    ContractVariant,
    american_payoff,
    european_payoff,
)
from option_mc.options.simulation.gbm import (
    DiffusionSetup,
    ModelParams,
    NumericalInstabilityError,
    StepVolatility,
    generate_american_paths,
    generate_terminal_values,
)
from option_mc.options.simulation.random_source import NormalSource

logger = logging.getLogger(__name__)


class ParityViolationError(Exception):
    """Raised when simulated put-call parity fails and halting is configured."""

    pass


def _validate_count(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"CRITICAL: {name} must be a positive integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"CRITICAL: {name} must be > 0, got {value}")
    return int(value)


@dataclass(frozen=True)
class MCResult:
    """
    Monte Carlo pricing result.

    Attributes
    ----------
    price : float
        Option price (discounted mean payoff)
    standard_error : float
        Standard error of the estimate
    confidence_interval : tuple[float, float]
        Confidence interval (z from SETTINGS.validation.confidence_z)
    n_paths : int
        Number of paths used
    discount_factor : float
        Discount factor used
    variant : ContractVariant
        Contract priced
    """

    price: float
    standard_error: float
    confidence_interval: tuple[float, float]
    n_paths: int
    discount_factor: float
    variant: ContractVariant

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    @property
    def ci_width(self) -> float:
        """Width of the confidence interval."""
        return self.confidence_interval[1] - self.confidence_interval[0]


class MonteCarloEngine:
    """
    Simple Monte Carlo pricing engine.

    Randomness comes from exactly one place per call:

    - ``source`` given: every call continues that NormalSource's stream, so
      sequential calls are correlated through shared state.
    - ``seed`` given: every call starts a fresh NormalSource(seed), so
      identical calls return bit-identical prices.
    - neither: every call starts a fresh NormalSource.from_settings().

    Parameters
    ----------
    n_paths : int, optional
        Number of simulation paths (default SETTINGS.simulation.n_paths)
    seed : int, optional
        Seed for a per-call NormalSource
    source : NormalSource, optional
        Shared source consumed across calls
    step_volatility : StepVolatility or str, optional
        Per-step shock size for American paths
    batch_size : int, optional
        Paths per vectorized batch (default SETTINGS.simulation.batch_size)

    Examples
    --------
    >>> engine = MonteCarloEngine(n_paths=100000, seed=42)
    >>> params = ModelParams(expiry=1, strike=100, spot=100, drift=0.0, volatility=0.3, rate=0.0)
    >>> result = engine.price(params, ContractVariant.EUROPEAN_CALL)
    >>> print(f"Price: {result.price:.4f} ± {result.standard_error:.4f}")
    """

    def __init__(
        self,
        n_paths: Optional[int] = None,
        seed: Optional[int] = None,
        source: Optional[NormalSource] = None,
        step_volatility: Union[StepVolatility, str, None] = None,
        batch_size: Optional[int] = None,
    ):
        if n_paths is None:
            n_paths = SETTINGS.simulation.n_paths
        if batch_size is None:
            batch_size = SETTINGS.simulation.batch_size
        if seed is not None and source is not None:
            raise ValueError("CRITICAL: pass either seed or source, not both")

        self.n_paths = _validate_count("n_paths", n_paths)
        self.batch_size = _validate_count("batch_size", batch_size)
        self.seed = seed
        self.source = source
        self.step_volatility = StepVolatility.parse(step_volatility)

        if seed is not None:
            # Fail at construction rather than on first call
            NormalSource(seed)

    def _source_for_call(self) -> NormalSource:
        if self.source is not None:
            return self.source
        if self.seed is not None:
            return NormalSource(self.seed)
        return NormalSource.from_settings()

    def _batches(self) -> list[int]:
        full, remainder = divmod(self.n_paths, self.batch_size)
        return [self.batch_size] * full + ([remainder] if remainder else [])

    def price(
        self,
        params: ModelParams,
        variant: Union[ContractVariant, str] = ContractVariant.EUROPEAN_CALL,
    ) -> MCResult:
        """
        Price one contract.

        [T1] Price = exp(-rT) * (1/N) * Σ payoff_i

        Parameters
        ----------
        params : ModelParams
            Model parameters
        variant : ContractVariant or str
            Contract variant

        Returns
        -------
        MCResult
            Monte Carlo pricing result

        Raises
        ------
        NumericalInstabilityError
            If any intermediate or the price is non-finite
        """
        variant = ContractVariant.parse(variant)
        setup = DiffusionSetup.from_params(params)
        source = self._source_for_call()
        batches = self._batches()

        logger.debug(
            f"Pricing {variant.value}: n_paths={self.n_paths}, "
            f"batches={len(batches)}, expiry={params.expiry}"
        )

        # Running sum plus pairwise-combined second moment (Chan et al.)
        running_sum = 0.0
        count = 0
        mean = 0.0
        m2 = 0.0

        for batch in batches:
            if variant.is_american:
                paths = generate_american_paths(setup, source, batch, self.step_volatility)
                payoffs = american_payoff(paths, params.strike, params.rate, variant.option_type)
            else:
                terminal = generate_terminal_values(setup, source, batch)
                payoffs = european_payoff(terminal, params.strike, variant.option_type)

            batch_sum = float(payoffs.sum())
            batch_mean = batch_sum / batch
            batch_m2 = float(np.sum((payoffs - batch_mean) ** 2))

            delta = batch_mean - mean
            total = count + batch
            mean += delta * batch / total
            m2 += batch_m2 + delta**2 * count * batch / total
            count = total
            running_sum += batch_sum

        return self._compute_result(params, variant, running_sum, m2)

    def _compute_result(
        self,
        params: ModelParams,
        variant: ContractVariant,
        running_sum: float,
        m2: float,
    ) -> MCResult:
        """Discount the sample mean and attach sampling statistics."""
        df = params.discount_factor
        mean_payoff = running_sum / self.n_paths
        price = df * mean_payoff

        if not (math.isfinite(price) and math.isfinite(m2)):
            raise NumericalInstabilityError(
                f"CRITICAL: non-finite price {price} for {variant.value} with {params}"
            )

        if self.n_paths > 1:
            se_price = df * math.sqrt(max(m2, 0.0) / (self.n_paths - 1) / self.n_paths)
        else:
            se_price = 0.0

        z = SETTINGS.validation.confidence_z
        result = MCResult(
            price=price,
            standard_error=se_price,
            confidence_interval=(price - z * se_price, price + z * se_price),
            n_paths=self.n_paths,
            discount_factor=df,
            variant=variant,
        )

        logger.debug(f"Priced {variant.value}: {price:.6f} ± {se_price:.6f}")
        return result


def simple_monte_carlo(
    expiry: int,
    strike: float,
    spot: float,
    drift: float,
    volatility: float,
    rate: float,
    n_paths: int,
    variant: Union[ContractVariant, str] = ContractVariant.EUROPEAN_CALL,
    seed: Optional[int] = None,
    source: Optional[NormalSource] = None,
    step_volatility: Union[StepVolatility, str, None] = None,
) -> float:
    """
    Price one contract and return only the price.

    Parameters
    ----------
    expiry : int
        Time to maturity in whole periods
    strike : float
        Strike price
    spot : float
        Initial spot price
    drift : float
        Return rate of the underlying per period
    volatility : float
        Volatility per period
    rate : float
        Risk-free rate per period
    n_paths : int
        Number of simulation paths
    variant : ContractVariant or str, default EUROPEAN_CALL
        Contract variant
    seed : int, optional
        Seed for a fresh NormalSource
    source : NormalSource, optional
        Shared source to continue drawing from
    step_volatility : StepVolatility or str, optional
        Per-step shock size for American paths

    Returns
    -------
    float
        Present-value price estimate

    Examples
    --------
    >>> price = simple_monte_carlo(1, 100, 100, 0.0, 0.3, 0.0, 100_000, seed=0)
    """
    params = ModelParams(
        expiry=expiry,
        strike=strike,
        spot=spot,
        drift=drift,
        volatility=volatility,
        rate=rate,
    )
    engine = MonteCarloEngine(
        n_paths=n_paths,
        seed=seed,
        source=source,
        step_volatility=step_volatility,
    )
    return engine.price(params, variant).price


# =============================================================================
# Put-Call Parity
# =============================================================================


@dataclass(frozen=True)
class ParityResult:
    """
    Simulated put-call parity comparison.

    [T1] C + K*exp(-rT) = P + S*exp(μT)

    Attributes
    ----------
    call_price : float
        European call estimate
    put_price : float
        European put estimate
    call_side : float
        C + K*exp(-rT)
    put_side : float
        P + S*exp(μT)
    tolerance : float
        Allowed |call_side - put_side| from the combined standard error
    """

    call_price: float
    put_price: float
    call_side: float
    put_side: float
    tolerance: float

    @property
    def difference(self) -> float:
        return self.call_side - self.put_side

    @property
    def holds(self) -> bool:
        return abs(self.difference) <= self.tolerance


def put_call_parity(
    params: ModelParams,
    engine: Optional[MonteCarloEngine] = None,
) -> ParityResult:
    """
    Price the European call and put and compare both sides of parity.

    Parameters
    ----------
    params : ModelParams
        Model parameters
    engine : MonteCarloEngine, optional
        Engine used for both legs (default: seeded from SETTINGS)

    Returns
    -------
    ParityResult
        Both parity sides and the tolerance used

    Raises
    ------
    ParityViolationError
        If parity fails and SETTINGS.validation.halt_on_parity_violation
    """
    if engine is None:
        engine = MonteCarloEngine()

    call = engine.price(params, ContractVariant.EUROPEAN_CALL)
    put = engine.price(params, ContractVariant.EUROPEAN_PUT)

    # Legs share draws when the engine is seeded; sd(C - P) <= sd(C) + sd(P) always
    combined_se = call.standard_error + put.standard_error
    tolerance = SETTINGS.validation.parity_sigmas * combined_se + ANTI_PATTERN_TOLERANCE * params.spot

    result = ParityResult(
        call_price=call.price,
        put_price=put.price,
        call_side=call.price + params.strike * params.discount_factor,
        put_side=put.price + params.spot * math.exp(params.drift * params.expiry),
        tolerance=tolerance,
    )

    if not result.holds:
        message = (
            f"PUT-CALL PARITY VIOLATION: call side {result.call_side:.6f} vs "
            f"put side {result.put_side:.6f} (tolerance {tolerance:.6f})"
        )
        if SETTINGS.validation.halt_on_parity_violation:
            raise ParityViolationError(message)
        logger.warning(message)

    return result


# =============================================================================
# Convergence Analysis
# =============================================================================


def convergence_analysis(
    params: ModelParams,
    variant: Union[ContractVariant, str],
    analytical_price: float,
    path_counts: Sequence[int] = (1000, 5000, 10000, 50000, 100000, 500000),
    seed: int = 42,
) -> dict:
    """
    Analyze MC convergence to a reference price.

    [T1] MC error should converge at rate 1/√N.

    Parameters
    ----------
    params : ModelParams
        Model parameters
    variant : ContractVariant or str
        Contract variant
    analytical_price : float
        Reference (e.g. Black-Scholes) price
    path_counts : Sequence[int]
        Number of paths to test
    seed : int
        Random seed

    Returns
    -------
    dict
        Per-path-count results and estimated convergence rate
    """
    variant = ContractVariant.parse(variant)
    results = []

    for n in path_counts:
        engine = MonteCarloEngine(n_paths=n, seed=seed)
        mc_result = engine.price(params, variant)

        error = abs(mc_result.price - analytical_price)
        rel_error = error / analytical_price if analytical_price > 0 else float("inf")

        results.append(
            {
                "n_paths": n,
                "mc_price": mc_result.price,
                "analytical_price": analytical_price,
                "absolute_error": error,
                "relative_error": rel_error,
                "standard_error": mc_result.standard_error,
                "within_ci": mc_result.confidence_interval[0]
                <= analytical_price
                <= mc_result.confidence_interval[1],
            }
        )

    return {
        "results": results,
        "convergence_rate": _estimate_convergence_rate(results),
    }


def _estimate_convergence_rate(results: list[dict]) -> float:
    """
    Estimate convergence rate from standard errors.

    [T1] Theory predicts rate = -0.5 (SE ~ 1/√N). Uses the reported
    standard errors rather than realized errors, which are too noisy for a
    log-log fit.

    Returns
    -------
    float
        Estimated convergence rate (should be ~-0.5)
    """
    log_n = np.log([r["n_paths"] for r in results])
    log_se = np.log([r["standard_error"] + 1e-15 for r in results])

    slope, _intercept = np.polyfit(log_n, log_se, 1)
    return float(slope)
