"""
Black-Scholes reference prices for the simulated model.

The simulated underlying grows at drift + rate, so its forward is
S * exp((μ + r)T). That is Black-Scholes with dividend yield q = -μ.
These closed forms are the oracle for European Monte Carlo estimates.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

import numpy as np
from scipy import stats

from option_mc.config.tolerances import PUT_CALL_PARITY_TOLERANCE
from option_mc.options.payoffs.base import OptionType
from option_mc.options.simulation.gbm import ModelParams


def _calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    drift: float,
    volatility: float,
    expiry: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r + μ + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    vol_sqrt_t = volatility * np.sqrt(expiry)

    d1 = (np.log(spot / strike) + (rate + drift + 0.5 * volatility**2) * expiry) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t

    return d1, d2


def _validate_inputs(
    spot: float,
    strike: float,
    volatility: float,
    expiry: float,
) -> None:
    """Validate Black-Scholes inputs."""
    if spot <= 0:
        raise ValueError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    if volatility < 0:
        raise ValueError(f"CRITICAL: volatility must be >= 0, got {volatility}")
    if expiry < 0:
        raise ValueError(f"CRITICAL: expiry must be >= 0, got {expiry}")


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    drift: float,
    volatility: float,
    expiry: float,
) -> float:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*e^(μT)*N(d1) - K*e^(-rT)*N(d2)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate per period
    drift : float
        Return rate of the underlying per period
    volatility : float
        Volatility per period
    expiry : float
        Time to expiry in periods

    Returns
    -------
    float
        Call option price

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 0.0, 0.0, 0.30, 1.0), 2)
    11.92
    """
    _validate_inputs(spot, strike, volatility, expiry)

    if expiry == 0:
        return max(spot - strike, 0.0)

    discount = np.exp(-rate * expiry)
    forward = spot * np.exp((rate + drift) * expiry)

    # σ = 0: deterministic forward
    if volatility == 0:
        return float(discount * max(forward - strike, 0.0))

    d1, d2 = _calculate_d1_d2(spot, strike, rate, drift, volatility, expiry)

    call_price = discount * (forward * stats.norm.cdf(d1) - strike * stats.norm.cdf(d2))

    return float(call_price)


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    drift: float,
    volatility: float,
    expiry: float,
) -> float:
    """
    Price European put option using Black-Scholes.

    [T1] P = K*e^(-rT)*N(-d2) - S*e^(μT)*N(-d1)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate per period
    drift : float
        Return rate of the underlying per period
    volatility : float
        Volatility per period
    expiry : float
        Time to expiry in periods

    Returns
    -------
    float
        Put option price
    """
    _validate_inputs(spot, strike, volatility, expiry)

    if expiry == 0:
        return max(strike - spot, 0.0)

    discount = np.exp(-rate * expiry)
    forward = spot * np.exp((rate + drift) * expiry)

    if volatility == 0:
        return float(discount * max(strike - forward, 0.0))

    d1, d2 = _calculate_d1_d2(spot, strike, rate, drift, volatility, expiry)

    put_price = discount * (strike * stats.norm.cdf(-d2) - forward * stats.norm.cdf(-d1))

    return float(put_price)


def black_scholes_price(params: ModelParams, option_type: OptionType) -> float:
    """
    Price European option for a ModelParams set.

    Parameters
    ----------
    params : ModelParams
        Model parameters
    option_type : OptionType
        Call or put

    Returns
    -------
    float
        Option price
    """
    args = (
        params.spot,
        params.strike,
        params.rate,
        params.drift,
        params.volatility,
        float(params.expiry),
    )
    if option_type == OptionType.CALL:
        return black_scholes_call(*args)
    else:
        return black_scholes_put(*args)


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    drift: float,
    expiry: float,
    tolerance: float = PUT_CALL_PARITY_TOLERANCE,
) -> tuple[bool, float]:
    """
    Verify put-call parity.

    [T1] C - P = S*e^(μT) - K*e^(-rT)

    Returns
    -------
    tuple[bool, float]
        (parity_holds, error)
    """
    actual_diff = call_price - put_price
    expected_diff = spot * np.exp(drift * expiry) - strike * np.exp(-rate * expiry)

    error = abs(actual_diff - expected_diff)
    parity_holds = error < tolerance

    return parity_holds, float(error)
