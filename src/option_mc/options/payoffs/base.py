"""
Contract variants and vanilla option payoffs.

A contract is one of four runtime variants: {Call, Put} x {European, American}.
The variant selects both the payoff formula and the path-generation strategy.

References
----------
[T1] Hull (2021) Ch. 10 - Properties of stock options
"""

from enum import Enum

import numpy as np


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


class ExerciseStyle(Enum):
    """Exercise style enumeration."""

    EUROPEAN = "european"
    AMERICAN = "american"


class ContractVariant(Enum):
    """
    Contract variant: option type crossed with exercise style.

    Examples
    --------
    >>> ContractVariant.AMERICAN_PUT.option_type
    <OptionType.PUT: 'put'>
    >>> ContractVariant.from_parts(OptionType.CALL, ExerciseStyle.EUROPEAN)
    <ContractVariant.EUROPEAN_CALL: 'european_call'>
    """

    EUROPEAN_CALL = "european_call"
    EUROPEAN_PUT = "european_put"
    AMERICAN_CALL = "american_call"
    AMERICAN_PUT = "american_put"

    @property
    def option_type(self) -> OptionType:
        """Call or put."""
        return OptionType.CALL if self.value.endswith("call") else OptionType.PUT

    @property
    def exercise_style(self) -> ExerciseStyle:
        """European or American."""
        if self.value.startswith("american"):
            return ExerciseStyle.AMERICAN
        return ExerciseStyle.EUROPEAN

    @property
    def is_american(self) -> bool:
        return self.exercise_style == ExerciseStyle.AMERICAN

    @classmethod
    def from_parts(cls, option_type: OptionType, exercise_style: ExerciseStyle) -> "ContractVariant":
        """Build a variant from its option type and exercise style."""
        return cls(f"{exercise_style.value}_{option_type.value}")

    @classmethod
    def parse(cls, value: "ContractVariant | str") -> "ContractVariant":
        """
        Coerce a variant or its string name.

        Accepts "european_call", "EUROPEAN_CALL" or "european-call".

        Raises
        ------
        ValueError
            If the name matches no variant
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_")
            for variant in cls:
                if variant.value == normalized:
                    return variant
        valid = ", ".join(v.value for v in cls)
        raise ValueError(f"CRITICAL: unknown contract variant {value!r}. Valid: {valid}")


def intrinsic_value(spots: np.ndarray, strike: float, option_type: OptionType) -> np.ndarray:
    """
    Exercise value of the option at the given spots.

    [T1] Call: max(S - K, 0)
    [T1] Put: max(K - S, 0)

    Parameters
    ----------
    spots : np.ndarray
        Spot values (any shape)
    strike : float
        Strike price
    option_type : OptionType
        Call or put

    Returns
    -------
    np.ndarray
        Non-negative exercise values, same shape as spots
    """
    spots = np.asarray(spots, dtype=float)
    if option_type == OptionType.CALL:
        return np.maximum(spots - strike, 0.0)
    return np.maximum(strike - spots, 0.0)


def european_payoff(terminal: np.ndarray, strike: float, option_type: OptionType) -> np.ndarray:
    """Payoff at expiry for each terminal spot."""
    return intrinsic_value(terminal, strike, option_type)


def american_payoff(
    paths: np.ndarray,
    strike: float,
    rate: float,
    option_type: OptionType,
) -> np.ndarray:
    """
    Naive path-wise American payoff.

    Starts from the terminal payoff, then walks each path backward from
    step expiry-2 to 0 keeping the maximum of the held payoff and the
    intrinsic value at step j discounted by exp(-rate * (expiry - j)).

    This is NOT an optimal-stopping value: there is no continuation-value
    regression, so it is a biased approximation of the American price.

    Parameters
    ----------
    paths : np.ndarray
        Spot paths, shape (n_paths, expiry) or (expiry,) for one path
    strike : float
        Strike price
    rate : float
        Risk-free rate per period
    option_type : OptionType
        Call or put

    Returns
    -------
    np.ndarray
        Payoff per path, shape (n_paths,)
    """
    paths = np.atleast_2d(np.asarray(paths, dtype=float))
    expiry = paths.shape[1]
    if expiry == 0:
        raise ValueError("CRITICAL: Path cannot be empty")

    payoff = intrinsic_value(paths[:, -1], strike, option_type)
    if expiry == 1:
        return payoff

    # exp(-rate * (expiry - j)) for j = 0 .. expiry-2
    steps = np.arange(expiry - 1)
    discounts = np.exp(-rate * (expiry - steps))
    early_exercise = intrinsic_value(paths[:, :-1], strike, option_type) * discounts

    return np.maximum(payoff, early_exercise.max(axis=1))
