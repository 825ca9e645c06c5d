"""
Option payoffs.

Provides:
- Contract variants (call/put x European/American)
- Intrinsic, European and naive American payoffs
"""

from option_mc.options.payoffs.base import (
    ContractVariant,
    ExerciseStyle,
    OptionType,
    american_payoff,
    european_payoff,
    intrinsic_value,
)

__all__ = [
    "ContractVariant",
    "ExerciseStyle",
    "OptionType",
    "american_payoff",
    "european_payoff",
    "intrinsic_value",
]
