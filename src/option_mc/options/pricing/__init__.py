"""
Analytical option pricing.

Provides:
- Black-Scholes reference prices for the simulated model
"""

from option_mc.options.pricing.black_scholes import (
    black_scholes_call,
    black_scholes_price,
    black_scholes_put,
    put_call_parity_check,
)

__all__ = [
    "black_scholes_call",
    "black_scholes_price",
    "black_scholes_put",
    "put_call_parity_check",
]
