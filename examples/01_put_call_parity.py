#!/usr/bin/env python3
"""
Put-Call Parity Demo.

Prices a European call and put by simple Monte Carlo and prints both sides
of put-call parity:

    Call + K*B(r,t) == Put + S(t)

where B(r,t) = exp(-rT) and S(t) is the spot grown at the drift. The two
lines should agree to within Monte Carlo sampling error.

Usage:
    python examples/01_put_call_parity.py                 # 1e7 paths
    python examples/01_put_call_parity.py --paths 100000  # quick run
    python examples/01_put_call_parity.py --american      # also price American legs
"""

import argparse
import logging
import sys

# Add src to path if running as script
sys.path.insert(0, "src")

from option_mc import ContractVariant, ModelParams, MonteCarloEngine, put_call_parity

SCENARIOS = [
    ModelParams(expiry=1, strike=100, spot=100, drift=0.0, volatility=0.3, rate=0.0),
    ModelParams(expiry=10, strike=100, spot=100, drift=0.005, volatility=0.03, rate=0.003),
]


def print_parity(params: ModelParams, engine: MonteCarloEngine) -> None:
    """Print both sides of put-call parity for one scenario."""
    result = put_call_parity(params, engine)

    print("\ntest Put-call Parity:")
    print(f"  T={params.expiry}, K={params.strike}, S={params.spot}, "
          f"mu={params.drift}, vol={params.volatility}, r={params.rate}")
    print(f"Call + K*B(r,t) == {result.call_side:.3f}")
    print(f"Put + S(t) == {result.put_side:.3f}")
    print(f"  |difference| = {abs(result.difference):.5f} "
          f"(tolerance {result.tolerance:.5f}, holds={result.holds})")


def print_american(params: ModelParams, engine: MonteCarloEngine) -> None:
    """Print naive American prices next to their European counterparts."""
    for european, american in (
        (ContractVariant.EUROPEAN_CALL, ContractVariant.AMERICAN_CALL),
        (ContractVariant.EUROPEAN_PUT, ContractVariant.AMERICAN_PUT),
    ):
        eu = engine.price(params, european)
        am = engine.price(params, american)
        print(f"  {european.value:>14}: {eu.price:.4f}   {american.value:>14}: {am.price:.4f}")


def main() -> None:
    """Run the demo."""
    parser = argparse.ArgumentParser(description="Monte Carlo put-call parity demo")
    parser.add_argument("--paths", type=int, default=10_000_000, help="Paths per price")
    parser.add_argument("--seed", type=int, default=0, help="Generator seed")
    parser.add_argument("--american", action="store_true", help="Also price American legs")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    engine = MonteCarloEngine(n_paths=args.paths, seed=args.seed)

    for params in SCENARIOS:
        print_parity(params, engine)
        if args.american:
            print_american(params, engine)


if __name__ == "__main__":
    main()
