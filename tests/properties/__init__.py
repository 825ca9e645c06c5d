"""
Property-based testing using Hypothesis.

This package contains property tests that verify pricing invariants hold
across randomly generated model parameters.

Modules:
    test_mc_properties: Monte Carlo bounds, parity, zero-volatility and determinism
"""
