"""
Tests for contract variants and vanilla payoffs.

[T1] Call: max(S - K, 0); Put: max(K - S, 0)
[T1] Naive American: max of terminal payoff and discounted earlier intrinsic values
"""

import numpy as np
import pytest

from option_mc.options.payoffs.base import (
    ContractVariant,
    ExerciseStyle,
    OptionType,
    american_payoff,
    european_payoff,
    intrinsic_value,
)


class TestContractVariant:
    """Tests for ContractVariant."""

    @pytest.mark.parametrize("variant,option_type,style", [
        (ContractVariant.EUROPEAN_CALL, OptionType.CALL, ExerciseStyle.EUROPEAN),
        (ContractVariant.EUROPEAN_PUT, OptionType.PUT, ExerciseStyle.EUROPEAN),
        (ContractVariant.AMERICAN_CALL, OptionType.CALL, ExerciseStyle.AMERICAN),
        (ContractVariant.AMERICAN_PUT, OptionType.PUT, ExerciseStyle.AMERICAN),
    ])
    def test_parts(self, variant, option_type, style):
        assert variant.option_type is option_type
        assert variant.exercise_style is style
        assert variant.is_american == (style is ExerciseStyle.AMERICAN)
        assert ContractVariant.from_parts(option_type, style) is variant

    @pytest.mark.parametrize("name", ["american_put", "AMERICAN_PUT", "american-put"])
    def test_parse_names(self, name):
        assert ContractVariant.parse(name) is ContractVariant.AMERICAN_PUT

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="unknown contract variant"):
            ContractVariant.parse("bermudan_call")

    def test_parse_wrong_type(self):
        with pytest.raises(ValueError, match="unknown contract variant"):
            ContractVariant.parse(OptionType.CALL)


class TestEuropeanPayoff:
    """Tests for European payoffs."""

    def test_call(self):
        terminal = np.array([80.0, 100.0, 125.0])
        np.testing.assert_array_equal(
            european_payoff(terminal, 100.0, OptionType.CALL), [0.0, 0.0, 25.0]
        )

    def test_put(self):
        terminal = np.array([80.0, 100.0, 125.0])
        np.testing.assert_array_equal(
            european_payoff(terminal, 100.0, OptionType.PUT), [20.0, 0.0, 0.0]
        )

    def test_call_minus_put_is_forward_payoff(self):
        """[T1] max(S-K,0) - max(K-S,0) = S - K pathwise."""
        terminal = np.linspace(50, 150, 101)
        diff = intrinsic_value(terminal, 100.0, OptionType.CALL) - intrinsic_value(
            terminal, 100.0, OptionType.PUT
        )
        np.testing.assert_allclose(diff, terminal - 100.0)


class TestAmericanPayoff:
    """Tests for the naive backward-scan American payoff."""

    def test_terminal_payoff_when_no_early_value(self):
        """Rising path: call's best value is at expiry."""
        path = np.array([[90.0, 95.0, 110.0]])
        payoff = american_payoff(path, 100.0, 0.0, OptionType.CALL)
        np.testing.assert_allclose(payoff, [10.0])

    def test_early_exercise_discounted(self):
        """Value at step j is discounted by exp(-r * (expiry - j))."""
        # expiry = 3; put intrinsic at step 0 is 30, at expiry 0
        path = np.array([[70.0, 100.0, 110.0]])
        rate = 0.1
        payoff = american_payoff(path, 100.0, rate, OptionType.PUT)
        np.testing.assert_allclose(payoff, [30.0 * np.exp(-rate * 3)])

    def test_best_of_backward_scan(self):
        """Running maximum over all discounted candidates."""
        path = np.array([[120.0, 130.0, 105.0, 101.0]])
        rate = 0.05
        expiry = 4
        candidates = [
            1.0,  # terminal
            5.0 * np.exp(-rate * (expiry - 2)),
            30.0 * np.exp(-rate * (expiry - 1)),
            20.0 * np.exp(-rate * (expiry - 0)),
        ]
        payoff = american_payoff(path, 100.0, rate, OptionType.CALL)
        np.testing.assert_allclose(payoff, [max(candidates)])

    def test_never_below_terminal_payoff(self):
        rng = np.random.default_rng(0)
        paths = 100 * np.exp(np.cumsum(0.1 * rng.standard_normal((500, 12)), axis=1))
        for option_type in OptionType:
            american = american_payoff(paths, 100.0, 0.02, option_type)
            terminal = intrinsic_value(paths[:, -1], 100.0, option_type)
            assert np.all(american >= terminal)

    def test_single_step_is_terminal(self):
        paths = np.array([[90.0], [110.0]])
        np.testing.assert_array_equal(
            american_payoff(paths, 100.0, 0.05, OptionType.PUT), [10.0, 0.0]
        )

    def test_one_dimensional_path(self):
        payoff = american_payoff(np.array([70.0, 100.0]), 100.0, 0.0, OptionType.PUT)
        assert payoff.shape == (1,)
        np.testing.assert_allclose(payoff, [30.0])

    def test_empty_path(self):
        with pytest.raises(ValueError, match="Path cannot be empty"):
            american_payoff(np.empty((3, 0)), 100.0, 0.0, OptionType.CALL)
