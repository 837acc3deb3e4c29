"""
SmartBAR - Spending Curve Tests.

Property-based and unit tests for the front-loaded spending curve.

**Feature: smartbar, Property 1: Curve Endpoints and Monotonicity**
"""

from decimal import Decimal

from hypothesis import given, settings, assume
from hypothesis.strategies import decimals

from smartbar.curve import (
    FRONT_LOAD_FACTOR,
    front_loaded_fraction,
    front_loaded_spending,
)


def unit_interval():
    """Decimal time fractions within [0, 1]."""
    return decimals(
        min_value=Decimal("0"),
        max_value=Decimal("1"),
        places=4,
        allow_nan=False,
        allow_infinity=False
    )


class TestFrontLoadedCurveUnit:
    """Unit tests for the curve formula."""

    def test_default_factor(self) -> None:
        """Verify the payday front-load factor is 1.2."""
        assert FRONT_LOAD_FACTOR == Decimal("1.2")

    def test_starts_at_zero(self) -> None:
        """Verify nothing is expected at the start of the period."""
        assert front_loaded_fraction(0) == 0

    def test_ends_at_one(self) -> None:
        """Verify the full budget is expected at the end of the period."""
        assert front_loaded_fraction(1) == 1

    def test_midpoint_is_front_loaded(self) -> None:
        """Verify 55% of budget is expected at 50% of time."""
        assert front_loaded_fraction(Decimal("0.5")) == Decimal("0.55")

    def test_accepts_float_input(self) -> None:
        """Verify float input is converted without binary artefacts."""
        assert front_loaded_fraction(0.5) == Decimal("0.55")

    def test_returns_decimal_type(self) -> None:
        """Verify the fraction is a Decimal."""
        assert isinstance(front_loaded_fraction(Decimal("0.25")), Decimal)

    def test_capped_at_full_budget(self) -> None:
        """Verify t beyond the period end never exceeds 100%."""
        assert front_loaded_fraction(2) == 1

    def test_factor_one_is_linear(self) -> None:
        """Verify a factor of 1 gives straight-line pacing."""
        assert front_loaded_fraction(Decimal("0.3"), Decimal("1")) == Decimal("0.3")

    def test_spending_scales_with_budget(self) -> None:
        """Verify expected amount is fraction times budget."""
        assert front_loaded_spending(Decimal("0.5"), Decimal("1500")) == Decimal("825")

    def test_spending_accepts_int_budget(self) -> None:
        """Verify int budgets are accepted."""
        assert front_loaded_spending(1, 1500) == Decimal("1500")


class TestFrontLoadedCurveProperty:
    """
    Property-based tests for the curve shape.

    **Feature: smartbar, Property 1: Curve Endpoints and Monotonicity**
    """

    @given(unit_interval(), unit_interval())
    @settings(max_examples=200)
    def test_monotonically_non_decreasing(self, t1: Decimal, t2: Decimal) -> None:
        """
        Property: Expected fraction never decreases as time passes.
        """
        assume(t1 <= t2)

        assert front_loaded_fraction(t1) <= front_loaded_fraction(t2), (
            f"Curve decreased between t={t1} and t={t2}"
        )

    @given(unit_interval())
    @settings(max_examples=200)
    def test_ahead_of_linear_pace(self, t: Decimal) -> None:
        """
        Property: The curve is never behind straight-line pacing.
        """
        assert front_loaded_fraction(t) >= t

    @given(unit_interval())
    @settings(max_examples=200)
    def test_within_unit_interval(self, t: Decimal) -> None:
        """
        Property: Expected fraction stays within [0, 1].
        """
        fraction = front_loaded_fraction(t)

        assert Decimal("0") <= fraction <= Decimal("1")
