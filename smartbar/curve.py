"""
SmartBAR - Spending Curve Module.

Default expectation of how a budget is consumed over a period. Spending
is front-loaded: more of the budget is expected to go early in the period,
reflecting the payday effect.

Functions:
    front_loaded_fraction: Expected fraction of budget spent at time t.
    front_loaded_spending: Expected amount spent at time t.
"""

from decimal import Decimal

from smartbar.schema import Numeric, to_decimal


# How much faster spending happens early in the period (payday effect)
FRONT_LOAD_FACTOR = Decimal("1.2")

FULL_BUDGET = Decimal("1")


def front_loaded_fraction(
    t: Numeric,
    factor: Decimal = FRONT_LOAD_FACTOR
) -> Decimal:
    """
    Calculates the expected fraction of the budget spent at time t.

    Formula: min(a*t - (a-1)*t^2, 1)

    The curve passes through (0, 0) and (1, 1) and is strictly increasing
    on [0, 1] for any factor in (1, 2]. Callers are responsible for
    keeping t within [0, 1].

    Args:
        t: Elapsed fraction of the period (0 to 1).
        factor: Front-load factor. Defaults to FRONT_LOAD_FACTOR.

    Returns:
        Expected spending fraction, capped at 1.

    Example:
        >>> front_loaded_fraction(Decimal("0.5"))
        Decimal('0.550')
    """
    t = to_decimal(t)
    fraction = factor * t - (factor - 1) * t * t
    return min(fraction, FULL_BUDGET)


def front_loaded_spending(
    t: Numeric,
    total_budget: Numeric,
    factor: Decimal = FRONT_LOAD_FACTOR
) -> Decimal:
    """
    Calculates the expected amount spent at time t.

    Args:
        t: Elapsed fraction of the period (0 to 1).
        total_budget: Total budget for the period.
        factor: Front-load factor. Defaults to FRONT_LOAD_FACTOR.

    Returns:
        Expected spend amount.
    """
    return to_decimal(total_budget) * front_loaded_fraction(t, factor)
