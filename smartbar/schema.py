"""
SmartBAR - Data Schema Module.

This module defines the value objects exchanged with the Budget Adherence
Ratio (BAR) engine. All monetary fields and fractions use Decimal type to
ensure financial precision.

Classes:
    BARStatus: Enumeration of spending pace classifications.
    SpendingCheckpoint: Cumulative spend recorded at a day of a past period.
    HistoricalSpendingPeriod: One past budgeting period used for learning.
    BARResult: Minimal classification output.
    BARCalculation: Full result returned by the calculator.
    ExpectedSpendPoint: Expected cumulative spend on a given day.
    BARSnapshot: Complete calculation run with metadata for audit purposes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Tuple, Union


Numeric = Union[Decimal, int, float, str]


class BARStatus(Enum):
    """
    Spending pace classification derived from the BAR value.

    Attributes:
        UNDER: Well under budget (BAR < 0.85).
        GOOD: Slightly under budget (0.85 <= BAR < 0.95).
        ON_TRACK: Right on track (0.95 <= BAR <= 1.05).
        WARNING: Slightly over budget (1.05 < BAR <= 1.15).
        OVER: Significantly over budget (BAR > 1.15).
    """

    UNDER = "under"
    GOOD = "good"
    ON_TRACK = "onTrack"
    WARNING = "warning"
    OVER = "over"


@dataclass(frozen=True)
class SpendingCheckpoint:
    """
    A single point-in-time spending checkpoint.

    Attributes:
        day: Day offset within the period (0 = period start).
        spent: Cumulative amount spent by this day.
    """

    day: int
    spent: Decimal


@dataclass(frozen=True)
class HistoricalSpendingPeriod:
    """
    Historical spending period data for adaptive learning.

    Checkpoints are expected in non-decreasing day order, although the
    learner sorts them before interpolating.

    Attributes:
        total_days: Total days in this historical period.
        total_budget: Total budget for this period.
        checkpoints: Spending checkpoints recorded during the period.

    Example:
        >>> period = HistoricalSpendingPeriod(
        ...     total_days=30,
        ...     total_budget=Decimal("1500"),
        ...     checkpoints=(
        ...         SpendingCheckpoint(10, Decimal("700")),
        ...         SpendingCheckpoint(20, Decimal("1100")),
        ...         SpendingCheckpoint(30, Decimal("1450")),
        ...     ),
        ... )
    """

    total_days: int
    total_budget: Decimal
    checkpoints: Tuple[SpendingCheckpoint, ...] = ()


@dataclass(frozen=True)
class BARResult:
    """
    Result of a BAR classification.

    Attributes:
        bar: Budget Adherence Ratio (actual_spent / expected_spent).
        status: Pace category for the ratio.
        message: Human-readable description of the status.
    """

    bar: Decimal
    status: BARStatus
    message: str


@dataclass(frozen=True)
class BARCalculation(BARResult):
    """
    Complete BAR calculation with all metrics.

    Attributes:
        expected_spent: Amount expected to have been spent by now.
        actual_spent: Amount actually spent.
        remaining: Budget left, never negative.
        days_remaining: Days left in the period, never negative.
    """

    expected_spent: Decimal
    actual_spent: Decimal
    remaining: Decimal
    days_remaining: int


@dataclass(frozen=True)
class ExpectedSpendPoint:
    """Expected cumulative spend on one day of a period."""

    day: int
    expected_spent: Decimal


@dataclass
class BARSnapshot:
    """
    Complete calculation run with metadata for audit purposes.

    Captures the raw inputs supplied by the caller alongside the
    resulting calculation, so a report can be reproduced later.

    Attributes:
        timestamp: When the calculation was performed.
        version: SmartBAR version identifier.
        budget_name: Label of the budget being tracked.
        days_elapsed: Days elapsed as supplied by the caller.
        total_days: Period length as supplied by the caller.
        total_budget: Budget amount as supplied by the caller.
        historical_periods: Number of historical periods supplied.
        calculation: Result of the calculation.
        schedule: Expected spend for every day of the period.
    """

    timestamp: datetime
    version: str
    budget_name: str
    days_elapsed: int
    total_days: int
    total_budget: Decimal
    historical_periods: int
    calculation: BARCalculation
    schedule: List[ExpectedSpendPoint] = field(default_factory=list)


def to_decimal(value: Numeric) -> Decimal:
    """
    Converts a numeric value to Decimal without binary float artefacts.

    Args:
        value: Decimal, int, float or numeric string.

    Returns:
        Decimal representation of the value.

    Example:
        >>> to_decimal(0.1)
        Decimal('0.1')
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
