"""
SmartBAR - Budget Adherence Calculator Module.

This module provides the Budget Adherence Ratio (BAR) engine. It estimates
how much should have been spent by a point in a budgeting period, compares
it to actual spending, and classifies the pace.

BAR Interpretation:
    - BAR = 1.0: Spending at exactly the expected pace
    - BAR < 1.0: Spending slower than expected (under budget)
    - BAR > 1.0: Spending faster than expected (over budget)

The engine never raises for numeric inputs. Degenerate values are
normalised once, up front, before any computation takes place.

Classes:
    NormalisedInputs: Validated period parameters used internally.
    SmartBudgetCalculator: Expected spending, classification and results.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from smartbar.curve import FRONT_LOAD_FACTOR, front_loaded_fraction
from smartbar.history import HistoricalLearner
from smartbar.schema import (
    BARCalculation,
    BARResult,
    BARStatus,
    ExpectedSpendPoint,
    HistoricalSpendingPeriod,
    Numeric,
    to_decimal,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalisedInputs:
    """
    Period parameters after the guard step.

    Attributes:
        days_elapsed: Elapsed days, within [0, total_days].
        total_days: Period length, at least 1.
        total_budget: Budget amount, strictly positive.
    """

    days_elapsed: int
    total_days: int
    total_budget: Decimal

    @property
    def time_fraction(self) -> Decimal:
        """Elapsed fraction of the period (0 to 1)."""
        return to_decimal(self.days_elapsed) / to_decimal(self.total_days)


class SmartBudgetCalculator:
    """
    Smart Budget Adherence Ratio (BAR) calculator.

    Combines a front-loaded spending curve with adaptive learning from
    historical periods. With at least MIN_HISTORICAL_PERIODS periods the
    expectation is 70% learned pattern and 30% curve; otherwise the curve
    is used alone.

    Status Thresholds:
        - under (< 0.85): Well under budget
        - good (0.85-0.95): Slightly under budget
        - onTrack (0.95-1.05): Right on track
        - warning (1.05-1.15): Slightly over budget
        - over (> 1.15): Significantly over budget

    Example:
        >>> calculator = SmartBudgetCalculator()
        >>> result = calculator.calculate(
        ...     days_elapsed=15,
        ...     total_days=30,
        ...     actual_spent=Decimal("800"),
        ...     total_budget=Decimal("1500"),
        ... )
        >>> result.status
        <BARStatus.ON_TRACK: 'onTrack'>
    """

    MIN_HISTORICAL_PERIODS = 2
    BLEND_WEIGHT = Decimal("0.7")

    # Guards against zero or negative denominators
    MIN_BUDGET = Decimal("0.01")
    MIN_EXPECTED_SPEND = Decimal("0.01")

    UNDER_THRESHOLD = Decimal("0.85")
    GOOD_THRESHOLD = Decimal("0.95")
    ON_TRACK_THRESHOLD = Decimal("1.05")
    WARNING_THRESHOLD = Decimal("1.15")

    STATUS_MESSAGES = {
        BARStatus.UNDER: "Well under budget!",
        BARStatus.GOOD: "Slightly under budget",
        BARStatus.ON_TRACK: "Right on track",
        BARStatus.WARNING: "Slightly over budget",
        BARStatus.OVER: "Significantly over budget!",
    }

    def __init__(
        self,
        learner: Optional[HistoricalLearner] = None,
        front_load_factor: Decimal = FRONT_LOAD_FACTOR
    ):
        """
        Initialises the SmartBudgetCalculator.

        Args:
            learner: HistoricalLearner used for adaptive learning.
                     Defaults to a new HistoricalLearner.
            front_load_factor: Front-load factor of the default curve.
        """
        self._learner = learner or HistoricalLearner()
        self._front_load_factor = front_load_factor

    def normalise_inputs(
        self,
        days_elapsed: int,
        total_days: int,
        total_budget: Numeric
    ) -> NormalisedInputs:
        """
        Clamps period parameters to safe values.

        - total_days <= 0 becomes 1
        - total_budget <= 0, NaN or infinite becomes MIN_BUDGET
        - days_elapsed < 0 becomes 0
        - days_elapsed > total_days becomes total_days

        Args:
            days_elapsed: Days since the period started.
            total_days: Total days in the period.
            total_budget: Total budget amount.

        Returns:
            NormalisedInputs safe for every downstream computation.
        """
        budget = to_decimal(total_budget)

        if total_days <= 0:
            logger.debug("total_days=%s normalised to 1", total_days)
            total_days = 1
        if not budget.is_finite() or budget <= 0:
            logger.debug("total_budget=%s normalised to %s", budget, self.MIN_BUDGET)
            budget = self.MIN_BUDGET
        if days_elapsed < 0:
            days_elapsed = 0
        if days_elapsed > total_days:
            days_elapsed = total_days

        return NormalisedInputs(
            days_elapsed=days_elapsed,
            total_days=total_days,
            total_budget=budget
        )

    def calculate_expected_spending(
        self,
        days_elapsed: int,
        total_days: int,
        total_budget: Numeric,
        historical_data: Optional[Sequence[HistoricalSpendingPeriod]] = None
    ) -> Decimal:
        """
        Calculates expected spending at a given point in time.

        Args:
            days_elapsed: Days since the period started.
            total_days: Total days in the period.
            total_budget: Total budget amount.
            historical_data: Optional past periods, most recent last.

        Returns:
            Expected amount to have spent by now.

        Example:
            >>> calculator.calculate_expected_spending(10, 30, Decimal("1500"))
            # ~566.67 (38% of budget at 33% of time)
        """
        inputs = self.normalise_inputs(days_elapsed, total_days, total_budget)
        return self._expected_from_inputs(inputs, historical_data)

    def build_expected_schedule(
        self,
        total_days: int,
        total_budget: Numeric,
        historical_data: Optional[Sequence[HistoricalSpendingPeriod]] = None
    ) -> List[ExpectedSpendPoint]:
        """
        Calculates expected spending for every day of a period.

        Args:
            total_days: Total days in the period.
            total_budget: Total budget amount.
            historical_data: Optional past periods, most recent last.

        Returns:
            One ExpectedSpendPoint per day from 0 to total_days
            (after normalisation).
        """
        base = self.normalise_inputs(0, total_days, total_budget)

        schedule = []
        for day in range(base.total_days + 1):
            inputs = NormalisedInputs(
                days_elapsed=day,
                total_days=base.total_days,
                total_budget=base.total_budget
            )
            schedule.append(ExpectedSpendPoint(
                day=day,
                expected_spent=self._expected_from_inputs(inputs, historical_data)
            ))

        return schedule

    def calculate_bar(
        self,
        actual_spent: Numeric,
        expected_spent: Numeric
    ) -> BARResult:
        """
        Calculates the BAR score with status.

        Args:
            actual_spent: Amount actually spent so far.
            expected_spent: Amount expected to have spent by now.
                            Values <= 0, NaN or infinite are treated
                            as MIN_EXPECTED_SPEND.

        Returns:
            BARResult with score, status and message.
        """
        actual = self._spent_amount(actual_spent)
        expected = to_decimal(expected_spent)

        if not expected.is_finite() or expected <= 0:
            expected = self.MIN_EXPECTED_SPEND

        bar = actual / expected
        status = self.determine_status(bar)

        return BARResult(
            bar=bar,
            status=status,
            message=self.STATUS_MESSAGES[status]
        )

    def determine_status(self, bar: Decimal) -> BARStatus:
        """
        Maps a BAR value onto its status category.

        Thresholds are evaluated in order, first match wins. The lower
        two bounds are exclusive and the upper two inclusive, so 0.85 is
        good, 1.05 is onTrack and 1.15 is warning.
        A NaN ratio matches none of the bounds and reads as over.

        Args:
            bar: Budget Adherence Ratio.

        Returns:
            BARStatus for the ratio.
        """
        if bar.is_nan():
            return BARStatus.OVER

        if bar < self.UNDER_THRESHOLD:
            return BARStatus.UNDER
        elif bar < self.GOOD_THRESHOLD:
            return BARStatus.GOOD
        elif bar <= self.ON_TRACK_THRESHOLD:
            return BARStatus.ON_TRACK
        elif bar <= self.WARNING_THRESHOLD:
            return BARStatus.WARNING
        else:
            return BARStatus.OVER

    def calculate(
        self,
        days_elapsed: int,
        total_days: int,
        actual_spent: Numeric,
        total_budget: Numeric,
        historical_data: Optional[Sequence[HistoricalSpendingPeriod]] = None
    ) -> BARCalculation:
        """
        Full calculation with all guards and adaptive learning.

        Normalisation only affects the expected spend. Remaining budget
        and remaining days are reported from the values as supplied.
        A NaN actual spend counts as nothing spent, and a budget that is
        NaN or infinite leaves no remaining budget to report.

        Args:
            days_elapsed: Days since the period started.
            total_days: Total days in the period.
            actual_spent: Amount actually spent.
            total_budget: Total budget amount.
            historical_data: Optional past periods, most recent last.

        Returns:
            BARCalculation with complete metrics.
        """
        actual = self._spent_amount(actual_spent)
        budget = to_decimal(total_budget)

        expected_spent = self.calculate_expected_spending(
            days_elapsed,
            total_days,
            budget,
            historical_data
        )
        result = self.calculate_bar(actual, expected_spent)

        return BARCalculation(
            bar=result.bar,
            status=result.status,
            message=result.message,
            expected_spent=expected_spent,
            actual_spent=actual,
            remaining=self._remaining_budget(budget, actual),
            days_remaining=max(0, total_days - days_elapsed)
        )

    def _spent_amount(self, actual_spent: Numeric) -> Decimal:
        """Converts actual spend, reading NaN as nothing spent."""
        actual = to_decimal(actual_spent)
        if actual.is_nan():
            logger.debug("actual_spent=%s normalised to 0", actual)
            return Decimal("0")
        return actual

    def _remaining_budget(self, budget: Decimal, actual: Decimal) -> Decimal:
        """Budget left after spending, floored at zero."""
        if not budget.is_finite():
            return Decimal("0")
        return max(Decimal("0"), budget - actual)

    def _expected_from_inputs(
        self,
        inputs: NormalisedInputs,
        historical_data: Optional[Sequence[HistoricalSpendingPeriod]]
    ) -> Decimal:
        """
        Blends the learned pattern with the front-loaded curve.

        Args:
            inputs: Normalised period parameters.
            historical_data: Optional past periods, most recent last.

        Returns:
            Expected spend amount.
        """
        t = inputs.time_fraction
        front_loaded = inputs.total_budget * front_loaded_fraction(
            t, self._front_load_factor
        )

        if (historical_data is None
                or len(historical_data) < self.MIN_HISTORICAL_PERIODS):
            return front_loaded

        historical = inputs.total_budget * self._learner.historical_fraction(
            t, historical_data
        )

        return (
            self.BLEND_WEIGHT * historical
            + (1 - self.BLEND_WEIGHT) * front_loaded
        )
