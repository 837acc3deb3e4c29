"""
SmartBAR - Historical Learning Module.

Learns the user's own spending pattern from past budgeting periods. Each
period is interpolated at the same relative point in time, and periods are
combined with a recency-weighted average so recent behaviour dominates.

Classes:
    HistoricalLearner: Estimates expected spending fractions from history.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import List, Optional, Sequence

from smartbar.schema import (
    HistoricalSpendingPeriod,
    Numeric,
    SpendingCheckpoint,
    to_decimal,
)


logger = logging.getLogger(__name__)


class HistoricalLearner:
    """
    Estimates the expected spending fraction at time t from past periods.

    Weight formula: DECAY_FACTOR ** periods_ago, so the most recent period
    weighs 1.0, the one before 0.8, then 0.64 and so on.

    Attributes:
        DECAY_FACTOR: Per-period weight decay for older periods.
        DAY_PRECISION: Resolution used when locating the target day.

    Example:
        >>> learner = HistoricalLearner()
        >>> learner.historical_fraction(Decimal("0.5"), [period_a, period_b])
    """

    DECAY_FACTOR = Decimal("0.8")
    DAY_PRECISION = Decimal("0.000001")

    def __init__(self, decay_factor: Optional[Decimal] = None):
        """
        Initialises the HistoricalLearner.

        Args:
            decay_factor: Weight decay per period of age.
                          Defaults to DECAY_FACTOR.
        """
        self._decay_factor = (
            decay_factor if decay_factor is not None else self.DECAY_FACTOR
        )

    def historical_fraction(
        self,
        t: Numeric,
        periods: Sequence[HistoricalSpendingPeriod]
    ) -> Decimal:
        """
        Returns the recency-weighted spending fraction at time t.

        Periods that cannot be interpolated are left out before weights
        are assigned. If no period contributes, falls back to linear
        pacing and returns t itself.

        Args:
            t: Elapsed fraction of the period (0 to 1).
            periods: Past periods, oldest first and most recent last.

        Returns:
            Weighted average spending fraction.
        """
        t = to_decimal(t)

        fractions: List[Decimal] = []
        for period in periods:
            fraction = self.interpolate_spending_at_time(t, period)
            if fraction is not None:
                fractions.append(fraction)

        if not fractions:
            logger.debug("No usable historical checkpoints, using linear pace")
            return t

        count = len(fractions)
        weights = [self._decay_factor ** (count - 1 - i) for i in range(count)]
        weighted_sum = sum(
            (fraction * weight for fraction, weight in zip(fractions, weights)),
            Decimal("0")
        )

        return weighted_sum / sum(weights, Decimal("0"))

    def interpolate_spending_at_time(
        self,
        t: Numeric,
        period: HistoricalSpendingPeriod
    ) -> Optional[Decimal]:
        """
        Interpolates the spending fraction of one period at time t.

        Finds the last checkpoint on or before the target day and the
        first checkpoint on or after it, and interpolates linearly
        between them. With only one side available, that checkpoint's
        spend is used as is.

        Args:
            t: Elapsed fraction of the period (0 to 1).
            period: Historical period with checkpoints.

        Returns:
            Spending fraction of the period budget, or None if the
            period has no usable checkpoints, a non-positive length, or a
            budget that is non-positive, NaN or infinite.
        """
        if not period.checkpoints:
            return None

        total_budget = to_decimal(period.total_budget)
        if (period.total_days <= 0
                or not total_budget.is_finite()
                or total_budget <= 0):
            logger.debug(
                "Skipping historical period with total_days=%s total_budget=%s",
                period.total_days, total_budget
            )
            return None

        try:
            target_day = (to_decimal(t) * period.total_days).quantize(
                self.DAY_PRECISION, rounding=ROUND_HALF_EVEN
            )
        except InvalidOperation:
            logger.debug(
                "Skipping historical period with total_days=%s, target day out of range",
                period.total_days
            )
            return None

        checkpoints = sorted(
            (cp for cp in period.checkpoints if to_decimal(cp.spent).is_finite()),
            key=lambda cp: cp.day
        )

        before: Optional[SpendingCheckpoint] = None
        after: Optional[SpendingCheckpoint] = None

        for checkpoint in checkpoints:
            if checkpoint.day <= target_day:
                before = checkpoint
            if checkpoint.day >= target_day and after is None:
                after = checkpoint

        if before is not None and after is not None and before.day != after.day:
            ratio = (target_day - before.day) / (after.day - before.day)
            before_spent = to_decimal(before.spent)
            after_spent = to_decimal(after.spent)
            spent = before_spent + ratio * (after_spent - before_spent)
            return spent / total_budget
        elif before is not None:
            return to_decimal(before.spent) / total_budget
        elif after is not None:
            return to_decimal(after.spent) / total_budget

        return None
