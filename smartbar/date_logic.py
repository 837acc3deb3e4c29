"""
SmartBAR - Date Logic Module.

This module turns budget period dates into the day counts the BAR engine
works with. Periods are inclusive of both their start and end dates.

Classes:
    DateManager: Manages all date-related calculations for budget periods.
"""

import calendar
from datetime import date
from typing import Optional, Tuple


class DateManager:
    """
    Manages date calculations for budget periods.

    Day counts are inclusive: a period from the 1st to the 31st spans
    31 days, and the reference day counts as elapsed.

    Example:
        >>> dm = DateManager()
        >>> dm.get_total_days(date(2024, 12, 1), date(2024, 12, 31))
        31
        >>> dm.get_days_elapsed(date(2024, 12, 1), date(2024, 12, 31), date(2024, 12, 15))
        15
    """

    def get_total_days(self, start_date: date, end_date: date) -> int:
        """
        Returns the total number of days in a period.

        Includes both start and end dates. An end date before the start
        date yields 0, which the calculator normalises.

        Args:
            start_date: First day of the period.
            end_date: Last day of the period.

        Returns:
            Number of days in the period.
        """
        return max(0, (end_date - start_date).days + 1)

    def get_days_elapsed(
        self,
        start_date: date,
        end_date: date,
        reference_date: Optional[date] = None
    ) -> int:
        """
        Calculates the number of days elapsed in a period.

        Returns:
        - 0 if the reference date is before the period start
        - total days if the reference date is after the period end
        - Days since start, inclusive of the reference date, otherwise

        Args:
            start_date: First day of the period.
            end_date: Last day of the period.
            reference_date: Date to calculate from. Defaults to today.

        Returns:
            Number of days elapsed.
        """
        if reference_date is None:
            reference_date = date.today()

        if reference_date < start_date:
            return 0
        if reference_date > end_date:
            return self.get_total_days(start_date, end_date)

        return (reference_date - start_date).days + 1

    def get_days_remaining(
        self,
        start_date: date,
        end_date: date,
        reference_date: Optional[date] = None
    ) -> int:
        """
        Calculates days remaining in a period after the reference date.

        Args:
            start_date: First day of the period.
            end_date: Last day of the period.
            reference_date: Date to calculate from. Defaults to today.

        Returns:
            Number of days remaining, never negative.
        """
        total_days = self.get_total_days(start_date, end_date)
        elapsed = self.get_days_elapsed(start_date, end_date, reference_date)
        return max(0, total_days - elapsed)

    def get_month_bounds(
        self,
        reference_date: Optional[date] = None
    ) -> Tuple[date, date]:
        """
        Returns the first and last day of the reference date's month.

        Correctly handles February in leap years (29 days) and
        non-leap years (28 days).

        Args:
            reference_date: Date within the month. Defaults to today.

        Returns:
            Tuple of (first day, last day).
        """
        if reference_date is None:
            reference_date = date.today()

        last_day = calendar.monthrange(reference_date.year, reference_date.month)[1]
        return (
            reference_date.replace(day=1),
            reference_date.replace(day=last_day),
        )
