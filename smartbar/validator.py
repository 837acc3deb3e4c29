"""
SmartBAR - Data Validation Module.

This module loads historical spending checkpoints from CSV and converts
them into HistoricalSpendingPeriod objects. All monetary values are
converted to Decimal type with comprehensive error reporting including
row numbers.

Expected CSV layout (one row per checkpoint, header required):

    Period,Total_Days,Total_Budget,Day,Spent
    2024-10,31,1500,10,700
    2024-10,31,1500,20,1100

Periods appear in the order they are first seen, which should be oldest
first so the most recent period ends up last.

Classes:
    ValidationError: A single row-level validation failure.
    HistoryValidationResult: Container for validation outcomes.
    DataValidator: Main validation class for history CSV processing.
"""

import csv
import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from smartbar.schema import HistoricalSpendingPeriod, SpendingCheckpoint


logger = logging.getLogger(__name__)


@dataclass
class ValidationError:
    """
    Represents a single validation error with context.

    Attributes:
        row_number: The row number in the CSV (header is row 1).
        field_name: The name of the field that failed validation.
        value: The invalid value that was provided.
        message: A user-facing error message.
    """

    row_number: int
    field_name: str
    value: str
    message: str

    def __str__(self) -> str:
        """Returns a formatted error message for display."""
        return f"Error: Row {self.row_number} '{self.field_name}' - {self.message}"


@dataclass
class HistoryValidationResult:
    """
    Container for history validation results.

    Attributes:
        periods: Historical periods built from valid rows, oldest first.
        errors: List of ValidationError objects for failed rows.
        total_rows: Total number of data rows processed.
    """

    periods: List[HistoricalSpendingPeriod] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        """Returns True if validation produced no errors."""
        return len(self.errors) == 0

    @property
    def period_count(self) -> int:
        """Returns the number of historical periods loaded."""
        return len(self.periods)

    @property
    def checkpoint_count(self) -> int:
        """Returns the number of checkpoints across all periods."""
        return sum(len(period.checkpoints) for period in self.periods)

    @property
    def error_count(self) -> int:
        """Returns the number of validation errors."""
        return len(self.errors)


@dataclass
class _PeriodBuilder:
    """Accumulates checkpoints for one period while rows are read."""

    total_days: int
    total_budget: Decimal
    checkpoints: List[SpendingCheckpoint] = field(default_factory=list)

    def build(self) -> HistoricalSpendingPeriod:
        return HistoricalSpendingPeriod(
            total_days=self.total_days,
            total_budget=self.total_budget,
            checkpoints=tuple(self.checkpoints)
        )


class DataValidator:
    """
    Validates history CSV input and converts to HistoricalSpendingPeriod.

    Ensures all monetary values are converted to Decimal type and
    validates required columns, day numbers and per-period consistency.

    Attributes:
        REQUIRED_COLUMNS: List of mandatory CSV column names.

    Example:
        >>> validator = DataValidator()
        >>> result = validator.validate_csv("history.csv")
        >>> if result.is_valid:
        ...     print(result.period_count)
    """

    REQUIRED_COLUMNS = ["Period", "Total_Days", "Total_Budget", "Day", "Spent"]

    # Pattern to clean currency strings (removes symbols, spaces, commas)
    CURRENCY_CLEAN_PATTERN = re.compile(r"[R$€£\s,]")

    def validate_csv(self, file_path: Union[str, Path]) -> HistoryValidationResult:
        """
        Validates a history CSV file and groups rows into periods.

        Errors are collected with row numbers for easy identification.
        A row with any invalid field contributes no checkpoint.

        Args:
            file_path: Path to the CSV file.

        Returns:
            HistoryValidationResult with periods and any errors.

        Raises:
            FileNotFoundError: If the CSV file does not exist.
            ValueError: If required columns are missing.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(
                f"CSV file not found: {file_path}"
            )

        with open(file_path, "r", encoding="utf-8-sig", newline="") as csvfile:
            reader = csv.DictReader(csvfile)

            missing = self._check_required_columns(reader.fieldnames or [])
            if missing:
                raise ValueError(
                    f"Missing required columns: {', '.join(missing)}"
                )

            rows = [self._canonical_row(row) for row in reader]

        result = self.validate_rows(rows, start_row=2)
        logger.debug(
            "Loaded %d historical periods (%d checkpoints) from %s",
            result.period_count, result.checkpoint_count, file_path
        )
        return result

    def validate_rows(
        self,
        rows: List[dict],
        start_row: int = 2
    ) -> HistoryValidationResult:
        """
        Validates a list of row dictionaries.

        Useful for validating data from sources other than CSV files.

        Args:
            rows: List of dictionaries keyed by REQUIRED_COLUMNS.
            start_row: Starting row number for error reporting.

        Returns:
            HistoryValidationResult with periods and any errors.
        """
        result = HistoryValidationResult()
        result.total_rows = len(rows)

        builders: Dict[str, _PeriodBuilder] = {}

        for idx, row in enumerate(rows):
            row_num = start_row + idx
            errors = self._validate_row(row, row_num, builders)
            result.errors.extend(errors)

        result.periods = [builder.build() for builder in builders.values()]
        return result

    def _check_required_columns(self, columns: List[str]) -> List[str]:
        """
        Checks if all required columns are present.

        Args:
            columns: List of column names from CSV header.

        Returns:
            List of missing column names (empty if all present).
        """
        columns_lower = [c.lower().strip() for c in columns]
        missing = []

        for required in self.REQUIRED_COLUMNS:
            if required.lower() not in columns_lower:
                missing.append(required)

        return missing

    def _canonical_row(self, row: dict) -> dict:
        """Maps header spellings onto REQUIRED_COLUMNS names."""
        lookup = {name.lower(): name for name in self.REQUIRED_COLUMNS}
        canonical = {}
        for key, value in row.items():
            if key is None:
                continue
            name = lookup.get(key.lower().strip())
            if name:
                canonical[name] = value if value is not None else ""
        return canonical

    def _validate_row(
        self,
        row: dict,
        row_number: int,
        builders: Dict[str, _PeriodBuilder]
    ) -> List[ValidationError]:
        """
        Validates a single row and appends its checkpoint to its period.

        Args:
            row: Dictionary with row data.
            row_number: Row number for error reporting.
            builders: Periods seen so far, keyed by period label.

        Returns:
            List of errors for this row.
        """
        errors: List[ValidationError] = []

        period_label = (row.get("Period") or "").strip()
        if not period_label:
            errors.append(ValidationError(
                row_number=row_number,
                field_name="Period",
                value=row.get("Period") or "",
                message="Period cannot be empty"
            ))

        total_days, days_error = self._parse_int(
            row.get("Total_Days"), "Total_Days", row_number, minimum=1
        )
        if days_error:
            errors.append(days_error)

        total_budget, budget_error = self._parse_decimal(
            row.get("Total_Budget"), "Total_Budget", row_number,
            must_be_positive=True
        )
        if budget_error:
            errors.append(budget_error)

        day, day_error = self._parse_int(
            row.get("Day"), "Day", row_number, minimum=0
        )
        if day_error:
            errors.append(day_error)

        spent, spent_error = self._parse_decimal(
            row.get("Spent"), "Spent", row_number
        )
        if spent_error:
            errors.append(spent_error)

        if errors:
            return errors

        builder = builders.get(period_label)
        if builder is None:
            builders[period_label] = _PeriodBuilder(
                total_days=total_days,
                total_budget=total_budget,
                checkpoints=[SpendingCheckpoint(day=day, spent=spent)]
            )
            return errors

        if builder.total_days != total_days:
            errors.append(ValidationError(
                row_number=row_number,
                field_name="Total_Days",
                value=str(total_days),
                message=f"Total_Days differs from earlier rows of period "
                        f"'{period_label}' ({builder.total_days})"
            ))
        if builder.total_budget != total_budget:
            errors.append(ValidationError(
                row_number=row_number,
                field_name="Total_Budget",
                value=str(total_budget),
                message=f"Total_Budget differs from earlier rows of period "
                        f"'{period_label}' ({builder.total_budget})"
            ))

        if not errors:
            builder.checkpoints.append(SpendingCheckpoint(day=day, spent=spent))

        return errors

    def _parse_int(
        self,
        value: Optional[str],
        field_name: str,
        row_number: int,
        minimum: int = 0
    ) -> Tuple[Optional[int], Optional[ValidationError]]:
        """
        Parses a string value to int with a lower bound.

        Args:
            value: String value to parse.
            field_name: Name of the field for error messages.
            row_number: Row number for error messages.
            minimum: Smallest accepted value.

        Returns:
            Tuple of (int value or None, ValidationError or None).
        """
        original_value = value or ""
        value = original_value.strip()

        if not value:
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} cannot be empty"
            )

        if not re.match(r"^-?\d+$", value):
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} must be a whole number "
                        f"(received: '{original_value}')"
            )

        int_value = int(value)
        if int_value < minimum:
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} must be at least {minimum} "
                        f"(received: '{original_value}')"
            )

        return int_value, None

    def _parse_decimal(
        self,
        value: Optional[str],
        field_name: str,
        row_number: int,
        must_be_positive: bool = False
    ) -> Tuple[Optional[Decimal], Optional[ValidationError]]:
        """
        Parses a string value to Decimal with validation.

        Handles various currency formats:
        - "1500" (plain number)
        - "1,500" (with thousands separator)
        - "R 1,500" or "$1500.00" (with currency symbol)

        Args:
            value: String value to parse.
            field_name: Name of the field for error messages.
            row_number: Row number for error messages.
            must_be_positive: If True, value must be > 0.

        Returns:
            Tuple of (Decimal value or None, ValidationError or None).
        """
        original_value = value or ""
        value = original_value.strip()

        if not value:
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} cannot be empty"
            )

        # Detect European format (comma as decimal separator) - reject it
        if re.match(r"^[R$€£]?\s*\d+,\d{2}$", value):
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} appears to use European format (comma as decimal). "
                        f"Please use period as decimal separator (e.g., '100.00' not '100,00')"
            )

        cleaned = self.CURRENCY_CLEAN_PATTERN.sub("", value)

        if not re.match(r"^-?\d+\.?\d*$", cleaned):
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} must be a valid number "
                        f"(received: '{original_value}')"
            )

        try:
            decimal_value = Decimal(cleaned)
        except InvalidOperation:
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} must be a valid number "
                        f"(received: '{original_value}')"
            )

        decimal_value = decimal_value.quantize(
            Decimal("0.01"),
            rounding=ROUND_HALF_EVEN
        )

        if must_be_positive and decimal_value <= Decimal("0"):
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} must be a positive number "
                        f"(received: '{original_value}')"
            )

        if decimal_value < Decimal("0"):
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=f"{field_name} must be a non-negative number "
                        f"(received: '{original_value}')"
            )

        return decimal_value, None
