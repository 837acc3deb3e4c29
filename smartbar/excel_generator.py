"""
SmartBAR - Excel Report Generation Module.

This module generates Excel reports for a BAR calculation. A Pace Summary
tab gives the at-a-glance verdict, and a Pace Schedule tab lists the
expected cumulative spend for every day of the period.

Classes:
    ExcelReporter: Generates Excel workbooks from BAR snapshots.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from smartbar.schema import BARSnapshot, BARStatus


class ExcelReporter:
    """
    Generates Excel reports for BAR calculations.

    Attributes:
        CURRENCY_FORMAT: Excel number format for amounts.
        PERCENTAGE_FORMAT: Excel number format for percentages.
        RATIO_FORMAT: Excel number format for the BAR value.

    Example:
        >>> reporter = ExcelReporter()
        >>> reporter.generate_report(snapshot, "bar_report.xlsx")
    """

    CURRENCY_FORMAT = '#,##0.00'
    PERCENTAGE_FORMAT = '0.00%'
    RATIO_FORMAT = '0.000'

    UNDER_FILL = PatternFill(
        start_color="C6EFCE",
        end_color="C6EFCE",
        fill_type="solid"
    )
    WARNING_FILL = PatternFill(
        start_color="FFEB9C",
        end_color="FFEB9C",
        fill_type="solid"
    )
    OVER_FILL = PatternFill(
        start_color="FFC7CE",
        end_color="FFC7CE",
        fill_type="solid"
    )

    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(
        start_color="2F5496",
        end_color="2F5496",
        fill_type="solid"
    )
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    def generate_report(
        self,
        snapshot: BARSnapshot,
        output_path: Union[str, Path]
    ) -> None:
        """
        Generates a complete Excel report from a BAR snapshot.

        Creates a workbook with two sheets:
        1. Pace Summary - Inputs, expected vs actual and status
        2. Pace Schedule - Expected spend per day of the period

        Args:
            snapshot: Snapshot of the calculation run.
            output_path: Path for the output .xlsx file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()
        workbook.remove(workbook.active)

        self._create_summary_sheet(workbook, snapshot)
        self._create_schedule_sheet(workbook, snapshot)

        workbook.save(output_path)

    def _create_summary_sheet(
        self,
        workbook: Workbook,
        snapshot: BARSnapshot
    ) -> None:
        """
        Creates the Pace Summary sheet.

        Args:
            workbook: Target workbook.
            snapshot: Calculation data.
        """
        ws = workbook.create_sheet("Pace Summary")
        calculation = snapshot.calculation

        ws["A1"] = f"SmartBAR - {snapshot.budget_name}"
        ws["A1"].font = Font(bold=True, size=16)
        ws.merge_cells("A1:C1")

        ws["A3"] = "Report Generated:"
        ws["B3"] = datetime.now().strftime("%Y-%m-%d %H:%M")
        ws["A4"] = "Calculated At:"
        ws["B4"] = snapshot.timestamp.strftime("%Y-%m-%d %H:%M")
        ws["A5"] = "Version:"
        ws["B5"] = snapshot.version

        ws["A7"] = "PERIOD"
        ws["A7"].font = Font(bold=True, size=14)

        period_rows = [
            ("Days Elapsed", snapshot.days_elapsed, None),
            ("Total Days", snapshot.total_days, None),
            ("Days Remaining", calculation.days_remaining, None),
            ("Historical Periods", snapshot.historical_periods, None),
        ]
        self._write_rows(ws, 8, period_rows)

        ws["A13"] = "SPENDING"
        ws["A13"].font = Font(bold=True, size=14)

        spending_rows = [
            ("Total Budget", float(snapshot.total_budget), self.CURRENCY_FORMAT),
            ("Expected Spend", float(calculation.expected_spent), self.CURRENCY_FORMAT),
            ("Actual Spend", float(calculation.actual_spent), self.CURRENCY_FORMAT),
            ("Remaining Budget", float(calculation.remaining), self.CURRENCY_FORMAT),
        ]
        self._write_rows(ws, 14, spending_rows)

        ws["A19"] = "PACE"
        ws["A19"].font = Font(bold=True, size=14)

        pace_rows = [
            ("BAR", float(calculation.bar), self.RATIO_FORMAT),
            ("Status", calculation.status.value, None),
            ("Message", calculation.message, None),
        ]
        self._write_rows(ws, 20, pace_rows)

        status_fill = self._get_status_fill(calculation.status)
        if status_fill:
            for row in (20, 21, 22):
                ws[f"B{row}"].fill = status_fill

        self._auto_adjust_columns(ws)

    def _create_schedule_sheet(
        self,
        workbook: Workbook,
        snapshot: BARSnapshot
    ) -> None:
        """
        Creates the Pace Schedule sheet with one row per day.

        Args:
            workbook: Target workbook.
            snapshot: Calculation data.
        """
        ws = workbook.create_sheet("Pace Schedule")

        headers = ["Day", "Time %", "Expected Spend", "Expected %"]

        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

        total_days = max(len(snapshot.schedule) - 1, 1)
        budget = float(snapshot.total_budget) if snapshot.total_budget > 0 else 0.0

        for row_idx, point in enumerate(snapshot.schedule, start=2):
            expected = float(point.expected_spent)
            row_data = [
                point.day,
                point.day / total_days,
                expected,
                expected / budget if budget else 0.0,
            ]

            for col_idx, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.THIN_BORDER

                if col_idx in (2, 4):
                    cell.number_format = self.PERCENTAGE_FORMAT
                elif col_idx == 3:
                    cell.number_format = self.CURRENCY_FORMAT

            if point.day == snapshot.days_elapsed:
                for col_idx in range(1, len(headers) + 1):
                    ws.cell(row=row_idx, column=col_idx).font = Font(bold=True)

        self._auto_adjust_columns(ws)

    def _write_rows(self, ws: Worksheet, start_row: int, rows: list) -> None:
        """Writes label/value pairs with optional number formats."""
        for offset, (label, value, number_format) in enumerate(rows):
            row = start_row + offset
            ws[f"A{row}"] = label
            ws[f"A{row}"].font = Font(bold=True)
            ws[f"B{row}"] = value
            if number_format:
                ws[f"B{row}"].number_format = number_format

    def _get_status_fill(self, status: BARStatus) -> Optional[PatternFill]:
        """
        Returns the fill colour for a BAR status.

        Args:
            status: Pace status.

        Returns:
            PatternFill for the status, or None for onTrack.
        """
        if status in (BARStatus.UNDER, BARStatus.GOOD):
            return self.UNDER_FILL
        elif status == BARStatus.WARNING:
            return self.WARNING_FILL
        elif status == BARStatus.OVER:
            return self.OVER_FILL
        return None

    def _auto_adjust_columns(self, worksheet: Worksheet) -> None:
        """
        Auto-adjusts column widths based on content.

        Args:
            worksheet: Target worksheet.
        """
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            column_letter = get_column_letter(col_idx)

            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            worksheet.column_dimensions[column_letter].width = max(max_length + 2, 10)

    def generate_filename(self, prefix: str = "bar_report") -> str:
        """
        Generates a timestamped filename for reports.

        Args:
            prefix: Filename prefix. Defaults to "bar_report".

        Returns:
            Filename like "bar_report_2024-12-18_143052.xlsx".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
