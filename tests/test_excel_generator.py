"""
SmartBAR - Excel Generator Tests.

Unit tests for ExcelReporter class.
Tests ensure correct sheet creation, data population
and formatting application.
"""

import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from openpyxl import load_workbook

from smartbar.calculator import SmartBudgetCalculator
from smartbar.excel_generator import ExcelReporter
from smartbar.schema import BARSnapshot, BARStatus


def create_test_snapshot(
    actual_spent: Decimal = Decimal("800"),
    days_elapsed: int = 15,
    total_days: int = 30
) -> BARSnapshot:
    """Creates a snapshot from a real calculation."""
    calculator = SmartBudgetCalculator()
    total_budget = Decimal("1500")
    return BARSnapshot(
        timestamp=datetime(2024, 12, 18, 14, 30, 0),
        version="0.1.0",
        budget_name="Groceries",
        days_elapsed=days_elapsed,
        total_days=total_days,
        total_budget=total_budget,
        historical_periods=0,
        calculation=calculator.calculate(
            days_elapsed=days_elapsed,
            total_days=total_days,
            actual_spent=actual_spent,
            total_budget=total_budget
        ),
        schedule=calculator.build_expected_schedule(total_days, total_budget)
    )


class TestExcelReporterUnit:
    """Unit tests for ExcelReporter."""

    def setup_method(self) -> None:
        """Initialise ExcelReporter for each test."""
        self.reporter = ExcelReporter()

    def _generate(self, snapshot: BARSnapshot, tmpdir: str):
        output_path = Path(tmpdir) / "report.xlsx"
        self.reporter.generate_report(snapshot, output_path)
        return load_workbook(output_path)

    def test_generate_report_creates_file(self) -> None:
        """Verify report generation creates a file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "sub" / "report.xlsx"

            self.reporter.generate_report(create_test_snapshot(), output_path)

            assert output_path.exists()

    def test_report_has_two_sheets(self) -> None:
        """Verify the summary and schedule sheets exist."""
        with tempfile.TemporaryDirectory() as tmpdir:
            workbook = self._generate(create_test_snapshot(), tmpdir)

            assert workbook.sheetnames == ["Pace Summary", "Pace Schedule"]

    def test_summary_title_names_budget(self) -> None:
        """Verify the title carries the budget name."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(create_test_snapshot(), tmpdir)["Pace Summary"]

            assert "Groceries" in str(ws["A1"].value)

    def test_summary_values(self) -> None:
        """Verify the key figures are written."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(create_test_snapshot(), tmpdir)["Pace Summary"]

            assert ws["B8"].value == 15
            assert ws["B9"].value == 30
            assert ws["B10"].value == 15
            assert ws["B14"].value == 1500.0
            assert ws["B15"].value == 825.0
            assert ws["B16"].value == 800.0
            assert ws["B17"].value == 700.0
            assert abs(ws["B20"].value - 800 / 825) < 1e-9
            assert ws["B21"].value == "onTrack"
            assert ws["B22"].value == "Right on track"

    def test_currency_formatting_applied(self) -> None:
        """Verify amounts use the currency number format."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(create_test_snapshot(), tmpdir)["Pace Summary"]

            assert "#,##0" in ws["B14"].number_format

    def test_over_status_highlighted(self) -> None:
        """Verify an over-budget status gets the red fill."""
        snapshot = create_test_snapshot(actual_spent=Decimal("1400"))
        assert snapshot.calculation.status == BARStatus.OVER

        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(snapshot, tmpdir)["Pace Summary"]

            assert ws["B21"].fill.start_color.rgb.endswith("FFC7CE")

    def test_on_track_not_highlighted(self) -> None:
        """Verify an on-track status keeps the default fill."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(create_test_snapshot(), tmpdir)["Pace Summary"]

            assert ws["B21"].fill.fill_type is None

    def test_schedule_headers(self) -> None:
        """Verify the schedule sheet headers."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(create_test_snapshot(), tmpdir)["Pace Schedule"]

            headers = [cell.value for cell in ws[1]]
            assert headers == ["Day", "Time %", "Expected Spend", "Expected %"]

    def test_schedule_row_per_day(self) -> None:
        """Verify one data row per day including day 0."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(create_test_snapshot(), tmpdir)["Pace Schedule"]

            assert ws.max_row - 1 == 31
            assert ws.cell(row=2, column=1).value == 0
            assert ws.cell(row=32, column=1).value == 30
            assert ws.cell(row=32, column=3).value == 1500.0
            assert ws.cell(row=32, column=4).value == 1.0

    def test_current_day_bold(self) -> None:
        """Verify the elapsed day is emphasised in the schedule."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(create_test_snapshot(), tmpdir)["Pace Schedule"]

            assert ws.cell(row=17, column=1).font.bold
            assert not ws.cell(row=16, column=1).font.bold

    def test_empty_schedule(self) -> None:
        """Verify a snapshot without schedule still produces a report."""
        snapshot = create_test_snapshot()
        snapshot.schedule = []

        with tempfile.TemporaryDirectory() as tmpdir:
            ws = self._generate(snapshot, tmpdir)["Pace Schedule"]

            assert ws.max_row == 1

    def test_generate_filename(self) -> None:
        """Verify the timestamped filename pattern."""
        filename = self.reporter.generate_filename()

        assert filename.startswith("bar_report_")
        assert filename.endswith(".xlsx")
