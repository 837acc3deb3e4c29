"""
SmartBAR - Command Line Tests.

Unit tests for the main entry point: argument handling, period
resolution, history loading and report output.
"""

import argparse
import csv
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from main import build_parser, main, parse_amount, parse_date, resolve_period


def write_history(directory: str, rows) -> Path:
    """Writes a history CSV and returns its path."""
    path = Path(directory) / "history.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Period", "Total_Days", "Total_Budget", "Day", "Spent"])
        writer.writerows(rows)
    return path


class TestArgumentParsing:
    """Unit tests for argument types and validation."""

    def test_parse_amount_strips_separators(self) -> None:
        """Verify thousands separators are accepted."""
        assert parse_amount("1,500.50") == Decimal("1500.50")

    def test_parse_amount_rejects_text(self) -> None:
        """Verify free text amounts are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_amount("lots")

    def test_parse_date(self) -> None:
        """Verify ISO dates are parsed."""
        assert parse_date("2024-12-18") == date(2024, 12, 18)

    def test_parse_date_rejects_other_formats(self) -> None:
        """Verify non-ISO dates are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_date("18/12/2024")

    def test_spent_and_budget_required(self) -> None:
        """Verify missing required options exit with usage."""
        with pytest.raises(SystemExit):
            main(["--spent", "100"])

    def test_day_counts_must_be_paired(self) -> None:
        """Verify --days-elapsed without --total-days is an error."""
        with pytest.raises(SystemExit):
            main(["--spent", "100", "--budget", "1000", "--days-elapsed", "5"])

    def test_dates_must_be_paired(self) -> None:
        """Verify --start without --end is an error."""
        with pytest.raises(SystemExit):
            main(["--spent", "100", "--budget", "1000", "--start", "2024-12-01"])


class TestResolvePeriod:
    """Unit tests for working out elapsed and total days."""

    def setup_method(self) -> None:
        """Initialise the parser for each test."""
        self.parser = build_parser()

    def test_explicit_day_counts(self) -> None:
        """Verify explicit day counts are used as given."""
        args = self.parser.parse_args([
            "--spent", "1", "--budget", "1",
            "--days-elapsed", "10", "--total-days", "30"
        ])

        assert resolve_period(args) == (10, 30)

    def test_date_range(self) -> None:
        """Verify --start and --end with --as-of give inclusive counts."""
        args = self.parser.parse_args([
            "--spent", "1", "--budget", "1",
            "--start", "2024-12-01", "--end", "2024-12-31",
            "--as-of", "2024-12-18"
        ])

        assert resolve_period(args) == (18, 31)

    def test_calendar_month_of_reference(self) -> None:
        """Verify the month of --as-of is used without explicit bounds."""
        args = self.parser.parse_args([
            "--spent", "1", "--budget", "1", "--as-of", "2024-02-10"
        ])

        assert resolve_period(args) == (10, 29)


class TestMain:
    """End-to-end tests for the command line."""

    def test_summary_only(self, capsys) -> None:
        """Verify a run without reports prints the pace summary."""
        exit_code = main([
            "--spent", "800", "--budget", "1500",
            "--days-elapsed", "15", "--total-days", "30",
            "--no-report"
        ])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "ONTRACK: Right on track" in output
        assert "825.00" in output

    def test_reports_written(self) -> None:
        """Verify the audit JSON and Excel report are written."""
        with tempfile.TemporaryDirectory() as tmpdir:
            exit_code = main([
                "--spent", "1400", "--budget", "1500",
                "--days-elapsed", "15", "--total-days", "30",
                "--name", "Groceries",
                "--output-dir", tmpdir
            ])

            output_dir = Path(tmpdir)
            assert exit_code == 0
            assert len(list(output_dir.glob("bar_audit_*.json"))) == 1
            assert len(list(output_dir.glob("bar_report_*.xlsx"))) == 1

    def test_with_history(self, capsys) -> None:
        """Verify valid history is loaded and counted."""
        with tempfile.TemporaryDirectory() as tmpdir:
            history = write_history(tmpdir, [
                ["2024-10", "30", "1500", "10", "750"],
                ["2024-10", "30", "1500", "30", "1500"],
                ["2024-11", "30", "1500", "10", "600"],
                ["2024-11", "30", "1500", "30", "1450"],
            ])

            exit_code = main([
                "--spent", "600", "--budget", "1500",
                "--days-elapsed", "10", "--total-days", "30",
                "--history", str(history), "--no-report"
            ])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "Loaded 2 periods (4 checkpoints)" in output
        assert "History Periods:   2" in output

    def test_invalid_history_fails(self, capsys) -> None:
        """Verify history validation errors give exit code 1."""
        with tempfile.TemporaryDirectory() as tmpdir:
            history = write_history(tmpdir, [["2024-10", "30", "1500", "10", "-5"]])

            exit_code = main([
                "--spent", "600", "--budget", "1500",
                "--days-elapsed", "10", "--total-days", "30",
                "--history", str(history), "--no-report"
            ])

        output = capsys.readouterr().out
        assert exit_code == 1
        assert "VALIDATION ERRORS" in output
        assert "Row 2 'Spent'" in output

    def test_missing_history_fails(self, capsys) -> None:
        """Verify a missing history file gives exit code 1."""
        exit_code = main([
            "--spent", "600", "--budget", "1500",
            "--days-elapsed", "10", "--total-days", "30",
            "--history", "no_such_history.csv", "--no-report"
        ])

        assert exit_code == 1
        assert "File not found" in capsys.readouterr().out
