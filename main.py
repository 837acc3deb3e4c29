"""
SmartBAR - Main Entry Point.

Budget pace checker. Calculates the Budget Adherence Ratio (BAR) for a
budget period, optionally learning from historical spending, and writes
JSON audit and Excel reports.

Usage:
    python main.py --spent <amount> --budget <amount>
                   [--days-elapsed N --total-days N | --start DATE --end DATE [--as-of DATE]]
                   [--history <csv>] [--name NAME] [--output-dir <dir>]

Example:
    python main.py --spent 800 --budget 1500 --days-elapsed 15 --total-days 30
"""

import argparse
import logging
import sys
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional, Tuple

from smartbar import __version__
from smartbar.audit import AuditLogger
from smartbar.calculator import SmartBudgetCalculator
from smartbar.date_logic import DateManager
from smartbar.excel_generator import ExcelReporter
from smartbar.schema import BARSnapshot, BARStatus, HistoricalSpendingPeriod
from smartbar.validator import DataValidator


logger = logging.getLogger("smartbar")


STATUS_ICONS = {
    BARStatus.UNDER: "✓✓",
    BARStatus.GOOD: "✓ ",
    BARStatus.ON_TRACK: "✓ ",
    BARStatus.WARNING: "⚡",
    BARStatus.OVER: "⚠️ ",
}


def print_header() -> None:
    """Prints the application header."""
    print("=" * 60)
    print("  SmartBAR - Budget Adherence Ratio")
    print(f"  Version: {__version__}")
    print("=" * 60)
    print()


def print_summary(snapshot: BARSnapshot) -> None:
    """
    Prints a summary of the calculation to the console.

    Args:
        snapshot: Snapshot with results.
    """
    calculation = snapshot.calculation

    print("\n" + "=" * 60)
    print(f"  PACE SUMMARY - {snapshot.budget_name}")
    print("=" * 60)
    print()

    print("  PERIOD")
    print("  " + "-" * 40)
    print(f"  Days Elapsed:      {snapshot.days_elapsed} of {snapshot.total_days}")
    print(f"  Days Remaining:    {calculation.days_remaining}")
    print(f"  History Periods:   {snapshot.historical_periods}")
    print()

    print("  SPENDING")
    print("  " + "-" * 40)
    print(f"  Total Budget:      {snapshot.total_budget:,.2f}")
    print(f"  Expected Spend:    {calculation.expected_spent:,.2f}")
    print(f"  Actual Spend:      {calculation.actual_spent:,.2f}")
    print(f"  Remaining:         {calculation.remaining:,.2f}")
    print()

    print("  PACE")
    print("  " + "-" * 40)
    print(f"  BAR:               {calculation.bar:.3f}")
    icon = STATUS_ICONS[calculation.status]
    print(f"  {icon} {calculation.status.value.upper()}: {calculation.message}")
    print()


def parse_amount(value: str) -> Decimal:
    """argparse type for monetary amounts."""
    try:
        return Decimal(value.replace(",", "").strip())
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: '{value}'")


def parse_date(value: str) -> date:
    """argparse type for ISO dates."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): '{value}'")


def resolve_period(args: argparse.Namespace) -> Tuple[int, int]:
    """
    Works out elapsed and total days from the command line options.

    Explicit day counts win. Otherwise the period comes from --start and
    --end, falling back to the calendar month of --as-of (or today).

    Args:
        args: Parsed command line arguments.

    Returns:
        Tuple of (days_elapsed, total_days).
    """
    if args.days_elapsed is not None and args.total_days is not None:
        return args.days_elapsed, args.total_days

    date_manager = DateManager()
    reference_date = args.as_of or date.today()

    if args.start and args.end:
        start_date, end_date = args.start, args.end
    else:
        start_date, end_date = date_manager.get_month_bounds(reference_date)

    return (
        date_manager.get_days_elapsed(start_date, end_date, reference_date),
        date_manager.get_total_days(start_date, end_date),
    )


def load_history(csv_path: Path) -> Optional[List[HistoricalSpendingPeriod]]:
    """
    Loads and validates historical checkpoints.

    Args:
        csv_path: Path to history CSV file.

    Returns:
        Historical periods, or None if validation failed.
    """
    print(f"  Loading history: {csv_path}")
    validator = DataValidator()

    try:
        result = validator.validate_csv(csv_path)
    except FileNotFoundError:
        print(f"\n  ❌ ERROR: File not found: {csv_path}")
        return None
    except ValueError as e:
        print(f"\n  ❌ ERROR: {e}")
        return None

    if not result.is_valid:
        print(f"\n  ❌ VALIDATION ERRORS ({result.error_count} errors):")
        for error in result.errors[:10]:
            print(f"     {error}")
        if result.error_count > 10:
            print(f"     ... and {result.error_count - 10} more errors")
        return None

    print(f"  ✓ Loaded {result.period_count} periods "
          f"({result.checkpoint_count} checkpoints)")
    return result.periods


def run_calculation(args: argparse.Namespace) -> int:
    """
    Runs the complete calculation pipeline.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    print_header()

    history: Optional[List[HistoricalSpendingPeriod]] = None
    if args.history:
        history = load_history(args.history)
        if history is None:
            return 1

    days_elapsed, total_days = resolve_period(args)
    logger.info("Calculating BAR for day %d of %d", days_elapsed, total_days)

    calculator = SmartBudgetCalculator()
    calculation = calculator.calculate(
        days_elapsed=days_elapsed,
        total_days=total_days,
        actual_spent=args.spent,
        total_budget=args.budget,
        historical_data=history,
    )
    schedule = calculator.build_expected_schedule(total_days, args.budget, history)

    snapshot = BARSnapshot(
        timestamp=datetime.now(),
        version=__version__,
        budget_name=args.name,
        days_elapsed=days_elapsed,
        total_days=total_days,
        total_budget=args.budget,
        historical_periods=len(history) if history else 0,
        calculation=calculation,
        schedule=schedule,
    )

    if not args.no_report:
        output_dir: Path = args.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)

        audit_logger = AuditLogger()
        audit_path = output_dir / audit_logger.generate_filename("bar_audit")
        audit_logger.save_to_file(snapshot, audit_path)
        print(f"  ✓ Audit log saved: {audit_path}")

        excel_reporter = ExcelReporter()
        excel_path = output_dir / excel_reporter.generate_filename("bar_report")
        excel_reporter.generate_report(snapshot, excel_path)
        print(f"  ✓ Excel report saved: {excel_path}")

    print_summary(snapshot)

    print("=" * 60)
    print("  SmartBAR - Calculation Complete")
    print("=" * 60)

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Builds the command line parser."""
    parser = argparse.ArgumentParser(
        description="SmartBAR - Budget Adherence Ratio calculator"
    )
    parser.add_argument(
        "--spent",
        type=parse_amount,
        required=True,
        help="Amount spent so far in the period"
    )
    parser.add_argument(
        "--budget",
        type=parse_amount,
        required=True,
        help="Total budget for the period"
    )
    parser.add_argument(
        "--days-elapsed",
        type=int,
        help="Days elapsed in the period (use with --total-days)"
    )
    parser.add_argument(
        "--total-days",
        type=int,
        help="Total days in the period (use with --days-elapsed)"
    )
    parser.add_argument(
        "--start",
        type=parse_date,
        help="Period start date, YYYY-MM-DD (use with --end)"
    )
    parser.add_argument(
        "--end",
        type=parse_date,
        help="Period end date, YYYY-MM-DD (use with --start)"
    )
    parser.add_argument(
        "--as-of",
        type=parse_date,
        help="Reference date for elapsed days (default: today)"
    )
    parser.add_argument(
        "--history",
        type=Path,
        help="CSV of historical spending checkpoints"
    )
    parser.add_argument(
        "--name",
        default="Budget",
        help="Budget name shown in reports (default: Budget)"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Output directory for reports (default: output/)"
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Print the summary only, without writing report files"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments. Defaults to sys.argv.

    Returns:
        Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.days_elapsed is None) != (args.total_days is None):
        parser.error("--days-elapsed and --total-days must be given together")
    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    return run_calculation(args)


if __name__ == "__main__":
    sys.exit(main())
