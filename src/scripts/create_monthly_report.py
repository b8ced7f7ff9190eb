#!/usr/bin/env python3
"""
Create monthly workload report from an exported calendar.

Generates Excel report with three sheets:
- Daily Workload: one row per day with visits, work/travel hours and level
- Visit Detail: every work entry in the month
- Summary: period totals, busiest day and overall level

Usage:
    uv run python src/scripts/create_monthly_report.py --month 2025-11 --input data/calendar.json
"""

import argparse
import sys
import traceback
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import OUTPUT_DIR
from models.workload import WorkloadOptions
from services.calendar import load_entries
from services.classifier import classify_all
from services.reports import create_monthly_excel_report
from services.workload import check_workload, format_hours, period_range, period_summary


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_month_reference(month_str: str | None) -> date:
    """
    First day of the target month.

    Args:
        month_str: Optional month string (YYYY-MM). Uses previous month if None.
    """
    if month_str:
        year, month = map(int, month_str.split("-"))
        return date(year, month, 1)

    today = date.today()
    if today.month == 1:
        return date(today.year - 1, 12, 1)
    return date(today.year, today.month - 1, 1)


# =============================================================================
# MAIN
# =============================================================================


def main(input_path: Path, month_str: str | None = None):
    """Main entry point for monthly report."""
    try:
        # 1. Calculate date range (full month)
        reference = get_month_reference(month_str)
        start_date, end_date = period_range("monthly", reference)
        print(f"Generating monthly report for {start_date} to {end_date}")

        # 2. Load and classify entries
        entries = classify_all(load_entries(input_path))
        work_entries = [e for e in entries if e.is_work]
        print(f"Loaded {len(entries)} entries ({len(work_entries)} work)")

        # 3. Summarize the month
        summary = period_summary("monthly", entries, WorkloadOptions(reference_date=reference))
        print(
            f"Total: {format_hours(summary.total_hours)} over {summary.event_count} visits, "
            f"level {summary.level}"
        )

        # 4. Flag days over their limits
        for metric in summary.metrics:
            for warning in check_workload(metric.date, entries):
                if warning.kind != "weekly-hours":
                    print(f"  {metric.date}: {warning.message}")

        # 5. Generate Excel file
        output_dir = OUTPUT_DIR / "reports" / "monthly"
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"workload_monthly_report_{start_date.strftime('%Y_%m')}.xlsx"
        create_monthly_excel_report(summary, entries, output_path)

        print("\nDone!")

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate monthly workload report")
    parser.add_argument("--input", required=True, type=Path, help="Exported calendar JSON file")
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to previous month.",
    )
    args = parser.parse_args()

    main(args.input, args.month)
