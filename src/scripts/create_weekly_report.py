#!/usr/bin/env python3
"""
Create weekly workload report from an exported calendar.

Classifies entries, computes per-day workload for the week containing the
as-of date, prints burnout warnings, and writes a Numbers report.

Usage:
    uv run python src/scripts/create_weekly_report.py --date 2025-11-07 --input data/calendar.json
"""

import argparse
import sys
import traceback
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from numbers_parser import Document

from core.config import DETAIL_HEADERS, MIN_TABLE_ROWS, OUTPUT_DIR, WORKLOAD_HEADERS
from models.events import EnrichedEntry
from models.workload import WorkloadOptions, WorkloadSummary
from services.calendar import load_entries
from services.classifier import classify_all
from services.reports import write_detail_table, write_workload_table
from services.workload import check_workload, format_hours, period_summary, workload_label


# =============================================================================
# DATE UTILITIES
# =============================================================================


def parse_as_of_date(as_of_date_str: str | None) -> date:
    """
    Args:
        as_of_date_str: Optional date string (YYYY-MM-DD). Uses today if None.
    """
    if as_of_date_str:
        return datetime.strptime(as_of_date_str, "%Y-%m-%d").date()
    return date.today()


# =============================================================================
# NUMBERS FILE GENERATION
# =============================================================================


def create_weekly_numbers_report(
    summary: WorkloadSummary, entries: list[EnrichedEntry], output_path: Path
):
    """
    Create Numbers report with Workload Summary and Visit Detail sheets.

    Sheet 1 - Workload Summary: one row per day of the week plus a total row.
    Sheet 2 - Visit Detail: every work entry in the week.
    """
    metrics = summary.metrics
    summary_rows = len(metrics) + 2  # header + days + total row

    doc = Document(
        sheet_name="Workload Summary",
        table_name="Workload Summary",
        num_rows=summary_rows,
        num_cols=len(WORKLOAD_HEADERS),
        num_header_rows=1,
        num_header_cols=1,
    )
    summary_table = doc.sheets["Workload Summary"].tables["Workload Summary"]
    write_workload_table(summary_table, metrics)

    total_row_idx = len(metrics) + 1
    summary_table.write(total_row_idx, 0, "Total")
    summary_table.write(total_row_idx, 1, summary.event_count)
    summary_table.write(total_row_idx, 2, round(summary.total_work_hours, 2))
    summary_table.write(total_row_idx, 3, round(summary.total_travel_hours, 2))
    summary_table.write(total_row_idx, 4, round(summary.total_hours, 2))
    summary_table.write(total_row_idx, 5, workload_label(summary.level))

    in_week = [e for e in entries if summary.start_date <= e.start.date() <= summary.end_date]
    detail_rows = max(sum(1 for e in in_week if e.is_work) + 1, MIN_TABLE_ROWS)
    doc.add_sheet(
        "Visit Detail",
        table_name="Visit Detail",
        num_rows=detail_rows,
        num_cols=len(DETAIL_HEADERS),
    )
    detail_table = doc.sheets["Visit Detail"].tables["Visit Detail"]
    write_detail_table(detail_table, in_week)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(str(output_path))
    print(f"Saved Numbers report to: {output_path}")


# =============================================================================
# MAIN
# =============================================================================


def main(input_path: Path, as_of_date_str: str | None = None):
    """Main entry point."""
    try:
        # 1. Resolve the week
        as_of = parse_as_of_date(as_of_date_str)
        options = WorkloadOptions(reference_date=as_of)

        # 2. Load and classify entries
        entries = classify_all(load_entries(input_path))
        print(f"Loaded {len(entries)} entries ({sum(e.is_work for e in entries)} work)")

        # 3. Summarize the week
        summary = period_summary("weekly", entries, options)
        print(f"Generating report for {summary.start_date} to {summary.end_date}")
        print(
            f"Total: {format_hours(summary.total_hours)}, "
            f"average {format_hours(summary.average_daily_hours)}/day, "
            f"busiest {summary.busiest_day.date} ({format_hours(summary.busiest_day.hours)})"
        )

        # 4. Warnings as of the report date
        warnings = check_workload(as_of, entries, options)
        for warning in warnings:
            print(f"  [{warning.severity.upper()}] {warning.message}")

        # 5. Generate Numbers file
        output_dir = OUTPUT_DIR / "reports" / "weekly"
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"workload_weekly_report_{summary.start_date.strftime('%Y_%m_%d')}.numbers"
        create_weekly_numbers_report(summary, entries, output_path)

        print("\nDone!")

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate weekly workload report")
    parser.add_argument("--input", required=True, type=Path, help="Exported calendar JSON file")
    parser.add_argument(
        "--date",
        help="As-of date (YYYY-MM-DD). Reports the week containing this date. Defaults to today.",
    )
    args = parser.parse_args()

    main(args.input, args.date)
