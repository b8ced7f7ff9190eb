"""
Report generation utilities for Numbers and Excel formats.
"""

from datetime import date
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from core.config import DETAIL_HEADERS, SUMMARY_ROW_LABELS, WORKLOAD_HEADERS
from models.events import EnrichedEntry
from models.workload import WorkloadMetric, WorkloadSummary
from services.classifier import service_type_label
from services.workload import format_hours, workload_label

LEVEL_FILLS = {
    "comfortable": "D1FAE5",
    "busy": "FEF3C7",
    "high": "FFEDD5",
    "burnout": "FEE2E2",
}


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def format_date_short(d: date) -> str:
    """Format date as 'Mon D' (platform-safe, e.g., 'Nov 7')."""
    return f"{d.strftime('%b')} {d.day}"


def workload_row(metric: WorkloadMetric) -> list:
    return [
        format_date_display(metric.date),
        metric.event_count,
        round(metric.work_minutes / 60, 2),
        round(metric.travel_minutes / 60, 2),
        round(metric.total_minutes / 60, 2),
        workload_label(metric.level),
    ]


def detail_row(entry: EnrichedEntry) -> list:
    return [
        format_date_display(entry.start.date()),
        entry.extracted_client_label or "",
        service_type_label(entry.service_type),
        entry.start.strftime("%H:%M"),
        entry.end.strftime("%H:%M"),
        entry.duration_minutes,
        entry.location or "",
    ]


def work_entries_by_start(entries: list[EnrichedEntry]) -> list[EnrichedEntry]:
    return sorted((e for e in entries if e.is_work), key=lambda e: e.start)


def write_workload_table(table, metrics: list[WorkloadMetric]):
    """
    Write headers and one row per day to a Numbers table.

    Reusable helper for any object with a write(row, col, value) method.
    """
    for col_idx, header in enumerate(WORKLOAD_HEADERS):
        table.write(0, col_idx, header)

    for row_idx, metric in enumerate(metrics, start=1):
        for col_idx, value in enumerate(workload_row(metric)):
            table.write(row_idx, col_idx, value)


def write_detail_table(table, entries: list[EnrichedEntry]):
    """Write headers and work-entry rows to a Numbers detail table."""
    for col_idx, header in enumerate(DETAIL_HEADERS):
        table.write(0, col_idx, header)

    for row_idx, entry in enumerate(work_entries_by_start(entries), start=1):
        for col_idx, value in enumerate(detail_row(entry)):
            table.write(row_idx, col_idx, value)


# =============================================================================
# EXCEL REPORT GENERATION (Monthly Reports)
# =============================================================================


def write_excel_workload_sheet(ws, metrics: list[WorkloadMetric]):
    """
    Write the Daily Workload sheet.

    Row 1 headers, one row per day, then a Total row with SUM formulas for the
    Visits and hour columns. Level cells are shaded by workload level.
    """
    for col_idx, header in enumerate(WORKLOAD_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, metric in enumerate(metrics, start=2):
        for col_idx, value in enumerate(workload_row(metric), start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)
        fill = LEVEL_FILLS.get(metric.level)
        if fill:
            ws.cell(row=row_idx, column=len(WORKLOAD_HEADERS)).fill = PatternFill(
                start_color=fill, end_color=fill, fill_type="solid"
            )

    total_row = len(metrics) + 2
    last_data_row = len(metrics) + 1
    ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
    # Columns B-E: Visits, Work Hours, Travel Hours, Total Hours
    for col_idx in range(2, 6):
        col_letter = get_column_letter(col_idx)
        ws.cell(
            row=total_row,
            column=col_idx,
            value=f"=SUM({col_letter}2:{col_letter}{last_data_row})",
        )


def write_excel_detail_sheet(ws, entries: list[EnrichedEntry]):
    for col_idx, header in enumerate(DETAIL_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, entry in enumerate(work_entries_by_start(entries), start=2):
        for col_idx, value in enumerate(detail_row(entry), start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_excel_summary_sheet(ws, summary: WorkloadSummary):
    """Label/value rows for the period summary."""
    values = [
        f"{format_date_display(summary.start_date)} - {format_date_display(summary.end_date)}",
        round(summary.total_work_hours, 2),
        round(summary.total_travel_hours, 2),
        round(summary.average_daily_hours, 2),
        f"{format_date_short(summary.busiest_day.date)} ({format_hours(summary.busiest_day.hours)})",
        summary.event_count,
        workload_label(summary.level),
    ]
    for row_idx, (label, value) in enumerate(zip(SUMMARY_ROW_LABELS, values), start=1):
        ws.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row_idx, column=2, value=value)


def create_monthly_excel_report(
    summary: WorkloadSummary, entries: list[EnrichedEntry], output_path: Path
):
    """
    Create Excel monthly report with three sheets.

    Sheet 1: "Daily Workload" - one row per day plus SUM totals
    Sheet 2: "Visit Detail" - every work entry in the month
    Sheet 3: "Summary" - period totals, busiest day and level
    """
    wb = Workbook()

    ws_daily = wb.active
    ws_daily.title = "Daily Workload"
    write_excel_workload_sheet(ws_daily, summary.metrics)

    in_period = [
        e for e in entries if summary.start_date <= e.start.date() <= summary.end_date
    ]
    ws_detail = wb.create_sheet(title="Visit Detail")
    write_excel_detail_sheet(ws_detail, in_period)

    ws_summary = wb.create_sheet(title="Summary")
    write_excel_summary_sheet(ws_summary, summary)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
