"""
Tests for Numbers/Excel report helpers.
"""

from datetime import date

import pytest
from openpyxl import load_workbook

from core.config import DETAIL_HEADERS, WORKLOAD_HEADERS
from models.workload import WorkloadOptions
from services.reports import (
    create_monthly_excel_report,
    detail_row,
    format_date_display,
    format_date_short,
    write_detail_table,
    write_workload_table,
)
from services.workload import period_summary


class FakeTable:
    """Anything with write(row, col, value), like a numbers_parser table."""

    def __init__(self):
        self.cells = {}

    def write(self, row, col, value):
        self.cells[(row, col)] = value


@pytest.fixture
def february_entries(make_work_entry):
    return [
        make_work_entry("Walk Rex 60", "2024-02-05T09:00", "2024-02-05T10:00", location="12 Oak"),
        make_work_entry("Fluffy - 30", "2024-02-05T11:00", "2024-02-05T11:30"),
        make_work_entry("Dentist", "2024-02-06T09:00", "2024-02-06T10:00"),
        make_work_entry("Fluffy - 30", "2024-03-01T09:00", "2024-03-01T09:30"),
    ]


@pytest.fixture
def february_summary(february_entries):
    options = WorkloadOptions(include_travel_time=False, reference_date=date(2024, 2, 14))
    return period_summary("monthly", february_entries, options)


def test_date_formats():
    assert format_date_display(date(2024, 2, 5)) == "2/5/2024"
    assert format_date_short(date(2024, 11, 7)) == "Nov 7"


def test_detail_row(make_work_entry):
    entry = make_work_entry("Walk Rex 60", "2024-02-05T09:00", "2024-02-05T10:00", location="12 Oak")
    assert detail_row(entry) == ["2/5/2024", "Walk Rex 60", "Walk", "09:00", "10:00", 60, "12 Oak"]


def test_workload_table(february_summary):
    table = FakeTable()

    write_workload_table(table, february_summary.metrics)

    assert [table.cells[(0, c)] for c in range(len(WORKLOAD_HEADERS))] == WORKLOAD_HEADERS
    # Feb 5 is row 5
    assert table.cells[(5, 0)] == "2/5/2024"
    assert table.cells[(5, 1)] == 2
    assert table.cells[(5, 2)] == 1.5
    assert table.cells[(5, 5)] == "Comfortable"
    assert table.cells[(1, 5)] == "No Work"


def test_detail_table_only_has_work_entries(february_entries):
    table = FakeTable()

    write_detail_table(table, february_entries)

    assert [table.cells[(0, c)] for c in range(len(DETAIL_HEADERS))] == DETAIL_HEADERS
    rows = {r for r, _ in table.cells if r > 0}
    assert rows == {1, 2, 3}
    assert table.cells[(1, 1)] == "Walk Rex 60"
    assert table.cells[(2, 1)] == "Fluffy"


def test_monthly_excel_report(tmp_path, february_summary, february_entries):
    output_path = tmp_path / "reports" / "monthly.xlsx"

    create_monthly_excel_report(february_summary, february_entries, output_path)

    wb = load_workbook(output_path)
    assert wb.sheetnames == ["Daily Workload", "Visit Detail", "Summary"]

    daily = wb["Daily Workload"]
    assert [c.value for c in daily[1]] == WORKLOAD_HEADERS
    assert daily.cell(row=31, column=1).value == "Total"
    assert daily.cell(row=31, column=3).value == "=SUM(C2:C30)"

    detail = wb["Visit Detail"]
    # March entry is outside the period, the dentist is personal
    assert detail.max_row == 3

    summary = wb["Summary"]
    assert summary.cell(row=1, column=2).value == "2/1/2024 - 2/29/2024"
    assert summary.cell(row=5, column=2).value == "Feb 5 (1h 30m)"
    assert summary.cell(row=7, column=2).value == "Comfortable"


def test_weekly_numbers_report(tmp_path, february_entries):
    pytest.importorskip("numbers_parser")
    from numbers_parser import Document

    from scripts.create_weekly_report import create_weekly_numbers_report

    options = WorkloadOptions(include_travel_time=False, reference_date=date(2024, 2, 5))
    summary = period_summary("weekly", february_entries, options)
    output_path = tmp_path / "weekly.numbers"

    create_weekly_numbers_report(summary, february_entries, output_path)

    doc = Document(str(output_path))
    table = doc.sheets["Workload Summary"].tables["Workload Summary"]
    assert table.cell(0, 0).value == "Date"
    assert table.cell(8, 0).value == "Total"
