"""
CSV rendering of month and year reports.

Comma-separated, one header row, "\\n" line endings. Fields are quoted
only when they have to be (embedded commas, quotes or newlines, which in
practice means notes).
"""

import csv
import io
from typing import Callable

from cashflow.reports.snapshot import MonthReport, YearReport


MONTH_HEADER = ["Date", "Category", "Amount", "Note"]
MONTH_SUMMARY_HEADER = ["Income", "Total Spent", "Remaining"]
YEAR_HEADER = ["Month", "Income", "Spent", "Remaining"]
TOTAL_LABEL = "Total"


def _writer(buf: io.StringIO):
    return csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)


def render_month_csv(report: MonthReport, money: Callable) -> str:
    """Expense rows, then a blank line, then the income/spent/remaining summary."""
    buf = io.StringIO()
    w = _writer(buf)
    w.writerow(MONTH_HEADER)
    for row in report.transactions:
        w.writerow([
            row.date_iso.isoformat(),
            row.category,
            money(row.amount),
            row.note,
        ])

    w.writerow([])
    w.writerow(MONTH_SUMMARY_HEADER)
    w.writerow([
        money(report.summary.income),
        money(report.summary.spent),
        money(report.summary.remaining),
    ])
    return buf.getvalue()


def render_year_csv(report: YearReport, money: Callable) -> str:
    """One row per stored month, then a grand total row."""
    buf = io.StringIO()
    w = _writer(buf)
    w.writerow(YEAR_HEADER)
    for summary in report.months:
        w.writerow([
            summary.month_key,
            money(summary.income),
            money(summary.spent),
            money(summary.remaining),
        ])
    w.writerow([
        TOTAL_LABEL,
        money(report.income),
        money(report.spent),
        money(report.remaining),
    ])
    return buf.getvalue()
