"""Report generation package (CSV and printable HTML)."""

from cashflow.reports.generator import ReportGenerator
from cashflow.reports.snapshot import (
    BreakdownRow,
    MonthReport,
    TransactionRow,
    YearReport,
    build_month_report,
    build_year_report,
)

__all__ = [
    "BreakdownRow",
    "MonthReport",
    "ReportGenerator",
    "TransactionRow",
    "YearReport",
    "build_month_report",
    "build_year_report",
]
