"""
Report Generator

Turns a ledger snapshot (one month, or the stored months of a year) into
portable export text:
- CSV, for spreadsheets
- HTML, for the platform print service to turn into a PDF

GUARANTEES:
- Pure: no I/O. The caller writes the result to a file and shares/prints it.
- Every amount goes through the caller-supplied currency formatter;
  no currency symbol is hardcoded here.
- Empty months and years still produce a complete document with a
  zeroed summary.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Optional, Union

from cashflow.models.ledger import MonthRecord
from cashflow.models.profile import DEFAULT_CURRENCY
from cashflow.reports.csv_export import render_month_csv, render_year_csv
from cashflow.reports.document import render_month_document, render_year_document
from cashflow.reports.snapshot import (
    MonthReport,
    YearReport,
    build_month_report,
    build_year_report,
)
from cashflow.utils.currency import CurrencyFormatter, format_amount


class ReportGenerator:
    """Renders month and year reports with one currency formatter."""

    def __init__(
        self,
        formatter: CurrencyFormatter = format_amount,
        currency_code: str = DEFAULT_CURRENCY,
    ):
        self._formatter = formatter
        self._currency_code = currency_code

    @property
    def currency_code(self) -> str:
        return self._currency_code

    def money(self, amount: Union[Decimal, float, int]) -> str:
        return self._formatter(amount, self._currency_code)

    def month_report(self, month_key: str, month: Optional[MonthRecord]) -> MonthReport:
        return build_month_report(month_key, month)

    def year_report(self, year: int, months: Mapping[str, MonthRecord]) -> YearReport:
        return build_year_report(year, months)

    def month_csv(self, month_key: str, month: Optional[MonthRecord]) -> str:
        return render_month_csv(self.month_report(month_key, month), self.money)

    def year_csv(self, year: int, months: Mapping[str, MonthRecord]) -> str:
        return render_year_csv(self.year_report(year, months), self.money)

    def month_document(self, month_key: str, month: Optional[MonthRecord]) -> str:
        return render_month_document(self.month_report(month_key, month), self.money)

    def year_document(self, year: int, months: Mapping[str, MonthRecord]) -> str:
        return render_year_document(self.year_report(year, months), self.money)
