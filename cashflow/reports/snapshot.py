"""
Report Snapshots

DESIGN DECISION: A month or year is first reduced to a report model,
and both export formats render from that same model. This keeps the CSV
and the printable document in the same order with the same numbers.

Transaction order: ascending by date, then by creation time, then by
the order they were recorded in.
"""

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from itertools import groupby
from typing import Optional

from pydantic import BaseModel, Field

from cashflow.aggregation import budget_math
from cashflow.models.ledger import MonthRecord, MonthSummary
from cashflow.utils.dates import month_label


class TransactionRow(BaseModel):
    """One expense line of a monthly report."""

    date_iso: date
    category: str
    amount: Decimal
    note: str = ""


class BreakdownRow(BaseModel):
    """Spend for one category."""

    category: str
    total: Decimal


class MonthReport(BaseModel):
    """Everything a monthly export shows."""

    month_key: str
    label: str
    summary: MonthSummary
    breakdown: list[BreakdownRow] = Field(default_factory=list)
    transactions: list[TransactionRow] = Field(default_factory=list)

    @property
    def transactions_by_date(self) -> list[tuple[date, list[TransactionRow]]]:
        """Transactions grouped by day, in report order."""
        return [
            (day, list(rows))
            for day, rows in groupby(self.transactions, key=lambda r: r.date_iso)
        ]


class YearReport(BaseModel):
    """Everything a yearly export shows."""

    year: int
    label: str
    months: list[MonthSummary] = Field(default_factory=list)
    income: Decimal = Decimal("0")
    spent: Decimal = Decimal("0")
    remaining: Decimal = Decimal("0")
    breakdown: list[BreakdownRow] = Field(default_factory=list)

    def label_for(self, summary: MonthSummary) -> str:
        return month_label(summary.month_key)


def _sort_key(expense):
    return (expense.date_iso, expense.created_at.timestamp())


def build_month_report(month_key: str, month: Optional[MonthRecord]) -> MonthReport:
    """Reduce one month to its report model."""
    month = month or MonthRecord()
    transactions = [
        TransactionRow(
            date_iso=expense.date_iso,
            category=month.category_name(expense.category_id),
            amount=budget_math.to_amount(expense.amount),
            note=expense.note or "",
        )
        for expense in sorted(month.expenses, key=_sort_key)
    ]
    return MonthReport(
        month_key=month_key,
        label=month_label(month_key),
        summary=budget_math.summarize_month(month_key, month),
        breakdown=[
            BreakdownRow(category=name, total=total)
            for name, total in budget_math.category_breakdown([month])
        ],
        transactions=transactions,
    )


def build_year_report(year: int, months: Mapping[str, MonthRecord]) -> YearReport:
    """
    Reduce the stored months of a year to its report model.

    Only the months given appear; missing months are not zero-filled.
    """
    ordered = [months[key] for key in sorted(months)]
    summaries = [
        budget_math.summarize_month(key, months[key]) for key in sorted(months)
    ]
    income = sum((s.income for s in summaries), Decimal("0"))
    spent = sum((s.spent for s in summaries), Decimal("0"))
    return YearReport(
        year=year,
        label=str(year),
        months=summaries,
        income=income,
        spent=spent,
        remaining=income - spent,
        breakdown=[
            BreakdownRow(category=name, total=total)
            for name, total in budget_math.category_breakdown(ordered)
        ],
    )
