"""Tests for CSV and printable HTML reports."""

import csv
import io
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from cashflow.models import Expense, MonthRecord
from cashflow.reports import ReportGenerator, build_month_report, build_year_report


def _expense(expense_id, amount, category_id, day, note=None, minute=0):
    return Expense(
        id=expense_id,
        amount=Decimal(amount),
        category_id=category_id,
        note=note,
        date_iso=date(2024, 3, day),
        created_at=datetime(2024, 3, day, 12, minute, tzinfo=timezone.utc),
    )


@pytest.fixture
def march():
    month = MonthRecord(
        income=Decimal("2000"),
        expenses=[
            _expense("e3", "20", "transport", 12, note="Bus"),
            _expense("e1", "50", "food", 2, note="Groceries, weekly"),
            _expense("e2", "30", "food", 12, note="<b>Pizza</b>", minute=5),
            _expense("e4", "7", "pets", 20),
        ],
    )
    month.ensure_categories()
    return month


@pytest.fixture
def generator():
    return ReportGenerator()


class TestSnapshots:
    """Tests for the report models both formats render from."""

    def test_transactions_sorted_by_date_then_creation(self, march):
        report = build_month_report("2024-03", march)
        assert [t.note for t in report.transactions] == [
            "Groceries, weekly", "Bus", "<b>Pizza</b>", "",
        ]

    def test_dangling_category_shows_as_unknown(self, march):
        report = build_month_report("2024-03", march)
        assert report.transactions[-1].category == "Unknown"
        assert "Unknown" not in [row.category for row in report.breakdown]

    def test_grouped_by_date(self, march):
        report = build_month_report("2024-03", march)
        days = [day for day, _ in report.transactions_by_date]
        assert days == [date(2024, 3, 2), date(2024, 3, 12), date(2024, 3, 20)]

    def test_missing_month_is_empty(self):
        report = build_month_report("2024-05", None)
        assert report.label == "May 2024"
        assert report.transactions == []
        assert report.summary.spent == Decimal("0")

    def test_year_totals(self, march):
        january = MonthRecord(income=Decimal("1000"))
        report = build_year_report(2024, {"2024-03": march, "2024-01": january})
        assert [m.month_key for m in report.months] == ["2024-01", "2024-03"]
        assert report.income == Decimal("3000")
        assert report.spent == Decimal("107")
        assert report.remaining == Decimal("2893")


class TestMonthCsv:
    """Tests for the monthly CSV export."""

    def test_empty_month(self, generator):
        assert generator.month_csv("2024-04", MonthRecord()) == (
            "Date,Category,Amount,Note\n"
            "\n"
            "Income,Total Spent,Remaining\n"
            "$0.00,$0.00,$0.00\n"
        )

    def test_rows_and_summary(self, generator, march):
        rows = list(csv.reader(io.StringIO(generator.month_csv("2024-03", march))))
        assert rows[0] == ["Date", "Category", "Amount", "Note"]
        assert rows[1] == ["2024-03-02", "Food", "$50.00", "Groceries, weekly"]
        assert rows[4] == ["2024-03-20", "Unknown", "$7.00", ""]
        assert rows[5] == []
        assert rows[6] == ["Income", "Total Spent", "Remaining"]
        assert rows[7] == ["$2000.00", "$107.00", "$1893.00"]

    def test_notes_with_commas_are_quoted(self, generator, march):
        text = generator.month_csv("2024-03", march)
        assert '"Groceries, weekly"' in text
        assert '"Bus"' not in text

    def test_uses_currency_formatter(self, march):
        text = ReportGenerator(currency_code="EUR").month_csv("2024-03", march)
        assert "€50.00" in text
        assert "$" not in text

    def test_custom_formatter(self, march):
        generator = ReportGenerator(formatter=lambda amount, code: f"{code}:{amount}")
        assert "USD:50" in generator.month_csv("2024-03", march)


class TestYearCsv:
    """Tests for the yearly CSV export."""

    def test_only_stored_months_plus_total(self, generator, march):
        text = generator.year_csv(2024, {"2024-03": march})
        assert text == (
            "Month,Income,Spent,Remaining\n"
            "2024-03,$2000.00,$107.00,$1893.00\n"
            "Total,$2000.00,$107.00,$1893.00\n"
        )

    def test_empty_year(self, generator):
        assert generator.year_csv(2023, {}) == (
            "Month,Income,Spent,Remaining\n"
            "Total,$0.00,$0.00,$0.00\n"
        )


class TestDocuments:
    """Tests for the printable HTML."""

    def test_month_document(self, generator, march):
        html = generator.month_document("2024-03", march)
        assert "<h1>March 2024</h1>" in html
        assert "$2000.00" in html
        assert "Spending by Category" in html

    def test_notes_are_escaped(self, generator, march):
        html = generator.month_document("2024-03", march)
        assert "&lt;b&gt;Pizza&lt;/b&gt;" in html
        assert "<b>Pizza</b>" not in html

    def test_same_order_as_csv(self, generator, march):
        html = generator.month_document("2024-03", march)
        positions = [html.index(note) for note in ("Groceries, weekly", "Bus", "&lt;b&gt;Pizza")]
        assert positions == sorted(positions)

    def test_empty_month_document(self, generator):
        html = generator.month_document("2024-04", MonthRecord())
        assert "No transactions recorded." in html
        assert "No spending this month." in html

    def test_over_budget_remaining_is_marked(self, generator):
        month = MonthRecord(expenses=[_expense("e1", "20", "food", 1)])
        month.ensure_categories()
        html = generator.month_document("2024-03", month)
        assert "$-20.00" in html
        assert 'class="value negative"' in html

    def test_year_document(self, generator, march):
        html = generator.year_document(2024, {"2024-03": march})
        assert "<h1>2024</h1>" in html
        assert "March 2024" in html
        assert "Total" in html
        assert "Food" in html

    def test_empty_year_document(self, generator):
        html = generator.year_document(2023, {})
        assert "No spending this year." in html
