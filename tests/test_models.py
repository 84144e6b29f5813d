"""
Tests for CashFlow models

Test strategy:
1. Persisted models round-trip through camelCase JSON
2. Input models reject what must never be written
3. Audit events carry what the structured log needs
"""

import json
import pytest
from datetime import date
from decimal import Decimal

from cashflow.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BillingCycle,
    Category,
    DEFAULT_CATEGORIES,
    Expense,
    ExpenseInput,
    MonthRecord,
    Session,
    Subscription,
    SubscriptionInput,
    UserLedger,
    UserProfile,
)


class TestLedgerModels:
    """Tests for the persisted ledger models."""

    def test_category_without_limit(self):
        """A missing limit means no budget, not zero."""
        category = Category(id="food", name="Food")
        assert category.limit is None

    @pytest.mark.parametrize("limit", [0, -5, "abc", float("nan")])
    def test_unusable_stored_limit_reads_as_none(self, limit):
        """Zero, negative and junk limits mean no budget."""
        assert Category(id="food", name="Food", limit=limit).limit is None

    def test_stored_amounts_never_rejected(self):
        """Null or junk stored amounts read as 0."""
        expense = Expense.model_validate({
            "id": "e1", "amount": None, "categoryId": "food", "dateIso": "2024-03-01",
        })
        assert expense.amount == Decimal("0")
        assert MonthRecord(income="lots").income == Decimal("0")

    def test_unknown_stored_cycle_is_monthly(self):
        sub = Subscription.model_validate({"id": "s1", "name": "X", "amount": 3, "billingCycle": "daily"})
        assert sub.billing_cycle == BillingCycle.MONTHLY

    def test_expense_accepts_camel_case_keys(self):
        """Stored documents use camelCase field names."""
        expense = Expense.model_validate({
            "id": "e1",
            "amount": 12.5,
            "categoryId": "food",
            "dateIso": "2024-03-15",
            "createdAt": "2024-03-15T10:00:00Z",
        })
        assert expense.category_id == "food"
        assert expense.date_iso == date(2024, 3, 15)
        assert expense.amount == Decimal("12.5")
        assert expense.note is None

    def test_expense_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Expense(
                id="e1",
                amount=Decimal("-1"),
                category_id="food",
                date_iso=date(2024, 3, 15),
            )

    def test_subscription_defaults_to_monthly(self):
        """Billing cycle defaults to monthly."""
        sub = Subscription(id="s1", name="Netflix", amount=Decimal("15.99"))
        assert sub.billing_cycle == BillingCycle.MONTHLY
        assert sub.next_billing_date is None

    def test_ledger_json_uses_camel_case_and_numbers(self):
        """Dumped JSON has camelCase keys and plain numeric amounts."""
        ledger = UserLedger(
            months={
                "2024-03": MonthRecord(
                    income=Decimal("2000"),
                    expenses=[Expense(
                        id="e1",
                        amount=Decimal("12.50"),
                        category_id="food",
                        date_iso=date(2024, 3, 15),
                    )],
                ),
            },
            subscriptions=[Subscription(
                id="s1",
                name="Gym",
                amount=Decimal("30"),
                billing_cycle=BillingCycle.WEEKLY,
            )],
        )
        doc = json.loads(ledger.model_dump_json(by_alias=True))

        month = doc["months"]["2024-03"]
        assert month["income"] == 2000
        assert month["expenses"][0]["categoryId"] == "food"
        assert month["expenses"][0]["dateIso"] == "2024-03-15"
        assert month["expenses"][0]["amount"] == 12.5
        assert doc["subscriptions"][0]["billingCycle"] == "weekly"
        assert "createdAt" in doc["subscriptions"][0]

    def test_ledger_round_trip(self):
        """A dumped ledger loads back equal."""
        ledger = UserLedger(months={"2024-03": MonthRecord(income=Decimal("10"))})
        loaded = UserLedger.model_validate_json(ledger.model_dump_json(by_alias=True))
        assert loaded.months["2024-03"].income == Decimal("10")

    def test_used_ids_covers_expenses_and_subscriptions(self):
        """used_ids collects ids from every month and the subscription list."""
        ledger = UserLedger(
            months={
                "2024-02": MonthRecord(expenses=[Expense(
                    id="a", amount=Decimal("1"), category_id="food",
                    date_iso=date(2024, 2, 1),
                )]),
                "2024-03": MonthRecord(expenses=[Expense(
                    id="b", amount=Decimal("1"), category_id="food",
                    date_iso=date(2024, 3, 1),
                )]),
            },
            subscriptions=[Subscription(id="c", name="X", amount=Decimal("1"))],
        )
        assert ledger.used_ids() == {"a", "b", "c"}


class TestMonthRecord:
    """Tests for month seeding and category lookup."""

    def test_ensure_categories_seeds_defaults_in_order(self):
        """An empty month gets the seven default categories."""
        month = MonthRecord()
        assert month.ensure_categories() is True
        assert [(c.id, c.name) for c in month.categories] == DEFAULT_CATEGORIES
        assert all(c.limit is None for c in month.categories)

    def test_ensure_categories_keeps_existing(self):
        """A month with categories is left alone."""
        month = MonthRecord(categories=[Category(id="rent", name="Rent")])
        assert month.ensure_categories() is False
        assert [c.id for c in month.categories] == ["rent"]

    def test_category_name_for_dangling_id(self):
        """Unknown category ids display as Unknown."""
        month = MonthRecord()
        month.ensure_categories()
        assert month.category_name("food") == "Food"
        assert month.category_name("gone") == "Unknown"


class TestInputModels:
    """Tests for caller input models."""

    def test_expense_input_requires_positive_amount(self):
        with pytest.raises(ValueError):
            ExpenseInput(amount=Decimal("0"), category_id="food")

    def test_expense_input_rounds_to_cents(self):
        assert ExpenseInput(amount=Decimal("1.005"), category_id="food").amount == Decimal("1.01")
        assert ExpenseInput(amount=0.1 + 0.2, category_id="food").amount == Decimal("0.30")

    def test_expense_input_rejects_amount_rounding_to_zero(self):
        with pytest.raises(ValueError):
            ExpenseInput(amount=Decimal("0.004"), category_id="food")

    def test_subscription_input_rejects_unknown_cycle(self):
        with pytest.raises(ValueError):
            SubscriptionInput(name="X", amount=Decimal("1"), billing_cycle="daily")


class TestProfileModels:
    """Tests for profile and session models."""

    def test_profile_defaults(self):
        profile = UserProfile()
        assert profile.currency == "USD"
        assert profile.full_name == ""

    def test_profile_currency_upper_cased(self):
        assert UserProfile(currency="eur").currency == "EUR"

    def test_profile_full_name(self):
        profile = UserProfile.model_validate({"firstName": "Ada", "lastName": "Lovelace"})
        assert profile.full_name == "Ada Lovelace"

    def test_session_normalizes_email(self):
        session = Session(user_id="u1", email="  Ada@Example.COM ")
        assert session.email == "ada@example.com"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.income_updated(
            user_id="u1",
            month_key="2024-03",
            income="2000",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "income_updated"
        assert log_dict["user_id"] == "u1"

    def test_save_failed_is_an_error(self):
        """Failed writes are logged at error severity."""
        event = AuditEventBuilder.save_failed("u1", "data:u1", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_budget_limit_cleared_event(self):
        """Clearing a limit is its own event type."""
        event = AuditEventBuilder.budget_limit_changed("u1", "2024-03", "food", None)
        assert event.event_type == AuditEventType.BUDGET_LIMIT_CLEARED


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
