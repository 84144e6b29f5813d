"""
Ledger Store

DESIGN DECISION: The ledger store is the single source of truth for a
user's financial document. Every operation:
1. Takes the user id explicitly (no ambient session)
2. Loads the WHOLE document from the blob store
3. Mutates an in-memory copy
4. Writes the WHOLE document back

There is no locking. Two mutations issued concurrently for the same user
race, and the later write wins - the earlier change is lost. That is the
accepted model for a single-device, single-writer client.

Reads never write: a month that was never stored is returned as a
freshly seeded view (default categories, zero income, no expenses)
without being persisted.

KNOWN QUIRK (kept on purpose): add_expense always files the expense under
the CURRENT month, even when its date_iso falls in another month.
"""

import json
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional, Union
from uuid import uuid4

from cashflow.aggregation import budget_math
from cashflow.audit import AuditLogger
from cashflow.models.audit import AuditEventBuilder
from cashflow.models.ledger import (
    Category,
    CategoryWithSpent,
    Expense,
    ExpenseInput,
    MonthRecord,
    MonthSummary,
    Subscription,
    SubscriptionInput,
    UserLedger,
)
from cashflow.services.storage import BlobStoreInterface, StorageError, ledger_key
from cashflow.utils.dates import month_key as to_month_key
from cashflow.utils.dates import parse_month_key, year_month_keys
from cashflow.validation import LedgerValidator, ValidationError, ValidationIssue


def _new_id(used: set[str]) -> str:
    """A uuid4 string not already used anywhere in the ledger."""
    while True:
        candidate = str(uuid4())
        if candidate not in used:
            return candidate


class LedgerStore:
    """
    Reads and mutates per-user ledgers stored as JSON blobs.

    A stored document that is not a JSON object is replaced by an empty
    one. Inside a readable document only the unusable entries are skipped.
    Both cases are audited. Blob store failures surface as StorageError;
    bad input raises ValidationError before anything is read or written.
    """

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LedgerValidator] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize the store.

        Args:
            blob_store: Persistence substrate
            audit_logger: Where mutations are logged. Defaults to a local one.
            validator: Input validator. Defaults to one using app settings.
            today: Clock returning the local date; decides the current month.
        """
        self._blobs = blob_store
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or LedgerValidator()
        self._today = today or date.today

    # -------------------------------------------------------------------------
    # Document I/O
    # -------------------------------------------------------------------------

    def current_month_key(self) -> str:
        return to_month_key(self._today())

    def _resolve_month_key(self, month_key: Optional[str]) -> str:
        if month_key is None:
            return self.current_month_key()
        parse_month_key(month_key)
        return month_key

    async def _load(self, user_id: str) -> UserLedger:
        key = ledger_key(user_id)
        try:
            raw = await self._blobs.get(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

        if not raw:
            return UserLedger()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            data, reason = None, str(e)
        else:
            reason = "top level is not an object"
        if not isinstance(data, dict):
            await self._audit.log(AuditEventBuilder.document_recovered(
                user_id=user_id,
                key=key,
                reason=reason,
            ))
            return UserLedger()

        ledger, skipped = UserLedger.from_document(data)
        if skipped:
            await self._audit.log(AuditEventBuilder.document_repaired(
                user_id=user_id,
                key=key,
                skipped=skipped,
            ))
        return ledger

    async def _save(self, user_id: str, ledger: UserLedger) -> None:
        key = ledger_key(user_id)
        try:
            await self._blobs.set(key, ledger.model_dump_json(by_alias=True))
        except Exception as e:
            await self._audit.log(AuditEventBuilder.save_failed(
                user_id=user_id,
                key=key,
                error_message=str(e),
            ))
            if isinstance(e, StorageError):
                raise
            raise StorageError(f"Failed to save data: {e}") from e

    @staticmethod
    def _month_view(ledger: UserLedger, month_key: str) -> MonthRecord:
        """A seeded copy of a month, for read paths. Never stored."""
        stored = ledger.months.get(month_key)
        month = stored.model_copy(deep=True) if stored else MonthRecord()
        month.ensure_categories()
        return month

    @staticmethod
    def _month_for_write(ledger: UserLedger, month_key: str) -> MonthRecord:
        """The stored month, created and seeded in the document if needed."""
        month = ledger.months.get(month_key)
        if month is None:
            month = MonthRecord()
            ledger.months[month_key] = month
        month.ensure_categories()
        return month

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_ledger(self, user_id: str) -> UserLedger:
        """The whole document, as stored (no seeding)."""
        user_id = self._validator.validate_id("user_id", user_id)
        return await self._load(user_id)

    async def get_month(self, user_id: str, month_key: Optional[str] = None) -> MonthRecord:
        """
        A month of the ledger (current month by default).

        Months that were never stored come back seeded with the default
        categories, zero income and no expenses.
        """
        user_id = self._validator.validate_id("user_id", user_id)
        month_key = self._resolve_month_key(month_key)
        ledger = await self._load(user_id)
        return self._month_view(ledger, month_key)

    async def get_year(self, user_id: str, year: int) -> dict[str, MonthRecord]:
        """
        Stored months of a calendar year, January first.

        Sparse: months that were never stored are absent, not zero-filled.
        """
        user_id = self._validator.validate_id("user_id", user_id)
        if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
            raise ValidationError([ValidationIssue(
                field="year",
                issue_type="invalid_value",
                message=f"Year must be between 1 and 9999, got {year!r}",
            )])
        ledger = await self._load(user_id)
        return {
            key: self._month_view(ledger, key)
            for key in year_month_keys(year)
            if key in ledger.months
        }

    async def get_month_summary(
        self,
        user_id: str,
        month_key: Optional[str] = None,
    ) -> MonthSummary:
        """Income, spent and remaining balance. Recomputed on every call."""
        month_key = self._resolve_month_key(month_key)
        month = await self.get_month(user_id, month_key)
        return budget_math.summarize_month(month_key, month)

    async def get_categories(self, user_id: str) -> list[Category]:
        """Categories of the current month (defaults when none are stored)."""
        month = await self.get_month(user_id)
        return month.categories

    async def get_categories_with_spent(self, user_id: str) -> list[CategoryWithSpent]:
        """Current month's categories with spent, remaining and over-budget flag."""
        month = await self.get_month(user_id)
        return budget_math.categories_with_spent(month)

    async def get_subscriptions(self, user_id: str) -> list[Subscription]:
        user_id = self._validator.validate_id("user_id", user_id)
        ledger = await self._load(user_id)
        return ledger.subscriptions

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add_expense(
        self,
        user_id: str,
        expense: Union[ExpenseInput, dict[str, Any]],
    ) -> Expense:
        """
        Record an expense in the current month.

        The expense keeps its own date_iso (today when omitted) but is always
        filed under the current month's list.
        """
        user_id = self._validator.validate_id("user_id", user_id)
        data = self._validator.validate_expense(expense)
        today = self._today()
        month_key = to_month_key(today)

        ledger = await self._load(user_id)
        month = self._month_for_write(ledger, month_key)
        created = Expense(
            id=_new_id(ledger.used_ids()),
            amount=data.amount,
            category_id=data.category_id,
            note=data.note,
            date_iso=data.date_iso or today,
        )
        month.expenses.append(created)
        await self._save(user_id, ledger)

        await self._audit.log(AuditEventBuilder.expense_added(
            user_id=user_id,
            expense_id=created.id,
            month_key=month_key,
            amount=str(created.amount),
        ))
        return created

    async def update_income(self, user_id: str, income: Any) -> Decimal:
        """Replace (not add to) the current month's income."""
        user_id = self._validator.validate_id("user_id", user_id)
        value = self._validator.validate_income(income)
        month_key = self.current_month_key()

        ledger = await self._load(user_id)
        month = self._month_for_write(ledger, month_key)
        month.income = value
        await self._save(user_id, ledger)

        await self._audit.log(AuditEventBuilder.income_updated(
            user_id=user_id,
            month_key=month_key,
            income=str(value),
        ))
        return value

    async def delete_expense(
        self,
        user_id: str,
        expense_id: str,
        month_key: Optional[str] = None,
    ) -> bool:
        """
        Remove an expense from a month (current month by default).

        Idempotent: an unknown id is a no-op and nothing is written.

        Returns:
            True if an expense was removed
        """
        user_id = self._validator.validate_id("user_id", user_id)
        month_key = self._resolve_month_key(month_key)

        ledger = await self._load(user_id)
        month = ledger.months.get(month_key)
        if month is None:
            return False

        kept = [e for e in month.expenses if e.id != expense_id]
        if len(kept) == len(month.expenses):
            return False

        month.expenses = kept
        await self._save(user_id, ledger)

        await self._audit.log(AuditEventBuilder.expense_deleted(
            user_id=user_id,
            expense_id=expense_id,
            month_key=month_key,
        ))
        return True

    async def _set_limit(
        self,
        user_id: str,
        category_id: str,
        limit: Optional[Decimal],
    ) -> bool:
        month_key = self.current_month_key()
        ledger = await self._load(user_id)
        month = self._month_for_write(ledger, month_key)
        category = month.find_category(category_id)
        if category is None:
            return False

        category.limit = limit
        await self._save(user_id, ledger)

        await self._audit.log(AuditEventBuilder.budget_limit_changed(
            user_id=user_id,
            month_key=month_key,
            category_id=category_id,
            limit=str(limit) if limit is not None else None,
        ))
        return True

    async def save_budget_limit(self, user_id: str, category_id: str, limit: Any) -> bool:
        """
        Set a category's budget limit for the current month only.

        Returns:
            False (and writes nothing) if the category does not exist
        """
        user_id = self._validator.validate_id("user_id", user_id)
        category_id = self._validator.validate_id("category_id", category_id)
        value = self._validator.validate_limit(limit)
        return await self._set_limit(user_id, category_id, value)

    async def clear_budget_limit(self, user_id: str, category_id: str) -> bool:
        """Unset (not zero) a category's limit for the current month."""
        user_id = self._validator.validate_id("user_id", user_id)
        category_id = self._validator.validate_id("category_id", category_id)
        return await self._set_limit(user_id, category_id, None)

    async def add_subscription(
        self,
        user_id: str,
        subscription: Union[SubscriptionInput, dict[str, Any]],
    ) -> Subscription:
        """Append a subscription to the ledger-level list."""
        user_id = self._validator.validate_id("user_id", user_id)
        data = self._validator.validate_subscription(subscription)

        ledger = await self._load(user_id)
        created = Subscription(
            id=_new_id(ledger.used_ids()),
            name=data.name,
            amount=data.amount,
            billing_cycle=data.billing_cycle,
            next_billing_date=data.next_billing_date,
        )
        ledger.subscriptions.append(created)
        await self._save(user_id, ledger)

        await self._audit.log(AuditEventBuilder.subscription_added(
            user_id=user_id,
            subscription_id=created.id,
            name=created.name,
            billing_cycle=created.billing_cycle.value,
        ))
        return created

    async def delete_subscription(self, user_id: str, subscription_id: str) -> bool:
        """Remove a subscription. Idempotent."""
        user_id = self._validator.validate_id("user_id", user_id)

        ledger = await self._load(user_id)
        kept = [s for s in ledger.subscriptions if s.id != subscription_id]
        if len(kept) == len(ledger.subscriptions):
            return False

        ledger.subscriptions = kept
        await self._save(user_id, ledger)

        await self._audit.log(AuditEventBuilder.subscription_deleted(
            user_id=user_id,
            subscription_id=subscription_id,
        ))
        return True
