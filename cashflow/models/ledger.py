"""
Core Data Models for the CashFlow ledger

These models define the schemas for everything the ledger persists
and everything it derives. They are designed to:
1. Round-trip through the persisted JSON document (camelCase keys)
2. Survive whatever an older client stored: bad amounts read as 0,
   unusable entries are skipped, never the whole document
3. Keep money as Decimal in Python and plain numbers in JSON

DESIGN DECISION: Stored models are lenient (they must load whatever an
older client wrote) while the *Input models are strict, because they
guard what gets written in the first place.
"""

from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_amount(value: Any) -> Decimal:
    """
    Coerce anything amount-like to a finite Decimal.

    None, booleans, NaN, infinities and unparseable values become 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    return amount if amount.is_finite() else ZERO


def to_limit(value: Any) -> Optional[Decimal]:
    """A usable budget limit, or None. Zero, negative and junk limits mean "no limit"."""
    if value is None:
        return None
    amount = to_amount(value)
    return amount if amount > 0 else None


def to_cents(amount: Decimal) -> Decimal:
    """Round to whole cents, half up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


# Decimal in Python, number in the persisted JSON document.
# Stored amounts are never rejected: bad values read as 0.
Money = Annotated[
    Decimal,
    BeforeValidator(to_amount),
    PlainSerializer(float, return_type=float, when_used="json"),
]

Limit = Annotated[Optional[Money], BeforeValidator(to_limit)]

UNKNOWN_CATEGORY_NAME = "Unknown"

# Seeded into every month whose category list is empty, in this order
DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("food", "Food"),
    ("transport", "Transport"),
    ("entertainment", "Entertainment"),
    ("shopping", "Shopping"),
    ("utilities", "Utilities"),
    ("health", "Health"),
    ("other", "Other"),
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LedgerModel(BaseModel):
    """Base for persisted models: snake_case in Python, camelCase on disk."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# ENUMS
# =============================================================================

class BillingCycle(str, Enum):
    """How often a subscription charges."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# PERSISTED LEDGER MODELS
# =============================================================================

class Category(LedgerModel):
    """
    A spending bucket within one month.

    A missing limit means "no budget set", which is not the same as zero.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Stable slug, unique within its month"
    )
    name: str = Field(
        ...,
        description="Display name"
    )
    limit: Limit = Field(
        default=None,
        description="Optional monthly budget ceiling (zero or junk reads as none)"
    )


class Expense(LedgerModel):
    """
    One recorded expense.

    category_id is not enforced against the month's categories; a dangling
    id shows up as "Unknown" when read and is left out of breakdowns.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Globally unique expense ID"
    )
    amount: Money = Field(
        default=ZERO,
        description="Amount spent"
    )
    category_id: str = Field(
        ...,
        description="ID of a category in the same month"
    )
    note: Optional[str] = Field(
        default=None,
        description="Free-text note"
    )
    date_iso: date = Field(
        ...,
        description="Calendar date of the expense"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the expense was recorded"
    )


class Subscription(LedgerModel):
    """A recurring charge. Lives at ledger level, not inside a month."""

    id: str = Field(
        ...,
        min_length=1,
        description="Globally unique subscription ID"
    )
    name: str = Field(
        ...,
        description="Service name (e.g. Netflix)"
    )
    amount: Money = Field(
        default=ZERO,
        description="Amount charged per billing cycle"
    )
    billing_cycle: BillingCycle = Field(
        default=BillingCycle.MONTHLY,
        description="Billing cycle"
    )
    next_billing_date: Optional[date] = None
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the subscription was added"
    )

    @field_validator('billing_cycle', mode='before')
    @classmethod
    def unknown_cycle_is_monthly(cls, v: Any) -> Any:
        try:
            return BillingCycle(v)
        except ValueError:
            return BillingCycle.MONTHLY

    @field_validator('next_billing_date', mode='before')
    @classmethod
    def unparseable_date_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return date.fromisoformat(v)
            except ValueError:
                return None
        return v


class MonthRecord(LedgerModel):
    """Income, categories and expenses of one calendar month."""

    income: Money = Field(
        default=ZERO,
        description="Income for the month (last write wins)"
    )
    categories: list[Category] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)

    def ensure_categories(self) -> bool:
        """Seed the default categories if the list is empty. Returns True if seeded."""
        if self.categories:
            return False
        self.categories = default_categories()
        return True

    def find_category(self, category_id: str) -> Optional[Category]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def category_name(self, category_id: str) -> str:
        """Display name for a category id; dangling ids read as "Unknown"."""
        category = self.find_category(category_id)
        return category.name if category else UNKNOWN_CATEGORY_NAME


class UserLedger(LedgerModel):
    """The full per-user financial document."""

    months: dict[str, MonthRecord] = Field(default_factory=dict)
    subscriptions: list[Subscription] = Field(default_factory=list)

    def used_ids(self) -> set[str]:
        """Every expense and subscription ID ever present in the document."""
        ids = {sub.id for sub in self.subscriptions}
        for month in self.months.values():
            ids.update(expense.id for expense in month.expenses)
        return ids

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> tuple["UserLedger", list[str]]:
        """
        Load a stored document entry by entry.

        Entries that cannot be repaired (an expense without an id or date,
        a month that is not an object, ...) are skipped and described in
        the returned list; everything else is kept.

        Returns:
            (ledger, skipped)
        """
        skipped: list[str] = []

        months: dict[str, MonthRecord] = {}
        raw_months = data.get("months")
        if isinstance(raw_months, Mapping):
            for key, raw in raw_months.items():
                if not isinstance(raw, Mapping):
                    skipped.append(f"months.{key}: not an object")
                    continue
                months[str(key)] = MonthRecord(
                    income=raw.get("income"),
                    categories=_salvage(Category, raw.get("categories"), f"months.{key}.categories", skipped),
                    expenses=_salvage(Expense, raw.get("expenses"), f"months.{key}.expenses", skipped),
                )
        elif raw_months is not None:
            skipped.append("months: not an object")

        subscriptions = _salvage(Subscription, data.get("subscriptions"), "subscriptions", skipped)
        return cls(months=months, subscriptions=subscriptions), skipped


def _salvage(model: type[LedgerModel], items: Any, where: str, skipped: list[str]) -> list:
    """Validate a stored list item by item, skipping what does not validate."""
    if items is None:
        return []
    if not isinstance(items, list):
        skipped.append(f"{where}: not a list")
        return []
    kept = []
    for index, item in enumerate(items):
        try:
            kept.append(model.model_validate(item))
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            skipped.append(f"{where}[{index}].{field}: {first.get('msg')}")
    return kept


def default_categories() -> list[Category]:
    """A fresh copy of the default category set."""
    return [Category(id=cat_id, name=name) for cat_id, name in DEFAULT_CATEGORIES]


# =============================================================================
# INPUT MODELS - validated before anything is written
# =============================================================================

def _positive_cents(amount: Decimal) -> Decimal:
    rounded = to_cents(amount)
    if rounded <= 0:
        raise ValueError("Amount must be at least 0.01")
    return rounded


class ExpenseInput(LedgerModel):
    """What a caller supplies to record an expense."""

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent (must be positive); rounded to cents"
    )
    category_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Category to file the expense under"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    date_iso: Optional[date] = Field(
        default=None,
        description="Calendar date; today when omitted"
    )

    @field_validator('amount')
    @classmethod
    def round_amount(cls, v: Decimal) -> Decimal:
        return _positive_cents(v)


class SubscriptionInput(LedgerModel):
    """What a caller supplies to add a subscription."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    amount: Decimal = Field(
        ...,
        gt=0,
    )
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    next_billing_date: Optional[date] = None

    @field_validator('amount')
    @classmethod
    def round_amount(cls, v: Decimal) -> Decimal:
        return _positive_cents(v)


# =============================================================================
# DERIVED MODELS - computed on demand, never persisted
# =============================================================================

class CategoryWithSpent(Category):
    """A category together with what was spent against it this month."""

    spent: Money = Decimal("0")
    remaining: Optional[Money] = Field(
        default=None,
        description="limit - spent; None when no limit is set"
    )
    over_budget: bool = False


class MonthSummary(LedgerModel):
    """Income, total spent and remaining balance of a month."""

    month_key: str
    income: Money = Decimal("0")
    spent: Money = Decimal("0")
    remaining: Money = Decimal("0")


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'invalid_format')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
