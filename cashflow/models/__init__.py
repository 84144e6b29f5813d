"""
Data Models Package

This package contains all Pydantic models used by the ledger core.
Everything persisted or derived conforms to these schemas.
"""

from cashflow.models.ledger import (
    DEFAULT_CATEGORIES,
    UNKNOWN_CATEGORY_NAME,
    BillingCycle,
    Category,
    CategoryWithSpent,
    Expense,
    ExpenseInput,
    MonthRecord,
    MonthSummary,
    Subscription,
    SubscriptionInput,
    UserLedger,
    ValidationIssue,
    default_categories,
)
from cashflow.models.profile import DEFAULT_CURRENCY, Session, UserProfile
from cashflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_CATEGORIES",
    "UNKNOWN_CATEGORY_NAME",
    "BillingCycle",
    "Category",
    "CategoryWithSpent",
    "Expense",
    "ExpenseInput",
    "MonthRecord",
    "MonthSummary",
    "Subscription",
    "SubscriptionInput",
    "UserLedger",
    "ValidationIssue",
    "default_categories",
    # Profile models
    "DEFAULT_CURRENCY",
    "Session",
    "UserProfile",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
