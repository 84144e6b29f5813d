"""
Audit Models for CashFlow

Every ledger mutation, recovery and export is logged as an event.
This provides:
1. Traceability of what changed a user's document and when
2. Debugging information when a document had to be reset
3. A record of failed writes the user was told about

DESIGN DECISION: Audit events are append-only log records. They are not
part of the ledger document and are never read back by the core.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    INCOME_UPDATED = "income_updated"
    BUDGET_LIMIT_SET = "budget_limit_set"
    BUDGET_LIMIT_CLEARED = "budget_limit_cleared"
    SUBSCRIPTION_ADDED = "subscription_added"
    SUBSCRIPTION_DELETED = "subscription_deleted"

    # Profile / session
    PROFILE_SAVED = "profile_saved"
    SESSION_SAVED = "session_saved"
    SESSION_CLEARED = "session_cleared"

    # Storage
    DOCUMENT_RECOVERED = "document_recovered"
    DOCUMENT_REPAIRED = "document_repaired"
    SAVE_FAILED = "save_failed"

    # Reports
    EXPORT_GENERATED = "export_generated"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - whose document, and which entity in it
    user_id: Optional[str] = Field(
        default=None,
        description="Owner of the affected document"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'subscription', 'month')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(user_id, expense_id, month_key, amount)
        event = AuditEventBuilder.save_failed(user_id, key, error)
    """

    @staticmethod
    def expense_added(
        user_id: str,
        expense_id: str,
        month_key: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            user_id=user_id,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense of {amount} added to {month_key}",
            details={"month_key": month_key, "amount": amount},
        )

    @staticmethod
    def expense_deleted(
        user_id: str,
        expense_id: str,
        month_key: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            user_id=user_id,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense deleted from {month_key}",
            details={"month_key": month_key},
        )

    @staticmethod
    def income_updated(
        user_id: str,
        month_key: str,
        income: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INCOME_UPDATED,
            user_id=user_id,
            entity_type="month",
            entity_id=month_key,
            description=f"Income for {month_key} set to {income}",
            details={"income": income},
        )

    @staticmethod
    def budget_limit_changed(
        user_id: str,
        month_key: str,
        category_id: str,
        limit: Optional[str],
    ) -> AuditEvent:
        if limit is None:
            return AuditEvent(
                event_type=AuditEventType.BUDGET_LIMIT_CLEARED,
                user_id=user_id,
                entity_type="category",
                entity_id=category_id,
                description=f"Budget limit cleared for {category_id} in {month_key}",
                details={"month_key": month_key},
            )
        return AuditEvent(
            event_type=AuditEventType.BUDGET_LIMIT_SET,
            user_id=user_id,
            entity_type="category",
            entity_id=category_id,
            description=f"Budget limit for {category_id} in {month_key} set to {limit}",
            details={"month_key": month_key, "limit": limit},
        )

    @staticmethod
    def subscription_added(
        user_id: str,
        subscription_id: str,
        name: str,
        billing_cycle: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_ADDED,
            user_id=user_id,
            entity_type="subscription",
            entity_id=subscription_id,
            description=f"Subscription added: {name} ({billing_cycle})",
            details={"name": name, "billing_cycle": billing_cycle},
        )

    @staticmethod
    def subscription_deleted(
        user_id: str,
        subscription_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_DELETED,
            user_id=user_id,
            entity_type="subscription",
            entity_id=subscription_id,
            description="Subscription deleted",
        )

    @staticmethod
    def profile_saved(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_SAVED,
            user_id=user_id,
            entity_type="profile",
            description="Profile saved",
        )

    @staticmethod
    def session_changed(user_id: Optional[str], cleared: bool) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.SESSION_CLEARED
                if cleared
                else AuditEventType.SESSION_SAVED
            ),
            user_id=user_id,
            entity_type="session",
            description="Session cleared" if cleared else "Session saved",
        )

    @staticmethod
    def document_recovered(
        user_id: str,
        key: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_RECOVERED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type="document",
            entity_id=key,
            description="Malformed document replaced with an empty default",
            error_message=reason,
        )

    @staticmethod
    def document_repaired(
        user_id: str,
        key: str,
        skipped: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_REPAIRED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type="document",
            entity_id=key,
            description=f"Skipped {len(skipped)} unusable stored entries",
            details={"skipped": skipped},
        )

    @staticmethod
    def save_failed(
        user_id: Optional[str],
        key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            entity_type="document",
            entity_id=key,
            description=f"Failed to save {key}",
            error_message=error_message,
        )

    @staticmethod
    def export_generated(
        user_id: str,
        scope: str,
        fmt: str,
        filename: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            user_id=user_id,
            entity_type="export",
            entity_id=scope,
            description=f"Export generated: {filename}",
            details={"scope": scope, "format": fmt, "filename": filename},
        )
