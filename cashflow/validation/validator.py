"""
Input Validation

DESIGN DECISION: Every value a caller hands to the ledger is checked
before the document is even read:

STAGE 1 - SCHEMA VALIDATION:
- Type checking and required fields (pydantic input models)
- Positive, two-decimal amounts
- ISO dates

STAGE 2 - SANITY CHECKS:
- Amounts above the configured ceiling
- Income that is negative or not a number

Anything that fails raises ValidationError with the full list of issues.
Nothing is ever persisted from a rejected input, and nothing is silently
fixed up.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cashflow.config import get_settings
from cashflow.models.ledger import (
    ExpenseInput,
    SubscriptionInput,
    ValidationIssue,
)


class ValidationError(Exception):
    """Input rejected before any write. Carries every issue found."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in issues))

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


def _issues_from_pydantic(error: PydanticValidationError) -> list[ValidationIssue]:
    issues = []
    for err in error.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "input"
        issues.append(ValidationIssue(
            field=field,
            issue_type=err.get("type", "invalid_value"),
            message=err.get("msg", "Invalid value"),
            severity="error",
        ))
    return issues


class LedgerValidator:
    """
    Validates caller input for ledger mutations.

    Returns typed, normalized input on success; raises ValidationError
    otherwise.
    """

    def __init__(self, max_amount: Optional[float] = None):
        if max_amount is None:
            max_amount = get_settings().app.max_amount
        self._max_amount = Decimal(str(max_amount))

    def _parse(self, model: type[BaseModel], data: Union[BaseModel, dict[str, Any]]):
        if isinstance(data, model):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump()
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(_issues_from_pydantic(e))

    def _check_ceiling(self, field: str, amount: Decimal) -> list[ValidationIssue]:
        if amount > self._max_amount:
            return [ValidationIssue(
                field=field,
                issue_type="suspicious_value",
                message=f"Amount {amount} is above the allowed maximum of {self._max_amount}",
                severity="error",
            )]
        return []

    def _to_decimal(self, field: str, value: Any) -> Decimal:
        if isinstance(value, bool):
            value = None
        try:
            amount = Decimal(str(value)) if value is not None else None
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite():
            raise ValidationError([ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{field} must be a number, got {value!r}",
                severity="error",
            )])
        return amount

    def validate_expense(self, data: Union[ExpenseInput, dict[str, Any]]) -> ExpenseInput:
        """Validate a new expense."""
        expense = self._parse(ExpenseInput, data)
        issues = self._check_ceiling("amount", expense.amount)
        if issues:
            raise ValidationError(issues)
        if expense.note is not None and not expense.note:
            expense = expense.model_copy(update={"note": None})
        return expense

    def validate_subscription(
        self,
        data: Union[SubscriptionInput, dict[str, Any]],
    ) -> SubscriptionInput:
        """Validate a new subscription."""
        subscription = self._parse(SubscriptionInput, data)
        issues = self._check_ceiling("amount", subscription.amount)
        if issues:
            raise ValidationError(issues)
        return subscription

    def validate_income(self, value: Any) -> Decimal:
        """Income must be a finite, non-negative number."""
        income = self._to_decimal("income", value)
        issues = []
        if income < 0:
            issues.append(ValidationIssue(
                field="income",
                issue_type="invalid_value",
                message="Income cannot be negative",
                severity="error",
            ))
        issues.extend(self._check_ceiling("income", income))
        if issues:
            raise ValidationError(issues)
        return income

    def validate_limit(self, value: Any) -> Decimal:
        """A budget limit must be a finite number greater than zero."""
        limit = self._to_decimal("limit", value)
        issues = []
        if limit <= 0:
            issues.append(ValidationIssue(
                field="limit",
                issue_type="invalid_value",
                message="Budget limit must be greater than zero",
                severity="error",
            ))
        issues.extend(self._check_ceiling("limit", limit))
        if issues:
            raise ValidationError(issues)
        return limit

    def validate_id(self, field: str, value: Any) -> str:
        """IDs must be non-empty strings."""
        if not isinstance(value, str) or not value.strip():
            raise ValidationError([ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field} is required",
                severity="error",
            )])
        return value.strip()

    @staticmethod
    def get_user_friendly_summary(error: ValidationError) -> str:
        """One line per issue, for showing to the user."""
        lines = ["Please fix the following:"]
        for issue in error.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)
