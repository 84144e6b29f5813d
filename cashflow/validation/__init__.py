"""Input validation package."""

from cashflow.models.ledger import ValidationIssue
from cashflow.validation.validator import LedgerValidator, ValidationError

__all__ = ["LedgerValidator", "ValidationError", "ValidationIssue"]
