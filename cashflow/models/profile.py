"""User profile and session records kept next to the ledger."""

from typing import Optional

from pydantic import Field, field_validator

from cashflow.models.ledger import LedgerModel


DEFAULT_CURRENCY = "USD"


class UserProfile(LedgerModel):
    """
    Display details for a user.

    Only `currency` matters to the ledger core: exports format amounts
    with it.
    """

    first_name: str = ""
    last_name: str = ""
    profile_picture: Optional[str] = None
    birthday: Optional[str] = None
    currency: str = Field(
        default=DEFAULT_CURRENCY,
        min_length=1,
        max_length=8,
        description="ISO currency code used for display"
    )

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Session(LedgerModel):
    """The signed-in user on this device."""

    user_id: str = Field(..., min_length=1)
    email: str = ""

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()
