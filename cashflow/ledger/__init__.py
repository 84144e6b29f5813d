"""Ledger, profile and session stores."""

from cashflow.ledger.profile_store import ProfileStore, SessionStore
from cashflow.ledger.store import LedgerStore

__all__ = ["LedgerStore", "ProfileStore", "SessionStore"]
