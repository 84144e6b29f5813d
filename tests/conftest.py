"""Shared fixtures: an in-memory blob store and stores pinned to 15 March 2024."""

from datetime import date

import pytest

from cashflow.audit import AuditLogger
from cashflow.ledger import LedgerStore, ProfileStore, SessionStore
from cashflow.services.storage import InMemoryBlobStore
from cashflow.validation import LedgerValidator


TODAY = date(2024, 3, 15)


@pytest.fixture
def blobs():
    return InMemoryBlobStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def store(blobs, audit_logger):
    return LedgerStore(
        blobs,
        audit_logger=audit_logger,
        validator=LedgerValidator(max_amount=1_000_000),
        today=lambda: TODAY,
    )


@pytest.fixture
def profile_store(blobs, audit_logger):
    return ProfileStore(blobs, audit_logger=audit_logger)


@pytest.fixture
def session_store(blobs, audit_logger):
    return SessionStore(blobs, audit_logger=audit_logger)
