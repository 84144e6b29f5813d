"""
Main Orchestrator for CashFlow

This module ties together the stores and the report generator and defines
the end-to-end export flows:
1. Month export (ledger month + profile currency → CSV or printable HTML)
2. Year export (stored months of a year → CSV or printable HTML)

DESIGN DECISION: The orchestrator is the only place that knows about
both the ledger and the profile:
- The report generator stays pure and never reads storage
- The currency always comes from the user's profile
- Every export is audited

Writing the returned text to a file, sharing it, or printing it to PDF
is left to the platform.
"""

from typing import Callable, Literal, Optional

from pydantic import BaseModel, Field

from cashflow.audit import AuditLogger, configure_logging
from cashflow.config import get_settings
from cashflow.ledger import LedgerStore, ProfileStore, SessionStore
from cashflow.models.audit import AuditEventBuilder
from cashflow.reports import ReportGenerator
from cashflow.services.storage import (
    BlobStoreInterface,
    FileBlobStore,
    InMemoryBlobStore,
)
from cashflow.validation import ValidationError, ValidationIssue


ExportFormat = Literal["csv", "pdf"]

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
HTML_MEDIA_TYPE = "text/html; charset=utf-8"


class ExportFile(BaseModel):
    """A generated export, ready to be written out by the platform."""

    filename: str = Field(..., min_length=1)
    media_type: str
    content: str


def _check_format(fmt: str) -> str:
    if fmt not in ("csv", "pdf"):
        raise ValidationError([ValidationIssue(
            field="fmt",
            issue_type="invalid_value",
            message=f"Export format must be 'csv' or 'pdf', got {fmt!r}",
            severity="error",
        )])
    return fmt


class ExportFlow:
    """
    Orchestrates month and year exports.

    Flow:
    1. Load → month or year from the ledger store
    2. Currency → from the user's profile
    3. Render → CSV text, or HTML for the PDF print service
    4. Audit → one export_generated event
    """

    def __init__(
        self,
        ledger_store: LedgerStore,
        profile_store: ProfileStore,
        generator_factory: Optional[Callable[[str], ReportGenerator]] = None,
        audit_logger: Optional[AuditLogger] = None,
        filename_prefix: Optional[str] = None,
    ):
        self._ledger = ledger_store
        self._profiles = profile_store
        self._generator_factory = generator_factory or (
            lambda code: ReportGenerator(currency_code=code)
        )
        self._audit_logger = audit_logger or AuditLogger()
        self._prefix = filename_prefix or get_settings().reports.filename_prefix

    async def _generator_for(self, user_id: str) -> ReportGenerator:
        profile = await self._profiles.get_profile(user_id)
        return self._generator_factory(profile.currency)

    def _export_file(self, scope: str, fmt: str, content: str) -> ExportFile:
        if fmt == "csv":
            return ExportFile(
                filename=f"{self._prefix}-{scope}.csv",
                media_type=CSV_MEDIA_TYPE,
                content=content,
            )
        return ExportFile(
            filename=f"{self._prefix}-{scope}.html",
            media_type=HTML_MEDIA_TYPE,
            content=content,
        )

    async def export_month(
        self,
        user_id: str,
        month_key: Optional[str] = None,
        fmt: ExportFormat = "csv",
    ) -> ExportFile:
        """
        Export one month (current month by default).

        A month that was never stored still exports, with zeroed totals.
        """
        fmt = _check_format(fmt)
        month_key = month_key or self._ledger.current_month_key()
        month = await self._ledger.get_month(user_id, month_key)
        generator = await self._generator_for(user_id)

        if fmt == "csv":
            content = generator.month_csv(month_key, month)
        else:
            content = generator.month_document(month_key, month)

        export = self._export_file(month_key, fmt, content)
        await self._audit_logger.log(AuditEventBuilder.export_generated(
            user_id=user_id,
            scope=month_key,
            fmt=fmt,
            filename=export.filename,
        ))
        return export

    async def export_year(
        self,
        user_id: str,
        year: int,
        fmt: ExportFormat = "csv",
    ) -> ExportFile:
        """Export the stored months of a calendar year plus totals."""
        fmt = _check_format(fmt)
        months = await self._ledger.get_year(user_id, year)
        generator = await self._generator_for(user_id)

        if fmt == "csv":
            content = generator.year_csv(year, months)
        else:
            content = generator.year_document(year, months)

        scope = f"{year:04d}"
        export = self._export_file(scope, fmt, content)
        await self._audit_logger.log(AuditEventBuilder.export_generated(
            user_id=user_id,
            scope=scope,
            fmt=fmt,
            filename=export.filename,
        ))
        return export


def create_blob_store(use_storage: bool = True) -> BlobStoreInterface:
    """
    Build the configured blob store.

    Args:
        use_storage: Set to False to force the in-memory backend (tests,
                    throwaway sessions).
    """
    settings = get_settings().storage
    if not use_storage or settings.backend == "memory":
        return InMemoryBlobStore()
    return FileBlobStore(settings.data_dir, settings.retry_attempts)


def create_app_components(
    use_storage: bool = True,
) -> tuple[LedgerStore, ProfileStore, SessionStore, ExportFlow]:
    """
    Factory function to create all application components.

    All components share one blob store and one audit logger.

    Args:
        use_storage: Whether to use the configured persistent backend.
                    Set to False for testing without storage.

    Returns:
        (ledger_store, profile_store, session_store, export_flow)
    """
    configure_logging(get_settings().app.log_level)
    blob_store = create_blob_store(use_storage)
    audit_logger = AuditLogger()

    ledger_store = LedgerStore(blob_store, audit_logger=audit_logger)
    profile_store = ProfileStore(blob_store, audit_logger=audit_logger)
    session_store = SessionStore(blob_store, audit_logger=audit_logger)
    export_flow = ExportFlow(
        ledger_store,
        profile_store,
        audit_logger=audit_logger,
    )

    return ledger_store, profile_store, session_store, export_flow
