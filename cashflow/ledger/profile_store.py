"""Profile and session records, stored beside the ledger in the same blob store."""

import json
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from cashflow.audit import AuditLogger
from cashflow.config import get_settings
from cashflow.models.audit import AuditEventBuilder
from cashflow.models.profile import Session, UserProfile
from cashflow.services.storage import (
    SESSION_KEY,
    BlobStoreInterface,
    StorageError,
    profile_key,
)


class ProfileStore:
    """
    Per-user profile at data:profile_<userId>.

    Stored fields override the defaults; missing or malformed fields fall
    back to them. The default currency comes from the report settings.
    """

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        default_currency: Optional[str] = None,
    ):
        self._blobs = blob_store
        self._audit = audit_logger or AuditLogger()
        self._default_currency = (
            default_currency or get_settings().reports.default_currency
        ).upper()

    def _profile(self, fields: Optional[dict] = None) -> UserProfile:
        return UserProfile.model_validate({"currency": self._default_currency, **(fields or {})})

    async def get_profile(self, user_id: str) -> UserProfile:
        key = profile_key(user_id)
        raw = await self._blobs.get(key)
        if not raw:
            return self._profile()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            await self._audit.log(AuditEventBuilder.document_recovered(user_id, key, str(e)))
            return self._profile()
        if not isinstance(data, dict):
            return self._profile()

        try:
            return self._profile(data)
        except PydanticValidationError as e:
            # Keep whatever fields are still usable
            bad = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
            usable = {k: v for k, v in data.items() if k not in bad}
            await self._audit.log(AuditEventBuilder.document_recovered(
                user_id, key, f"dropped fields: {sorted(bad)}"
            ))
            try:
                return self._profile(usable)
            except PydanticValidationError:
                return self._profile()

    async def save_profile(self, user_id: str, profile: UserProfile) -> None:
        key = profile_key(user_id)
        try:
            await self._blobs.set(key, profile.model_dump_json(by_alias=True))
        except StorageError as e:
            await self._audit.log(AuditEventBuilder.save_failed(user_id, key, str(e)))
            raise
        await self._audit.log(AuditEventBuilder.profile_saved(user_id))


class SessionStore:
    """The device's current session, stored under the `session` key."""

    def __init__(
        self,
        blob_store: BlobStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._blobs = blob_store
        self._audit = audit_logger or AuditLogger()

    async def get_session(self) -> Optional[Session]:
        raw = await self._blobs.get(SESSION_KEY)
        if not raw:
            return None
        try:
            return Session.model_validate_json(raw)
        except PydanticValidationError:
            return None

    async def save_session(self, session: Session) -> None:
        await self._blobs.set(SESSION_KEY, session.model_dump_json(by_alias=True))
        await self._audit.log(AuditEventBuilder.session_changed(session.user_id, cleared=False))

    async def clear_session(self) -> None:
        await self._blobs.delete(SESSION_KEY)
        await self._audit.log(AuditEventBuilder.session_changed(None, cleared=True))
