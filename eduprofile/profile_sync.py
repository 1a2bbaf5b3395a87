"""
Profile Synchronizer
====================

Reads and writes the single profile document ``users/{identity.id}``.

    load_profile    point read; missing document -> read-only fallback profile
    save_profile    validate, normalise, merge update (stamps updatedAt)
    create_profile  full write at sign-up (stamps createdAt)

Every document-store failure surfaces as ``SyncError`` with a generic message.
Saves carry no version token: concurrent saves are last-write-wins.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .document_store import DocumentStore
from .errors import SyncError
from .models import Identity, Profile, utc_now_iso
from .validation import validate_profile_form

logger = logging.getLogger("eduprofile.profile_sync")

MSG_LOAD_FAILED = "No se pudo cargar la información del usuario"
MSG_SAVE_FAILED = "No se pudo actualizar el perfil"
MSG_CREATE_FAILED = "No se pudo guardar la información del usuario"


class ProfileSynchronizer:
    def __init__(self, store: DocumentStore, collection: str = "users"):
        self._store = store
        self._collection = collection

    async def load_profile(self, identity: Identity) -> Profile:
        try:
            data = await self._store.get_document(self._collection, identity.id)
        except Exception as e:
            logger.error("profile_load_error uid=%s error=%s", identity.id, repr(e))
            raise SyncError(MSG_LOAD_FAILED) from e

        if data is None:
            logger.info("profile_missing uid=%s fallback=true", identity.id)
            return Profile.fallback(identity)
        return Profile.from_document(data)

    async def save_profile(self, identity: Identity, patch: Mapping[str, Any]) -> Dict[str, Any]:
        validate_profile_form(patch).raise_for_failure()

        fields = {
            "name": str(patch["name"]).strip(),
            "degree": str(patch["degree"]).strip(),
            "graduationYear": int(str(patch["graduationYear"]).strip()),
            "updatedAt": utc_now_iso(),
        }
        try:
            await self._store.update_document(self._collection, identity.id, fields)
        except Exception as e:
            logger.error("profile_save_error uid=%s error=%s", identity.id, repr(e))
            raise SyncError(MSG_SAVE_FAILED) from e

        logger.info("profile_saved uid=%s", identity.id)
        return fields

    async def create_profile(self, identity: Identity, initial_data: Mapping[str, Any]) -> Profile:
        profile = Profile(
            name=str(initial_data["name"]).strip(),
            email=str(initial_data.get("email") or identity.email).lower(),
            degree=str(initial_data["degree"]).strip(),
            graduation_year=int(str(initial_data["graduationYear"]).strip()),
            created_at=utc_now_iso(),
        )
        try:
            await self._store.set_document(self._collection, identity.id, profile.to_document())
        except Exception as e:
            logger.error("profile_create_error uid=%s error=%s", identity.id, repr(e))
            raise SyncError(MSG_CREATE_FAILED) from e

        logger.info("profile_created uid=%s", identity.id)
        return profile

    @staticmethod
    def edit_form(profile: Optional[Profile]) -> Dict[str, str]:
        """Initial edit-screen form state; unknown values become empty fields."""
        if profile is None or profile.is_fallback:
            return {"name": "", "degree": "", "graduationYear": ""}
        return {
            "name": profile.name or "",
            "degree": profile.degree or "",
            "graduationYear": str(profile.graduation_year_value) if profile.has_graduation_year else "",
        }
