"""
Document store adapters: key-based point reads and writes, no queries.

FirestoreDocumentStore drives the synchronous google-cloud-firestore client
through ``asyncio.to_thread``; InMemoryDocumentStore backs local development
(``USE_MEMORY_STORE=1``) and the test suite.
"""

import asyncio
import copy
import logging
from typing import Any, Dict, Optional, Protocol

from google.api_core import exceptions as gcp_exceptions

logger = logging.getLogger("eduprofile.document_store")


class DocumentNotFound(LookupError):
    """Merge write against a document that does not exist."""


class DocumentStore(Protocol):
    async def get_document(self, collection: str, key: str) -> Optional[Dict[str, Any]]: ...

    async def set_document(self, collection: str, key: str, fields: Dict[str, Any]) -> None: ...

    async def update_document(self, collection: str, key: str, fields: Dict[str, Any]) -> None: ...


class FirestoreDocumentStore:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        if self._db is None:
            from .firebase_client import get_firestore
            self._db = get_firestore()
        return self._db

    async def get_document(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        ref = self.db.collection(collection).document(key)
        snapshot = await asyncio.to_thread(ref.get)
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    async def set_document(self, collection: str, key: str, fields: Dict[str, Any]) -> None:
        ref = self.db.collection(collection).document(key)
        await asyncio.to_thread(ref.set, fields)

    async def update_document(self, collection: str, key: str, fields: Dict[str, Any]) -> None:
        ref = self.db.collection(collection).document(key)
        try:
            await asyncio.to_thread(ref.update, fields)
        except gcp_exceptions.NotFound as e:
            raise DocumentNotFound(f"{collection}/{key}") from e


class InMemoryDocumentStore:
    """Process-local store with Firestore's set/update semantics."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    async def get_document(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        doc = self._collections.get(collection, {}).get(key)
        return copy.deepcopy(doc) if doc is not None else None

    async def set_document(self, collection: str, key: str, fields: Dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[key] = copy.deepcopy(fields)

    async def update_document(self, collection: str, key: str, fields: Dict[str, Any]) -> None:
        docs = self._collections.get(collection, {})
        if key not in docs:
            raise DocumentNotFound(f"{collection}/{key}")
        docs[key].update(copy.deepcopy(fields))
