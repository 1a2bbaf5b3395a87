"""
Shared fixtures: in-process fakes for the authentication service and the
document store, recording every remote call in order.
"""

import asyncio
from typing import List, Optional, Tuple

import pytest

from eduprofile.config import Settings
from eduprofile.document_store import InMemoryDocumentStore
from eduprofile.errors import AuthError
from eduprofile.models import Identity
from eduprofile.profile_sync import ProfileSynchronizer
from eduprofile.services import build_services
from eduprofile.session import SessionContext, SessionManager


class FakeAuthProvider:
    """AuthProvider double. ``fail[name] = AuthError(...)`` makes a call fail;
    ``gate`` (an asyncio.Event) holds every call until it is set."""

    def __init__(self, calls: List[Tuple]):
        self.calls = calls
        self.fail = {}
        self.gate: Optional[asyncio.Event] = None
        self.passwords = {"ana@uni.edu": "secret1"}
        self._next_uid = 1

    async def _enter(self, name: str, *args):
        self.calls.append(("auth", name) + args)
        if self.gate is not None:
            await self.gate.wait()
        if name in self.fail:
            raise self.fail[name]

    def _identity(self, email: str, uid: Optional[str] = None, token: str = "tok-1") -> Identity:
        return Identity(id=uid or f"uid-{email}", email=email, id_token=token, refresh_token="ref-1")

    async def sign_in_with_password(self, email, password):
        await self._enter("sign_in_with_password", email)
        if self.passwords.get(email) != password:
            raise AuthError("invalid-credential", "INVALID_LOGIN_CREDENTIALS")
        return self._identity(email)

    async def create_account(self, email, password):
        await self._enter("create_account", email)
        if email in self.passwords:
            raise AuthError("email-already-in-use", "EMAIL_EXISTS")
        self.passwords[email] = password
        uid = f"new-{self._next_uid}"
        self._next_uid += 1
        return self._identity(email, uid=uid)

    async def reauthenticate(self, identity, current_password):
        await self._enter("reauthenticate", identity.id)
        if self.passwords.get(identity.email) != current_password:
            raise AuthError("wrong-password", "INVALID_PASSWORD")
        return identity.with_tokens("tok-fresh", "ref-fresh")

    async def update_password(self, identity, new_password):
        await self._enter("update_password", identity.id)
        self.passwords[identity.email] = new_password
        return identity.with_tokens("tok-updated", "ref-updated")

    async def sign_out(self, identity):
        await self._enter("sign_out")

    async def delete_account(self, identity):
        await self._enter("delete_account", identity.id)
        self.passwords.pop(identity.email, None)


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that records calls and can be told to fail."""

    def __init__(self, calls: List[Tuple]):
        super().__init__()
        self.calls = calls
        self.fail = {}

    def _enter(self, name: str, collection: str, key: str):
        self.calls.append(("store", name, collection, key))
        if name in self.fail:
            raise self.fail[name]

    async def get_document(self, collection, key):
        self._enter("get_document", collection, key)
        return await super().get_document(collection, key)

    async def set_document(self, collection, key, fields):
        self._enter("set_document", collection, key)
        await super().set_document(collection, key, fields)

    async def update_document(self, collection, key, fields):
        self._enter("update_document", collection, key)
        await super().update_document(collection, key, fields)

    def writes(self):
        return [c for c in self.calls if c[0] == "store" and c[1] != "get_document"]


@pytest.fixture
def calls():
    return []


@pytest.fixture
def auth(calls):
    return FakeAuthProvider(calls)


@pytest.fixture
def store(calls):
    return RecordingStore(calls)


@pytest.fixture
def identity():
    return Identity(id="uid-ana", email="ana@uni.edu", display_name="Ana", id_token="tok-1")


@pytest.fixture
def profiles(store):
    return ProfileSynchronizer(store, collection="users")


@pytest.fixture
def context():
    return SessionContext()


@pytest.fixture
def session(auth, profiles, context):
    return SessionManager(auth, profiles, context)


@pytest.fixture
def settings():
    return Settings(
        firebase_api_key="test-key",
        firebase_api_key_secret_name=None,
        firebase_admin_json=None,
        firebase_admin_secret_name=None,
        google_project_id="test-project",
        identity_toolkit_url="http://localhost:9099/identitytoolkit.googleapis.com/v1",
        http_timeout=5.0,
        users_collection="users",
        use_memory_store=True,
        service_version="test",
    )


@pytest.fixture
def services(settings, auth, store):
    return build_services(settings, auth=auth, store=store)


@pytest.fixture
def registration_form():
    return {
        "name": "  Luis Pérez ",
        "email": "Luis@Uni.edu",
        "password": "clave123",
        "degree": " Ingeniería Civil ",
        "graduationYear": "2020",
    }
