"""
Runtime wiring: builds the adapters, the session context and the screen
handlers from ``Settings``. One ``Services`` instance per process; it holds the
single session subject.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .auth_provider import AuthProvider, IdentityToolkitClient
from .config import Settings, get_settings
from .document_store import DocumentStore, FirestoreDocumentStore, InMemoryDocumentStore
from .profile_sync import ProfileSynchronizer
from .screens import ScreenHandlers
from .session import SessionContext, SessionManager

logger = logging.getLogger("eduprofile.services")


@dataclass
class Services:
    settings: Settings
    context: SessionContext
    session: SessionManager
    profiles: ProfileSynchronizer
    screens: ScreenHandlers


def build_services(
    settings: Optional[Settings] = None,
    auth: Optional[AuthProvider] = None,
    store: Optional[DocumentStore] = None,
) -> Services:
    settings = settings or get_settings()

    if auth is None:
        from .firebase_client import get_web_api_key
        auth = IdentityToolkitClient(
            api_key=get_web_api_key(),
            base_url=settings.identity_toolkit_url,
            timeout=settings.http_timeout,
        )
    if store is None:
        store = InMemoryDocumentStore() if settings.use_memory_store else FirestoreDocumentStore()

    logger.info("services_built store=%s collection=%s", type(store).__name__, settings.users_collection)

    context = SessionContext()
    profiles = ProfileSynchronizer(store, collection=settings.users_collection)
    session = SessionManager(auth, profiles, context)
    return Services(
        settings=settings,
        context=context,
        session=session,
        profiles=profiles,
        screens=ScreenHandlers(session, profiles),
    )
