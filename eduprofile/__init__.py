"""
EduProfile - academic profile service
=====================================

Account registration, sign-in, profile viewing/editing and password change on
top of Firebase Authentication and Cloud Firestore.

Modules:
    - validation: pure form rules (first failing rule wins)
    - session: SessionContext and SessionManager (sign-in/up/out, password change)
    - profile_sync: ProfileSynchronizer (users/{uid} document)
    - actions: per-submit state machine and notifications
    - screens: one handler per screen action
    - main: FastAPI routes

Usage:
    from eduprofile import build_services

    services = build_services()
    notification = await services.screens.login({"email": ..., "password": ...})
"""

from .errors import (
    ActionInProgressError,
    AuthError,
    EduProfileError,
    PartialRegistrationError,
    SyncError,
    ValidationError,
)
from .models import Identity, Profile
from .profile_sync import ProfileSynchronizer
from .services import Services, build_services
from .session import SessionContext, SessionManager

__all__ = [
    # Errors
    "EduProfileError",
    "ValidationError",
    "AuthError",
    "SyncError",
    "PartialRegistrationError",
    "ActionInProgressError",
    # Models
    "Identity",
    "Profile",
    # Core
    "SessionContext",
    "SessionManager",
    "ProfileSynchronizer",
    # Wiring
    "Services",
    "build_services",
]
