"""
Session Manager
===============

Owns the authenticated-identity lifecycle: sign-in, sign-up, sign-out and
password change with re-authentication.

The current session subject lives in a ``SessionContext`` created empty at
application start. Any component may read it; only ``SessionManager`` writes
it. Remote calls inside one operation are awaited strictly in sequence.

Sign-up is a two-step create across two stores (account, then profile
document) with no shared transaction. When the profile write fails the
account is deleted as a compensating action and the partial failure is raised
as ``PartialRegistrationError``; nothing is retried.
"""

import logging
from typing import Optional

from . import errors
from .auth_provider import AuthProvider
from .errors import AuthError, PartialRegistrationError, SyncError
from .models import Identity
from .profile_sync import ProfileSynchronizer
from .validation import validate_login_form, validate_password_form, validate_registration_form

logger = logging.getLogger("eduprofile.session")

MSG_PARTIAL_ROLLED_BACK = (
    "No se pudo guardar la información del usuario. La cuenta no fue creada, intente nuevamente"
)
MSG_PARTIAL_ORPHANED = (
    "La cuenta fue creada pero no se pudo guardar la información del usuario"
)


class SessionContext:
    """Single source of truth for who is authenticated in this process."""

    def __init__(self):
        self._identity: Optional[Identity] = None

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def require_identity(self) -> Identity:
        if self._identity is None:
            raise AuthError(errors.NO_CURRENT_USER, errors.NO_SESSION_MESSAGE)
        return self._identity

    def _begin(self, identity: Identity) -> None:
        self._identity = identity

    def _end(self) -> None:
        self._identity = None


class SessionManager:
    def __init__(self, auth: AuthProvider, profiles: ProfileSynchronizer, context: SessionContext):
        self._auth = auth
        self._profiles = profiles
        self._context = context

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._context.identity

    async def sign_in(self, email: str, password: str) -> Identity:
        validate_login_form({"email": email, "password": password}).raise_for_failure()

        identity = await self._auth.sign_in_with_password(email, password)
        self._context._begin(identity)
        logger.info("sign_in status=ok uid=%s", identity.id)
        return identity

    async def sign_up(self, name: str, email: str, password: str, degree: str, graduation_year) -> Identity:
        form = {
            "name": name,
            "email": email,
            "password": password,
            "degree": degree,
            "graduationYear": graduation_year,
        }
        validate_registration_form(form).raise_for_failure()

        identity = await self._auth.create_account(email, password)
        logger.info("account_created uid=%s", identity.id)

        try:
            await self._profiles.create_profile(identity, {
                "name": name,
                "email": email,
                "degree": degree,
                "graduationYear": graduation_year,
            })
        except SyncError as e:
            rolled_back = await self._rollback_account(identity)
            message = MSG_PARTIAL_ROLLED_BACK if rolled_back else MSG_PARTIAL_ORPHANED
            raise PartialRegistrationError(message, identity_id=identity.id, rolled_back=rolled_back) from e

        self._context._begin(identity)
        logger.info("sign_up status=ok uid=%s", identity.id)
        return identity

    async def _rollback_account(self, identity: Identity) -> bool:
        try:
            await self._auth.delete_account(identity)
        except Exception as e:
            # Account stays without a profile document; needs manual repair
            logger.error("sign_up_rollback status=error uid=%s error=%s", identity.id, repr(e))
            return False
        logger.warning("sign_up_rollback status=ok uid=%s", identity.id)
        return True

    async def sign_out(self) -> None:
        identity = self._context.identity
        await self._auth.sign_out(identity)
        self._context._end()
        logger.info("sign_out status=ok uid=%s", identity.id if identity else None)

    async def change_password(self, current_password: str, new_password: str, confirm_password: str) -> None:
        validate_password_form({
            "currentPassword": current_password,
            "newPassword": new_password,
            "confirmPassword": confirm_password,
        }).raise_for_failure()

        identity = self._context.require_identity()
        fresh = await self._auth.reauthenticate(identity, current_password)
        updated = await self._auth.update_password(fresh, new_password)
        self._context._begin(updated)
        logger.info("password_changed uid=%s", identity.id)
