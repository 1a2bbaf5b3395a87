"""
Authentication Provider - Firebase Identity Toolkit
====================================================

Password authentication against Firebase Auth through the Identity Toolkit
REST API (the Admin SDK cannot verify passwords).

Endpoints used (all POST, ``?key=<web API key>``):
    accounts:signInWithPassword  -> sign in / re-authenticate
    accounts:signUp              -> create account
    accounts:update              -> change password (needs a fresh idToken)
    accounts:delete              -> roll back an account created during sign-up

REST failures come back as ``{"error": {"message": "EMAIL_EXISTS", ...}}``;
``classify_rest_error`` maps them to the ``AuthError`` vocabulary.

Sign-out is local: the client SDK semantics are to drop the tokens, nothing
is revoked server-side.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import aiohttp

from . import errors
from .errors import AuthError
from .models import Identity

logger = logging.getLogger("eduprofile.auth_provider")

REST_ERROR_CODES: Dict[str, str] = {
    "INVALID_EMAIL": errors.INVALID_EMAIL,
    "MISSING_EMAIL": errors.INVALID_EMAIL,
    "USER_DISABLED": errors.USER_DISABLED,
    "EMAIL_NOT_FOUND": errors.USER_NOT_FOUND,
    "USER_NOT_FOUND": errors.USER_NOT_FOUND,
    "INVALID_PASSWORD": errors.WRONG_PASSWORD,
    "MISSING_PASSWORD": errors.WRONG_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": errors.INVALID_CREDENTIAL,
    "INVALID_ID_TOKEN": errors.INVALID_CREDENTIAL,
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": errors.INVALID_CREDENTIAL,
    "TOKEN_EXPIRED": errors.INVALID_CREDENTIAL,
    "EMAIL_EXISTS": errors.EMAIL_ALREADY_IN_USE,
    "WEAK_PASSWORD": errors.WEAK_PASSWORD,
    "OPERATION_NOT_ALLOWED": errors.OPERATION_NOT_ALLOWED,
    "PASSWORD_LOGIN_DISABLED": errors.OPERATION_NOT_ALLOWED,
}


def classify_rest_error(message: str) -> AuthError:
    """Build an AuthError from an Identity Toolkit error message.

    Messages look like ``"WEAK_PASSWORD : Password should be at least 6 characters"``;
    only the token before the first space/colon identifies the error.
    """
    raw = (message or "").strip()
    key = raw.split(":", 1)[0].strip().split(" ", 1)[0]
    return AuthError(REST_ERROR_CODES.get(key, errors.UNKNOWN), raw or None)


class AuthProvider(Protocol):
    async def sign_in_with_password(self, email: str, password: str) -> Identity: ...

    async def create_account(self, email: str, password: str) -> Identity: ...

    async def reauthenticate(self, identity: Identity, current_password: str) -> Identity: ...

    async def update_password(self, identity: Identity, new_password: str) -> Identity: ...

    async def sign_out(self, identity: Optional[Identity]) -> None: ...

    async def delete_account(self, identity: Identity) -> None: ...


class IdentityToolkitClient:
    """AuthProvider backed by the Identity Toolkit REST API."""

    def __init__(self, api_key: str, base_url: str, timeout: float = 30.0):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self._base_url}/accounts:{endpoint}"
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(url, params={"key": self._api_key}, json=payload) as response:
                    try:
                        body = await response.json(content_type=None)
                    except ValueError:
                        # Proxies and load balancers answer with HTML pages
                        body = None
                        if response.status == 200:
                            logger.error("identity_toolkit_invalid_body endpoint=%s", endpoint)
                            raise AuthError(errors.UNKNOWN, "Respuesta inválida del servicio de autenticación")
                    if response.status != 200:
                        message = ((body or {}).get("error") or {}).get("message", f"HTTP {response.status}")
                        logger.warning("identity_toolkit_error endpoint=%s status=%s error=%s",
                                       endpoint, response.status, message)
                        raise classify_rest_error(message)
                    return body or {}
        except aiohttp.ClientError as e:
            logger.error("identity_toolkit_connection_error endpoint=%s error=%s", endpoint, repr(e))
            raise AuthError(errors.UNKNOWN, f"Error de conexión: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("identity_toolkit_timeout endpoint=%s", endpoint)
            raise AuthError(errors.UNKNOWN, "Tiempo de espera agotado") from e

    @staticmethod
    def _identity_from(body: Dict[str, Any], fallback: Optional[Identity] = None) -> Identity:
        return Identity(
            id=body.get("localId") or (fallback.id if fallback else ""),
            email=body.get("email") or (fallback.email if fallback else ""),
            display_name=body.get("displayName") or (fallback.display_name if fallback else None),
            id_token=body.get("idToken") or (fallback.id_token if fallback else ""),
            refresh_token=body.get("refreshToken") or (fallback.refresh_token if fallback else ""),
        )

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        body = await self._post("signInWithPassword", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        return self._identity_from(body)

    async def create_account(self, email: str, password: str) -> Identity:
        body = await self._post("signUp", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        return self._identity_from(body)

    async def reauthenticate(self, identity: Identity, current_password: str) -> Identity:
        body = await self._post("signInWithPassword", {
            "email": identity.email,
            "password": current_password,
            "returnSecureToken": True,
        })
        fresh = self._identity_from(body, fallback=identity)
        if fresh.id != identity.id:
            raise AuthError(errors.INVALID_CREDENTIAL, "La credencial no corresponde al usuario actual")
        return fresh

    async def update_password(self, identity: Identity, new_password: str) -> Identity:
        body = await self._post("update", {
            "idToken": identity.id_token,
            "password": new_password,
            "returnSecureToken": True,
        })
        return self._identity_from(body, fallback=identity)

    async def sign_out(self, identity: Optional[Identity]) -> None:
        logger.debug("identity_toolkit_sign_out uid=%s", identity.id if identity else None)

    async def delete_account(self, identity: Identity) -> None:
        await self._post("delete", {"idToken": identity.id_token})
