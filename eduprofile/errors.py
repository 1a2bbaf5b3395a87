"""
Error taxonomy shared by the session, profile and validation layers.

Every error carries the text shown to the user; the action runner
(``eduprofile.actions``) turns it into a single notification.
"""

from typing import Dict, Optional

# Fixed vocabulary of authentication error codes
INVALID_EMAIL = "invalid-email"
USER_DISABLED = "user-disabled"
USER_NOT_FOUND = "user-not-found"
WRONG_PASSWORD = "wrong-password"
INVALID_CREDENTIAL = "invalid-credential"
EMAIL_ALREADY_IN_USE = "email-already-in-use"
WEAK_PASSWORD = "weak-password"
OPERATION_NOT_ALLOWED = "operation-not-allowed"
NO_CURRENT_USER = "no-current-user"
UNKNOWN = "unknown"

AUTH_ERROR_CODES = frozenset({
    INVALID_EMAIL,
    USER_DISABLED,
    USER_NOT_FOUND,
    WRONG_PASSWORD,
    INVALID_CREDENTIAL,
    EMAIL_ALREADY_IN_USE,
    WEAK_PASSWORD,
    OPERATION_NOT_ALLOWED,
    NO_CURRENT_USER,
})

# Per-flow messages; codes missing from a flow fall back to the raw provider message
LOGIN_MESSAGES: Dict[str, str] = {
    INVALID_EMAIL: "Email inválido",
    USER_DISABLED: "Usuario deshabilitado",
    USER_NOT_FOUND: "Usuario no encontrado",
    WRONG_PASSWORD: "Contraseña incorrecta",
    INVALID_CREDENTIAL: "Credenciales inválidas",
}

REGISTER_MESSAGES: Dict[str, str] = {
    EMAIL_ALREADY_IN_USE: "Este email ya está registrado",
    INVALID_EMAIL: "Email inválido",
    OPERATION_NOT_ALLOWED: "Operación no permitida",
    WEAK_PASSWORD: "La contraseña es muy débil",
}

PASSWORD_CHANGE_MESSAGES: Dict[str, str] = {
    WRONG_PASSWORD: "La contraseña actual es incorrecta",
    WEAK_PASSWORD: "La nueva contraseña es muy débil",
}

NO_SESSION_MESSAGE = "No hay una sesión activa"


class EduProfileError(Exception):
    """Base class for every error surfaced to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EduProfileError):
    """Local form rule violation; raised before any remote call."""


class AuthError(EduProfileError):
    """Failure reported by the authentication service."""

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code if code in AUTH_ERROR_CODES else UNKNOWN
        super().__init__(message or "")

    def user_message(self, messages: Dict[str, str], default: str) -> str:
        if self.code in messages:
            return messages[self.code]
        if self.code == NO_CURRENT_USER:
            return NO_SESSION_MESSAGE
        return self.message or default

    def __repr__(self) -> str:
        return f"AuthError(code={self.code!r}, message={self.message!r})"


class SyncError(EduProfileError):
    """Failure reported by the document store."""


class PartialRegistrationError(SyncError):
    """The account was created but its profile document could not be written."""

    def __init__(self, message: str, identity_id: str, rolled_back: bool):
        super().__init__(message)
        self.identity_id = identity_id
        self.rolled_back = rolled_back


class ActionInProgressError(EduProfileError):
    """A submit arrived while the same action was still running."""

    def __init__(self, action: str):
        super().__init__(f"La acción '{action}' ya está en curso")
        self.action = action


__all__ = [
    "AUTH_ERROR_CODES",
    "LOGIN_MESSAGES",
    "REGISTER_MESSAGES",
    "PASSWORD_CHANGE_MESSAGES",
    "NO_SESSION_MESSAGE",
    "EduProfileError",
    "ValidationError",
    "AuthError",
    "SyncError",
    "PartialRegistrationError",
    "ActionInProgressError",
]
