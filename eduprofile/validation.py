"""
Form Validator
==============

Pure validation rules for the login, registration, profile-edit and
password-change forms. No I/O.

Each form validator runs its rules in a fixed order and stops at the first
violation; the returned ``ValidationResult`` carries that single reason.

Usage:
    result = validate_registration_form(form)
    result.raise_for_failure()  # ValidationError(result.reason)
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from .errors import ValidationError

MIN_GRADUATION_YEAR = 1950
MAX_YEARS_AHEAD = 10
MIN_PASSWORD_LENGTH = 6

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

MSG_EMPTY_FIELDS = "Por favor, complete todos los campos"
MSG_EMPTY_PASSWORD_FIELDS = "Por favor, complete todos los campos de contraseña"
MSG_INVALID_EMAIL = "Por favor, ingrese un email válido"
MSG_SHORT_PASSWORD = "La contraseña debe tener al menos 6 caracteres"
MSG_SHORT_NEW_PASSWORD = "La nueva contraseña debe tener al menos 6 caracteres"
MSG_PASSWORD_MISMATCH = "Las contraseñas no coinciden"
MSG_INVALID_YEAR = "Por favor, ingrese un año de graduación válido"

LOGIN_FIELDS = ("email", "password")
REGISTRATION_FIELDS = ("name", "email", "password", "degree", "graduationYear")
PROFILE_FIELDS = ("name", "degree", "graduationYear")
PASSWORD_FIELDS = ("currentPassword", "newPassword", "confirmPassword")


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_failure(self) -> None:
        if not self.ok:
            raise ValidationError(self.reason or MSG_EMPTY_FIELDS)


PASSED = ValidationResult(True)


def _fail(reason: str) -> ValidationResult:
    return ValidationResult(False, reason)


def _as_text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _all_filled(form: Mapping[str, object], fields, strip: bool = True) -> bool:
    values = (_as_text(form.get(f)) for f in fields)
    return all(v.strip() if strip else v for v in values)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(_as_text(email)))


def parse_graduation_year(value) -> Optional[int]:
    """Whole-string integer parse; ``None`` when the value is not an integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = _as_text(value).strip()
    if not _INTEGER_PATTERN.match(text):
        return None
    return int(text)


def graduation_year_bounds(now: Optional[datetime] = None) -> tuple[int, int]:
    now = now or datetime.now()
    return MIN_GRADUATION_YEAR, now.year + MAX_YEARS_AHEAD


def validate_email(email: str) -> ValidationResult:
    return PASSED if is_valid_email(email) else _fail(MSG_INVALID_EMAIL)


def validate_graduation_year(value, now: Optional[datetime] = None) -> ValidationResult:
    # Range follows the wall clock at call time
    year = parse_graduation_year(value)
    low, high = graduation_year_bounds(now)
    if year is None or year < low or year > high:
        return _fail(MSG_INVALID_YEAR)
    return PASSED


def validate_login_form(form: Mapping[str, object]) -> ValidationResult:
    if not _all_filled(form, LOGIN_FIELDS):
        return _fail(MSG_EMPTY_FIELDS)
    return validate_email(_as_text(form.get("email")))


def validate_registration_form(form: Mapping[str, object], now: Optional[datetime] = None) -> ValidationResult:
    if not _all_filled(form, REGISTRATION_FIELDS):
        return _fail(MSG_EMPTY_FIELDS)
    if not is_valid_email(_as_text(form.get("email"))):
        return _fail(MSG_INVALID_EMAIL)
    if len(_as_text(form.get("password"))) < MIN_PASSWORD_LENGTH:
        return _fail(MSG_SHORT_PASSWORD)
    return validate_graduation_year(form.get("graduationYear"), now)


def validate_profile_form(form: Mapping[str, object], now: Optional[datetime] = None) -> ValidationResult:
    if not _all_filled(form, PROFILE_FIELDS):
        return _fail(MSG_EMPTY_FIELDS)
    return validate_graduation_year(form.get("graduationYear"), now)


def validate_password_form(form: Mapping[str, object]) -> ValidationResult:
    # Passwords are taken verbatim, whitespace included
    if not _all_filled(form, PASSWORD_FIELDS, strip=False):
        return _fail(MSG_EMPTY_PASSWORD_FIELDS)
    new_password = _as_text(form.get("newPassword"))
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return _fail(MSG_SHORT_NEW_PASSWORD)
    if new_password != _as_text(form.get("confirmPassword")):
        return _fail(MSG_PASSWORD_MISMATCH)
    return PASSED
