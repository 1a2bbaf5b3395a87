"""
Unit tests for the form validator.

Run with:
    pytest tests/test_validation.py -v
"""

from datetime import datetime

import pytest

from eduprofile.errors import ValidationError
from eduprofile.validation import (
    MSG_EMPTY_FIELDS,
    MSG_EMPTY_PASSWORD_FIELDS,
    MSG_INVALID_EMAIL,
    MSG_INVALID_YEAR,
    MSG_PASSWORD_MISMATCH,
    MSG_SHORT_NEW_PASSWORD,
    MSG_SHORT_PASSWORD,
    graduation_year_bounds,
    is_valid_email,
    parse_graduation_year,
    validate_graduation_year,
    validate_login_form,
    validate_password_form,
    validate_profile_form,
    validate_registration_form,
)

NOW = datetime(2026, 10, 18)


class TestEmail:
    @pytest.mark.parametrize("email", ["a@b.com", "ana.perez@uni.edu.co", "x+tag@d.io"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["a@b", "a.com", "a @b.com", "", "a@@b.com", "a@b .com"])
    def test_invalid(self, email):
        assert not is_valid_email(email)


class TestGraduationYear:
    def test_bounds_follow_clock(self):
        assert graduation_year_bounds(NOW) == (1950, 2036)

    @pytest.mark.parametrize("year,ok", [
        (1949, False),
        (1950, True),
        (2000, True),
        (2036, True),
        (2037, False),
    ])
    def test_range(self, year, ok):
        assert validate_graduation_year(year, NOW).ok is ok
        assert validate_graduation_year(str(year), NOW).ok is ok

    def test_range_uses_current_year_by_default(self):
        current = datetime.now().year
        assert validate_graduation_year(current + 10).ok
        assert not validate_graduation_year(current + 11).ok

    @pytest.mark.parametrize("value", ["", "abc", "20.5", "2020abc", None, True])
    def test_not_an_integer(self, value):
        result = validate_graduation_year(value, NOW)
        assert not result.ok
        assert result.reason == MSG_INVALID_YEAR

    def test_parse_trims(self):
        assert parse_graduation_year(" 2021 ") == 2021


class TestLoginForm:
    def test_passes(self):
        assert validate_login_form({"email": "a@b.com", "password": "x"}).ok

    def test_blank_fields(self):
        result = validate_login_form({"email": "a@b.com", "password": "   "})
        assert result.reason == MSG_EMPTY_FIELDS

    def test_bad_email(self):
        assert validate_login_form({"email": "a.com", "password": "x"}).reason == MSG_INVALID_EMAIL


class TestRegistrationForm:
    def test_passes(self, registration_form):
        assert validate_registration_form(registration_form, NOW).ok

    def test_first_failing_rule_wins(self, registration_form):
        # Bad email, short password and bad year at once: only the email is reported
        form = dict(registration_form, email="bad", password="123", graduationYear="1800")
        result = validate_registration_form(form, NOW)
        assert result.reason == MSG_INVALID_EMAIL

    def test_missing_field(self, registration_form):
        form = dict(registration_form, degree="  ")
        assert validate_registration_form(form, NOW).reason == MSG_EMPTY_FIELDS

    def test_short_password(self, registration_form):
        form = dict(registration_form, password="12345")
        assert validate_registration_form(form, NOW).reason == MSG_SHORT_PASSWORD

    def test_year_out_of_range(self, registration_form):
        form = dict(registration_form, graduationYear="2037")
        assert validate_registration_form(form, NOW).reason == MSG_INVALID_YEAR


class TestProfileForm:
    def test_passes(self):
        assert validate_profile_form({"name": "Ana", "degree": "Física", "graduationYear": "1999"}, NOW).ok

    def test_empty_name(self):
        result = validate_profile_form({"name": "", "degree": "Física", "graduationYear": "1999"}, NOW)
        assert result.reason == MSG_EMPTY_FIELDS

    def test_blank_degree_is_empty(self):
        result = validate_profile_form({"name": "Ana", "degree": "   ", "graduationYear": "1999"}, NOW)
        assert result.reason == MSG_EMPTY_FIELDS


class TestPasswordForm:
    def test_passes(self):
        form = {"currentPassword": "old", "newPassword": "abcdef", "confirmPassword": "abcdef"}
        assert validate_password_form(form).ok

    def test_empty(self):
        form = {"currentPassword": "", "newPassword": "abcdef", "confirmPassword": "abcdef"}
        assert validate_password_form(form).reason == MSG_EMPTY_PASSWORD_FIELDS

    def test_whitespace_password_is_not_empty(self):
        form = {"currentPassword": "secret1", "newPassword": "      ", "confirmPassword": "      "}
        assert validate_password_form(form).ok

    def test_short_new_password(self):
        form = {"currentPassword": "old", "newPassword": "abc", "confirmPassword": "abc"}
        assert validate_password_form(form).reason == MSG_SHORT_NEW_PASSWORD

    def test_mismatch(self):
        form = {"currentPassword": "old", "newPassword": "abcdef", "confirmPassword": "abcdeg"}
        assert validate_password_form(form).reason == MSG_PASSWORD_MISMATCH

    def test_raise_for_failure(self):
        form = {"currentPassword": "old", "newPassword": "abcdef", "confirmPassword": "zzzzzz"}
        with pytest.raises(ValidationError) as exc:
            validate_password_form(form).raise_for_failure()
        assert exc.value.message == MSG_PASSWORD_MISMATCH
