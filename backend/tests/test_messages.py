"""
NoteNest Backend — Auth Message Translation Tests
===================================================

What we test:
    ✅ known auth-service messages are classified by substring
    ✅ login and register tables give the friendly wording
    ✅ unknown messages pass through verbatim, empty ones use the fallback
"""

import pytest

from notenest.messages import (
    LOGIN_FALLBACK,
    REGISTER_FALLBACK,
    login_message,
    register_message,
)
from notenest.remote.base import AuthErrorKind, AuthFailure, classify_auth_message


class TestClassify:
    @pytest.mark.parametrize(
        "message,kind",
        [
            ("Invalid login credentials", AuthErrorKind.INVALID_CREDENTIALS),
            ("Email not confirmed", AuthErrorKind.EMAIL_NOT_CONFIRMED),
            ("User not found", AuthErrorKind.USER_NOT_FOUND),
            ("Too many requests, slow down", AuthErrorKind.RATE_LIMITED),
            ("User already registered", AuthErrorKind.ALREADY_REGISTERED),
            ("Password should be at least 6 characters", AuthErrorKind.WEAK_PASSWORD),
            ("Unable to validate email address: invalid format", AuthErrorKind.INVALID_EMAIL),
            ("Database error saving new user", AuthErrorKind.UNKNOWN),
        ],
    )
    def test_substring_classification(self, message, kind):
        assert classify_auth_message(message) is kind


class TestLoginMessages:
    def test_invalid_credentials(self):
        failure = AuthFailure.from_message("Invalid login credentials")
        assert login_message(failure) == "Invalid email or password. Please try again."

    def test_unconfirmed_email(self):
        failure = AuthFailure.from_message("Email not confirmed")
        assert login_message(failure) == "Please verify your email address before signing in."

    def test_rate_limited(self):
        failure = AuthFailure.from_message("Too many requests")
        assert login_message(failure) == "Too many login attempts. Please try again later."

    def test_unknown_message_is_verbatim(self):
        failure = AuthFailure.from_message("Signups not allowed for this instance")
        assert login_message(failure) == "Signups not allowed for this instance"

    def test_empty_message_uses_fallback(self):
        assert login_message(AuthFailure.from_message(None)) == LOGIN_FALLBACK

    def test_no_failure_is_empty(self):
        assert login_message(None) == ""

    def test_register_only_kind_is_not_translated_for_login(self):
        failure = AuthFailure.from_message("User already registered")
        assert login_message(failure) == "User already registered"


class TestRegisterMessages:
    def test_already_registered(self):
        failure = AuthFailure.from_message("User already registered")
        assert register_message(failure) == "An account with this email already exists. Please sign in instead."

    def test_weak_password(self):
        failure = AuthFailure.from_message("Password should be at least 6 characters")
        assert register_message(failure) == "Password must be at least 6 characters long."

    def test_invalid_email(self):
        failure = AuthFailure.from_message("Invalid email")
        assert register_message(failure) == "Please enter a valid email address."

    def test_rate_limited(self):
        failure = AuthFailure.from_message("Too many requests")
        assert register_message(failure) == "Too many sign-up attempts. Please try again later."

    def test_empty_message_uses_fallback(self):
        assert register_message(AuthFailure.from_message("")) == REGISTER_FALLBACK
