"""
User-facing text for remote error messages.

Known substrings of the auth service's `{message}` map to friendlier wording;
anything unrecognized is shown verbatim.
"""

from typing import Mapping, Optional

from notenest.remote.base import AuthErrorKind, AuthFailure

UNEXPECTED_ERROR = "An unexpected error occurred"

LOGIN_MESSAGES: Mapping[AuthErrorKind, str] = {
    AuthErrorKind.INVALID_CREDENTIALS: "Invalid email or password. Please try again.",
    AuthErrorKind.EMAIL_NOT_CONFIRMED: "Please verify your email address before signing in.",
    AuthErrorKind.USER_NOT_FOUND: "No account found with this email address.",
    AuthErrorKind.RATE_LIMITED: "Too many login attempts. Please try again later.",
}
LOGIN_FALLBACK = "An error occurred during sign in. Please try again."

REGISTER_MESSAGES: Mapping[AuthErrorKind, str] = {
    AuthErrorKind.ALREADY_REGISTERED: "An account with this email already exists. Please sign in instead.",
    AuthErrorKind.WEAK_PASSWORD: "Password must be at least 6 characters long.",
    AuthErrorKind.INVALID_EMAIL: "Please enter a valid email address.",
    AuthErrorKind.RATE_LIMITED: "Too many sign-up attempts. Please try again later.",
}
REGISTER_FALLBACK = "An error occurred during registration. Please try again."


def translate(
    failure: Optional[AuthFailure],
    table: Mapping[AuthErrorKind, str],
    fallback: str,
) -> str:
    if failure is None:
        return ""
    if failure.kind in table:
        return table[failure.kind]
    return failure.message or fallback


def login_message(failure: Optional[AuthFailure]) -> str:
    return translate(failure, LOGIN_MESSAGES, LOGIN_FALLBACK)


def register_message(failure: Optional[AuthFailure]) -> str:
    return translate(failure, REGISTER_MESSAGES, REGISTER_FALLBACK)
