"""
NoteNest — Abstract Remote Client Interface
=============================================

What:  The contract the app consumes from its backend-as-a-service.
Why:   SessionStore and NoteCollection only need a handful of auth and table
       calls. Keeping them behind an interface lets tests drive the whole
       app with an in-memory fake, and keeps Supabase types out of the core.
How:   SupabaseRemoteClient implements this on top of the supabase async SDK.

Error contract:
    - Auth calls never raise for errors the auth service reports; those come back
      as `AuthReply.error` (an AuthFailure carrying the raw `{message}`).
    - Table calls raise RemoteError for errors the backend reports.
    - Transport failures (connection refused, timeouts) propagate untouched.
      Callers treat them as unexpected.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from notenest.models.note import Identity


class AuthErrorKind(str, Enum):
    """Known auth failure classes, derived from the remote message text."""

    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    USER_NOT_FOUND = "user_not_found"
    RATE_LIMITED = "rate_limited"
    ALREADY_REGISTERED = "already_registered"
    WEAK_PASSWORD = "weak_password"
    INVALID_EMAIL = "invalid_email"
    UNKNOWN = "unknown"


# Substring → kind. Checked in order; first match wins.
_KIND_MARKERS: Tuple[Tuple[str, AuthErrorKind], ...] = (
    ("Invalid login credentials", AuthErrorKind.INVALID_CREDENTIALS),
    ("Email not confirmed", AuthErrorKind.EMAIL_NOT_CONFIRMED),
    ("User not found", AuthErrorKind.USER_NOT_FOUND),
    ("Too many requests", AuthErrorKind.RATE_LIMITED),
    ("User already registered", AuthErrorKind.ALREADY_REGISTERED),
    ("Password should be at least", AuthErrorKind.WEAK_PASSWORD),
    ("Invalid email", AuthErrorKind.INVALID_EMAIL),
    ("Unable to validate email", AuthErrorKind.INVALID_EMAIL),
)


def classify_auth_message(message: str) -> AuthErrorKind:
    for marker, kind in _KIND_MARKERS:
        if marker in message:
            return kind
    return AuthErrorKind.UNKNOWN


@dataclass(frozen=True)
class AuthFailure:
    """An error the auth service reported, in its `{message}` shape."""

    message: str
    kind: AuthErrorKind = AuthErrorKind.UNKNOWN

    @classmethod
    def from_message(cls, message: Optional[str]) -> "AuthFailure":
        text = message or ""
        return cls(message=text, kind=classify_auth_message(text))


@dataclass(frozen=True)
class AuthReply:
    """
    Result of sign-in / sign-up as the remote reported it.

    identity:    the user in the reply (may be set even without a session,
                 e.g. sign-up awaiting email confirmation)
    has_session: whether the reply carried an active session
    error:       set when the auth service rejected the request
    """

    identity: Optional[Identity] = None
    has_session: bool = False
    error: Optional[AuthFailure] = None


SessionCallback = Callable[[Optional[Identity]], None]


class RemoteSubscription(ABC):
    """Handle for a session-change subscription on the remote client."""

    @abstractmethod
    def unsubscribe(self) -> None:
        ...


class RemoteClient(ABC):
    """
    Abstract interface to the backend-as-a-service.

    One instance per AppContext: the remote auth client keeps the signed-in
    session, so instances are never shared between browser sessions.
    """

    # ── Auth ──────────────────────────────────────────────────────────────

    @abstractmethod
    async def get_session(self) -> Optional[Identity]:
        """Identity of the current session, or None when signed out."""
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthReply:
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthReply:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...

    @abstractmethod
    def on_session_change(self, callback: SessionCallback) -> RemoteSubscription:
        """
        Register `callback` for session-change pushes (token refresh, sign-in
        elsewhere, expiry). It receives the new identity, or None.
        """
        ...

    # ── Notes table ───────────────────────────────────────────────────────

    @abstractmethod
    async def select_notes(self, user_id: str) -> List[Dict[str, Any]]:
        """All rows owned by `user_id`, ordered by created_at descending."""
        ...

    @abstractmethod
    async def insert_note(self, user_id: str, title: str, content: str) -> None:
        ...

    @abstractmethod
    async def update_note(self, note_id: str, title: str, content: str) -> None:
        ...

    @abstractmethod
    async def delete_note(self, note_id: str) -> None:
        ...

    async def close(self) -> None:
        """Release client resources. Default: nothing to release."""
        return None
