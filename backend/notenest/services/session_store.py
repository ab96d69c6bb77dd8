"""
NoteNest — Session Store
==========================

What:  Holds the signed-in identity for one AppContext.
Why:   Every page reads "who is signed in"; only this class may change it.
How:   Delegates auth calls to the RemoteClient, updates identity from their
       results and from session-change pushes, and notifies local listeners.
Who:   Owned by AppContext; read by view controllers and the notes cache.

State machine:
    Unauthenticated ──sign_in / sign_up (with session)──▶ Authenticated
    Authenticated ──sign_out / expiry push──▶ Unauthenticated

Result contract:
    sign_in and sign_up return an AuthResult with a tri-state AuthStatus:
        VERIFIED            the remote returned a session; identity is set
        NEEDS_VERIFICATION  sign-up created a user but no session exists yet
        ERROR               the auth service rejected the request (see `error`)
    Transport failures are NOT folded into ERROR: they propagate so the caller
    can report them as unexpected.

Listener contract:
    Listeners are called synchronously on the event loop with the new identity.
    They must be idempotent and must not do anything beyond reacting to the
    identity value (no remote calls, no writes back into the store).
"""

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from notenest.models.note import Identity
from notenest.remote.base import AuthFailure, AuthReply, RemoteClient, RemoteSubscription

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], None]


class AuthStatus(str, Enum):
    VERIFIED = "verified"
    NEEDS_VERIFICATION = "needs_verification"
    ERROR = "error"


@dataclass(frozen=True)
class AuthResult:
    status: AuthStatus
    error: Optional[AuthFailure] = None

    @property
    def ok(self) -> bool:
        return self.status is not AuthStatus.ERROR

    @property
    def needs_verification(self) -> bool:
        return self.status is AuthStatus.NEEDS_VERIFICATION


class Subscription:
    """Cancellation handle returned by SessionStore.subscribe()."""

    def __init__(self, store: "SessionStore", token: int):
        self._store = store
        self._token = token
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self._store._remove_listener(self._token)
            self.active = False


class SessionStore:
    """Single writer of the current identity."""

    def __init__(self, remote: RemoteClient):
        self._remote = remote
        self._identity: Optional[Identity] = None
        self._listeners: Dict[int, IdentityListener] = {}
        self._tokens = itertools.count()
        self._remote_subscription: Optional[RemoteSubscription] = None

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    async def initialize(self) -> None:
        """
        Load the current session and start listening for session pushes.

        Safe to call twice: the remote subscription is only registered once.
        """
        self._set_identity(await self._remote.get_session())
        if self._remote_subscription is None:
            self._remote_subscription = self._remote.on_session_change(self._set_identity)
        logger.debug("Session store initialized (signed_in=%s)", self.is_authenticated)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        reply = await self._remote.sign_in(email, password)
        if reply.error is not None:
            return AuthResult(AuthStatus.ERROR, error=reply.error)
        if reply.identity is not None:
            self._set_identity(reply.identity)
        return AuthResult(AuthStatus.VERIFIED)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        reply: AuthReply = await self._remote.sign_up(email, password)
        if reply.error is not None:
            return AuthResult(AuthStatus.ERROR, error=reply.error)
        if reply.identity is not None and reply.has_session:
            self._set_identity(reply.identity)
            return AuthResult(AuthStatus.VERIFIED)
        return AuthResult(AuthStatus.NEEDS_VERIFICATION)

    async def sign_out(self) -> None:
        """Sign out remotely; local identity is cleared even if that fails."""
        try:
            await self._remote.sign_out()
        except Exception:
            logger.warning("Remote sign-out failed; clearing local session anyway", exc_info=True)
        finally:
            self._set_identity(None)

    def subscribe(self, listener: IdentityListener) -> Subscription:
        # One token per registration; the same callable may be registered twice.
        token = next(self._tokens)
        self._listeners[token] = listener
        return Subscription(self, token)

    def close(self) -> None:
        if self._remote_subscription is not None:
            self._remote_subscription.unsubscribe()
            self._remote_subscription = None
        self._listeners.clear()

    # ── internals ─────────────────────────────────────────────────────────

    def _remove_listener(self, token: int) -> None:
        self._listeners.pop(token, None)

    def _set_identity(self, identity: Optional[Identity]) -> None:
        if identity == self._identity:
            return
        self._identity = identity
        for listener in list(self._listeners.values()):
            listener(identity)
