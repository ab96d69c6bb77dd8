"""
NoteNest — Application Context & Registry
===========================================

What:  AppContext is the root of one browser session's state. ContextRegistry
       keeps one AppContext per session cookie.
Why:   Session identity and the note cache must be shared by every page of one
       user, and must never leak between users. Building them once per browser
       session and passing them by reference avoids module-level singletons.
How:   A FastAPI dependency (get_app_context) reads the session cookie, asks
       the registry for the matching context (creating and initializing one
       on first contact) and injects it into route handlers.

Ownership:
    AppContext
    ├── remote:  RemoteClient     (one per context: it holds the auth session)
    ├── session: SessionStore     (sole writer of identity)
    ├── notes:   NoteCollection   (sole writer of the cache)
    └── view:    current View     (replaced on navigation)

Lifecycle:
    created   → first request without a known cookie
    touched   → every request
    discarded → sign-out, idle timeout, or application shutdown
"""

import logging
import secrets
import time
from typing import Awaitable, Callable, Dict, Optional, Tuple, Type, TypeVar

from fastapi import Request, Response

from notenest.config import settings
from notenest.models.note import Identity
from notenest.remote.base import RemoteClient
from notenest.services.note_cache import NoteCollection
from notenest.services.session_store import SessionStore, Subscription
from notenest.views import HomeView, LoginView, NotesView, RegisterView, View

logger = logging.getLogger(__name__)

RemoteFactory = Callable[[], Awaitable[RemoteClient]]
V = TypeVar("V", bound=View)


class AppContext:
    """State root for one browser session."""

    def __init__(self, remote: RemoteClient, testimonial_interval: float = 5.0, label: str = ""):
        self.remote = remote
        self.session = SessionStore(remote)
        self.notes = NoteCollection(remote)
        self.view: Optional[View] = None
        self.testimonial_interval = testimonial_interval
        self.label = label
        self.touched_at = time.monotonic()
        self._identity_subscription: Optional[Subscription] = None

    async def start(self) -> None:
        await self.session.initialize()
        self._identity_subscription = self.session.subscribe(self._log_identity_change)

    def touch(self) -> None:
        self.touched_at = time.monotonic()

    def _log_identity_change(self, identity: Optional[Identity]) -> None:
        if identity is None:
            logger.info("Context %s signed out", self.label)
        else:
            logger.info("Context %s signed in as user %s", self.label, identity.user_id)

    # ── Navigation ────────────────────────────────────────────────────────

    def _build(self, view_cls: Type[View]) -> View:
        if view_cls is HomeView:
            return HomeView(self.session, interval=self.testimonial_interval)
        if view_cls is NotesView:
            return NotesView(self.session, self.notes)
        if view_cls in (LoginView, RegisterView):
            return view_cls(self.session)
        raise ValueError(f"Unknown view {view_cls!r}")

    async def navigate(self, view_cls: Type[V]) -> V:
        """
        Make `view_cls` the current page.

        Staying on the same page keeps its state (drafts, search text).
        Moving to another page closes the old view, so its state resets.
        """
        if isinstance(self.view, view_cls):
            return self.view
        if self.view is not None:
            self.view.close()
        view = self._build(view_cls)
        self.view = view
        await view.mount()
        return view  # type: ignore[return-value]

    async def close(self) -> None:
        if self.view is not None:
            self.view.close()
            self.view = None
        if self._identity_subscription is not None:
            self._identity_subscription.cancel()
            self._identity_subscription = None
        self.session.close()
        await self.remote.close()


class ContextRegistry:
    """
    Session-cookie → AppContext map.

    Idle contexts are evicted lazily on each lookup, the same sweep-on-access
    approach the auth rate limiter uses for stale IP entries.
    """

    def __init__(
        self,
        remote_factory: RemoteFactory,
        idle_seconds: int = 3600,
        testimonial_interval: float = 5.0,
    ):
        self.remote_factory = remote_factory
        self.idle_seconds = idle_seconds
        self.testimonial_interval = testimonial_interval
        self._contexts: Dict[str, AppContext] = {}

    def __len__(self) -> int:
        return len(self._contexts)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._contexts

    async def get_or_create(self, session_id: Optional[str]) -> Tuple[str, AppContext, bool]:
        """
        Returns (session_id, context, created).

        Unknown or missing ids (e.g. after a server restart) get a fresh id.
        """
        await self.evict_idle()

        if session_id and session_id in self._contexts:
            context = self._contexts[session_id]
            context.touch()
            return session_id, context, False

        new_id = secrets.token_urlsafe(32)
        remote = await self.remote_factory()
        context = AppContext(remote, testimonial_interval=self.testimonial_interval, label=new_id[:8])
        await context.start()
        self._contexts[new_id] = context
        logger.info("Created context %s (%d active)", context.label, len(self._contexts))
        return new_id, context, True

    async def discard(self, session_id: str) -> None:
        context = self._contexts.pop(session_id, None)
        if context is not None:
            await context.close()
            logger.info("Discarded context %s (%d active)", context.label, len(self._contexts))

    async def evict_idle(self, now: Optional[float] = None) -> int:
        now = time.monotonic() if now is None else now
        stale = [
            sid for sid, ctx in self._contexts.items()
            if now - ctx.touched_at > self.idle_seconds
        ]
        for sid in stale:
            await self.discard(sid)
        if stale:
            logger.debug("Evicted %d idle contexts", len(stale))
        return len(stale)

    async def close_all(self) -> None:
        for sid in list(self._contexts):
            await self.discard(sid)


# ── FastAPI Dependency ────────────────────────────────────────────────────
async def get_app_context(request: Request, response: Response) -> AppContext:
    """
    Resolve the caller's AppContext from the session cookie.

    A new context sets the cookie on the outgoing response. The session id is
    also stored on request.state so sign-out can discard the context.
    """
    registry: ContextRegistry = request.app.state.contexts
    cookie = request.cookies.get(settings.session_cookie_name)
    session_id, context, created = await registry.get_or_create(cookie)
    if created:
        response.set_cookie(
            key=settings.session_cookie_name,
            value=session_id,
            httponly=True,
            samesite="lax",
            secure=settings.session_cookie_secure,
            max_age=settings.context_idle_seconds,
        )
    request.state.session_id = session_id
    return context
