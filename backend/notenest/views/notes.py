"""
NoteNest — Notes Dashboard View State
=======================================

What:  Everything the dashboard shows beyond the notes themselves: search text,
       grid/list mode, the create and edit modals, stats and empty-state copy.
Why:   These are pure functions of user input plus the note cache; the only
       remote work happens when the user confirms an action, and that is
       delegated to NoteCollection / SessionStore.
How:   Read paths (page, visible_notes, stats) never mutate the cache and only
       show it when it was loaded for the signed-in identity.
       Confirm paths (save_draft, save_edit, delete_note) call the cache, which
       reloads itself afterwards. On failure the modal stays open with its
       buffer intact and `error` explains what happened.

Error handling per action:
    ValidationError   → inline message, no remote call was made
    StaleCacheError   → write done, modal closes, message says the list is stale
    NoteNestError     → its message (RemoteError carries the remote text verbatim)
    anything else     → "An unexpected error occurred", logged with traceback
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional

from notenest.exceptions import NoteNestError, NotFoundError, StaleCacheError
from notenest.messages import UNEXPECTED_ERROR
from notenest.models.note import Identity, Note
from notenest.schemas.pages import (
    EmptyState,
    NoteBuffer,
    NoteCard,
    NotesPage,
    NotesStats,
    ViewMode,
)
from notenest.services.note_cache import NoteCollection
from notenest.services.session_store import SessionStore
from notenest.views.base import View

logger = logging.getLogger(__name__)

SIGNED_OUT_MESSAGE = "Sign in to access your notes"


def _utc(value: datetime) -> datetime:
    # Naive timestamps from the backend are UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def format_relative(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Human-friendly age of a timestamp.

    < 1 minute → "Just now", < 1 hour → "Nm ago", < 1 day → "Nh ago",
    < 7 days → "Nd ago", otherwise M/D/YYYY. Missing timestamps read "Just now".
    """
    if value is None:
        return "Just now"
    value = _utc(value)
    now = _utc(now) if now is not None else datetime.now(timezone.utc)
    seconds = (now - value).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return f"{value.month}/{value.day}/{value.year}"


class NotesView(View):
    name = "notes"

    def __init__(self, session: SessionStore, notes: NoteCollection):
        super().__init__()
        self.session = session
        self.notes = notes
        self.search_query = ""
        self.view_mode: ViewMode = "grid"
        self.is_creating = False
        self.draft = NoteBuffer()
        self.editing: Optional[NoteBuffer] = None
        self.error = ""
        self.redirect_to: Optional[str] = None

    async def mount(self) -> None:
        await super().mount()
        await self.sync()

    @property
    def identity(self) -> Optional[Identity]:
        return self.session.identity

    async def sync(self) -> None:
        """Reload the cache if it was loaded for someone else (or never)."""
        identity = self.identity
        if identity is None:
            if self.notes.owner is not None:
                self.notes.clear()
            return
        if not self.notes.loaded or self.notes.owner != identity:
            await self._run(lambda: self.notes.refresh(identity), "refresh")

    # ── Search & layout ───────────────────────────────────────────────────

    def set_search(self, query: str) -> None:
        self.search_query = query

    def toggle_view_mode(self) -> ViewMode:
        self.view_mode = "list" if self.view_mode == "grid" else "grid"
        return self.view_mode

    def visible_notes(self) -> List[Note]:
        if not self.notes.owned_by(self.identity):
            return []
        return self.notes.search(self.search_query)

    # ── Create modal ──────────────────────────────────────────────────────

    def open_create(self) -> None:
        self.is_creating = True
        self.error = ""

    def update_draft(self, title: Optional[str] = None, content: Optional[str] = None) -> None:
        self.open_create()
        if title is not None:
            self.draft.title = title
        if content is not None:
            self.draft.content = content

    def cancel_create(self) -> None:
        self.is_creating = False
        self.draft = NoteBuffer()
        self.error = ""

    @property
    def can_save_draft(self) -> bool:
        return bool(self.draft.title.strip() or self.draft.content.strip())

    async def save_draft(self) -> bool:
        draft = self.draft
        ok = await self._run(
            lambda: self.notes.create(self.identity, draft.title, draft.content),
            "create",
        )
        if ok:
            self.draft = NoteBuffer()
            self.is_creating = False
        return ok

    # ── Edit modal ────────────────────────────────────────────────────────

    def start_edit(self, note_id: str) -> NoteBuffer:
        note = self._own_note(note_id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        self.editing = NoteBuffer(id=note.id, title=note.title, content=note.content)
        self.error = ""
        return self.editing

    def update_edit(self, title: Optional[str] = None, content: Optional[str] = None) -> NoteBuffer:
        if self.editing is None:
            raise NotFoundError(resource="note being edited")
        if title is not None:
            self.editing.title = title
        if content is not None:
            self.editing.content = content
        return self.editing

    def cancel_edit(self) -> None:
        self.editing = None
        self.error = ""

    async def save_edit(self) -> bool:
        if self.editing is None:
            raise NotFoundError(resource="note being edited")
        original = self._own_note(self.editing.id)
        if original is None:
            raise NotFoundError(resource="note", resource_id=self.editing.id)
        edited = original.model_copy(
            update={"title": self.editing.title, "content": self.editing.content}
        )
        ok = await self._run(lambda: self.notes.update(self.identity, edited), "update")
        if ok:
            self.editing = None
        return ok

    # ── Delete & sign-out ─────────────────────────────────────────────────

    async def delete_note(self, note_id: str) -> bool:
        return await self._run(lambda: self.notes.delete(self.identity, note_id), "delete")

    async def sign_out(self) -> None:
        await self.session.sign_out()
        self.notes.clear()
        self.redirect_to = "/"

    # ── Derived display state ─────────────────────────────────────────────

    def stats(self, now: Optional[datetime] = None) -> NotesStats:
        now = _utc(now) if now is not None else datetime.now(timezone.utc)
        week_ago = now - timedelta(days=7)
        cached = self.notes.notes if self.notes.owned_by(self.identity) else ()
        return NotesStats(
            total=len(cached),
            this_week=sum(1 for n in cached if _utc(n.created_at) > week_ago),
        )

    def empty_state(self) -> Optional[EmptyState]:
        if self.visible_notes():
            return None
        if self.search_query:
            return EmptyState(title="No notes found", hint="Try a different search term", show_create=False)
        return EmptyState(title="No notes yet", hint="Create your first note to get started", show_create=True)

    @staticmethod
    def display_title(note: Note) -> str:
        return note.title if note.title.strip() else "Untitled"

    @staticmethod
    def display_content(note: Note) -> str:
        return note.content if note.content.strip() else "No content"

    def card(self, note: Note, now: Optional[datetime] = None) -> NoteCard:
        return NoteCard(
            id=note.id,
            title=note.title,
            content=note.content,
            display_title=self.display_title(note),
            display_content=self.display_content(note),
            created_at=note.created_at,
            updated_at=note.updated_at,
            relative_time=format_relative(note.updated_at or note.created_at, now),
        )

    def page(self, now: Optional[datetime] = None) -> NotesPage:
        identity = self.identity
        if identity is None:
            return NotesPage(signed_in=False, message=SIGNED_OUT_MESSAGE, redirect_to=self.redirect_to)
        return NotesPage(
            signed_in=True,
            email=identity.email,
            notes=[self.card(n, now) for n in self.visible_notes()],
            search_query=self.search_query,
            view_mode=self.view_mode,
            stats=self.stats(now),
            empty_state=self.empty_state(),
            is_creating=self.is_creating,
            draft=self.draft.model_copy(),
            can_save_draft=self.can_save_draft,
            editing=self.editing.model_copy() if self.editing is not None else None,
            error=self.error,
            redirect_to=self.redirect_to,
        )

    # ── internals ─────────────────────────────────────────────────────────

    def _own_note(self, note_id: str) -> Optional[Note]:
        if not self.notes.owned_by(self.identity):
            return None
        return self.notes.get(note_id)

    async def _run(self, action: Callable[[], Awaitable[object]], label: str) -> bool:
        """
        Run a confirmed action; True once the write reached the server.

        A StaleCacheError still counts as done: the modal closes and `error`
        says the list could not be reloaded.
        """
        self.error = ""
        try:
            await action()
        except StaleCacheError as e:
            self.error = e.message
            return True
        except NoteNestError as e:
            logger.info("Note %s failed: %s", label, e.message)
            self.error = e.message
            return False
        except Exception:
            logger.error("Unexpected error during note %s", label, exc_info=True)
            self.error = UNEXPECTED_ERROR
            return False
        return True
