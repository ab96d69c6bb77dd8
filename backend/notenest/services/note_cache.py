"""
NoteNest — Note Collection Cache
==================================

What:  In-memory mirror of the signed-in user's notes.
Why:   The notes page filters, counts and renders from this list without a
       round trip per keystroke.
How:   refresh() replaces the list wholesale from the remote table. Every
       mutation goes through _mutate_then_reload(): await the write, then
       re-fetch. The cache is never patched locally.
Who:   Owned by AppContext; NotesView is the only caller of the mutators.

Consistency policy (mutate-then-reload):
    Reloading after each write costs one extra request, but the cache then
    always carries server-computed fields (ids, created_at, updated_at) and
    can never drift from the table. An incremental patch would only need to
    replace _mutate_then_reload.

    ┌──────────┐     ┌──────────────┐     ┌──────────────┐
    │  write   │────▶│ await result │────▶│  refresh()   │
    └──────────┘     └──────────────┘     └──────────────┘
         (insert / update / delete)        (select * order by created_at desc)

    A failed write raises its own error and nothing is reloaded. A failed
    reload after a successful write raises StaleCacheError: the action is
    done and must not be repeated.
"""

import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from notenest.exceptions import AuthRequiredError, NoteNestError, StaleCacheError, ValidationError
from notenest.models.note import Identity, Note
from notenest.remote.base import RemoteClient

logger = logging.getLogger(__name__)


class NoteCollection:
    """Notes of one identity, newest first."""

    def __init__(self, remote: RemoteClient):
        self._remote = remote
        self._notes: List[Note] = []
        self._owner: Optional[Identity] = None
        self._loaded = False

    @property
    def notes(self) -> Sequence[Note]:
        return tuple(self._notes)

    @property
    def owner(self) -> Optional[Identity]:
        """Identity the cache was last loaded for (None if never loaded or cleared)."""
        return self._owner

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._notes)

    def owned_by(self, identity: Optional[Identity]) -> bool:
        return identity is not None and self._owner == identity

    def get(self, note_id: str) -> Optional[Note]:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    async def refresh(self, identity: Optional[Identity]) -> Sequence[Note]:
        """
        Replace the cache with the remote rows owned by `identity`.

        With no identity the cache is emptied and the remote is not queried.
        Rows cached for a different identity are dropped before the query, so
        a failed load never leaves another user's notes behind. On a remote
        error for the same identity the previous cache is kept and the error
        propagates.
        """
        if identity is None:
            self.clear()
            return self.notes
        if self._owner is not None and self._owner != identity:
            self.clear()

        rows = await self._remote.select_notes(identity.user_id)
        notes = [Note.model_validate(row) for row in rows]
        # The remote orders by created_at desc already; sorting again keeps the
        # invariant even if a backend ignores the order clause. sorted() is stable.
        notes = sorted(notes, key=lambda n: n.created_at, reverse=True)

        self._notes = notes
        self._owner = identity
        self._loaded = True
        logger.debug("Loaded %d notes for user %s", len(notes), identity.user_id)
        return self.notes

    async def create(self, identity: Optional[Identity], title: str, content: str) -> Sequence[Note]:
        if not title.strip() and not content.strip():
            raise ValidationError(message="A note needs a title or some content", field="title")
        owner = self._require(identity)
        return await self._mutate_then_reload(
            owner,
            lambda: self._remote.insert_note(owner.user_id, title, content),
            "create",
        )

    async def update(self, identity: Optional[Identity], note: Note) -> Sequence[Note]:
        owner = self._require(identity)
        return await self._mutate_then_reload(
            owner,
            lambda: self._remote.update_note(note.id, note.title, note.content),
            "update",
        )

    async def delete(self, identity: Optional[Identity], note_id: str) -> Sequence[Note]:
        owner = self._require(identity)
        return await self._mutate_then_reload(
            owner,
            lambda: self._remote.delete_note(note_id),
            "delete",
        )

    def search(self, query: str) -> List[Note]:
        """Case-insensitive substring match over title or content, in cache order."""
        if not query:
            return list(self._notes)
        needle = query.lower()
        return [
            note for note in self._notes
            if needle in note.title.lower() or needle in note.content.lower()
        ]

    def clear(self) -> None:
        self._notes = []
        self._owner = None
        self._loaded = False

    # ── internals ─────────────────────────────────────────────────────────

    @staticmethod
    def _require(identity: Optional[Identity]) -> Identity:
        if identity is None:
            raise AuthRequiredError()
        return identity

    async def _mutate_then_reload(
        self,
        identity: Identity,
        mutation: Callable[[], Awaitable[None]],
        action: str,
    ) -> Sequence[Note]:
        await mutation()
        logger.info("Note %s completed for user %s; reloading", action, identity.user_id)
        try:
            return await self.refresh(identity)
        except Exception as e:
            # The write is on the server; the next sync retries the load.
            self._loaded = False
            cause = e.message if isinstance(e, NoteNestError) else type(e).__name__
            logger.warning(
                "Note %s saved for user %s but reload failed: %s", action, identity.user_id, cause
            )
            raise StaleCacheError(action=action, cause=cause) from e
