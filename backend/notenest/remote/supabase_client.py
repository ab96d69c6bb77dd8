"""
NoteNest — Supabase Remote Client
===================================

What:  RemoteClient implementation on top of the supabase async SDK.
Why:   Supabase provides auth, sessions and the `notes` table; the app only
       consumes its public request/response contract.
How:   Each instance owns its own `AsyncClient` (created with the anon key),
       so the SDK's in-memory session storage is per browser session and
       PostgREST requests carry that user's JWT for row-level security.
Who:   Created by ContextRegistry for every new AppContext.

Lifecycle:
    close() cancels the auth token refresh timer and closes the auth and
    PostgREST httpx clients. AppContext calls it on logout, idle eviction and
    shutdown.

Error translation:
    AuthError (any auth-service rejection)  → AuthReply.error (returned, not raised)
    postgrest APIError (table rejection)    → RemoteError (raised)
    anything else (httpx transport errors)  → propagates unchanged
"""

import logging
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthError, acreate_client

from notenest.config import settings
from notenest.exceptions import RemoteError
from notenest.models.note import Identity
from notenest.remote.base import (
    AuthFailure,
    AuthReply,
    RemoteClient,
    RemoteSubscription,
    SessionCallback,
)

logger = logging.getLogger(__name__)


class SupabaseSubscription(RemoteSubscription):
    """Wraps the SDK's Subscription so callers only see `unsubscribe()`."""

    def __init__(self, subscription: Any):
        self._subscription = subscription

    def unsubscribe(self) -> None:
        self._subscription.unsubscribe()


class SupabaseRemoteClient(RemoteClient):
    """
    Supabase-backed remote client for one browser session.

    Table shape (`notes`):
        id uuid pk, user_id uuid, title text, content text,
        created_at timestamptz default now(), updated_at timestamptz null
    """

    def __init__(self, client: AsyncClient, notes_table: str = "notes"):
        self._client = client
        self._table = notes_table

    @classmethod
    async def create(cls, url: str, key: str, notes_table: str = "notes") -> "SupabaseRemoteClient":
        client = await acreate_client(url, key)
        return cls(client, notes_table=notes_table)

    # ── Auth ──────────────────────────────────────────────────────────────

    async def get_session(self) -> Optional[Identity]:
        session = await self._client.auth.get_session()
        if session is None:
            return None
        return Identity.from_user(session.user)

    async def sign_in(self, email: str, password: str) -> AuthReply:
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            logger.info("Sign-in rejected by auth service: %s", e.message)
            return AuthReply(error=AuthFailure.from_message(e.message))
        return self._to_reply(response)

    async def sign_up(self, email: str, password: str) -> AuthReply:
        try:
            response = await self._client.auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            logger.info("Sign-up rejected by auth service: %s", e.message)
            return AuthReply(error=AuthFailure.from_message(e.message))
        return self._to_reply(response)

    async def sign_out(self) -> None:
        await self._client.auth.sign_out()

    def on_session_change(self, callback: SessionCallback) -> RemoteSubscription:
        def _listener(event: Any, session: Any) -> None:
            identity = Identity.from_user(session.user) if session is not None else None
            logger.debug("Auth state change %s (signed_in=%s)", event, identity is not None)
            callback(identity)

        return SupabaseSubscription(self._client.auth.on_auth_state_change(_listener))

    async def close(self) -> None:
        """
        Release the SDK client: stop the token auto-refresh timer and close
        the httpx clients behind auth and PostgREST.

        The SDK exposes no public way to stop the timer, which re-arms itself
        after every refresh.
        """
        auth = self._client.auth
        timer = getattr(auth, "_refresh_token_timer", None)
        if timer is not None:
            timer.cancel()
            auth._refresh_token_timer = None
        await auth.close()

        # PostgREST is created lazily; only close it if a query built it.
        postgrest = getattr(self._client, "_postgrest", None)
        if postgrest is not None:
            await postgrest.aclose()
        logger.debug("Supabase client closed")

    @staticmethod
    def _to_reply(response: Any) -> AuthReply:
        return AuthReply(
            identity=Identity.from_user(response.user),
            has_session=response.session is not None,
        )

    # ── Notes table ───────────────────────────────────────────────────────

    async def select_notes(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            response = await (
                self._client.table(self._table)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as e:
            raise self._remote_error(e, "select")
        return list(response.data or [])

    async def insert_note(self, user_id: str, title: str, content: str) -> None:
        try:
            await (
                self._client.table(self._table)
                .insert({"title": title, "content": content, "user_id": user_id})
                .execute()
            )
        except APIError as e:
            raise self._remote_error(e, "insert")

    async def update_note(self, note_id: str, title: str, content: str) -> None:
        try:
            await (
                self._client.table(self._table)
                .update({"title": title, "content": content})
                .eq("id", note_id)
                .execute()
            )
        except APIError as e:
            raise self._remote_error(e, "update")

    async def delete_note(self, note_id: str) -> None:
        try:
            await self._client.table(self._table).delete().eq("id", note_id).execute()
        except APIError as e:
            raise self._remote_error(e, "delete")

    @staticmethod
    def _remote_error(e: APIError, operation: str) -> RemoteError:
        message = getattr(e, "message", None) or str(e)
        logger.warning("Notes %s failed: %s (code=%s)", operation, message, getattr(e, "code", None))
        return RemoteError(
            message=message,
            operation=operation,
            context={"code": getattr(e, "code", None)},
        )


async def create_supabase_remote() -> SupabaseRemoteClient:
    """Default remote factory used by the context registry."""
    return await SupabaseRemoteClient.create(
        settings.supabase_url,
        settings.supabase_anon_key,
        notes_table=settings.notes_table,
    )
