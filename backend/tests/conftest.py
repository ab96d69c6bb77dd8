"""
NoteNest Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the whole suite.
Why:   Every layer talks to Supabase only through RemoteClient, so one
       in-memory fake (tests/fakes.py) drives the session store, the note
       cache, the views and the HTTP routes without network access.

Fixture Hierarchy:
    backend          → FakeBackend with user alice@example.com / correct-horse
    fake_remote      → FakeRemote on that backend
    session_store    → SessionStore(fake_remote)
    note_collection  → NoteCollection(fake_remote)
    alice            → Identity of the seeded user
    app              → create_app() whose registry builds FakeRemotes on `backend`
    test_client      → HTTPX AsyncClient over ASGITransport
"""

import os
from typing import List

# Settings are read at import time; override before any notenest import.
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["TESTIMONIAL_INTERVAL_SECONDS"] = "60"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fakes import ALICE_EMAIL, ALICE_PASSWORD, FakeBackend, FakeRemote
from notenest.models.note import Identity
from notenest.services.note_cache import NoteCollection
from notenest.services.session_store import SessionStore


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    fake.add_user(ALICE_EMAIL, ALICE_PASSWORD)
    return fake


@pytest.fixture
def alice(backend) -> Identity:
    return backend.users[ALICE_EMAIL]["identity"]


@pytest.fixture
def fake_remote(backend) -> FakeRemote:
    return FakeRemote(backend)


@pytest.fixture
def session_store(fake_remote) -> SessionStore:
    return SessionStore(fake_remote)


@pytest.fixture
def note_collection(fake_remote) -> NoteCollection:
    return NoteCollection(fake_remote)


@pytest_asyncio.fixture
async def signed_in_store(session_store) -> SessionStore:
    await session_store.initialize()
    await session_store.sign_in(ALICE_EMAIL, ALICE_PASSWORD)
    return session_store


@pytest_asyncio.fixture
async def app(backend):
    """
    Application whose registry builds one FakeRemote per browser session.

    The remotes created are kept on `app.state.fake_remotes` for assertions.
    """
    from notenest.main import create_app

    remotes: List[FakeRemote] = []

    async def factory() -> FakeRemote:
        remote = FakeRemote(backend)
        remotes.append(remote)
        return remote

    application = create_app(remote_factory=factory)
    application.state.fake_remotes = remotes
    yield application
    await application.state.contexts.close_all()


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    The client's cookie jar carries the session cookie between requests,
    like a browser would.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
