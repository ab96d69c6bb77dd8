"""
NoteNest Backend — View Controller Tests
==========================================

What we test:
    ✅ HomeView: carousel wrap-around, timer starts on mount and stops on close
    ✅ LoginView: local validation, translated errors, success redirect
    ✅ RegisterView: password checks, validation order, tri-state outcomes
    ✅ NotesView: modals, inline errors, stats, empty states, sign-out
    ✅ NotesView: only shows a cache loaded for the signed-in identity; a write
       whose reload fails still closes its modal
    ✅ format_relative(): every bucket of the relative-time label
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from notenest.exceptions import NotFoundError, RemoteError, StaleCacheError
from notenest.messages import UNEXPECTED_ERROR
from notenest.services.session_store import AuthStatus
from notenest.views import HomeView, LoginView, NotesView, RegisterView
from notenest.views.base import View
from notenest.views.home import TESTIMONIALS
from notenest.views.notes import SIGNED_OUT_MESSAGE, format_relative
from fakes import ALICE_EMAIL, ALICE_PASSWORD

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Home
# ══════════════════════════════════════════════════════════════════════════

class TestHomeView:
    def test_carousel_wraps_both_ways(self, session_store):
        view = HomeView(session_store)

        view.previous_testimonial()
        assert view.testimonial_index == len(TESTIMONIALS) - 1

        view.next_testimonial()
        view.next_testimonial()
        assert view.testimonial_index == 1

    def test_page_reflects_state(self, session_store):
        view = HomeView(session_store)
        view.toggle_menu()

        page = view.page()

        assert page.menu_open is True
        assert page.signed_in is False
        assert page.testimonial == TESTIMONIALS[0]
        assert page.testimonial_count == 3
        assert len(page.features) == 3
        assert [s.step for s in page.steps] == ["01", "02", "03"]

    @pytest.mark.asyncio
    async def test_timer_advances_while_mounted(self, session_store):
        view = HomeView(session_store, interval=0.01)
        await view.mount()
        try:
            for _ in range(100):
                await asyncio.sleep(0.01)
                if view.testimonial_index != 0:
                    break
            assert view.testimonial_index != 0
        finally:
            view.close()

    @pytest.mark.asyncio
    async def test_close_stops_timer(self, session_store):
        view = HomeView(session_store, interval=0.01)
        await view.mount()
        assert view.rotating

        view.close()
        index = view.testimonial_index
        await asyncio.sleep(0.05)

        assert view.rotating is False
        assert view.testimonial_index == index


# ══════════════════════════════════════════════════════════════════════════
# Login
# ══════════════════════════════════════════════════════════════════════════

class TestLoginView:
    @pytest.mark.asyncio
    async def test_blank_fields_make_no_remote_call(self, session_store, backend):
        view = LoginView(session_store)

        ok = await view.submit("  ", "")

        assert ok is False
        assert view.error == "Please enter your email and password."
        assert "sign_in" not in backend.calls

    @pytest.mark.asyncio
    async def test_invalid_credentials_show_translated_message(self, session_store):
        view = LoginView(session_store)

        ok = await view.submit(ALICE_EMAIL, "wrong")

        assert ok is False
        assert view.error == "Invalid email or password. Please try again."
        assert session_store.identity is None
        assert view.redirect_to is None

    @pytest.mark.asyncio
    async def test_success_redirects_to_notes(self, session_store, alice):
        view = LoginView(session_store)

        ok = await view.submit(f"  {ALICE_EMAIL} ", ALICE_PASSWORD)

        assert ok is True
        assert session_store.identity == alice
        assert view.success == "Successfully signed in! Redirecting..."
        assert view.redirect_to == "/notes"
        assert view.password == ""
        assert view.is_loading is False

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic(self, session_store, backend):
        backend.fail["sign_in"] = ConnectionError("network down")
        view = LoginView(session_store)

        ok = await view.submit(ALICE_EMAIL, ALICE_PASSWORD)

        assert ok is False
        assert view.error == UNEXPECTED_ERROR
        assert view.is_loading is False

    def test_toggle_password(self, session_store):
        view = LoginView(session_store)
        view.toggle_password()
        assert view.page().show_password is True


# ══════════════════════════════════════════════════════════════════════════
# Register
# ══════════════════════════════════════════════════════════════════════════

class TestRegisterView:
    def test_password_checks(self, session_store):
        view = RegisterView(session_store)

        view.fill("Ann", "ann@example.com", "short", "short")
        assert view.password_checks.length is False
        assert view.password_checks.match is True

        view.fill("Ann", "ann@example.com", "longenough", "different1")
        assert view.password_checks.length is True
        assert view.password_checks.match is False

        view.fill("Ann", "ann@example.com", "", "")
        assert view.password_checks.match is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,email,password,confirm,message",
        [
            ("", "ann@example.com", "longenough", "longenough", "Please enter your name."),
            ("Ann", "not-an-email", "longenough", "longenough", "Please enter a valid email address."),
            ("Ann", "ann@example.com", "short", "short", "Password must be at least 8 characters long."),
            ("Ann", "ann@example.com", "longenough", "longenougH", "Passwords do not match."),
        ],
    )
    async def test_local_validation_blocks_remote_call(
        self, session_store, backend, name, email, password, confirm, message
    ):
        view = RegisterView(session_store)

        status = await view.submit(name, email, password, confirm)

        assert status is AuthStatus.ERROR
        assert view.error == message
        assert "sign_up" not in backend.calls

    @pytest.mark.asyncio
    async def test_needs_verification(self, session_store, backend):
        backend.confirm_email = True
        view = RegisterView(session_store)

        status = await view.submit("Ann", "ann@example.com", "longenough", "longenough")

        assert status is AuthStatus.NEEDS_VERIFICATION
        assert view.needs_verification is True
        assert view.success == "Account created! Please check your email to verify your account."
        assert view.redirect_to is None
        assert session_store.identity is None

    @pytest.mark.asyncio
    async def test_verified_redirects(self, session_store):
        view = RegisterView(session_store)

        status = await view.submit("Ann", "ann@example.com", "longenough", "longenough")

        assert status is AuthStatus.VERIFIED
        assert view.success == "Account created successfully! Redirecting..."
        assert view.redirect_to == "/notes"
        assert session_store.is_authenticated

    @pytest.mark.asyncio
    async def test_existing_account_message(self, session_store):
        view = RegisterView(session_store)

        await view.submit("Alice", ALICE_EMAIL, "longenough", "longenough")

        assert view.error == "An account with this email already exists. Please sign in instead."

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic(self, session_store, backend):
        backend.fail["sign_up"] = TimeoutError()
        view = RegisterView(session_store)

        status = await view.submit("Ann", "ann@example.com", "longenough", "longenough")

        assert status is AuthStatus.ERROR
        assert view.error == UNEXPECTED_ERROR


# ══════════════════════════════════════════════════════════════════════════
# Notes
# ══════════════════════════════════════════════════════════════════════════

class TestFormatRelative:
    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(seconds=30), "Just now"),
            (timedelta(minutes=5), "5m ago"),
            (timedelta(hours=3), "3h ago"),
            (timedelta(days=2), "2d ago"),
        ],
    )
    def test_buckets(self, delta, expected):
        assert format_relative(NOW - delta, NOW) == expected

    def test_older_than_a_week_is_a_date(self):
        assert format_relative(datetime(2023, 12, 25, tzinfo=timezone.utc), NOW) == "12/25/2023"

    def test_naive_timestamps_are_utc(self):
        assert format_relative(datetime(2024, 1, 15, 11, 0), NOW) == "1h ago"


@pytest.fixture
def notes_view(signed_in_store, note_collection):
    return NotesView(signed_in_store, note_collection)


class TestNotesView:
    @pytest.mark.asyncio
    async def test_signed_out_page(self, session_store, note_collection, backend):
        view = NotesView(session_store, note_collection)
        await view.mount()

        page = view.page(NOW)

        assert page.signed_in is False
        assert page.message == SIGNED_OUT_MESSAGE
        assert page.notes == []
        assert "select" not in backend.calls

    @pytest.mark.asyncio
    async def test_mount_loads_notes(self, notes_view, backend, alice):
        backend.add_row(alice.user_id, "existing", "body")

        await notes_view.mount()

        assert [c.title for c in notes_view.page(NOW).notes] == ["existing"]

    @pytest.mark.asyncio
    async def test_first_note_closes_modal(self, notes_view):
        await notes_view.mount()
        notes_view.update_draft(title="A", content="")
        assert notes_view.is_creating
        assert notes_view.can_save_draft

        ok = await notes_view.save_draft()

        page = notes_view.page(NOW)
        assert ok is True
        assert page.is_creating is False
        assert page.draft.title == ""
        assert [c.display_title for c in page.notes] == ["A"]
        assert page.notes[0].display_content == "No content"
        assert page.empty_state is None

    @pytest.mark.asyncio
    async def test_blank_draft_stays_open_with_message(self, notes_view, backend):
        await notes_view.mount()
        notes_view.update_draft(title="  ", content="")
        backend.calls.clear()

        ok = await notes_view.save_draft()

        assert ok is False
        assert notes_view.is_creating is True
        assert notes_view.can_save_draft is False
        assert notes_view.error == "A note needs a title or some content"
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_remote_failure_keeps_draft(self, notes_view, backend):
        await notes_view.mount()
        backend.fail["insert"] = RemoteError("JWT expired", operation="insert")
        notes_view.update_draft(title="keep me", content="body")

        ok = await notes_view.save_draft()

        assert ok is False
        assert notes_view.error == "JWT expired"
        assert notes_view.draft.title == "keep me"
        assert notes_view.is_creating is True

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_generic(self, notes_view, backend):
        await notes_view.mount()
        backend.fail["insert"] = ConnectionError("reset by peer")
        notes_view.update_draft(title="A")

        await notes_view.save_draft()

        assert notes_view.error == UNEXPECTED_ERROR

    @pytest.mark.asyncio
    async def test_cancel_create_resets_draft(self, notes_view):
        notes_view.update_draft(title="A", content="B")
        notes_view.cancel_create()
        assert notes_view.is_creating is False
        assert notes_view.draft.title == ""

    @pytest.mark.asyncio
    async def test_edit_flow(self, notes_view):
        await notes_view.mount()
        notes_view.update_draft(title="draft", content="v1")
        await notes_view.save_draft()
        note_id = notes_view.notes.notes[0].id

        buffer = notes_view.start_edit(note_id)
        assert buffer.title == "draft"
        notes_view.update_edit(title="final")
        ok = await notes_view.save_edit()

        assert ok is True
        assert notes_view.editing is None
        note = notes_view.notes.get(note_id)
        assert note.title == "final"
        assert note.content == "v1"

    @pytest.mark.asyncio
    async def test_start_edit_unknown_note(self, notes_view):
        await notes_view.mount()
        with pytest.raises(NotFoundError):
            notes_view.start_edit("missing")

    @pytest.mark.asyncio
    async def test_update_edit_without_edit_in_progress(self, notes_view):
        with pytest.raises(NotFoundError):
            notes_view.update_edit(title="x")

    @pytest.mark.asyncio
    async def test_deleting_only_note_shows_empty_state(self, notes_view):
        await notes_view.mount()
        notes_view.update_draft(title="A")
        await notes_view.save_draft()

        ok = await notes_view.delete_note(notes_view.notes.notes[0].id)

        empty = notes_view.page(NOW).empty_state
        assert ok is True
        assert empty.title == "No notes yet"
        assert empty.hint == "Create your first note to get started"
        assert empty.show_create is True

    @pytest.mark.asyncio
    async def test_search_without_results(self, notes_view):
        await notes_view.mount()
        notes_view.update_draft(title="Groceries")
        await notes_view.save_draft()

        notes_view.set_search("zzz")
        page = notes_view.page(NOW)

        assert page.notes == []
        assert page.empty_state.title == "No notes found"
        assert page.empty_state.show_create is False
        assert page.stats.total == 1

    @pytest.mark.asyncio
    async def test_stats_count_this_week(self, notes_view, backend, alice):
        backend.add_row(alice.user_id, "recent", "", created_at=NOW - timedelta(days=1))
        backend.add_row(alice.user_id, "old", "", created_at=NOW - timedelta(days=30))
        await notes_view.mount()

        stats = notes_view.stats(NOW)

        assert stats.total == 2
        assert stats.this_week == 1

    @pytest.mark.asyncio
    async def test_toggle_view_mode(self, notes_view):
        assert notes_view.toggle_view_mode() == "list"
        assert notes_view.toggle_view_mode() == "grid"

    @pytest.mark.asyncio
    async def test_sign_out_clears_cache_and_redirects(self, notes_view, backend):
        await notes_view.mount()
        notes_view.update_draft(title="A")
        await notes_view.save_draft()
        backend.fail["sign_out"] = ConnectionError("offline")

        await notes_view.sign_out()

        assert notes_view.identity is None
        assert len(notes_view.notes) == 0
        assert notes_view.redirect_to == "/"
        assert notes_view.page(NOW).signed_in is False

    @pytest.mark.asyncio
    async def test_sync_reloads_for_a_different_user(self, notes_view, note_collection, backend, alice):
        backend.add_row(alice.user_id, "alice note", "")
        await notes_view.mount()
        bob = backend.add_user("bob@example.com", "bobpassword")
        backend.add_row(bob.user_id, "bob note", "")

        await notes_view.session.sign_out()
        await notes_view.session.sign_in("bob@example.com", "bobpassword")
        await notes_view.sync()

        assert [n.title for n in note_collection.notes] == ["bob note"]

    @pytest.mark.asyncio
    async def test_refresh_failure_is_inline(self, notes_view, backend):
        backend.fail["select"] = RemoteError("service unavailable", operation="select")

        await notes_view.mount()

        assert notes_view.error == "service unavailable"
        assert notes_view.page(NOW).notes == []

    @pytest.mark.asyncio
    async def test_failed_reload_for_new_user_hides_previous_notes(self, notes_view, backend, alice):
        backend.add_row(alice.user_id, "alice secret", "")
        await notes_view.mount()
        bob = backend.add_user("bob@example.com", "bobpassword")
        backend.fail["select"] = RemoteError("timeout", operation="select")

        await notes_view.session.sign_in("bob@example.com", "bobpassword")
        await notes_view.sync()
        page = notes_view.page(NOW)

        assert page.email == bob.email
        assert page.notes == []
        assert page.stats.total == 0
        assert notes_view.error == "timeout"

    @pytest.mark.asyncio
    async def test_cache_of_another_user_is_never_shown(self, notes_view, backend, alice):
        row = backend.add_row(alice.user_id, "alice secret", "")
        await notes_view.mount()
        backend.add_user("bob@example.com", "bobpassword")

        # Identity changes without a sync in between.
        await notes_view.session.sign_in("bob@example.com", "bobpassword")

        assert notes_view.visible_notes() == []
        assert notes_view.stats(NOW).total == 0
        with pytest.raises(NotFoundError):
            notes_view.start_edit(row["id"])

    @pytest.mark.asyncio
    async def test_saved_draft_closes_even_when_reload_fails(self, notes_view, backend):
        await notes_view.mount()
        backend.fail["select"] = RemoteError("timeout", operation="select")
        notes_view.update_draft(title="A")

        ok = await notes_view.save_draft()

        assert ok is True
        assert notes_view.is_creating is False
        assert notes_view.draft.title == ""
        assert notes_view.error == StaleCacheError(action="create").message
        assert [r["title"] for r in backend.rows] == ["A"]

        del backend.fail["select"]
        await notes_view.sync()
        assert [c.title for c in notes_view.page(NOW).notes] == ["A"]

    @pytest.mark.asyncio
    async def test_saved_edit_closes_even_when_reload_fails(self, notes_view, backend, alice):
        row = backend.add_row(alice.user_id, "draft", "v1")
        await notes_view.mount()
        notes_view.start_edit(row["id"])
        notes_view.update_edit(title="final")
        backend.fail["select"] = RemoteError("timeout", operation="select")

        ok = await notes_view.save_edit()

        assert ok is True
        assert notes_view.editing is None
        assert backend.rows[0]["title"] == "final"
        assert backend.calls.count("update") == 1


class TestViewBase:
    def test_base_view_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            View()

    def test_subclass_without_page_is_rejected(self):
        class Blank(View):
            name = "blank"

        with pytest.raises(TypeError):
            Blank()
