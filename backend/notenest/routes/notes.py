"""
NoteNest — Notes Dashboard Routes
===================================

What:  The dashboard page plus its actions: search, grid/list toggle, the
       create modal, the edit modal and delete.
How:   Every handler works on the caller's NotesView and returns its page.
       Reading the page is allowed signed out (it says so); every action
       requires a signed-in identity and answers 401 otherwise.

Status codes:
    200 → page model (a failed save keeps the modal open, message in `error`)
    401 → AuthRequiredError, no signed-in identity
    404 → NotFoundError, editing a note id that is not in the cache

Route order matters: the literal /notes/draft and /notes/edit paths are
registered before /notes/{note_id}.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from notenest.context import AppContext, get_app_context
from notenest.exceptions import AuthRequiredError
from notenest.schemas.pages import DraftRequest, EditRequest, ErrorResponse, NotesPage
from notenest.views import NotesView

router = APIRouter(
    prefix="/api/notes",
    tags=["Notes"],
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
    },
)


async def notes_view(ctx: AppContext = Depends(get_app_context)) -> NotesView:
    view = await ctx.navigate(NotesView)
    await view.sync()
    return view


async def signed_in_notes_view(view: NotesView = Depends(notes_view)) -> NotesView:
    if view.identity is None:
        raise AuthRequiredError()
    return view


@router.get("", response_model=NotesPage, summary="Notes dashboard")
async def get_notes(
    q: Optional[str] = Query(default=None, max_length=500, description="Search text (title or content)"),
    view: NotesView = Depends(notes_view),
) -> NotesPage:
    if q is not None:
        view.set_search(q)
    return view.page()


@router.post("/view-mode", response_model=NotesPage, summary="Toggle grid/list layout")
async def toggle_view_mode(view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    view.toggle_view_mode()
    return view.page()


# ── Create modal ──────────────────────────────────────────────────────────

@router.post("/draft", response_model=NotesPage, summary="Open the create modal and set the draft")
async def update_draft(body: DraftRequest, view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    view.update_draft(title=body.title, content=body.content)
    return view.page()


@router.delete("/draft", response_model=NotesPage, summary="Close the create modal")
async def cancel_draft(view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    view.cancel_create()
    return view.page()


@router.post("/draft/save", response_model=NotesPage, summary="Create a note from the draft")
async def save_draft(view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    await view.save_draft()
    return view.page()


# ── Edit modal ────────────────────────────────────────────────────────────

@router.patch("/edit", response_model=NotesPage, summary="Change the note being edited")
async def update_edit(body: EditRequest, view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    view.update_edit(title=body.title, content=body.content)
    return view.page()


@router.delete("/edit", response_model=NotesPage, summary="Close the edit modal")
async def cancel_edit(view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    view.cancel_edit()
    return view.page()


@router.post("/edit/save", response_model=NotesPage, summary="Save the note being edited")
async def save_edit(view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    await view.save_edit()
    return view.page()


@router.post(
    "/{note_id}/edit",
    response_model=NotesPage,
    summary="Open the edit modal for a note",
    responses={404: {"description": "Note is not in the cache", "model": ErrorResponse}},
)
async def start_edit(note_id: str, view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    view.start_edit(note_id)
    return view.page()


@router.delete("/{note_id}", response_model=NotesPage, summary="Delete a note")
async def delete_note(note_id: str, view: NotesView = Depends(signed_in_notes_view)) -> NotesPage:
    await view.delete_note(note_id)
    return view.page()
