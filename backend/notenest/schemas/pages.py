"""
NoteNest — Pydantic Request/Response Schemas
==============================================

What:  The JSON contract between the BFF and the browser client.
Why:   The client renders page models as-is, so every piece of view state it
       needs (form messages, modal buffers, empty-state copy) is spelled out here.
How:   View controllers build these models in their `page()` methods; routes
       return them. Request bodies are validated by FastAPI.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ViewMode = Literal["grid", "list"]


# ══════════════════════════════════════════════════════════════════════════
# Shared
# ══════════════════════════════════════════════════════════════════════════


class IdentityOut(BaseModel):
    user_id: str
    email: str


class SessionResponse(BaseModel):
    """Who is signed in for this browser session."""
    signed_in: bool
    user: Optional[IdentityOut] = None


# ══════════════════════════════════════════════════════════════════════════
# Landing Page
# ══════════════════════════════════════════════════════════════════════════


class Feature(BaseModel):
    title: str
    description: str


class Step(BaseModel):
    step: str
    title: str
    description: str


class Testimonial(BaseModel):
    name: str
    role: str
    avatar: str = Field(description="Initials shown in the avatar bubble")
    quote: str


class HomePage(BaseModel):
    headline: str
    tagline: str
    features: List[Feature]
    steps: List[Step]
    testimonial: Testimonial
    testimonial_index: int
    testimonial_count: int
    menu_open: bool = False
    signed_in: bool = False


# ══════════════════════════════════════════════════════════════════════════
# Auth Forms
# ══════════════════════════════════════════════════════════════════════════


class LoginRequest(BaseModel):
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=1024)


class LoginPage(BaseModel):
    """
    Login form state after the last action.

    `redirect_to` is set once sign-in succeeds; the client navigates there.
    The password is never echoed back.
    """
    email: str = ""
    show_password: bool = False
    is_loading: bool = False
    error: str = ""
    success: str = ""
    redirect_to: Optional[str] = None


class RegisterRequest(BaseModel):
    name: str = Field(default="", max_length=200)
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=1024)
    confirm_password: str = Field(default="", max_length=1024)


class PasswordChecks(BaseModel):
    length: bool = Field(description="At least 8 characters")
    match: bool = Field(description="Confirmation equals password and is non-empty")


class RegisterPage(BaseModel):
    name: str = ""
    email: str = ""
    password_checks: PasswordChecks
    is_valid: bool = False
    is_loading: bool = False
    error: str = ""
    success: str = ""
    needs_verification: bool = False
    redirect_to: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Notes Dashboard
# ══════════════════════════════════════════════════════════════════════════


class NoteCard(BaseModel):
    """One note as the dashboard shows it."""
    id: str
    title: str
    content: str
    display_title: str = Field(description="Title, or 'Untitled' when blank")
    display_content: str = Field(description="Content, or 'No content' when blank")
    created_at: datetime
    updated_at: Optional[datetime] = None
    relative_time: str = Field(description="'Just now', '5m ago', '3h ago', '2d ago' or M/D/YYYY")


class NoteBuffer(BaseModel):
    """Title/content being typed in the create or edit modal."""
    id: Optional[str] = None
    title: str = ""
    content: str = ""


class NotesStats(BaseModel):
    total: int
    this_week: int


class EmptyState(BaseModel):
    title: str
    hint: str
    show_create: bool


class NotesPage(BaseModel):
    signed_in: bool
    message: str = ""
    email: str = ""
    notes: List[NoteCard] = Field(default_factory=list)
    search_query: str = ""
    view_mode: ViewMode = "grid"
    stats: NotesStats = Field(default_factory=lambda: NotesStats(total=0, this_week=0))
    empty_state: Optional[EmptyState] = None
    is_creating: bool = False
    draft: NoteBuffer = Field(default_factory=NoteBuffer)
    can_save_draft: bool = False
    editing: Optional[NoteBuffer] = None
    error: str = ""
    redirect_to: Optional[str] = None


class DraftRequest(BaseModel):
    title: str = Field(default="", max_length=500)
    content: str = Field(default="", max_length=100_000)


class EditRequest(BaseModel):
    """Partial update of the edit buffer; omitted fields are left as they are."""
    title: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = Field(default=None, max_length=100_000)


# ══════════════════════════════════════════════════════════════════════════
# Errors & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {
            "error": "auth_required",
            "message": "Sign in to access your notes",
            "details": null,
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or degraded")
    version: str
    supabase: str = Field(description="configured or unconfigured")
    active_contexts: int = Field(description="Browser sessions currently held in memory")
    uptime_seconds: float
