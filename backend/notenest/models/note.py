"""
NoteNest — Domain Models
==========================

What:  Pydantic models for the two records the app mirrors from Supabase.
Why:   Rows come back from PostgREST as plain dicts with ISO timestamp strings;
       validating them once here gives every layer typed datetimes.
How:   `Note.model_validate(row)` for table rows, `Identity.from_user(user)` for
       the auth user object.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Identity(BaseModel):
    """
    The signed-in actor as far as the front-end cares: an opaque id and an email.

    Frozen so the session store can hand out references without copies.
    """

    user_id: str = Field(description="Opaque user id issued by the auth service")
    email: str = Field(default="", description="Email address, empty if unknown")

    model_config = {"frozen": True}

    @classmethod
    def from_user(cls, user: Any) -> Optional["Identity"]:
        """Build from a Supabase `User` (or None)."""
        if user is None:
            return None
        return cls(user_id=str(user.id), email=getattr(user, "email", None) or "")


class Note(BaseModel):
    """
    A user-owned text record.

    Why `title`/`content` default to "": the table allows nulls and the UI
    treats null and empty the same ("Untitled" / "No content").
    """

    id: str = Field(description="Server-assigned identifier")
    title: str = Field(default="")
    content: str = Field(default="")
    created_at: datetime = Field(description="Creation timestamp (server clock)")
    updated_at: Optional[datetime] = Field(default=None)
    user_id: Optional[str] = Field(default=None, description="Owner, echoed by the server")

    model_config = {"from_attributes": True}

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _stringify_ids(cls, v: Any) -> Any:
        # Integer and UUID primary keys both end up as opaque strings.
        return str(v) if v is not None else v

    @field_validator("title", "content", mode="before")
    @classmethod
    def _null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v
