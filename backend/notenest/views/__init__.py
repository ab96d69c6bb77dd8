"""
NoteNest — View-State Controllers
===================================

What:  Page-scoped state holders, one per page of the app.

View Inventory:
    - HomeView:     landing copy, testimonial carousel (timer-driven)
    - LoginView:    sign-in form
    - RegisterView: sign-up form with password checks
    - NotesView:    dashboard search, view mode, create/edit modals

Views read SessionStore and NoteCollection freely but never write to them
directly; confirmed actions go through those services' own methods.
"""

from notenest.views.auth import LoginView, RegisterView
from notenest.views.base import View
from notenest.views.home import HomeView
from notenest.views.notes import NotesView

__all__ = ["HomeView", "LoginView", "NotesView", "RegisterView", "View"]
