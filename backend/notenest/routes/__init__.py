"""
NoteNest — HTTP Routes Package
================================

What:  Thin FastAPI routers over the per-session view controllers.

Route Inventory:
    - home.py:    GET  /api/home, testimonial carousel, mobile menu
    - auth.py:    GET  /api/session, login and register forms, POST /api/logout
    - notes.py:   the notes dashboard: search, view mode, create/edit modals, delete
    - health.py:  GET  /health

Every /api handler resolves the caller's AppContext through the
get_app_context dependency, navigates to its page, calls one view method and
returns the view's page model. No route holds state of its own.
"""
