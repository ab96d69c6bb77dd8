"""
NoteNest Backend-for-Frontend — Package Initializer
====================================================

What: Server-side state holder for the NoteNest notes app.
Why:  Keeps session, note cache and page view state on the server so the
      browser client only renders JSON page models.
Who:  Imported by uvicorn (notenest.main:app), pytest, and the console script.

Architecture Note:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP / JSON)         │  ← thin, resolve AppContext
    ├─────────────────────────────────────┤
    │     Views (per-page view state)     │  ← forms, modals, search
    ├─────────────────────────────────────┤
    │ Services (SessionStore, NoteCache)  │  ← single writer each
    ├─────────────────────────────────────┤
    │    Remote adapter (Supabase BaaS)   │  ← auth + notes table
    └─────────────────────────────────────┘

    One AppContext per browser session wires these layers together.
    Nothing below the routes layer knows about HTTP.
"""

__version__ = "1.0.0"
