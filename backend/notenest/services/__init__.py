"""
NoteNest — Services Layer
===========================

What:  The two single-writer state holders of an AppContext.

Service Inventory:
    - SessionStore:   current identity, auth calls, session-change subscription
    - NoteCollection: notes cache with the mutate-then-reload policy

Neither service knows about HTTP or page state; view controllers sit on top.
"""
