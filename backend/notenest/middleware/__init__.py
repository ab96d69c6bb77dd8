"""
NoteNest — Middleware Package
===============================

What:  Cross-cutting HTTP concerns applied around every route.

Middleware Chain (outermost first):
    Request → [Auth Rate Limit] → [Request ID] → [Logging] → [CORS/GZip] → Route

    1. Auth rate limit: rejects credential-guessing bursts on POST /api/login
       and /api/register before a Supabase call is made
    2. Request ID: sets the correlation id every later log line carries
    3. Logging: one access line per request, with status and duration
"""
