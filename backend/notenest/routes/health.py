"""
NoteNest — Health Check Route
===============================

What:  Liveness probe for Docker and load balancers.
How:   Reports whether Supabase credentials are configured and how many
       browser sessions are held in memory. It makes no remote call: a
       probe every few seconds should not cost Supabase requests.

Status levels:
    healthy  → Supabase configured
    degraded → Supabase URL or key missing (every sign-in will fail)
"""

import time

from fastapi import APIRouter, Request

from notenest import __version__
from notenest.config import settings
from notenest.schemas.pages import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(request: Request) -> HealthResponse:
    configured = settings.supabase_configured
    return HealthResponse(
        status="healthy" if configured else "degraded",
        version=__version__,
        supabase="configured" if configured else "unconfigured",
        active_contexts=len(request.app.state.contexts),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
