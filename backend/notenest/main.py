"""
NoteNest Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
Why:   One place for middleware, exception handlers, routes and lifecycle.
How:   create_app() returns a configured FastAPI instance; `app` is the
       module-level instance uvicorn serves (uvicorn notenest.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Auth Rate Limit → Request ID → Logging     │
    │                                                          │
    │  Routes:      /api/home  /api/login  /api/register       │
    │               /api/session  /api/logout  /api/notes/...  │
    │               /health                                    │
    │                                                          │
    │  app.state.contexts: ContextRegistry                     │
    │      session cookie → AppContext(SessionStore,           │
    │                                  NoteCollection, View)   │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check (logged, not fatal)
    Shutdown: close every AppContext (views, subscriptions, Supabase clients)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from notenest import __version__
from notenest.config import settings
from notenest.context import ContextRegistry, RemoteFactory
from notenest.exceptions import (
    AuthRequiredError,
    NoteNestError,
    NotFoundError,
    RateLimitExceededError,
    RemoteError,
    ValidationError,
)
from notenest.middleware.logging import RequestLoggingMiddleware
from notenest.middleware.rate_limit import AuthRateLimitMiddleware
from notenest.middleware.request_id import RequestIDMiddleware, request_id_var
from notenest.remote.supabase_client import create_supabase_remote
from notenest.routes import auth, health, home, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] notenest.context: Created context ab12cd34 (1 active)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The Supabase SDK talks through httpx (and h2 for realtime); each request
    # would otherwise log at INFO.
    for noisy in ("uvicorn.access", "httpx", "httpcore", "hpack"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("NoteNest Backend %s starting up...", __version__)

    # Not fatal: /health keeps answering and reports the missing settings.
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Sign-in and notes will fail until Supabase is configured.")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("NoteNest Backend shutting down...")
    registry: ContextRegistry = app.state.contexts
    count = len(registry)
    await registry.close_all()
    logger.info("Closed %d session contexts. Shutdown complete.", count)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, exc: NoteNestError, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": exc.message,
            "details": exc.context or None,
            "request_id": request_id_var.get(""),
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to JSON error bodies.

    Handler hierarchy:
        ValidationError         → 400
        AuthRequiredError       → 401
        NotFoundError           → 404
        RateLimitExceededError  → 429 (Retry-After)
        RemoteError             → 502
        NoteNestError (base)    → 500
        Exception (fallback)    → 500, generic message, traceback logged only
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc)

    @app.exception_handler(AuthRequiredError)
    async def handle_auth_required(request: Request, exc: AuthRequiredError):
        return _error_response(401, "auth_required", exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc)

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return _error_response(
            429, "rate_limit_exceeded", exc, headers={"Retry-After": str(exc.retry_after)}
        )

    @app.exception_handler(RemoteError)
    async def handle_remote_error(request: Request, exc: RemoteError):
        logger.error(
            "[%s] Remote error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(502, "remote_error", exc)

    @app.exception_handler(NoteNestError)
    async def handle_app_error(request: Request, exc: NoteNestError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(remote_factory: Optional[RemoteFactory] = None) -> FastAPI:
    """
    Build the application.

    `remote_factory` makes one RemoteClient per browser session. It defaults
    to the Supabase adapter; tests pass an in-memory fake.
    """
    app = FastAPI(
        title="NoteNest API",
        description="Backend-for-frontend for the NoteNest personal notes app, backed by Supabase.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Created here rather than in lifespan so it exists even when an ASGI
    # transport skips lifespan events.
    app.state.contexts = ContextRegistry(
        remote_factory or create_supabase_remote,
        idle_seconds=settings.context_idle_seconds,
        testimonial_interval=settings.testimonial_interval_seconds,
    )

    # Middleware runs in reverse order of addition:
    # AuthRateLimit → RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(AuthRateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(home.router)
    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: `notenest`."""
    uvicorn.run(
        "notenest.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
