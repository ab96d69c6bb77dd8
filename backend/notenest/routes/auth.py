"""
NoteNest — Authentication Routes
==================================

What:  Session status, the login and registration forms, and sign-out.
How:   Form submissions always answer 200 with the form's page model; failed
       attempts carry their message in `error`. Status codes other than 200
       come only from the rate limiter (429) or the global handlers.

Sign-out is fail-open: the local identity is cleared even if Supabase cannot
be reached, the per-session context is discarded and the cookie removed.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from notenest.config import settings
from notenest.context import AppContext, get_app_context
from notenest.schemas.pages import (
    ErrorResponse,
    IdentityOut,
    LoginPage,
    LoginRequest,
    RegisterPage,
    RegisterRequest,
    SessionResponse,
)
from notenest.views import LoginView, NotesView, RegisterView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


def session_response(ctx: AppContext) -> SessionResponse:
    identity = ctx.session.identity
    if identity is None:
        return SessionResponse(signed_in=False)
    return SessionResponse(
        signed_in=True,
        user=IdentityOut(user_id=identity.user_id, email=identity.email),
    )


@router.get("/session", response_model=SessionResponse, summary="Current identity")
async def get_session(ctx: AppContext = Depends(get_app_context)) -> SessionResponse:
    return session_response(ctx)


# ── Login ─────────────────────────────────────────────────────────────────

async def login_view(ctx: AppContext = Depends(get_app_context)) -> LoginView:
    return await ctx.navigate(LoginView)


@router.get("/login", response_model=LoginPage, summary="Login form state")
async def get_login(view: LoginView = Depends(login_view)) -> LoginPage:
    return view.page()


@router.post(
    "/login",
    response_model=LoginPage,
    summary="Sign in with email and password",
    responses={429: {"description": "Too many attempts from this address", "model": ErrorResponse}},
)
async def post_login(body: LoginRequest, view: LoginView = Depends(login_view)) -> LoginPage:
    await view.submit(body.email, body.password)
    return view.page()


@router.post("/login/password-visibility", response_model=LoginPage, summary="Show or hide the password")
async def toggle_login_password(view: LoginView = Depends(login_view)) -> LoginPage:
    view.toggle_password()
    return view.page()


# ── Register ──────────────────────────────────────────────────────────────

async def register_view(ctx: AppContext = Depends(get_app_context)) -> RegisterView:
    return await ctx.navigate(RegisterView)


@router.get("/register", response_model=RegisterPage, summary="Registration form state")
async def get_register(view: RegisterView = Depends(register_view)) -> RegisterPage:
    return view.page()


@router.post(
    "/register",
    response_model=RegisterPage,
    summary="Create an account",
    responses={429: {"description": "Too many attempts from this address", "model": ErrorResponse}},
)
async def post_register(
    body: RegisterRequest, view: RegisterView = Depends(register_view)
) -> RegisterPage:
    await view.submit(body.name, body.email, body.password, body.confirm_password)
    return view.page()


# ── Logout ────────────────────────────────────────────────────────────────

@router.post("/logout", response_model=SessionResponse, summary="Sign out")
async def logout(
    request: Request,
    response: Response,
    ctx: AppContext = Depends(get_app_context),
) -> SessionResponse:
    if isinstance(ctx.view, NotesView):
        await ctx.view.sign_out()
    else:
        await ctx.session.sign_out()
        ctx.notes.clear()

    await request.app.state.contexts.discard(request.state.session_id)
    response.delete_cookie(settings.session_cookie_name)
    return SessionResponse(signed_in=False)
