"""
NoteNest — Login & Registration View State
============================================

What:  Form state for the sign-in and sign-up pages.
Why:   Keeps the form rules in one place: local validation, message
       translation and redirect decisions.
How:   submit() runs the three-tier error handling:
           1. local validation  → inline message, no remote call
           2. auth-service error → translated via notenest.messages
           3. anything unexpected → generic message, logged with traceback
       The transient `is_loading` flag is up only while the remote call runs.
"""

import logging
from typing import Optional

from notenest.messages import UNEXPECTED_ERROR, login_message, register_message
from notenest.schemas.pages import LoginPage, PasswordChecks, RegisterPage
from notenest.services.session_store import AuthStatus, SessionStore
from notenest.views.base import View

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
NOTES_PATH = "/notes"


class LoginView(View):
    name = "login"

    def __init__(self, session: SessionStore):
        super().__init__()
        self.session = session
        self.email = ""
        self.password = ""
        self.show_password = False
        self.is_loading = False
        self.error = ""
        self.success = ""
        self.redirect_to: Optional[str] = None

    def toggle_password(self) -> None:
        self.show_password = not self.show_password

    async def submit(self, email: str, password: str) -> bool:
        """Attempt sign-in. Returns True when the user is now signed in."""
        self.email = email.strip()
        self.password = password
        self.error = ""
        self.success = ""
        self.redirect_to = None

        if not self.email or not self.password:
            self.error = "Please enter your email and password."
            return False

        self.is_loading = True
        try:
            result = await self.session.sign_in(self.email, self.password)
        except Exception:
            logger.error("Unexpected error during sign in", exc_info=True)
            self.error = UNEXPECTED_ERROR
            return False
        finally:
            self.is_loading = False
            self.password = ""

        if result.status is AuthStatus.ERROR:
            self.error = login_message(result.error)
            return False

        self.success = "Successfully signed in! Redirecting..."
        self.redirect_to = NOTES_PATH
        return True

    def page(self) -> LoginPage:
        return LoginPage(
            email=self.email,
            show_password=self.show_password,
            is_loading=self.is_loading,
            error=self.error,
            success=self.success,
            redirect_to=self.redirect_to,
        )


class RegisterView(View):
    """
    Sign-up form.

    Validation rules (all must hold before any remote call):
        - name is not blank
        - email contains "@"
        - password has at least 8 characters
        - confirmation matches and is not empty
    """

    name = "register"

    def __init__(self, session: SessionStore):
        super().__init__()
        self.session = session
        self.name_field = ""
        self.email = ""
        self.password = ""
        self.confirm_password = ""
        self.show_password = False
        self.show_confirm_password = False
        self.is_loading = False
        self.error = ""
        self.success = ""
        self.needs_verification = False
        self.redirect_to: Optional[str] = None

    def fill(self, name: str, email: str, password: str, confirm_password: str) -> None:
        self.name_field = name
        self.email = email.strip()
        self.password = password
        self.confirm_password = confirm_password

    @property
    def password_checks(self) -> PasswordChecks:
        return PasswordChecks(
            length=len(self.password) >= MIN_PASSWORD_LENGTH,
            match=self.password == self.confirm_password and len(self.password) > 0,
        )

    @property
    def is_valid(self) -> bool:
        checks = self.password_checks
        return (
            self.name_field.strip() != ""
            and "@" in self.email
            and checks.length
            and checks.match
        )

    def _first_problem(self) -> str:
        checks = self.password_checks
        if not self.name_field.strip():
            return "Please enter your name."
        if "@" not in self.email:
            return "Please enter a valid email address."
        if not checks.length:
            return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        if not checks.match:
            return "Passwords do not match."
        return ""

    async def submit(self, name: str, email: str, password: str, confirm_password: str) -> AuthStatus:
        self.fill(name, email, password, confirm_password)
        self.error = ""
        self.success = ""
        self.needs_verification = False
        self.redirect_to = None

        if not self.is_valid:
            self.error = self._first_problem()
            return AuthStatus.ERROR

        self.is_loading = True
        try:
            result = await self.session.sign_up(self.email, self.password)
        except Exception:
            logger.error("Unexpected error during registration", exc_info=True)
            self.error = UNEXPECTED_ERROR
            return AuthStatus.ERROR
        finally:
            self.is_loading = False

        if result.status is AuthStatus.ERROR:
            self.error = register_message(result.error)
        elif result.status is AuthStatus.NEEDS_VERIFICATION:
            self.needs_verification = True
            self.success = "Account created! Please check your email to verify your account."
        else:
            self.success = "Account created successfully! Redirecting..."
            self.redirect_to = NOTES_PATH
        return result.status

    def page(self) -> RegisterPage:
        return RegisterPage(
            name=self.name_field,
            email=self.email,
            password_checks=self.password_checks,
            is_valid=self.is_valid,
            is_loading=self.is_loading,
            error=self.error,
            success=self.success,
            needs_verification=self.needs_verification,
            redirect_to=self.redirect_to,
        )
