"""
NoteNest — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a module-level `settings` object.
Who:   Imported by main, middleware, the context registry and the Supabase adapter.

Only the Supabase URL and anon key are required for a real deployment.
Everything else has a development default.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Supabase ──────────────────────────────────────────────────────────
    # The anon (public) key is used on purpose: every browser session gets its
    # own client, and row-level security scopes table access to the signed-in user.
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_anon_key: str = Field(default="", description="Supabase anon/public API key")
    notes_table: str = Field(default="notes")

    # ── Browser Sessions ──────────────────────────────────────────────────
    session_cookie_name: str = Field(default="notenest_session")
    session_cookie_secure: bool = Field(default=False)

    # Contexts untouched for this long are closed and dropped by the registry.
    context_idle_seconds: int = Field(default=3600, ge=60, le=86400)

    # ── Landing Page ──────────────────────────────────────────────────────
    testimonial_interval_seconds: float = Field(default=5.0, ge=1.0, le=60.0)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Auth Rate Limiting ────────────────────────────────────────────────
    # What: Per-IP sliding window applied to login and registration submits
    # Why: Supabase throttles too, but rejecting locally keeps brute-force
    #      attempts from ever leaving the server
    auth_rate_limit_requests: int = Field(default=20, ge=1, le=10000)
    auth_rate_limit_window: int = Field(default=300, ge=10, le=86400)  # seconds

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the Supabase connection settings are present.
        When:  Called during app startup (lifespan).
        How:   Collects every problem first, then raises one ValueError listing them.
        """
        errors = []
        if not self.supabase_url:
            errors.append("SUPABASE_URL is not set (Project Settings → API → Project URL)")
        if not self.supabase_anon_key:
            errors.append("SUPABASE_ANON_KEY is not set (Project Settings → API → anon key)")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
