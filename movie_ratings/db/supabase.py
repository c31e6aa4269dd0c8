from __future__ import annotations

from typing import Any

from supabase import Client, create_client

from movie_ratings.config import Settings, get_settings

UNIQUE_VIOLATION_CODE = "23505"


def create_supabase_admin_client(settings: Settings | None = None) -> Client:
    """
    Create a Supabase client using the service role key (bypasses RLS).

    Shared by the API and the operator scripts; both write to `core.movies`
    and `core.ratings` directly.
    """
    settings = settings or get_settings()
    if not settings.supabase_url:
        raise RuntimeError("SUPABASE_URL environment variable is not set")
    if not settings.supabase_service_role_key:
        raise RuntimeError("SUPABASE_SERVICE_ROLE_KEY environment variable is not set")
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


def error_code(error: Any) -> str:
    code = getattr(error, "code", None)
    if code is None and isinstance(error, dict):
        code = error.get("code")
    return str(code or "")


def describe_error(error: Any) -> str:
    parts = [
        error_code(error),
        str(getattr(error, "message", "") or ""),
        str(getattr(error, "details", "") or ""),
        str(getattr(error, "hint", "") or ""),
    ]
    combined = " ".join([p for p in parts if p]).strip()
    return combined or str(error)


def is_unique_violation(error: Any) -> bool:
    if error_code(error) == UNIQUE_VIOLATION_CODE:
        return True
    message = describe_error(error).casefold()
    return "duplicate key value violates unique constraint" in message
