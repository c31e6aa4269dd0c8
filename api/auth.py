"""
Static shared-secret bearer authentication.

Every movie and rating endpoint requires `Authorization: Bearer <AUTH_TOKEN>`.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, Request

from api.deps import AppSettings

logger = logging.getLogger(__name__)


def get_bearer_token(request: Request) -> str | None:
    """
    Extract Bearer token from Authorization header.

    Returns None if no token is present.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_token(request: Request, settings: AppSettings) -> None:
    """
    Dependency that rejects requests without the configured bearer token.

    With no AUTH_TOKEN configured every request is rejected.
    """
    if not request.headers.get("Authorization"):
        raise _unauthorized("Authorization header is required.")

    token = get_bearer_token(request)
    if token is None:
        raise _unauthorized("Invalid authorization format.")

    if not settings.auth_token:
        logger.warning("AUTH_TOKEN is not set; rejecting authenticated request.")
        raise _unauthorized("Invalid token.")

    if not secrets.compare_digest(token.encode("utf-8"), settings.auth_token.encode("utf-8")):
        raise _unauthorized("Invalid token.")


RequireToken = Depends(require_token)
