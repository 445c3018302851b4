"""
Security middleware: response hardening headers and the Row-Level Security
session context expected by the hosted Postgres policies.
"""

import logging
import os
from typing import Callable, Optional

from fastapi import Request, Response
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"


def get_csp_policy() -> str:
    """Restrictive Content-Security-Policy for a JSON-only API"""
    directives = [
        "default-src 'none'",
        "frame-ancestors 'none'",
        "base-uri 'none'",
        "form-action 'self'",
    ]
    return "; ".join(directives)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds security headers to all responses.

    Headers added:
    - X-Frame-Options: DENY
    - X-Content-Type-Options: nosniff
    - Referrer-Policy: strict-origin-when-cross-origin
    - Content-Security-Policy: (restrictive policy)
    - Strict-Transport-Security (production only)
    - Cache-Control: no-store (for API responses)
    """

    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or []

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return response

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = get_csp_policy()

        if IS_PRODUCTION:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        # Authenticated data must never be cached
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"

        return response


def _is_postgres(db: Session) -> bool:
    bind = db.get_bind()
    return bind is not None and bind.dialect.name == "postgresql"


def set_rls_context(db: Session, user_id: str) -> None:
    """
    Set the RLS context for a database session.

    The hosted database policies read request.jwt.claim.sub / app.current_user_id.
    Other dialects (SQLite in development) have no RLS, so this is a no-op there.
    """
    if not _is_postgres(db):
        return
    try:
        db.execute(
            text("SELECT set_config('app.current_user_id', :user_id, false)"),
            {"user_id": str(user_id)},
        )
        db.execute(
            text("SELECT set_config('request.jwt.claim.sub', :user_id, false)"),
            {"user_id": str(user_id)},
        )
        logger.debug(f"RLS context set for user_id={user_id}")
    except Exception as e:
        logger.error(f"Failed to set RLS context for user_id={user_id}: {e}")
        raise
