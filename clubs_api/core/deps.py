from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from clubs_api.core.session_scope import CSRF_TOKEN_KEY, MappingSessionScope, session_scope_for
from clubs_api.core.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def get_session_scope(request: Request) -> MappingSessionScope:
    """Return the per-client session scope backed by the signed session cookie."""
    return session_scope_for(request)


# PUBLIC_INTERFACE
def issue_csrf_token(scope: MappingSessionScope) -> str:
    """
    Return the anti-forgery token bound to this session, creating it on first use.
    """
    token = scope.get_string(CSRF_TOKEN_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        scope.set_string(CSRF_TOKEN_KEY, token)
    return token


# PUBLIC_INTERFACE
async def verify_csrf_token(
    x_csrf_token: str | None = Header(default=None, alias="X-CSRF-Token"),
    scope: MappingSessionScope = Depends(get_session_scope),
    settings: AppSettings = Depends(get_app_settings),
) -> None:
    """
    Validate the X-CSRF-Token header against the token stored in the session.

    Raises:
        HTTPException: 403 Forbidden if the header is missing or does not match.
    """
    if not settings.CSRF_ENABLED:
        return
    expected = scope.get_string(CSRF_TOKEN_KEY)
    if not x_csrf_token or not expected or not secrets.compare_digest(x_csrf_token, expected):
        logger.warning("Rejected request with missing or invalid CSRF token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Missing or invalid X-CSRF-Token header.",
        )
