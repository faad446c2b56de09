"""
NotesVault Backend: HTTP Basic Authentication
=============================================

What:  FastAPI dependency guarding the notes routers with HTTP Basic auth.
How:   `HTTPBasic(auto_error=False)` extracts credentials; they are compared
       in constant time against Settings.auth_username / auth_password.
       Failures raise a 401 HTTPException carrying `WWW-Authenticate: Basic`,
       which the global handler renders as `{"error": ...}`.
Who:   Attached with `dependencies=[Depends(require_basic_auth)]` when the
       notes routers are included; /health and / stay public.
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from notesvault.config import Settings

logger = logging.getLogger(__name__)

basic_auth = HTTPBasic(auto_error=False, realm="notesvault")


def _matches(supplied: str, expected: str) -> bool:
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": 'Basic realm="notesvault"'},
    )


def require_basic_auth(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
) -> Optional[str]:
    """
    Return the authenticated username (None when auth is disabled).

    Raises:
        HTTPException(401): missing or wrong credentials
    """
    settings: Settings = request.app.state.settings
    if not settings.auth_enabled:
        return None

    if credentials is None:
        raise _unauthorized("authentication required")

    # Both comparisons always run, in constant time
    user_ok = _matches(credentials.username, settings.auth_username)
    password_ok = _matches(credentials.password, settings.auth_password)
    if not (user_ok and password_ok):
        logger.warning("Rejected credentials for user '%s'", credentials.username)
        raise _unauthorized("invalid credentials")

    return credentials.username
