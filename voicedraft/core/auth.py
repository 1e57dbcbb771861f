"""Optional bearer-token protection for the drafting endpoint."""

import secrets

from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .logging import get_logger

security = HTTPBearer(auto_error=False)
log = get_logger("auth")


def _reject(reason: str, request_id: str | None, path: str | None) -> HTTPException:
    log.warning(f"Unauthorized request: {reason}", extra={"request_id": request_id, "path": path})
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=f"{reason.capitalize()} authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(
    credentials: HTTPAuthorizationCredentials | None,
    expected_token: str | None,
    request_id: str | None = None,
    path: str | None = None,
) -> None:
    """Check the Authorization header against the configured token.

    No configured token means the API is open (single-user, private network).

    Raises:
        HTTPException: 401 if a token is configured and the header is missing or wrong
    """
    if expected_token is None:
        return
    if credentials is None:
        raise _reject("missing", request_id, path)
    if not secrets.compare_digest(credentials.credentials.encode(), expected_token.encode()):
        raise _reject("invalid", request_id, path)
