"""Bearer token guard for protected routes."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.errors import UnauthenticatedError
from src.domain.user import RequestContext
from src.services import user_service


# auto_error=False so a missing or malformed header reaches our own error envelope
bearer_scheme = HTTPBearer(auto_error=False)


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext:
    """Resolve the request's bearer token to the caller's identity.

    Raises:
        UnauthenticatedError: If the header is missing, malformed, or the token does not resolve
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Not authorized, no token")

    return await user_service.resolve_token(credentials.credentials)
