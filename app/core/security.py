import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.auth import verify_access_token
from app.core.errors import AuthenticationRequired
from app.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# auto_error=False so a missing header renders our own 401 body
security = HTTPBearer(auto_error=False)


def require_authorization_header(request: Request) -> str:
    """
    Check that a credential is present without validating it.

    Used by itinerary generation, where validity is the gateway's concern.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthenticationRequired()
    return auth_header


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Dependency returning the id of the signed-in user from the Bearer token.

    Raises:
        AuthenticationRequired: token missing, invalid, or no signing secret configured
    """
    if credentials is None:
        raise AuthenticationRequired()

    if not settings.jwt_secret:
        logger.warning("SUPABASE_JWT_SECRET is not set; rejecting authenticated request")
        raise AuthenticationRequired()

    user_id = verify_access_token(credentials.credentials, settings.jwt_secret)
    if user_id is None:
        logger.warning("Token verification returned None")
        raise AuthenticationRequired()
    return user_id
