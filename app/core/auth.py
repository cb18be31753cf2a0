from typing import Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"


def verify_access_token(token: str, secret: str) -> Optional[str]:
    """
    Verify and decode an access token issued by the identity provider.

    Args:
        token: The JWT access token to verify
        secret: The shared HS256 signing secret

    Returns:
        Optional[str]: The user id (``sub`` claim) if valid, None otherwise
    """
    if not token or not secret:
        return None
    try:
        # Provider tokens carry an audience ("authenticated") we don't pin here
        payload = jwt.decode(
            token, secret, algorithms=[ALGORITHM], options={"verify_aud": False}
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id
