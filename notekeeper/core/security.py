"""
Security Utilities.

JWT helpers used to resolve the acting user. Token issuance belongs to the
identity provider; create_access_token exists for tooling and tests.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from notekeeper.core.config import get_app_config, get_settings
from notekeeper.core.exceptions import AuthenticationError
from notekeeper.core.logging import get_logger
from notekeeper.core.utils import utc_now

logger = get_logger(__name__)


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token for a user id.

    Args:
        subject: User id placed in the ``sub`` claim
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode = {"sub": subject, "exp": expire, "type": "access", "aud": jwt_config.audience}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")


def authenticate(token: str) -> str:
    """
    Resolve the acting user id from an access token.

    Raises:
        AuthenticationError: If the token is invalid or carries no subject
    """
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid token")
    return str(subject)
