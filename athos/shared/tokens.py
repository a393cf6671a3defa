"""Bearer token helpers.

Learner accounts and credentials live in the auth service; this service
only verifies the access tokens it issues. ``create_access_token`` exists
for local development and tests.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from athos.shared.config import Settings, get_settings
from athos.shared.exceptions import AuthenticationError


def create_access_token(user_id: UUID, settings: Settings | None = None) -> str:
    """Create a signed access token whose subject is the learner id."""
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expiration_hours)
    payload = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> UUID:
    """Verify an access token and return the learner id.

    Raises:
        AuthenticationError: If the token is expired, malformed or not an
            access token
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError()

    if payload.get("type") != "access":
        raise AuthenticationError()
    try:
        return UUID(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError()
