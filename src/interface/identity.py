"""Bearer credential handling for the HTTP layer.

The core only ever sees an opaque ``user_id``; this module is the single
place that turns an ``Authorization: Bearer <token>`` header into one.
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from src.core.config import constants, settings


logger = logging.getLogger(__name__)

_DEVELOPMENT_SECRET = "questflow-development-secret"  # noqa: S105

bearer_scheme = HTTPBearer(auto_error=False)


class IdentityProvider:
    """Issues and verifies signed bearer credentials carrying a user id."""

    def __init__(self, secret_key: str, *, max_age_seconds: int) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt=constants.IDENTITY_TOKEN_SALT)
        self._max_age_seconds = max_age_seconds

    def issue_token(self, user_id: str) -> str:
        if not user_id:
            raise ValueError("user_id must not be empty")
        return self._serializer.dumps({"uid": user_id})

    def resolve(self, token: str) -> str | None:
        """Return the user id carried by a token, or None if it is invalid or expired."""
        try:
            payload = self._serializer.loads(token, max_age=self._max_age_seconds)
        except SignatureExpired:
            logger.warning("identity_token_expired")
            return None
        except BadSignature:
            logger.warning("identity_token_invalid")
            return None

        user_id = payload.get("uid") if isinstance(payload, dict) else None
        return user_id if isinstance(user_id, str) and user_id else None


@lru_cache(maxsize=1)
def get_identity_provider() -> IdentityProvider:
    """Build the identity provider from settings.

    Production requires SECRET_KEY; other environments fall back to a fixed
    development key.
    """
    if settings.is_production:
        secret = settings.require_credential("secret_key", "Identity signing")
    else:
        secret = settings.secret_key or _DEVELOPMENT_SECRET
    return IdentityProvider(secret, max_age_seconds=settings.token_max_age_seconds)


def issue_token(user_id: str) -> str:
    """Issue a bearer credential for a user (local development and tests)."""
    return get_identity_provider().issue_token(user_id)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> str:
    """FastAPI dependency resolving the caller's user id.

    Raises:
        HTTPException: 401 if the credential is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer credential",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = provider.resolve(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired bearer credential",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
