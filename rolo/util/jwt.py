"""JWT token utilities.

Tokens are issued by the identity provider (Supabase-style access tokens:
the user id lives in ``sub``). ``create_token`` mints equivalent tokens for
local development and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import BaseModel, ConfigDict

from rolo.config import AuthSettings


class TokenPayload(BaseModel):
    """Decoded access token payload."""

    model_config = ConfigDict(extra="allow")

    sub: str
    exp: datetime
    email: str | None = None
    aud: str | list[str] | None = None
    role: str | None = None


class JWTError(Exception):
    """JWT-related error."""

    def __init__(self, message: str, expired: bool = False) -> None:
        super().__init__(message)
        self.expired = expired


def create_token(
    subject: str,
    settings: AuthSettings,
    email: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed access token.

    Args:
        subject: User ID placed in the ``sub`` claim
        settings: Authentication settings
        email: Optional email claim
        expires_in: Lifetime of the token (negative values create expired tokens)
        extra_claims: Additional claims to embed

    Returns:
        Encoded JWT token
    """
    payload: dict[str, Any] = {
        "sub": subject,
        "exp": datetime.now(timezone.utc) + expires_in,
        "role": "authenticated",
    }
    if email:
        payload["email"] = email
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            leeway=settings.jwt_leeway_seconds,
            options={"require": ["sub", "exp"]},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token expired", expired=True)
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
