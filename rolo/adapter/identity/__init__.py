"""Identity provider adapter."""

from .verifier import (
    JWTIdentityVerifier,
    MockIdentityVerifier,
    RemoteIdentityVerifier,
)

__all__ = ["JWTIdentityVerifier", "MockIdentityVerifier", "RemoteIdentityVerifier"]
