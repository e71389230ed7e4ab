"""Gateway identity verification shared by the scoreboard service."""

from shared.auth.identity_token import (
    TOKEN_TTL_SECONDS,
    IdentityClaims,
    create_identity_token,
    sign_identity_claims,
    verify_identity_token,
)
from shared.auth.settings import AuthSettings

__all__ = [
    "TOKEN_TTL_SECONDS",
    "AuthSettings",
    "IdentityClaims",
    "create_identity_token",
    "sign_identity_claims",
    "verify_identity_token",
]
