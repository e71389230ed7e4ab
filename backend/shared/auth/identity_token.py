"""HMAC-SHA256 signed identity tokens issued by the upstream auth gateway.

Sign-in, sessions and billing live outside this service. The gateway
authenticates the user and forwards a short-lived token naming them; this
service verifies the signature locally with the shared secret.

Token format: base64url(json_payload_bytes).base64url(hmac_sha256_signature)
"""

import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from dataclasses import asdict, dataclass

import structlog

logger = structlog.get_logger()

_TOKEN_PARTS = 2  # base64url(payload).base64url(signature)

TOKEN_TTL_SECONDS = 300
CLOCK_SKEW_SECONDS = 30


@dataclass
class IdentityClaims:
    """Payload carried inside a signed identity token."""

    user_id: str
    issued_at: float
    expires_at: float


def create_identity_token(user_id: str, secret: str, ttl_seconds: float = TOKEN_TTL_SECONDS) -> str:
    """Build and sign claims for user_id, returning the token string.

    The service itself only verifies tokens. This is the gateway side of the
    scheme, used to mint tokens for local runs and tests.
    """
    now = time.time()
    return sign_identity_claims(IdentityClaims(user_id=user_id, issued_at=now, expires_at=now + ttl_seconds), secret)


def sign_identity_claims(claims: IdentityClaims, secret: str) -> str:
    payload_bytes = json.dumps(asdict(claims), sort_keys=True).encode()
    sig = hmac.new(secret.encode(), payload_bytes, hashlib.sha256).digest()
    payload_b64 = base64.urlsafe_b64encode(payload_bytes).decode()
    sig_b64 = base64.urlsafe_b64encode(sig).decode()
    return f"{payload_b64}.{sig_b64}"


def verify_identity_token(token: str, secret: str) -> IdentityClaims | None:
    """Verify signature and expiry. Returns the claims, or None on any failure."""
    parts = token.split(".")
    if len(parts) != _TOKEN_PARTS:
        return None

    try:
        payload_bytes = base64.urlsafe_b64decode(parts[0])
        provided_sig = base64.urlsafe_b64decode(parts[1])
    except (ValueError, binascii.Error):
        return None

    expected_sig = hmac.new(secret.encode(), payload_bytes, hashlib.sha256).digest()
    if not hmac.compare_digest(provided_sig, expected_sig):
        logger.debug("identity token signature mismatch")
        return None

    try:
        data = json.loads(payload_bytes)
        claims = IdentityClaims(**data)
    except (json.JSONDecodeError, TypeError):
        logger.debug("identity token malformed payload")
        return None

    if not isinstance(claims.user_id, str) or not claims.user_id:
        logger.debug("identity token missing user id")
        return None

    if not _validate_timestamps(claims):
        return None

    return claims


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _validate_timestamps(claims: IdentityClaims) -> bool:
    """Reject non-finite, future-dated, overlong or expired claims."""
    if not _is_finite_number(claims.issued_at) or not _is_finite_number(claims.expires_at):
        logger.debug("identity token non-finite timestamp")
        return False

    now = time.time()
    if claims.issued_at > now + CLOCK_SKEW_SECONDS:
        logger.debug("identity token issued in the future")
        return False
    if claims.expires_at <= claims.issued_at:
        logger.debug("identity token expires_at <= issued_at")
        return False
    if claims.expires_at - claims.issued_at > TOKEN_TTL_SECONDS + CLOCK_SKEW_SECONDS:
        logger.debug("identity token lifetime too long")
        return False
    if now > claims.expires_at:
        logger.debug("identity token expired")
        return False
    return True
