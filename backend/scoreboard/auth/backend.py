"""Starlette AuthenticationBackend that trusts signed gateway identity tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import AuthCredentials, AuthenticationBackend

from scoreboard.auth.models import AuthenticatedUser
from shared.auth.identity_token import verify_identity_token

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

IDENTITY_TOKEN_HEADER = "x-identity-token"


class GatewayTokenBackend(AuthenticationBackend):
    """Authenticate requests via the ``X-Identity-Token`` header.

    The auth gateway in front of this service signs a short-lived token for
    the signed-in user. Missing, forged or expired tokens leave the request
    unauthenticated; route policies decide what that means.
    """

    def __init__(self, gateway_secret: str) -> None:
        self._gateway_secret = gateway_secret

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedUser] | None:
        token = conn.headers.get(IDENTITY_TOKEN_HEADER)
        if not token:
            return None

        claims = verify_identity_token(token, self._gateway_secret)
        if claims is None:
            return None

        return AuthCredentials(["authenticated"]), AuthenticatedUser(user_id=claims.user_id)
