"""User model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from starlette.authentication import BaseUser


class AuthenticatedUser(BaseUser):
    """Caller identity for Starlette's request.user, taken from a verified gateway token."""

    def __init__(self, user_id: str) -> None:
        self._user_id = user_id

    @property
    def is_authenticated(self) -> bool:  # pragma: no cover
        return True

    @property
    def display_name(self) -> str:  # pragma: no cover
        return self._user_id

    @property
    def identity(self) -> str:  # pragma: no cover
        return self._user_id

    @property
    def user_id(self) -> str:
        return self._user_id
