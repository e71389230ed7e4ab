"""Abstract interface for user profile (subscription) lookups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Entitlement


class UserRepository(ABC):
    """Abstract interface for user subscription state.

    Implementations can use SQLite, PostgreSQL, etc.
    """

    @abstractmethod
    async def get_entitlement(self, user_id: str) -> Entitlement | None: ...

    @abstractmethod
    async def set_subscription_status(self, user_id: str, status: str) -> None: ...
