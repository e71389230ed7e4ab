"""Abstract interface for group persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Group


class GroupRepository(ABC):
    """Abstract interface for group persistence."""

    @abstractmethod
    async def create_group(self, group: Group) -> None: ...

    @abstractmethod
    async def find_owned_group(self, group_id: str, user_id: str) -> Group | None:
        """Return the group only when ``user_id`` owns it."""
