"""Abstract interface for score record persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import ScoreRecord


class RecordRepository(ABC):
    """Abstract interface for score record persistence.

    Finders return every matching record (no pagination), ordered by
    creation time ascending.
    """

    @abstractmethod
    async def create_record(self, record: ScoreRecord) -> None: ...

    @abstractmethod
    async def find_by_user(self, user_id: str) -> list[ScoreRecord]: ...

    @abstractmethod
    async def find_by_group(self, group_id: str) -> list[ScoreRecord]: ...
