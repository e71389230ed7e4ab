"""SQLite-backed group repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

from shared.dal.group_repository import GroupRepository
from shared.dal.models import Group

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteGroupRepository(GroupRepository):
    """SQLite implementation of GroupRepository."""

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_group(self, group: Group) -> None:
        """Insert a group. Raises ValueError on duplicate group_id.

        Groups are managed upstream; this seeds a local database and tests.
        """
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO groups (id, user_id, data) VALUES (?, ?, ?)",
                    (group.group_id, group.user_id, group.model_dump_json()),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Group with id '{group.group_id}' already exists") from exc

    async def find_owned_group(self, group_id: str, user_id: str) -> Group | None:
        """Look up a group by id, scoped to its owner."""
        row = self._db.connection.execute(
            "SELECT data FROM groups WHERE id = ? AND user_id = ?",
            (group_id, user_id),
        ).fetchone()
        if row is None:
            return None
        return Group.model_validate(json.loads(row[0]))
