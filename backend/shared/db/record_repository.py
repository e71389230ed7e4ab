"""SQLite-backed score record repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

import structlog

from shared.dal.models import ScoreRecord
from shared.dal.record_repository import RecordRepository

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteRecordRepository(RecordRepository):
    """SQLite implementation of RecordRepository.

    Stores full records as JSON with indexed owner/group columns. Finders
    order by created_at, then rowid, so callers see a stable first-seen order.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_record(self, record: ScoreRecord) -> None:
        """Insert a record. Raises ValueError on duplicate record_id.

        Records are written upstream; this seeds a local database and tests.
        """
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO score_records (id, user_id, group_id, created_at, data) VALUES (?, ?, ?, ?, ?)",
                    (
                        record.record_id,
                        record.user_id,
                        record.group_id,
                        record.created_at.isoformat(),
                        record.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Record with id '{record.record_id}' already exists") from exc

    async def find_by_user(self, user_id: str) -> list[ScoreRecord]:
        """Retrieve every record owned by a user."""
        rows = self._db.connection.execute(
            "SELECT data FROM score_records WHERE user_id = ? ORDER BY created_at ASC, rowid ASC",
            (user_id,),
        ).fetchall()
        return [ScoreRecord.model_validate(json.loads(row[0])) for row in rows]

    async def find_by_group(self, group_id: str) -> list[ScoreRecord]:
        """Retrieve every record associated with a group."""
        rows = self._db.connection.execute(
            "SELECT data FROM score_records WHERE group_id = ? ORDER BY created_at ASC, rowid ASC",
            (group_id,),
        ).fetchall()
        return [ScoreRecord.model_validate(json.loads(row[0])) for row in rows]
