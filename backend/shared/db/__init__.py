"""SQLite database layer: connection management and repository implementations."""

from shared.db.connection import Database
from shared.db.group_repository import SqliteGroupRepository
from shared.db.record_repository import SqliteRecordRepository
from shared.db.user_repository import SqliteUserRepository

__all__ = [
    "Database",
    "SqliteGroupRepository",
    "SqliteRecordRepository",
    "SqliteUserRepository",
]
