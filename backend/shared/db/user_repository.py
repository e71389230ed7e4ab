"""SQLite-backed user subscription repository."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from shared.dal.models import Entitlement
from shared.dal.user_repository import UserRepository

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteUserRepository(UserRepository):
    """SQLite implementation of UserRepository.

    Subscription status is written by the billing webhook collaborator;
    this service only reads it, apart from the upsert used to seed it.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def get_entitlement(self, user_id: str) -> Entitlement | None:
        """Return the user's subscription status, or None for an unknown user."""
        row = self._db.connection.execute(
            "SELECT subscription_status FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        if row is None:
            return None
        return Entitlement(user_id=user_id, status=row[0])

    async def set_subscription_status(self, user_id: str, status: str) -> None:
        """Insert or update a user's subscription status.

        Billing updates the status upstream; this seeds a local database and tests.
        """
        async with self._lock:
            self._db.connection.execute(
                "INSERT INTO users (id, subscription_status) VALUES (?, ?) "
                "ON CONFLICT(id) DO UPDATE SET subscription_status = excluded.subscription_status",
                (user_id, status),
            )
            self._db.connection.commit()
            logger.info("subscription status updated", user_id=user_id, status=status)
