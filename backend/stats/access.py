"""Subscription gate consulted before any statistics are computed.

Callers without an active or trialing subscription get a zeroed response
flagged ``is_restricted`` instead of an error, so clients can render an
upgrade prompt from the same shape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from shared.dal.models import SubscriptionStatus
from stats.types import GroupStats, PersonalStats

if TYPE_CHECKING:
    from shared.dal.user_repository import UserRepository

logger = structlog.get_logger()

ENTITLED_STATUSES = frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING})


class AccessGate:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    async def is_entitled(self, user_id: str) -> bool:
        """Return True when the user's subscription is active or trialing.

        Users without a profile are treated as not entitled.
        """
        entitlement = await self._users.get_entitlement(user_id)
        if entitlement is None:
            logger.debug("no user profile found, treating as restricted", user_id=user_id)
            return False
        return entitlement.status in ENTITLED_STATUSES


def restricted_personal_stats() -> PersonalStats:
    return PersonalStats(is_restricted=True)


def restricted_group_stats() -> GroupStats:
    return GroupStats(is_restricted=True)
