"""Statistics for a single user across every record they own.

The user is always recorded as the first player on their own sheets, so
only player slot 0 is attributed; the other slots only affect ranking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from stats.access import restricted_personal_stats
from stats.accumulator import aggregate_records
from stats.errors import StatsUnavailableError
from stats.types import PersonalStats

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shared.dal.models import ScoreRecord
    from shared.dal.record_repository import RecordRepository
    from stats.access import AccessGate

logger = structlog.get_logger()

OWNER_IDENTITY = "owner"


def _owner_slot(_record: ScoreRecord, player_index: int) -> str | None:
    return OWNER_IDENTITY if player_index == 0 else None


def build_personal_stats(records: Iterable[ScoreRecord]) -> PersonalStats:
    """Aggregate the owner's records. Pure function of the records and their order."""
    aggregation = aggregate_records(records, _owner_slot)
    return PersonalStats(
        total_plays=aggregation.total_plays,
        most_played_game=aggregation.most_played_game().title,
        total_rankings=aggregation.rankings.to_counts(),
        game_details=[game.to_game_detail(title) for title, game in aggregation.games.items()],
    )


class PersonalStatsAggregator:
    def __init__(self, records: RecordRepository, access: AccessGate) -> None:
        self._records = records
        self._access = access

    async def compute_stats(self, user_id: str) -> PersonalStats:
        """Compute the caller's personal statistics, or the restricted placeholder.

        Raises StatsUnavailableError on any store or computation failure.
        """
        try:
            if not await self._access.is_entitled(user_id):
                logger.info("personal stats restricted", user_id=user_id)
                return restricted_personal_stats()

            records = await self._records.find_by_user(user_id)
            stats = build_personal_stats(records)
        except Exception as exc:
            logger.exception("personal stats computation failed", user_id=user_id)
            raise StatsUnavailableError("Failed to fetch stats") from exc

        logger.debug("personal stats computed", user_id=user_id, total_plays=stats.total_plays)
        return stats
