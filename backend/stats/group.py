"""Statistics for every record tied to a group, attributed by member id.

Record player slots carry a snapshot of the name at save time; output always
uses the member's current name from the group. Slots without a current member
id (ad hoc players, former members) still take part in ranking but never get
their own entry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from shared.validators import is_valid_object_id
from stats.access import restricted_group_stats
from stats.accumulator import aggregate_records
from stats.errors import GroupNotFoundError, InvalidGroupIdError, StatsError, StatsUnavailableError
from stats.types import GroupStats, PlayerDetail, SelectedGameStats

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.dal.group_repository import GroupRepository
    from shared.dal.models import Group, ScoreRecord
    from shared.dal.record_repository import RecordRepository
    from stats.access import AccessGate
    from stats.accumulator import IdentityExtractor, PlayerStats

logger = structlog.get_logger()


def resolve_member_id(record: ScoreRecord, player_index: int) -> str:
    """Member id of a player slot, or a synthetic ``NonMember-{index}`` id."""
    return record.player_names[player_index].member_id or f"NonMember-{player_index}"


def _current_member_slot(member_names: dict[str, str]) -> IdentityExtractor:
    def identify(record: ScoreRecord, player_index: int) -> str | None:
        member_id = resolve_member_id(record, player_index)
        return member_id if member_id in member_names else None

    return identify


def _player_details(
    stats_by_member: dict[str, PlayerStats],
    member_names: dict[str, str],
    total_first_places: int | None = None,
) -> list[PlayerDetail]:
    return [
        stats.to_player_detail(member_names[member_id], total_first_places)
        for member_id, stats in stats_by_member.items()
        if stats.total_plays > 0
    ]


def build_group_stats(
    group: Group,
    records: Sequence[ScoreRecord],
    selected_game_title: str | None = None,
) -> GroupStats:
    """Aggregate a group's records. Pure function of the group, records and their order."""
    if not records:
        return GroupStats(group_name=group.group_name)

    member_names = {member.member_id: member.name for member in group.members}
    aggregation = aggregate_records(
        records,
        _current_member_slot(member_names),
        tracked=member_names,
        selected_game_title=selected_game_title,
        tally_all_slots=True,
    )

    selected_game_stats = None
    if selected_game_title and selected_game_title in aggregation.games:
        game = aggregation.games[selected_game_title]
        selected_game_stats = SelectedGameStats(
            game_title=selected_game_title,
            total_plays=game.plays,
            average_score=game.average_score,
            highest_score=game.highest_score,
            lowest_score=game.lowest_score,
            ranks=game.ranks.to_counts(),
            # Selected-game player entries all carry the game-wide first-place count.
            player_details=_player_details(aggregation.selected_players, member_names, game.ranks.first),
        )

    return GroupStats(
        group_name=group.group_name,
        total_plays=aggregation.total_plays,
        available_games=list(aggregation.games),
        most_played_game=aggregation.most_played_game(),
        total_group_rankings=aggregation.rankings.to_counts(),
        player_details=_player_details(aggregation.players, member_names),
        selected_game_stats=selected_game_stats,
    )


class GroupStatsAggregator:
    def __init__(self, records: RecordRepository, groups: GroupRepository, access: AccessGate) -> None:
        self._records = records
        self._groups = groups
        self._access = access

    async def compute_stats(
        self,
        user_id: str,
        group_id: str,
        selected_game_title: str | None = None,
    ) -> GroupStats:
        """Compute statistics for a group owned by the caller.

        Raises InvalidGroupIdError for a malformed id, GroupNotFoundError when the
        group is missing or owned by someone else, and StatsUnavailableError for
        any other failure.
        """
        try:
            if not await self._access.is_entitled(user_id):
                logger.info("group stats restricted", user_id=user_id, group_id=group_id)
                return restricted_group_stats()

            if not is_valid_object_id(group_id):
                raise InvalidGroupIdError(group_id)

            group = await self._groups.find_owned_group(group_id, user_id)
            if group is None:
                raise GroupNotFoundError(group_id)

            records = await self._records.find_by_group(group_id)
            stats = build_group_stats(group, records, selected_game_title)
        except StatsError:
            raise
        except Exception as exc:
            logger.exception("group stats computation failed", user_id=user_id, group_id=group_id)
            raise StatsUnavailableError("An unexpected server error occurred.") from exc

        logger.debug(
            "group stats computed",
            user_id=user_id,
            group_id=group_id,
            total_plays=stats.total_plays,
            selected_game_title=selected_game_title,
        )
        return stats
