"""Factories for score records and groups used across stats tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from shared.dal.models import Group, GroupMember, Player, ScoreRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

GROUP_ID = "65a1f0c2e4b0a1b2c3d4e5f6"
OWNER_ID = "user-owner"

_BASE_TIME = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


def make_record(
    totals: Sequence[int],
    *,
    game_title: str = "Catan",
    record_id: str = "r1",
    user_id: str = OWNER_ID,
    group_id: str | None = None,
    players: Sequence[Player] | None = None,
    sequence: int = 0,
) -> ScoreRecord:
    """Build a one-item record whose per-player totals equal ``totals``."""
    if players is None:
        players = [Player(name=f"Player {i + 1}") for i in range(len(totals))]
    return ScoreRecord(
        record_id=record_id,
        user_id=user_id,
        group_id=group_id,
        game_title=game_title,
        player_names=list(players),
        score_item_names=["Total"],
        scores=[list(totals)],
        num_players=len(totals),
        num_score_items=1,
        created_at=_BASE_TIME + timedelta(minutes=sequence),
    )


def make_grid_record(
    scores: list[list[int]],
    *,
    game_title: str = "Catan",
    record_id: str = "r1",
) -> ScoreRecord:
    """Build a record from a full item x player grid."""
    num_players = len(scores[0])
    return ScoreRecord(
        record_id=record_id,
        user_id=OWNER_ID,
        game_title=game_title,
        player_names=[Player(name=f"Player {i + 1}") for i in range(num_players)],
        score_item_names=[f"Round {i + 1}" for i in range(len(scores))],
        scores=scores,
        num_players=num_players,
        num_score_items=len(scores),
    )


def member(member_id: str, name: str | None = None) -> Player:
    """Player slot linked to a group member, with an optional name snapshot."""
    return Player(member_id=member_id, name=name or member_id)


def guest(name: str = "Guest") -> Player:
    return Player(name=name)


def make_group(
    members: dict[str, str],
    *,
    group_id: str = GROUP_ID,
    user_id: str = OWNER_ID,
    group_name: str = "Friday Night",
) -> Group:
    return Group(
        group_id=group_id,
        user_id=user_id,
        group_name=group_name,
        members=[GroupMember(member_id=mid, name=name) for mid, name in members.items()],
    )
