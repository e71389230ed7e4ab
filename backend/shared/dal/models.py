"""Persistence models for the data access layer."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

MAX_PLAYERS = 10
MAX_SCORE_ITEMS = 15
MAX_GROUP_NAME_LENGTH = 30


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    TRIALING = "trialing"
    CANCELED = "canceled"
    INACTIVE = "inactive"


class Player(BaseModel, frozen=True):
    """Player slot on a score sheet, snapshotted at save time."""

    member_id: str | None = None  # durable group member id; None for ad hoc players
    name: str

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Player name must not be blank")
        return v


class ScoreRecord(BaseModel, frozen=True):
    """One completed play session: a num_score_items x num_players grid of scores."""

    record_id: str
    user_id: str  # owner
    group_id: str | None = None
    game_title: str
    player_names: list[Player]
    score_item_names: list[str]
    scores: list[list[int]]  # scores[item_index][player_index]
    num_players: int = Field(ge=1, le=MAX_PLAYERS)
    num_score_items: int = Field(ge=1, le=MAX_SCORE_ITEMS)
    created_at: datetime = Field(default_factory=_utcnow)
    last_saved_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _validate_grid_shape(self) -> Self:
        if len(self.player_names) != self.num_players:
            raise ValueError(f"playerNames must have {self.num_players} entries")
        if len(self.score_item_names) != self.num_score_items:
            raise ValueError(f"scoreItemNames must have {self.num_score_items} entries")
        if len(self.scores) != self.num_score_items:
            raise ValueError(f"Scores must be an array with {self.num_score_items} rows")
        for row in self.scores:
            if len(row) != self.num_players:
                raise ValueError(f"Each score row must have {self.num_players} elements")
        return self

    def player_total(self, player_index: int) -> int:
        """Sum of one player's scores over every score item."""
        return sum(row[player_index] for row in self.scores)

    def player_totals(self) -> list[int]:
        return [self.player_total(i) for i in range(self.num_players)]


class GroupMember(BaseModel, frozen=True):
    member_id: str
    name: str  # current display name


class Group(BaseModel, frozen=True):
    """Named set of members owned by a single user."""

    group_id: str
    user_id: str  # owner
    group_name: str = Field(min_length=1, max_length=MAX_GROUP_NAME_LENGTH)
    members: list[GroupMember] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _validate_unique_members(self) -> Self:
        member_ids = [m.member_id for m in self.members]
        if len(member_ids) != len(set(member_ids)):
            raise ValueError("Group member ids must be unique")
        return self


class Entitlement(BaseModel, frozen=True):
    """Subscription state of a user, as reported by the billing collaborator."""

    user_id: str
    status: str = SubscriptionStatus.INACTIVE  # unknown values are kept as-is
