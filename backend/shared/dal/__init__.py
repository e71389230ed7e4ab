"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.group_repository import GroupRepository
from shared.dal.models import (
    Entitlement,
    Group,
    GroupMember,
    Player,
    ScoreRecord,
    SubscriptionStatus,
)
from shared.dal.record_repository import RecordRepository
from shared.dal.user_repository import UserRepository

__all__ = [
    "Entitlement",
    "Group",
    "GroupMember",
    "GroupRepository",
    "Player",
    "RecordRepository",
    "ScoreRecord",
    "SubscriptionStatus",
    "UserRepository",
]
