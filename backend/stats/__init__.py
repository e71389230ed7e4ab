"""Statistics aggregation engine for saved score records."""

from stats.access import AccessGate
from stats.errors import GroupNotFoundError, InvalidGroupIdError, StatsError, StatsUnavailableError
from stats.group import GroupStatsAggregator
from stats.personal import PersonalStatsAggregator

__all__ = [
    "AccessGate",
    "GroupNotFoundError",
    "GroupStatsAggregator",
    "InvalidGroupIdError",
    "PersonalStatsAggregator",
    "StatsError",
    "StatsUnavailableError",
]
