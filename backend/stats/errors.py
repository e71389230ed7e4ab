"""Statistics error types."""


class StatsError(Exception):
    """Base class for failures surfaced by the statistics aggregators."""


class InvalidGroupIdError(StatsError):
    def __init__(self, group_id: str) -> None:
        super().__init__(f"Invalid group id format: {group_id!r}")
        self.group_id = group_id


class GroupNotFoundError(StatsError):
    """The group does not exist or is not owned by the caller."""

    def __init__(self, group_id: str) -> None:
        super().__init__(f"Group {group_id!r} not found")
        self.group_id = group_id


class StatsUnavailableError(StatsError):
    """Unexpected store or computation failure; details are logged, not exposed."""
