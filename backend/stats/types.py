"""Response shapes produced by the statistics aggregators.

Attributes are snake_case; serialize with ``model_dump(by_alias=True)`` to get
the camelCase field names consumers rely on.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NO_GAME_TITLE = "N/A"


class _StatsModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class RankCounts(_StatsModel):
    first: int = 0
    second: int = 0
    third: int = 0


class GameDetail(_StatsModel):
    game_title: str
    plays: int
    average_score: float
    highest_score: int
    lowest_score: int
    ranks: RankCounts


class PersonalStats(_StatsModel):
    total_plays: int = 0
    most_played_game: str = NO_GAME_TITLE
    total_rankings: RankCounts = Field(default_factory=RankCounts)
    game_details: list[GameDetail] = Field(default_factory=list)
    is_restricted: bool = False


class MostPlayedGame(_StatsModel):
    title: str = NO_GAME_TITLE
    plays: int = 0


class PlayerDetail(_StatsModel):
    player_name: str
    total_plays: int
    average_score: float
    highest_score: int
    lowest_score: int
    ranks: RankCounts
    total_first_places: int


class SelectedGameStats(_StatsModel):
    game_title: str
    total_plays: int
    average_score: float
    highest_score: int
    lowest_score: int
    ranks: RankCounts
    player_details: list[PlayerDetail]


class GroupStats(_StatsModel):
    group_name: str = ""
    total_plays: int = 0
    available_games: list[str] = Field(default_factory=list)
    most_played_game: MostPlayedGame = Field(default_factory=MostPlayedGame)
    total_group_rankings: RankCounts = Field(default_factory=RankCounts)
    player_details: list[PlayerDetail] = Field(default_factory=list)
    selected_game_stats: SelectedGameStats | None = None
    is_restricted: bool = False


class UserStatus(_StatsModel):
    is_restricted: bool
