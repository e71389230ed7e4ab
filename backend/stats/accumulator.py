"""Running aggregates over score records.

All accumulators are scratch state local to one aggregation call. A single
pass over the records feeds every accumulator; callers decide who a player
slot belongs to by passing an identity extractor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stats.ranking import compute_ranks
from stats.types import NO_GAME_TITLE, GameDetail, MostPlayedGame, PlayerDetail, RankCounts

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from shared.dal.models import ScoreRecord

    # (record, player slot index) -> identity, or None to leave the slot unattributed
    IdentityExtractor = Callable[[ScoreRecord, int], str | None]


@dataclass
class RankTally:
    """First/second/third place counts. Ranks beyond third are ignored."""

    first: int = 0
    second: int = 0
    third: int = 0

    def add(self, rank: int) -> None:
        if rank == 1:
            self.first += 1
        elif rank == 2:  # noqa: PLR2004
            self.second += 1
        elif rank == 3:  # noqa: PLR2004
            self.third += 1

    def to_counts(self) -> RankCounts:
        return RankCounts(first=self.first, second=self.second, third=self.third)


@dataclass
class PlayerStats:
    """Per-identity running totals. Extremes stay None until the first play."""

    total_plays: int = 0
    total_score: int = 0
    highest_score: int | None = None
    lowest_score: int | None = None
    ranks: RankTally = field(default_factory=RankTally)

    def record(self, score: int, rank: int) -> None:
        self.total_plays += 1
        self.total_score += score
        self.highest_score = score if self.highest_score is None else max(self.highest_score, score)
        self.lowest_score = score if self.lowest_score is None else min(self.lowest_score, score)
        self.ranks.add(rank)

    @property
    def average_score(self) -> float:
        return self.total_score / self.total_plays if self.total_plays > 0 else 0

    def to_player_detail(self, player_name: str, total_first_places: int | None = None) -> PlayerDetail:
        """``total_first_places`` defaults to this player's own first places."""
        return PlayerDetail(
            player_name=player_name,
            total_plays=self.total_plays,
            average_score=self.average_score,
            highest_score=self.highest_score if self.highest_score is not None else 0,
            lowest_score=self.lowest_score if self.lowest_score is not None else 0,
            ranks=self.ranks.to_counts(),
            total_first_places=self.ranks.first if total_first_places is None else total_first_places,
        )


@dataclass
class GameDetailStats:
    """Per-game-title play count, rank tally and attributed scores."""

    plays: int = 0
    ranks: RankTally = field(default_factory=RankTally)
    scores: list[int] = field(default_factory=list)

    @property
    def average_score(self) -> float:
        return sum(self.scores) / len(self.scores) if self.scores else 0

    @property
    def highest_score(self) -> int:
        return max(self.scores) if self.scores else 0

    @property
    def lowest_score(self) -> int:
        return min(self.scores) if self.scores else 0

    def to_game_detail(self, game_title: str) -> GameDetail:
        return GameDetail(
            game_title=game_title,
            plays=self.plays,
            average_score=self.average_score,
            highest_score=self.highest_score,
            lowest_score=self.lowest_score,
            ranks=self.ranks.to_counts(),
        )


@dataclass
class Aggregation:
    total_plays: int = 0
    rankings: RankTally = field(default_factory=RankTally)
    players: dict[str, PlayerStats] = field(default_factory=dict)
    selected_players: dict[str, PlayerStats] = field(default_factory=dict)
    games: dict[str, GameDetailStats] = field(default_factory=dict)  # first-seen order

    def most_played_game(self) -> MostPlayedGame:
        """Game with the most plays; on a tie the first title seen wins."""
        title = NO_GAME_TITLE
        max_plays = 0
        for game_title, game in self.games.items():
            if game.plays > max_plays:
                max_plays = game.plays
                title = game_title
        return MostPlayedGame(title=title, plays=max_plays)


def aggregate_records(
    records: Iterable[ScoreRecord],
    identify: IdentityExtractor,
    *,
    tracked: Iterable[str] = (),
    selected_game_title: str | None = None,
    tally_all_slots: bool = False,
) -> Aggregation:
    """Aggregate records into per-identity, per-game and overall accumulators.

    Every slot takes part in ranking, attributed or not. Only attributed slots
    update player stats and per-game scores and ranks. With ``tally_all_slots``
    the overall rank tally counts every slot's rank; otherwise it counts
    attributed slots only.

    ``tracked`` identities get accumulators up front (in that order) so they
    are present even without plays. The ``selected_players`` accumulators only
    see records whose title equals ``selected_game_title``.
    """
    aggregation = Aggregation()
    for identity in tracked:
        aggregation.players[identity] = PlayerStats()
        if selected_game_title:
            aggregation.selected_players[identity] = PlayerStats()

    for record in records:
        totals = record.player_totals()
        ranks = compute_ranks(list(enumerate(totals)))
        game = aggregation.games.setdefault(record.game_title, GameDetailStats())
        game.plays += 1
        aggregation.total_plays += 1
        in_selected_game = bool(selected_game_title) and record.game_title == selected_game_title

        for index, score in enumerate(totals):
            rank = ranks[index]
            if tally_all_slots:
                aggregation.rankings.add(rank)

            identity = identify(record, index)
            if identity is None:
                continue

            if not tally_all_slots:
                aggregation.rankings.add(rank)
            game.ranks.add(rank)
            aggregation.players.setdefault(identity, PlayerStats()).record(score, rank)
            game.scores.append(score)
            if in_selected_game:
                aggregation.selected_players.setdefault(identity, PlayerStats()).record(score, rank)

    return aggregation
