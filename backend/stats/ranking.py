"""Competition ranking of per-player totals within a single record."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Hashable, Sequence


def compute_ranks(entries: Sequence[tuple[Hashable, int]]) -> dict[Hashable, int]:
    """Rank identities by score, highest first, with ties sharing the higher rank.

    The next distinct score ranks one past the number of entries above it,
    so totals ``[10, 10, 5]`` rank ``[1, 1, 3]``.
    """
    ordered = sorted(entries, key=lambda entry: entry[1], reverse=True)
    ranks: dict[Hashable, int] = {}
    rank = 0
    previous: int | None = None
    for position, (identity, score) in enumerate(ordered):
        if score != previous:
            rank = position + 1
            previous = score
        ranks[identity] = rank
    return ranks
