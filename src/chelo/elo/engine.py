"""
Rating engine - folds a chronological stream of match results into ratings.

All state lives in a dict local to one compute_ratings() call, keyed by
player name, so results depend only on the order of the input and the
parameters: the same sequence always yields bit-identical ratings.

The engine does not sort. Callers must pass matches in ascending timestamp
order (the pipeline does a stable sort before calling in).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from chelo.elo.calculator import calculate_fast
from chelo.elo.constants import (
    DEFAULT_BASELINE,
    DEFAULT_K_FACTOR,
    DEFAULT_MIN_MATCHES,
    ELO_SCALE,
)
from chelo.models import MatchResult


@dataclass(frozen=True)
class EloParams:
    """
    Parameters of one rating run.

    ``k``: K-factor. ``baseline``: added to every reported rating.
    ``min_matches``: activity threshold for the output.
    """
    k: float = DEFAULT_K_FACTOR
    baseline: float = DEFAULT_BASELINE
    min_matches: int = DEFAULT_MIN_MATCHES
    scale: float = ELO_SCALE

    def __post_init__(self) -> None:
        if self.k <= 0.0:
            raise ValueError(f"k must be > 0, got {self.k}")
        if self.min_matches < 0:
            raise ValueError(f"min_matches must be >= 0, got {self.min_matches}")
        if self.scale <= 0.0:
            raise ValueError(f"scale must be > 0, got {self.scale}")


@dataclass
class _PlayerState:
    """Internal tracking of a player's state during a run."""
    match_count: int = 0
    rating: float = 0.0


def apply_match(
    state: dict[str, _PlayerState],
    match: MatchResult,
    k: float,
    scale: float = ELO_SCALE,
) -> None:
    """
    Apply one match to the rating state in place.

    Both players' pre-match values are read before either is written. The
    winner is written first and the loser second, so a self-play row
    (winner == loser) ends up with the loser's update.
    """
    winner = state.get(match.winner, _PlayerState())
    loser = state.get(match.loser, _PlayerState())

    new_winner, new_loser = calculate_fast(winner.rating, loser.rating, k, scale)

    state[match.winner] = _PlayerState(winner.match_count + 1, new_winner)
    state[match.loser] = _PlayerState(loser.match_count + 1, new_loser)


def compute_ratings(
    matches: Iterable[MatchResult],
    k: float = DEFAULT_K_FACTOR,
    baseline: float = DEFAULT_BASELINE,
    min_matches: int = DEFAULT_MIN_MATCHES,
) -> dict[str, float]:
    """
    Rate every player in a chronological match sequence.

    Every player starts at 0.0 with no matches. After the last match,
    players with at least ``min_matches`` matches are reported at
    ``rating + baseline``; everyone else is left out entirely.

    Args:
        matches: MatchResults sorted ascending by timestamp
        k: K-factor
        baseline: Offset added to every reported rating
        min_matches: Activity threshold

    Returns:
        Dict of player name -> final rating
    """
    params = EloParams(k=k, baseline=baseline, min_matches=min_matches)
    return RatingEngine(params).run(matches)


class RatingEngine:
    """
    Reusable wrapper around compute_ratings for a fixed set of parameters.

    Usage:
        engine = RatingEngine(EloParams(k=32.0, min_matches=5))
        ratings = engine.run(sorted_matches)
    """

    def __init__(self, params: EloParams | None = None):
        self.params = params or EloParams()

    def run(self, matches: Iterable[MatchResult]) -> dict[str, float]:
        params = self.params
        state: dict[str, _PlayerState] = {}

        for match in matches:
            apply_match(state, match, params.k, params.scale)

        return {
            player: player_state.rating + params.baseline
            for player, player_state in state.items()
            if player_state.match_count >= params.min_matches
        }
