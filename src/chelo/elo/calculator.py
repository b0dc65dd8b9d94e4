"""
Elo calculation primitives.

The update applied after each match:
  Expected score: E_W = 1 / (1 + 10^((R_L - R_W) / S))
                  E_L = 1 / (1 + 10^((R_W - R_L) / S))
  Winner:         R'_W = R_W + K * E_W
  Loser:          R'_L = R_L - K * E_L

Where:
  R_W, R_L = Current ratings of winner and loser
  K = How much ratings change (volatility factor)
  S = Scale (fixed at 400)

Note the winner moves by K times its *own* expected score, so a favourite
who wins gains more than K/2 and the two changes only cancel out when the
players were level before the match.
"""

from __future__ import annotations

from chelo.elo.constants import ELO_SCALE


def expected_score(rating: float, opponent_rating: float, scale: float = ELO_SCALE) -> float:
    """
    Elo expected score for ``rating`` against ``opponent_rating``.

    A gap too large for a float power yields the limit (0.0 for the
    hopeless side) instead of raising.
    """
    try:
        return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale))
    except OverflowError:
        return 0.0


def calculate_fast(
    winner_rating: float,
    loser_rating: float,
    k: float,
    scale: float = ELO_SCALE,
) -> tuple[float, float]:
    """
    Float-only rating update for one match.

    Args:
        winner_rating: Winner's rating before the match
        loser_rating: Loser's rating before the match
        k: K-factor
        scale: Spread factor

    Returns:
        Tuple of (new_winner_rating, new_loser_rating)
    """
    p_winner = expected_score(winner_rating, loser_rating, scale)
    p_loser = expected_score(loser_rating, winner_rating, scale)
    return winner_rating + k * p_winner, loser_rating - k * p_loser
