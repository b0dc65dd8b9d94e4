"""
Elo rating module.

Implements a plain zero-initialized Elo fold over chronologically ordered
match results, with an activity threshold on the reported ratings.
"""

from chelo.elo.calculator import calculate_fast, expected_score
from chelo.elo.constants import DEFAULT_BASELINE, DEFAULT_K_FACTOR, DEFAULT_MIN_MATCHES
from chelo.elo.engine import EloParams, RatingEngine, apply_match, compute_ratings

__all__ = [
    "DEFAULT_BASELINE",
    "DEFAULT_K_FACTOR",
    "DEFAULT_MIN_MATCHES",
    "EloParams",
    "RatingEngine",
    "apply_match",
    "calculate_fast",
    "compute_ratings",
    "expected_score",
]
