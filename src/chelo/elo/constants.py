"""
Elo rating constants.

K factor: Controls rating volatility (how much ratings change per match)
  - Higher K = bigger rating swings
  - Lower K = more stable ratings

Scale: Controls how a rating gap maps to an expected score. With 400, a
  400-point gap means the stronger player is expected to score ~0.91.

Ratings accumulate from 0.0 and the baseline is only added when results
are reported, so every player starts at the baseline in published terms.
"""

DEFAULT_K_FACTOR = 24.0

DEFAULT_BASELINE = 1200.0

# Players need this many rated matches before they show up in the output
DEFAULT_MIN_MATCHES = 10

ELO_SCALE = 400.0
