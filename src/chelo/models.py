"""
Core data model shared by the normalizer, cache and rating engine.

A MatchResult is the minimal shape every completed Challonge match is
reduced to: when it finished, who won and who lost. Everything else the
API returns is dropped during normalization.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into a timezone-aware datetime.

    Timestamps without an offset are taken to be UTC so that every
    MatchResult can be compared against every other one.

    Raises:
        ValueError: If the string is not a valid ISO 8601 timestamp
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of one completed match.

    ``winner == loser`` is not rejected here; the normalizer decides
    whether such rows reach the cache.
    """

    timestamp: datetime
    winner: str
    loser: str

    def to_row(self) -> list[str]:
        """Encode as the ``[timestamp, winner, loser]`` triple used on disk."""
        return [self.timestamp.isoformat(), self.winner, self.loser]

    @classmethod
    def from_row(cls, row: Any) -> "MatchResult":
        """
        Decode a ``[timestamp, winner, loser]`` triple.

        Raises:
            ValueError: If the row is not a triple of strings or the
                timestamp cannot be parsed
        """
        if not isinstance(row, (list, tuple)) or len(row) != 3:
            raise ValueError(f"expected [timestamp, winner, loser], got {row!r}")
        timestamp, winner, loser = row
        if not all(isinstance(v, str) for v in (timestamp, winner, loser)):
            raise ValueError(f"match row fields must be strings, got {row!r}")
        return cls(timestamp=parse_timestamp(timestamp), winner=winner, loser=loser)

    def __repr__(self) -> str:
        return f"<MatchResult({self.winner} def. {self.loser} @ {self.timestamp.isoformat()})>"
