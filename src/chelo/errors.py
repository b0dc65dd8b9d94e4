"""Error types raised across the fetch/cache/rate pipeline."""

from __future__ import annotations


class ChEloError(Exception):
    """Base class for all chelo errors."""


class FetchError(ChEloError):
    """The Challonge API could not be reached or returned unusable data."""

    def __init__(self, tournament_id: str, reason: str):
        self.tournament_id = tournament_id
        self.reason = reason
        super().__init__(f"failed to fetch tournament '{tournament_id}': {reason}")


class CacheDecodeError(ChEloError):
    """The persisted cache is not valid cache JSON.

    Raised by the decoder only; ``TournamentCache.load`` treats it as an
    empty cache.
    """


class CacheWriteError(ChEloError):
    """The cache could not be encoded or written to disk."""


class OutputWriteError(ChEloError):
    """The ratings output file could not be encoded or written to disk."""
