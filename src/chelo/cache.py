"""
Persistent tournament cache.

Maps each tournament id to the normalized MatchResults fetched for it, so a
tournament is only ever pulled from Challonge once. On disk it is a JSON
object:

    {"my_bracket": [["2024-03-02T18:04:11-05:00", "alice", "bob"], ...], ...}

Loading is forgiving: a missing, unreadable or malformed file just means an
empty cache (a fresh start). Saving is not: any failure raises
CacheWriteError.

Usage:
    cache = TournamentCache.load(Path("cache.json"))
    for tid in tournament_ids:
        cache.get_or_fetch(tid, client.fetch_tournament)
    cache.save(Path("cache.json"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional

from chelo.errors import CacheDecodeError, CacheWriteError
from chelo.models import MatchResult
from chelo.storage import write_json_atomic

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], list[MatchResult]]


class TournamentCache:
    """In-memory view of the cache file, owned by a single run."""

    def __init__(self, entries: Optional[dict[str, list[MatchResult]]] = None):
        self._entries: dict[str, list[MatchResult]] = {
            tid: list(matches) for tid, matches in (entries or {}).items()
        }

    # =========================================================================
    # Mapping behaviour
    # =========================================================================

    def __contains__(self, tournament_id: object) -> bool:
        return tournament_id in self._entries

    def __getitem__(self, tournament_id: str) -> list[MatchResult]:
        return list(self._entries[tournament_id])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TournamentCache):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"<TournamentCache({len(self._entries)} tournaments)>"

    def tournament_ids(self) -> list[str]:
        return list(self._entries)

    def put(self, tournament_id: str, matches: Iterable[MatchResult]) -> None:
        """Insert or wholesale replace one tournament's entry."""
        self._entries[tournament_id] = list(matches)

    def matches_for(self, tournament_ids: Iterable[str]) -> list[MatchResult]:
        """
        Concatenate the cached matches of the given tournaments.

        Tournaments are visited in the order given; ids not in the cache
        contribute nothing.
        """
        matches: list[MatchResult] = []
        for tid in tournament_ids:
            matches.extend(self._entries.get(tid, ()))
        return matches

    # =========================================================================
    # Lookup-or-fetch
    # =========================================================================

    def get_or_fetch(
        self,
        tournament_id: str,
        fetcher: Fetcher,
        *,
        refresh: bool = False,
    ) -> list[MatchResult]:
        """
        Return the cached matches for a tournament, fetching on a miss.

        The fetcher is called at most once per call, and only when the id is
        missing (or ``refresh`` is set). Its result replaces any existing
        entry. If the fetcher raises, the cache is left unchanged and the
        error propagates.
        """
        if not refresh and tournament_id in self._entries:
            logger.debug("Cache hit for %s", tournament_id)
            return list(self._entries[tournament_id])

        matches = list(fetcher(tournament_id))
        self._entries[tournament_id] = matches
        logger.info("Cached %d matches for %s", len(matches), tournament_id)
        return list(matches)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_json(self) -> dict[str, list[list[str]]]:
        return {
            tid: [match.to_row() for match in matches]
            for tid, matches in self._entries.items()
        }

    @classmethod
    def from_json(cls, payload: Any) -> "TournamentCache":
        """
        Build a cache from decoded JSON.

        Raises:
            CacheDecodeError: If the payload isn't an object of match-row arrays
        """
        if not isinstance(payload, dict):
            raise CacheDecodeError(f"cache root must be an object, got {type(payload).__name__}")

        entries: dict[str, list[MatchResult]] = {}
        for tid, rows in payload.items():
            if not isinstance(rows, list):
                raise CacheDecodeError(f"entry for '{tid}' must be an array")
            try:
                entries[tid] = [MatchResult.from_row(row) for row in rows]
            except ValueError as e:
                raise CacheDecodeError(f"bad match row in '{tid}': {e}") from e
        return cls(entries)

    @classmethod
    def load(cls, path: Path) -> "TournamentCache":
        """
        Load the cache from disk.

        A missing file is a fresh start. An unreadable or malformed file is
        logged and also treated as empty.
        """
        path = Path(path)
        if not path.exists():
            logger.info("No cache at %s, starting empty", path)
            return cls()

        try:
            with path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
            cache = cls.from_json(payload)
        except (OSError, ValueError, CacheDecodeError) as e:
            logger.warning("Ignoring unusable cache at %s: %s", path, e)
            return cls()

        logger.info("Loaded %d cached tournaments from %s", len(cache), path)
        return cache

    def save(self, path: Path) -> None:
        """
        Write the full cache to disk.

        Raises:
            CacheWriteError: On any encoding or I/O failure
        """
        path = Path(path)
        try:
            write_json_atomic(path, self.to_json())
        except (TypeError, ValueError) as e:
            raise CacheWriteError(f"could not encode cache: {e}") from e
        except OSError as e:
            raise CacheWriteError(f"could not write cache to {path}: {e}") from e
        logger.info("Saved %d tournaments to %s", len(self), path)


def load_cache(path: Path) -> TournamentCache:
    """Functional alias for TournamentCache.load."""
    return TournamentCache.load(path)


def save_cache(cache: TournamentCache, path: Path) -> None:
    """Functional alias for TournamentCache.save."""
    cache.save(path)


def get_or_fetch(cache: TournamentCache, tournament_id: str, fetcher: Fetcher) -> list[MatchResult]:
    """Functional alias for TournamentCache.get_or_fetch."""
    return cache.get_or_fetch(tournament_id, fetcher)
