"""
Fetch/cache/rate pipeline.

One run:
1. Load the tournament cache (missing or broken file -> empty)
2. Resolve every requested tournament, fetching only cache misses
3. Save the cache
4. Gather the requested tournaments' matches and sort them by time
5. Compute ratings
6. Write the ratings file

Tournaments are resolved one at a time. The first fetch failure aborts the
run before anything is written, so the on-disk cache never reflects a
half-finished run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from typing import Any, Iterable, Optional

from chelo.cache import Fetcher, TournamentCache
from chelo.elo.engine import EloParams, RatingEngine
from chelo.errors import OutputWriteError
from chelo.models import MatchResult
from chelo.storage import write_json_atomic

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def read_tournament_ids(path: Path) -> list[str]:
    """
    Read a newline-delimited tournament id list.

    Blank lines and ``#`` comments are skipped, surrounding whitespace is
    stripped, and repeated ids are kept only once (first occurrence wins).

    Raises:
        OSError: If the file can't be read
        UnicodeDecodeError: If the file isn't UTF-8
    """
    seen: set[str] = set()
    ids: list[str] = []
    # utf-8-sig drops the BOM Windows editors prepend
    with Path(path).open("r", encoding="utf-8-sig") as f:
        for line in f:
            tid = line.split("#", 1)[0].strip()
            if not tid or tid in seen:
                continue
            seen.add(tid)
            ids.append(tid)
    return ids


def sort_chronologically(matches: Iterable[MatchResult]) -> list[MatchResult]:
    """Stable sort by timestamp; ties keep their tournament/input order."""
    return sorted(matches, key=lambda m: m.timestamp)


def write_ratings(ratings: dict[str, float], path: Path) -> None:
    """
    Write ratings as a JSON object of player -> rating, keys sorted.

    Raises:
        OutputWriteError: On any encoding or I/O failure
    """
    path = Path(path)
    try:
        write_json_atomic(path, ratings, sort_keys=True)
    except (TypeError, ValueError) as e:
        raise OutputWriteError(f"could not encode ratings: {e}") from e
    except OSError as e:
        raise OutputWriteError(f"could not write ratings to {path}: {e}") from e
    logger.info("Wrote %d ratings to %s", len(ratings), path)


@dataclass
class PipelineResult:
    """Summary of one pipeline run."""

    requested: list[str]
    fetched: list[str]
    cache_hits: list[str]
    match_count: int
    ratings: dict[str, float]
    started_at: datetime
    ended_at: datetime
    dry_run: bool = False
    timings: dict[str, float] = field(default_factory=dict)

    @property
    def duration_s(self) -> float:
        return (self.ended_at - self.started_at).total_seconds()

    @property
    def rated_players(self) -> int:
        return len(self.ratings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "success",
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat(),
            "duration_s": self.duration_s,
            "requested": len(self.requested),
            "fetched": self.fetched,
            "cache_hits": len(self.cache_hits),
            "matches": self.match_count,
            "rated_players": self.rated_players,
            "timings": self.timings,
        }


def run_pipeline(
    tournament_ids: list[str],
    *,
    cache_path: Path,
    output_path: Path,
    fetcher: Optional[Fetcher],
    params: Optional[EloParams] = None,
    refresh: bool = False,
    dry_run: bool = False,
) -> PipelineResult:
    """
    Run the full fetch/cache/rate pipeline.

    Args:
        tournament_ids: Tournaments to rate, in request order
        cache_path: Cache file, read at the start and rewritten at the end
        output_path: Ratings file
        fetcher: Called with a tournament id on a cache miss. May be None
            when every requested tournament is expected to be cached; a
            miss then raises LookupError.
        params: Rating parameters (defaults: k=24, baseline=1200, min 10)
        refresh: Refetch every requested tournament even if cached
        dry_run: Compute everything but write neither file

    Returns:
        PipelineResult summary

    Raises:
        FetchError: If any fetch fails (nothing is written)
        CacheWriteError / OutputWriteError: If persisting fails
    """
    params = params or EloParams()
    # A tournament listed twice is still rated once
    tournament_ids = list(dict.fromkeys(tournament_ids))
    started_at = _utc_now()
    timings: dict[str, float] = {}

    # --- Step 1-2: Resolve tournaments ---
    t0 = perf_counter()
    cache = TournamentCache.load(cache_path)
    fetched: list[str] = []
    cache_hits: list[str] = []

    for tid in tournament_ids:
        if tid in cache and not refresh:
            cache_hits.append(tid)
            continue
        if fetcher is None:
            raise LookupError(f"tournament '{tid}' is not cached and no fetcher is configured")
        cache.get_or_fetch(tid, fetcher, refresh=refresh)
        fetched.append(tid)
    timings["resolve_s"] = round(perf_counter() - t0, 3)

    # --- Step 3: Persist cache ---
    if not dry_run:
        cache.save(cache_path)

    # --- Step 4-5: Rate ---
    t0 = perf_counter()
    matches = sort_chronologically(cache.matches_for(tournament_ids))
    ratings = RatingEngine(params).run(matches)
    timings["rate_s"] = round(perf_counter() - t0, 3)
    logger.info(
        "Rated %d players from %d matches across %d tournaments",
        len(ratings),
        len(matches),
        len(tournament_ids),
    )

    # --- Step 6: Persist ratings ---
    if not dry_run:
        write_ratings(ratings, output_path)

    return PipelineResult(
        requested=list(tournament_ids),
        fetched=fetched,
        cache_hits=cache_hits,
        match_count=len(matches),
        ratings=ratings,
        started_at=started_at,
        ended_at=_utc_now(),
        dry_run=dry_run,
        timings=timings,
    )
