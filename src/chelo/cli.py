"""
Command-line entry point.

Normal usage (fetch anything new, rate everything listed):
    chelo -i tournaments.txt -k $CHALLONGE_API_KEY

Refetch tournaments even if they're cached (e.g. a bracket was corrected):
    chelo --refresh

See what would be rated without touching the cache or output files:
    chelo --dry-run

Defaults for every path and rating parameter come from CHELO_* environment
variables (see chelo.config).
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from chelo.challonge.client import ChallongeClient
from chelo.config import settings
from chelo.elo.engine import EloParams
from chelo.errors import ChEloError
from chelo.pipeline import read_tournament_ids, run_pipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chelo",
        description="Rate players from completed Challonge tournaments.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-i", "--input",
        default=settings.input_path,
        help="File with one tournament ID per line (default: %(default)s).",
    )
    parser.add_argument(
        "-c", "--cache",
        default=settings.cache_path,
        help="Tournament cache file (default: %(default)s).",
    )
    parser.add_argument(
        "-o", "--output",
        default=settings.output_path,
        help="Ratings output file (default: %(default)s).",
    )
    parser.add_argument(
        "-k", "--api-key",
        default=settings.challonge_api_key,
        help="Challonge API key (default: $CHELO_CHALLONGE_API_KEY).",
    )
    parser.add_argument(
        "--k-factor",
        type=float,
        default=settings.elo_k_factor,
        help="Elo K-factor (default: %(default)s).",
    )
    parser.add_argument(
        "--baseline",
        type=float,
        default=settings.elo_baseline,
        help="Offset added to every reported rating (default: %(default)s).",
    )
    parser.add_argument(
        "--min-matches",
        type=int,
        default=settings.elo_min_matches,
        help="Minimum matches for a player to be reported (default: %(default)s).",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Refetch every listed tournament even if it is cached.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute ratings but write neither the cache nor the output file.",
    )
    parser.add_argument(
        "--metrics-json",
        default=None,
        help="Write a JSON summary to this path on completion.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default: %(default)s).",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # urllib3 logs full request lines at DEBUG, api_key query parameter included
    logging.getLogger("urllib3").setLevel(max(getattr(logging, level), logging.INFO))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.api_key:
        print(
            "ERROR: a Challonge API key is required (--api-key or CHELO_CHALLONGE_API_KEY)",
            file=sys.stderr,
        )
        return EXIT_USAGE

    try:
        params = EloParams(k=args.k_factor, baseline=args.baseline, min_matches=args.min_matches)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        tournament_ids = read_tournament_ids(Path(args.input))
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read tournament list %s: %s", args.input, e)
        return EXIT_FAILURE

    print(f"CHELO  tournaments={len(tournament_ids)}  refresh={args.refresh}  dry_run={args.dry_run}")
    print("-" * 60)

    try:
        with ChallongeClient(args.api_key) as client:
            result = run_pipeline(
                tournament_ids,
                cache_path=Path(args.cache),
                output_path=Path(args.output),
                fetcher=client.fetch_tournament,
                params=params,
                refresh=args.refresh,
                dry_run=args.dry_run,
            )
    except ChEloError as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    # Print summary
    print("-" * 60)
    print(f"Requested:      {len(result.requested)}")
    print(f"Fetched:        {len(result.fetched)}")
    print(f"Cache hits:     {len(result.cache_hits)}")
    print(f"Matches:        {result.match_count}")
    print(f"Rated players:  {result.rated_players}")
    print(f"Elapsed:        {result.duration_s:.2f}s")
    if args.dry_run:
        print("(dry run - nothing written)")

    if args.metrics_json:
        metrics_path = Path(args.metrics_json)
        metrics_path.parent.mkdir(parents=True, exist_ok=True)
        metrics_path.write_text(json.dumps(result.to_dict(), indent=2) + "\n", encoding="utf-8")

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
