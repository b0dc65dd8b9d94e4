"""
Normalization of raw Challonge records into MatchResult triples.

Challonge identifies match players by per-tournament participant ids, so a
participant directory (id -> account name) is built first and every match
is resolved through it. Participants without an account-linked name can't
be tracked across tournaments and are skipped, along with every match they
played.

Nothing here raises for bad or missing data: each problem is logged on this
module's logger (with structured ``extra`` fields) and the offending record
is excluded. The caller routes the log records wherever it wants.

Assumes the match list only holds completed matches; the client asks the
API for ``state=complete`` and this module does not re-check the state.
"""

from __future__ import annotations

import logging
from datetime import timezone
from typing import Iterable, Optional

from chelo.challonge.records import RawMatch, RawParticipant
from chelo.models import MatchResult

logger = logging.getLogger(__name__)


def resolve_participant_name(participant: RawParticipant) -> Optional[str]:
    """
    Pick the name a participant is rated under.

    Prefers the account-linked ``challonge_username`` and falls back to
    ``username``. Returns None if neither is set.
    """
    return participant.challonge_username or participant.username


def build_participant_directory(
    participants: Iterable[RawParticipant],
    *,
    tournament_id: Optional[str] = None,
) -> dict[int, str]:
    """
    Map participant ids to rated names for one tournament.

    Unresolvable participants (no username of either kind, or no id) are
    logged as warnings and left out.
    """
    directory: dict[int, str] = {}
    for participant in participants:
        name = resolve_participant_name(participant)
        if participant.id is not None and name is not None:
            directory[participant.id] = name
            continue
        logger.warning(
            "Skipping participant %s: %s",
            participant.label,
            "no participant id" if participant.id is None else "no Challonge username",
            extra={
                "tournament_id": tournament_id,
                "participant_id": participant.id,
                "participant_name": participant.display_name or participant.name,
            },
        )
    return directory


def normalize(
    raw_matches: Iterable[RawMatch],
    raw_participants: Iterable[RawParticipant],
    *,
    tournament_id: Optional[str] = None,
) -> list[MatchResult]:
    """
    Reduce raw matches to MatchResults, preserving input order.

    A match is emitted only when both its winner and loser resolve through
    the participant directory. Matches without a timestamp, and matches
    whose winner and loser resolve to the same name, are dropped with a
    warning.

    Args:
        raw_matches: Completed matches for one tournament
        raw_participants: Participants of the same tournament
        tournament_id: Only used to label diagnostics

    Returns:
        MatchResults in the same order as ``raw_matches``
    """
    directory = build_participant_directory(raw_participants, tournament_id=tournament_id)

    results: list[MatchResult] = []
    dropped = 0
    for match in raw_matches:
        winner = directory.get(match.winner_id) if match.winner_id is not None else None
        loser = directory.get(match.loser_id) if match.loser_id is not None else None
        if winner is None or loser is None:
            dropped += 1
            logger.debug(
                "Dropping match %s: unresolved participant (winner_id=%s, loser_id=%s)",
                match.id,
                match.winner_id,
                match.loser_id,
                extra={"tournament_id": tournament_id, "match_id": match.id},
            )
            continue

        if match.updated_at is None:
            dropped += 1
            logger.warning(
                "Dropping match %s: no updated_at timestamp",
                match.id,
                extra={"tournament_id": tournament_id, "match_id": match.id},
            )
            continue

        if winner == loser:
            dropped += 1
            logger.warning(
                "Dropping match %s: %s is recorded as both winner and loser",
                match.id,
                winner,
                extra={"tournament_id": tournament_id, "match_id": match.id},
            )
            continue

        timestamp = match.updated_at
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        results.append(MatchResult(timestamp=timestamp, winner=winner, loser=loser))

    if dropped:
        logger.info(
            "Normalized %d matches (%d dropped)",
            len(results),
            dropped,
            extra={"tournament_id": tournament_id},
        )
    return results
