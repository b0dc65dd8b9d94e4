"""
Raw Challonge API records.

Challonge's v1 API wraps every object in an envelope keyed by its type:

    [{"match": {"id": 1, "winner_id": 10, ...}}, ...]
    [{"participant": {"id": 10, "challonge_username": "...", ...}}, ...]

Only a handful of fields matter for rating, so those are typed explicitly
and everything else is kept as pydantic extras (``model_extra``) without
being validated.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class RawMatch(BaseModel):
    """A match object as returned by ``/tournaments/{id}/matches.json``."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: Optional[int] = None
    state: Optional[str] = None
    player1_id: Optional[int] = None
    player2_id: Optional[int] = None
    winner_id: Optional[int] = None
    loser_id: Optional[int] = None
    round: Optional[int] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class RawParticipant(BaseModel):
    """A participant object as returned by ``/tournaments/{id}/participants.json``."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: Optional[int] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    username: Optional[str] = None
    challonge_username: Optional[str] = None

    @field_validator("name", "display_name", "username", "challonge_username")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Challonge sends empty strings for unset usernames."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def label(self) -> str:
        """Best human-readable label, used in diagnostics."""
        return self.display_name or self.name or f"#{self.id}"


def unwrap_envelope(item: Any, key: str) -> Any:
    """
    Strip the ``{"match": {...}}`` style envelope if present.

    Bare objects are passed through so fixtures and alternative API
    mirrors without envelopes still parse.
    """
    if isinstance(item, dict) and set(item) == {key}:
        return item[key]
    return item


def parse_matches(payload: Any) -> list[RawMatch]:
    """
    Validate a matches.json response body.

    Raises:
        ValueError: If the body is not a list of match objects
            (pydantic's ValidationError is a ValueError)
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array of matches, got {type(payload).__name__}")
    return [RawMatch.model_validate(unwrap_envelope(item, "match")) for item in payload]


def parse_participants(payload: Any) -> list[RawParticipant]:
    """
    Validate a participants.json response body.

    Raises:
        ValueError: If the body is not a list of participant objects
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array of participants, got {type(payload).__name__}")
    return [
        RawParticipant.model_validate(unwrap_envelope(item, "participant"))
        for item in payload
    ]
