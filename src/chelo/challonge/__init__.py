"""
Challonge data source for chelo.

Key components:
- ChallongeClient: fetches completed matches and participants over HTTPS
- RawMatch / RawParticipant: pydantic models of the API's records
- normalize: reduces raw records to MatchResult triples

The data flow for a single tournament is:
    client.fetch_matches + client.fetch_participants -> normalize -> MatchResults
"""

from chelo.challonge.client import ChallongeClient
from chelo.challonge.normalize import build_participant_directory, normalize
from chelo.challonge.records import RawMatch, RawParticipant, parse_matches, parse_participants

__all__ = [
    "ChallongeClient",
    "RawMatch",
    "RawParticipant",
    "build_participant_directory",
    "normalize",
    "parse_matches",
    "parse_participants",
]
