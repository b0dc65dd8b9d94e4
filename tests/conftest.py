"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from chelo.challonge.records import parse_matches, parse_participants
from chelo.models import MatchResult

BASE_TIME = datetime(2024, 3, 2, 18, 0, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """Timestamp ``minutes`` after a fixed base time."""
    return BASE_TIME + timedelta(minutes=minutes)


def match(minutes: int, winner: str, loser: str) -> MatchResult:
    return MatchResult(timestamp=at(minutes), winner=winner, loser=loser)


@pytest.fixture
def participants_payload():
    """
    participants.json body for a four-player bracket.

    ``carol`` only has a secondary username, ``Guest Dave`` has none.
    """
    return [
        {"participant": {"id": 1, "name": "Alice", "challonge_username": "alice", "username": "alice_old"}},
        {"participant": {"id": 2, "name": "Bob", "challonge_username": "bob", "seed": 2}},
        {"participant": {"id": 3, "name": "Carol", "challonge_username": "", "username": "carol"}},
        {"participant": {"id": 4, "name": "Guest Dave", "challonge_username": None, "username": None}},
    ]


@pytest.fixture
def matches_payload():
    """matches.json body; match 103 involves the unresolvable guest."""
    return [
        {"match": {"id": 101, "state": "complete", "player1_id": 1, "player2_id": 2,
                   "winner_id": 1, "loser_id": 2, "scores_csv": "2-1",
                   "updated_at": "2024-03-02T18:10:00-05:00"}},
        {"match": {"id": 102, "state": "complete", "player1_id": 3, "player2_id": 1,
                   "winner_id": 3, "loser_id": 1, "scores_csv": "2-0",
                   "updated_at": "2024-03-02T18:05:00-05:00"}},
        {"match": {"id": 103, "state": "complete", "player1_id": 2, "player2_id": 4,
                   "winner_id": 4, "loser_id": 2, "scores_csv": "2-0",
                   "updated_at": "2024-03-02T18:20:00-05:00"}},
    ]


@pytest.fixture
def raw_participants(participants_payload):
    return parse_participants(participants_payload)


@pytest.fixture
def raw_matches(matches_payload):
    return parse_matches(matches_payload)


class FakeResponse:
    """Just enough of requests.Response for ChallongeClient."""

    def __init__(self, status_code=200, payload=None, json_error=None, url="https://api.test/x"):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error
        self.url = url

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session.

    ``routes`` maps a URL suffix (e.g. "t1/matches.json") to a list of
    responses (or exceptions) handed out in order.
    """

    def __init__(self, routes):
        self.routes = {key: list(values) for key, values in routes.items()}
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        for suffix, queue in self.routes.items():
            if url.endswith(suffix):
                item = queue.pop(0) if len(queue) > 1 else queue[0]
                if isinstance(item, Exception):
                    raise item
                return item
        return FakeResponse(status_code=404)

    def close(self):
        self.closed = True
