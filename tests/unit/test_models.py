"""Unit tests for MatchResult encoding."""

from datetime import datetime, timedelta, timezone

import pytest

from chelo.models import MatchResult, parse_timestamp


def test_parse_timestamp_keeps_offset():
    ts = parse_timestamp("2024-03-02T18:10:00-05:00")
    assert ts.utcoffset() == timedelta(hours=-5)


def test_parse_timestamp_naive_is_utc():
    assert parse_timestamp("2024-03-02T18:10:00") == datetime(2024, 3, 2, 18, 10, tzinfo=timezone.utc)


def test_row_round_trip():
    result = MatchResult(parse_timestamp("2024-03-02T18:10:00.250000+09:00"), "alice", "bob")
    assert MatchResult.from_row(result.to_row()) == result
    assert result.to_row() == ["2024-03-02T18:10:00.250000+09:00", "alice", "bob"]


def test_same_instant_different_offsets_are_equal():
    a = MatchResult(parse_timestamp("2024-03-02T23:00:00+00:00"), "x", "y")
    b = MatchResult(parse_timestamp("2024-03-02T18:00:00-05:00"), "x", "y")
    assert a == b


def test_immutable():
    result = MatchResult(parse_timestamp("2024-03-02T18:10:00Z"), "a", "b")
    with pytest.raises(AttributeError):
        result.winner = "c"


@pytest.mark.parametrize("row", [None, ["a", "b"], ("t", "a", "b", "c"), ["2024-03-02", 1, "b"]])
def test_from_row_rejects(row):
    with pytest.raises(ValueError):
        MatchResult.from_row(row)
