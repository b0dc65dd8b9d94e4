"""
Unit tests for Challonge record parsing and normalization.

Covers:
- Username preference (account username over secondary username)
- Unresolvable participants are skipped with a warning, never raised
- Matches referencing skipped participants are dropped
- Input order is preserved
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from chelo.challonge.normalize import build_participant_directory, normalize, resolve_participant_name
from chelo.challonge.records import RawMatch, RawParticipant, parse_matches, parse_participants


class TestRecords:
    """Tests for the pydantic raw record models."""

    def test_envelopes_are_unwrapped(self, raw_matches, raw_participants):
        assert [m.id for m in raw_matches] == [101, 102, 103]
        assert [p.id for p in raw_participants] == [1, 2, 3, 4]

    def test_bare_objects_are_accepted(self):
        matches = parse_matches([{"id": 7, "winner_id": 1, "loser_id": 2}])
        assert matches[0].id == 7

    def test_unknown_fields_are_preserved(self, raw_matches):
        assert raw_matches[0].model_extra["scores_csv"] == "2-1"

    def test_timestamp_offset_is_kept(self, raw_matches):
        ts = raw_matches[0].updated_at
        assert ts.utcoffset() == timedelta(hours=-5)

    def test_blank_usernames_become_none(self, raw_participants):
        carol = raw_participants[2]
        assert carol.challonge_username is None
        assert carol.username == "carol"

    def test_non_list_payload_raises(self):
        with pytest.raises(ValueError):
            parse_matches({"match": {}})
        with pytest.raises(ValueError):
            parse_participants("nope")


class TestParticipantDirectory:
    """Tests for build_participant_directory."""

    def test_prefers_account_username(self):
        p = RawParticipant(id=1, challonge_username="alice", username="alice_old")
        assert resolve_participant_name(p) == "alice"

    def test_falls_back_to_username(self):
        p = RawParticipant(id=1, username="carol")
        assert resolve_participant_name(p) == "carol"

    def test_unresolvable_returns_none(self):
        assert resolve_participant_name(RawParticipant(id=1, name="Guest")) is None

    def test_directory_skips_unresolvable(self, raw_participants, caplog):
        with caplog.at_level(logging.WARNING, logger="chelo.challonge.normalize"):
            directory = build_participant_directory(raw_participants, tournament_id="t1")

        assert directory == {1: "alice", 2: "bob", 3: "carol"}
        assert "Guest Dave" in caplog.text
        record = next(r for r in caplog.records if "Guest Dave" in r.getMessage())
        assert record.participant_id == 4
        assert record.tournament_id == "t1"

    def test_participant_without_id_is_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="chelo.challonge.normalize"):
            directory = build_participant_directory([RawParticipant(name="Ghost", username="ghost")])

        assert directory == {}
        message = caplog.records[0].getMessage()
        assert message == "Skipping participant Ghost: no participant id"

    def test_participant_without_username_reason(self, caplog):
        with caplog.at_level(logging.WARNING, logger="chelo.challonge.normalize"):
            build_participant_directory([RawParticipant(id=9, name="Guest")])
        assert caplog.records[0].getMessage() == "Skipping participant Guest: no Challonge username"


class TestNormalize:
    """Tests for normalize()."""

    def test_resolves_and_preserves_order(self, raw_matches, raw_participants):
        results = normalize(raw_matches, raw_participants)

        assert [(r.winner, r.loser) for r in results] == [("alice", "bob"), ("carol", "alice")]
        # Input order, not chronological order (102 happened before 101)
        assert results[0].timestamp > results[1].timestamp

    def test_match_with_unknown_participant_is_dropped(self, raw_participants):
        raw = [RawMatch(id=1, winner_id=1, loser_id=99, updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc))]
        assert normalize(raw, raw_participants) == []

    def test_match_without_winner_is_dropped(self, raw_participants):
        raw = [RawMatch(id=1, winner_id=None, loser_id=2, updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc))]
        assert normalize(raw, raw_participants) == []

    def test_match_without_timestamp_is_dropped(self, raw_participants, caplog):
        raw = [RawMatch(id=5, winner_id=1, loser_id=2)]
        with caplog.at_level(logging.WARNING, logger="chelo.challonge.normalize"):
            assert normalize(raw, raw_participants) == []
        assert "no updated_at" in caplog.text

    def test_naive_timestamp_is_treated_as_utc(self, raw_participants):
        raw = [RawMatch(id=1, winner_id=1, loser_id=2, updated_at=datetime(2024, 1, 1, 12, 0))]
        (result,) = normalize(raw, raw_participants)
        assert result.timestamp == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_self_play_is_rejected(self, caplog):
        participants = [
            RawParticipant(id=1, challonge_username="same"),
            RawParticipant(id=2, challonge_username="same"),
        ]
        raw = [RawMatch(id=9, winner_id=1, loser_id=2, updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc))]
        with caplog.at_level(logging.WARNING, logger="chelo.challonge.normalize"):
            assert normalize(raw, participants) == []
        assert "both winner and loser" in caplog.text

    def test_empty_inputs(self):
        assert normalize([], []) == []

    def test_all_unresolvable_gives_empty_list(self, raw_matches):
        participants = [RawParticipant(id=i, name=f"Guest {i}") for i in range(1, 5)]
        assert normalize(raw_matches, participants) == []
