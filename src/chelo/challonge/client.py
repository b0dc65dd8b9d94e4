"""
Challonge v1 REST API client.

Fetches the two collections rating needs for a tournament: its completed
matches and its participants. Uses a single requests.Session per client so
connections are reused across tournaments.

Key features:
- Context manager for proper resource cleanup
- Optional retry with exponential backoff (off by default: one attempt)
- Every transport, HTTP or decoding problem surfaces as FetchError
- The API key is scrubbed from error messages and logs
"""

from __future__ import annotations

import json
import logging
import random
import time
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import quote

import requests

from chelo.challonge.normalize import normalize
from chelo.challonge.records import RawMatch, RawParticipant, parse_matches, parse_participants
from chelo.config import settings
from chelo.errors import FetchError
from chelo.models import MatchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _RetryableStatus(Exception):
    """Internal marker for 5xx / 429 responses worth another attempt."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}")


def _quote_id(tournament_id: str) -> str:
    """Escape an id for use as one URL path segment."""
    return quote(tournament_id, safe="")


class ChallongeClient:
    """
    Synchronous client for the Challonge v1 API.

    Usage:
        with ChallongeClient(api_key) as client:
            matches = client.fetch_tournament("my_bracket")
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_base_delay: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.base_url = (base_url or settings.challonge_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.max_attempts = max_attempts if max_attempts is not None else settings.fetch_max_attempts
        self.retry_base_delay = (
            retry_base_delay if retry_base_delay is not None else settings.fetch_retry_base_delay
        )
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def __enter__(self) -> "ChallongeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    # =========================================================================
    # Public API
    # =========================================================================

    def fetch_matches(self, tournament_id: str) -> list[RawMatch]:
        """Fetch completed matches for a tournament."""
        payload = self._get_json(
            tournament_id,
            f"tournaments/{_quote_id(tournament_id)}/matches.json",
            {"state": "complete"},
        )
        return self._parse(tournament_id, parse_matches, payload)

    def fetch_participants(self, tournament_id: str) -> list[RawParticipant]:
        """Fetch the participant list for a tournament."""
        payload = self._get_json(
            tournament_id,
            f"tournaments/{_quote_id(tournament_id)}/participants.json",
            {},
        )
        return self._parse(tournament_id, parse_participants, payload)

    def fetch_tournament(self, tournament_id: str) -> list[MatchResult]:
        """
        Fetch and normalize one tournament.

        This is the fetcher handed to TournamentCache.get_or_fetch. Either
        request failing aborts the whole tournament; nothing partial is
        returned.

        Raises:
            FetchError: If either request fails
        """
        logger.info("Fetching tournament %s", tournament_id)
        raw_matches = self.fetch_matches(tournament_id)
        raw_participants = self.fetch_participants(tournament_id)
        return normalize(raw_matches, raw_participants, tournament_id=tournament_id)

    # =========================================================================
    # Internals
    # =========================================================================

    def _scrub(self, text: str) -> str:
        return text.replace(self.api_key, "***")

    def _parse(self, tournament_id: str, parser: Callable[[Any], T], payload: Any) -> T:
        try:
            return parser(payload)
        except ValueError as e:
            raise FetchError(tournament_id, f"unexpected response shape: {e}") from e

    def _get_json(self, tournament_id: str, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}/{path}"
        query = {"api_key": self.api_key, **params}

        last_error: Optional[Exception] = None
        for attempt in range(self.max_attempts):
            try:
                return self._request(tournament_id, url, query)
            except (requests.exceptions.JSONDecodeError, json.JSONDecodeError) as e:
                # Checked before RequestException, which requests' JSONDecodeError also is
                raise FetchError(tournament_id, f"invalid JSON from {path}") from e
            except (requests.RequestException, _RetryableStatus) as e:
                last_error = e
                if attempt < self.max_attempts - 1:
                    # Exponential backoff with jitter
                    delay = self.retry_base_delay * (2 ** attempt)
                    delay += random.uniform(0, 1)
                    logger.warning(
                        "[Retry %d/%d] GET %s failed: %s. Retrying in %.1fs...",
                        attempt + 1,
                        self.max_attempts,
                        path,
                        self._scrub(str(e)),
                        delay,
                    )
                    time.sleep(delay)

        raise FetchError(tournament_id, self._scrub(str(last_error))) from last_error

    def _request(self, tournament_id: str, url: str, query: dict[str, str]) -> Any:
        response = self.session.get(url, params=query, timeout=self.timeout)
        if response.status_code == 429 or response.status_code >= 500:
            raise _RetryableStatus(response.status_code)
        if response.status_code >= 400:
            # Client errors (bad key, unknown tournament) won't fix themselves
            raise FetchError(tournament_id, f"HTTP {response.status_code}")
        return response.json()
