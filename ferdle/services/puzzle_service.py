"""
Puzzle Service

Fetches the daily puzzle over HTTP. The daily endpoint is keyed by the
calendar date in US Eastern time, so "today" changes at midnight New York.
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import requests

from ..models.game import Puzzle


class PuzzleFetchError(Exception):
    """Raised once per failed load attempt: transport, HTTP status or decoding."""

    def __init__(self, message: str, reason: str = 'network'):
        super().__init__(message)
        self.reason = reason


def today_date_string(now: Optional[datetime] = None, timezone: str = 'America/New_York') -> str:
    """
    Formats the puzzle date as YYYY-MM-DD in ``timezone``.

    Args:
        now: Moment to format (timezone-aware, defaults to the current time)
        timezone: IANA zone the puzzle calendar follows
    """
    zone = ZoneInfo(timezone)
    if now is None:
        now = datetime.now(zone)
    elif now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(zone).strftime('%Y-%m-%d')


class PuzzleService:
    """
    HTTP client for the daily puzzle endpoint.

    No retries happen here; the host decides whether to load again.
    """

    def __init__(self,
                 url_template: str = 'https://www.nytimes.com/svc/wordle/v2/{date}.json',
                 timezone: str = 'America/New_York',
                 timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.url_template = url_template
        self.timezone = timezone
        self.timeout = float(timeout)
        self._http = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> "PuzzleService":
        return cls(
            url_template=config.PUZZLE_URL_TEMPLATE,
            timezone=config.PUZZLE_TIMEZONE,
            timeout=config.REQUEST_TIMEOUT_SECONDS
        )

    def puzzle_url(self, date: str) -> str:
        return self.url_template.format(date=date)

    def fetch_puzzle(self, date: Optional[str] = None) -> Puzzle:
        """
        Fetches the puzzle for ``date`` (defaults to today in the puzzle timezone).

        Raises:
            PuzzleFetchError: On any transport, HTTP or decoding failure
        """
        date = date or today_date_string(timezone=self.timezone)
        url = self.puzzle_url(date)

        try:
            response = self._http.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise PuzzleFetchError(f"Puzzle request for {date} failed: {e}", reason='http') from e
        except requests.RequestException as e:
            raise PuzzleFetchError(f"Could not reach puzzle service for {date}: {e}", reason='network') from e

        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("Puzzle payload must be a JSON object")
            return Puzzle.from_api(payload)
        except (ValueError, KeyError, TypeError) as e:
            raise PuzzleFetchError(f"Could not decode puzzle for {date}: {e}", reason='decode') from e
