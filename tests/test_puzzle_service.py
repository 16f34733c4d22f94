"""
Tests for ferdle.services.puzzle_service.
"""

from datetime import datetime, timezone
from unittest import mock

import pytest
import requests

from ferdle.services.puzzle_service import PuzzleFetchError, PuzzleService, today_date_string

PAYLOAD = {
    "id": 2500,
    "solution": "crane",
    "print_date": "2024-06-01",
    "days_since_launch": 1443,
    "editor": "Tracy Bennett"
}


def _service(response=None, error=None):
    session = mock.Mock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return PuzzleService(url_template="https://puzzles.test/{date}.json", timeout=3, session=session), session


def _response(payload=PAYLOAD, status_error=None, json_error=None):
    response = mock.Mock()
    response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def test_fetch_puzzle_decodes_payload():
    service, session = _service(_response())

    puzzle = service.fetch_puzzle("2024-06-01")

    session.get.assert_called_once_with("https://puzzles.test/2024-06-01.json", timeout=3.0)
    assert puzzle.solution == "CRANE"
    assert puzzle.days_since_launch == 1443


def test_fetch_puzzle_defaults_to_today():
    service, session = _service(_response())
    with mock.patch("ferdle.services.puzzle_service.today_date_string", return_value="2024-06-01"):
        service.fetch_puzzle()
    session.get.assert_called_once_with("https://puzzles.test/2024-06-01.json", timeout=3.0)


def test_network_error():
    service, _ = _service(error=requests.ConnectionError("offline"))
    with pytest.raises(PuzzleFetchError) as info:
        service.fetch_puzzle("2024-06-01")
    assert info.value.reason == "network"


def test_http_error():
    service, _ = _service(_response(status_error=requests.HTTPError("404 Not Found")))
    with pytest.raises(PuzzleFetchError) as info:
        service.fetch_puzzle("2024-06-01")
    assert info.value.reason == "http"


def test_invalid_json():
    service, _ = _service(_response(json_error=ValueError("Expecting value")))
    with pytest.raises(PuzzleFetchError) as info:
        service.fetch_puzzle("2024-06-01")
    assert info.value.reason == "decode"


@pytest.mark.parametrize("payload", [
    {"print_date": "2024-06-01", "days_since_launch": 1},
    {"solution": "toolong", "print_date": "2024-06-01", "days_since_launch": 1},
    {"solution": "crane", "print_date": "2024-06-01", "days_since_launch": "soon"},
    ["crane"],
])
def test_malformed_payload(payload):
    service, _ = _service(_response(payload=payload))
    with pytest.raises(PuzzleFetchError) as info:
        service.fetch_puzzle("2024-06-01")
    assert info.value.reason == "decode"


def test_today_date_string_uses_eastern_time():
    # 03:00 UTC on Jan 2 is still Jan 1 in New York
    assert today_date_string(datetime(2024, 1, 2, 3, 0, tzinfo=timezone.utc)) == "2024-01-01"
    assert today_date_string(datetime(2024, 1, 2, 6, 0, tzinfo=timezone.utc)) == "2024-01-02"


def test_today_date_string_rejects_naive_datetime():
    with pytest.raises(ValueError):
        today_date_string(datetime(2024, 1, 2, 3, 0))
