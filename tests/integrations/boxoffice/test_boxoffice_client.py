from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import requests

from movie_ratings.config import Settings
from movie_ratings.integrations.boxoffice.client import (
    BoxOfficeData,
    HttpBoxOfficeClient,
    build_box_office_client,
    parse_box_office_payload,
)

API_URL = "https://boxoffice.example.com/v1/movies"

SAMPLE_PAYLOAD = {
    "title": "Dune",
    "distributor": "Warner Bros.",
    "budget": 165000000,
    "mpa_rating": "PG-13",
    "revenue": {"worldwide": 402000000, "opening_weekend_usa": 41000000},
}


def _response(status_code: int = 200, payload=None, text: str = "") -> MagicMock:  # noqa: ANN001
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def _client(session: MagicMock) -> HttpBoxOfficeClient:
    return HttpBoxOfficeClient(API_URL, "secret", timeout_seconds=2.5, session=session)


def test_success_parses_payload_and_sends_title_and_key() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload=SAMPLE_PAYLOAD)

    data = _client(session).get_box_office_data("Dune")

    assert data == BoxOfficeData(
        title="Dune",
        distributor="Warner Bros.",
        budget=165000000,
        mpa_rating="PG-13",
        worldwide=402000000,
        opening_weekend_usa=41000000,
    )
    args, kwargs = session.get.call_args
    assert args == (API_URL,)
    assert kwargs["params"] == {"title": "Dune", "apikey": "secret"}
    assert kwargs["timeout"] == 2.5


def test_network_error_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("connection refused")

    with caplog.at_level(logging.WARNING):
        assert _client(session).get_box_office_data("Dune") is None
    assert "Box office request failed" in caplog.text


def test_timeout_returns_none() -> None:
    session = MagicMock()
    session.get.side_effect = requests.Timeout("read timed out")

    assert _client(session).get_box_office_data("Dune") is None


@pytest.mark.parametrize("status_code", [401, 404, 429, 500, 503])
def test_non_success_status_returns_none(status_code: int) -> None:
    session = MagicMock()
    session.get.return_value = _response(status_code=status_code, payload=SAMPLE_PAYLOAD, text="nope")

    assert _client(session).get_box_office_data("Dune") is None


def test_non_json_body_returns_none() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload=ValueError("Expecting value"), text="<html>")

    assert _client(session).get_box_office_data("Dune") is None


def test_unexpected_json_shape_returns_none() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload=["not", "an", "object"])

    assert _client(session).get_box_office_data("Dune") is None


def test_zero_and_missing_values_become_unset() -> None:
    data = parse_box_office_payload({"distributor": "", "budget": 0, "revenue": {"worldwide": 10}})

    assert data is not None
    assert data.distributor is None
    assert data.budget is None
    assert data.mpa_rating is None
    assert data.worldwide == 10
    assert data.opening_weekend_usa is None


def test_payload_strings_are_trimmed_like_stored_rows() -> None:
    payload = {"distributor": " Warner Bros. ", "budget": "165000000", "mpa_rating": "PG-13 ", "revenue": {"worldwide": 1}}

    data = parse_box_office_payload(payload)

    assert data is not None
    assert data.distributor == "Warner Bros."
    assert data.budget == 165000000
    assert data.mpa_rating == "PG-13"


def test_build_client_requires_url_and_key() -> None:
    assert build_box_office_client(Settings()) is None
    assert build_box_office_client(Settings(boxoffice_url=API_URL)) is None
    assert build_box_office_client(Settings(boxoffice_api_key="secret")) is None

    client = build_box_office_client(Settings(boxoffice_url=API_URL, boxoffice_api_key="secret"))
    assert isinstance(client, HttpBoxOfficeClient)
