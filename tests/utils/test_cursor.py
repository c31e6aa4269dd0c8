from __future__ import annotations

import base64

import pytest

from movie_ratings.errors import ValidationError
from movie_ratings.utils.cursor import MovieCursor, decode_cursor, encode_cursor


def test_cursor_is_opaque_and_url_safe() -> None:
    token = encode_cursor("2021-10-22", "Amélie / Part 2?")

    assert "=" not in token
    assert "/" not in token and "+" not in token
    assert decode_cursor(token) == MovieCursor(release_date="2021-10-22", title="Amélie / Part 2?")


@pytest.mark.parametrize(
    "token",
    [
        "",
        "next",
        "é",
        base64.urlsafe_b64encode(b"[1, 2]").decode(),
        base64.urlsafe_b64encode(b'{"release_date": 2021, "title": "Dune"}').decode(),
        base64.urlsafe_b64encode(b'{"release_date": "x,title.neq.zzz", "title": "A"}').decode(),
        base64.urlsafe_b64encode(b'{"release_date": "2021-13-40", "title": "Dune"}').decode(),
    ],
)
def test_malformed_cursor_raises_validation_error(token: str) -> None:
    with pytest.raises(ValidationError):
        decode_cursor(token)
