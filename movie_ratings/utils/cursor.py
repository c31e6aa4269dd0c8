"""
Opaque keyset cursor for movie listings.

A cursor encodes the sort key (release_date, title) of the last row on a page,
so the next page starts strictly after it regardless of rows inserted meanwhile.
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime

from movie_ratings.errors import ValidationError


@dataclass(frozen=True)
class MovieCursor:
    release_date: str
    title: str


def encode_cursor(release_date: str, title: str) -> str:
    raw = json.dumps({"release_date": release_date, "title": title}, separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str) -> MovieCursor:
    padded = token.strip() + "=" * (-len(token.strip()) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise ValidationError("Invalid cursor.") from exc

    if not isinstance(payload, dict):
        raise ValidationError("Invalid cursor.")
    release_date = payload.get("release_date")
    title = payload.get("title")
    if not isinstance(release_date, str) or not isinstance(title, str):
        raise ValidationError("Invalid cursor.")
    try:
        datetime.strptime(release_date, "%Y-%m-%d")
    except ValueError as exc:
        raise ValidationError("Invalid cursor.") from exc
    return MovieCursor(release_date=release_date, title=title)
