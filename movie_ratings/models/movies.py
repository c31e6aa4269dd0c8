from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Mapping

BOX_OFFICE_CURRENCY = "USD"
BOX_OFFICE_SOURCE = "BoxOfficeAPI"


def as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        raw = value.strip()
        if raw.isdigit():
            return int(raw)
    return None


def as_str(value: Any) -> str | None:
    """Strip a string; blank or non-string values become None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(frozen=True)
class Revenue:
    worldwide: int
    opening_weekend_usa: int | None = None


@dataclass(frozen=True)
class BoxOffice:
    """
    Revenue snapshot attached to a movie (maps to `core.movies.box_office` jsonb).
    """

    revenue: Revenue
    last_updated: datetime
    currency: str = BOX_OFFICE_CURRENCY
    source: str = BOX_OFFICE_SOURCE

    def to_json(self) -> dict[str, Any]:
        revenue: dict[str, Any] = {"worldwide": self.revenue.worldwide}
        if self.revenue.opening_weekend_usa is not None:
            revenue["openingWeekendUSA"] = self.revenue.opening_weekend_usa
        return {
            "revenue": revenue,
            "currency": self.currency,
            "source": self.source,
            "lastUpdated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_json(cls, payload: Mapping[str, Any] | None) -> BoxOffice | None:
        if not isinstance(payload, Mapping):
            return None
        revenue = payload.get("revenue")
        revenue_map = revenue if isinstance(revenue, Mapping) else {}
        last_updated_raw = payload.get("lastUpdated")
        try:
            last_updated = datetime.fromisoformat(str(last_updated_raw).replace("Z", "+00:00"))
        except ValueError:
            return None
        return cls(
            revenue=Revenue(
                worldwide=as_int(revenue_map.get("worldwide")) or 0,
                opening_weekend_usa=as_int(revenue_map.get("openingWeekendUSA")),
            ),
            last_updated=last_updated,
            currency=as_str(payload.get("currency")) or BOX_OFFICE_CURRENCY,
            source=as_str(payload.get("source")) or BOX_OFFICE_SOURCE,
        )


@dataclass(frozen=True)
class MovieCreate:
    title: str
    release_date: str  # YYYY-MM-DD
    genre: str
    distributor: str | None = None
    budget: int | None = None
    mpa_rating: str | None = None


@dataclass(frozen=True)
class MovieRecord:
    """
    Canonical movie record (maps to `core.movies`).

    Only distributor, budget, mpa_rating and box_office change after creation.
    """

    id: str
    title: str
    release_date: str
    genre: str
    distributor: str | None = None
    budget: int | None = None
    mpa_rating: str | None = None
    box_office: BoxOffice | None = None

    def with_updates(self, **changes: Any) -> MovieRecord:
        return replace(self, **changes)

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "release_date": self.release_date,
            "genre": self.genre,
            "distributor": self.distributor,
            "budget": self.budget,
            "mpa_rating": self.mpa_rating,
            "box_office": self.box_office.to_json() if self.box_office else None,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> MovieRecord:
        return cls(
            id=str(row.get("id") or ""),
            title=str(row.get("title") or ""),
            release_date=str(row.get("release_date") or ""),
            genre=str(row.get("genre") or ""),
            distributor=as_str(row.get("distributor")),
            budget=as_int(row.get("budget")),
            mpa_rating=as_str(row.get("mpa_rating")),
            box_office=BoxOffice.from_json(row.get("box_office")),
        )


@dataclass(frozen=True)
class MovieFilter:
    """
    Listing predicates, combined with AND. Unset predicates are ignored.
    """

    q: str | None = None
    year: int | None = None
    genre: str | None = None
    distributor: str | None = None
    max_budget: int | None = None
    mpa_rating: str | None = None


@dataclass(frozen=True)
class MoviePage:
    items: list[MovieRecord] = field(default_factory=list)
    next_cursor: str | None = None
