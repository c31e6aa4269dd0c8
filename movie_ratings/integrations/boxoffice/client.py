from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

import requests

from movie_ratings.config import DEFAULT_BOXOFFICE_TIMEOUT_SECONDS, Settings
from movie_ratings.models.movies import as_int, as_str

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoxOfficeData:
    """Normalized provider payload for one title."""

    title: str | None
    distributor: str | None
    budget: int | None
    mpa_rating: str | None
    worldwide: int
    opening_weekend_usa: int | None


class BoxOfficeClient(Protocol):
    """
    Port used by the movie service to enrich new movies.

    Implementations never raise: any failure means "no data" and returns None.
    """

    def get_box_office_data(self, movie_title: str) -> BoxOfficeData | None: ...


def parse_box_office_payload(payload: Any) -> BoxOfficeData | None:
    if not isinstance(payload, Mapping):
        return None
    revenue = payload.get("revenue")
    revenue_map = revenue if isinstance(revenue, Mapping) else {}

    budget = as_int(payload.get("budget"))
    opening = as_int(revenue_map.get("opening_weekend_usa"))
    # The provider reports unknown numbers as 0.
    return BoxOfficeData(
        title=as_str(payload.get("title")),
        distributor=as_str(payload.get("distributor")),
        budget=budget if budget else None,
        mpa_rating=as_str(payload.get("mpa_rating")),
        worldwide=as_int(revenue_map.get("worldwide")) or 0,
        opening_weekend_usa=opening if opening else None,
    )


class HttpBoxOfficeClient(BoxOfficeClient):
    """
    Best-effort HTTP client for the box-office provider.

    `GET <api_url>?title=<title>&apikey=<key>`; every failure (network, timeout,
    non-200, bad JSON, wrong shape) is logged and collapses to None.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        *,
        timeout_seconds: float = DEFAULT_BOXOFFICE_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def get_box_office_data(self, movie_title: str) -> BoxOfficeData | None:
        params = {"title": movie_title, "apikey": self._api_key}
        headers = {"accept": "application/json"}
        try:
            resp = self._session.get(self._api_url, params=params, headers=headers, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            logger.warning(f"Box office request failed for {movie_title!r}: {exc}")
            return None

        if resp.status_code != 200:
            logger.warning(
                f"Box office request for {movie_title!r} failed with HTTP {resp.status_code}: {(resp.text or '')[:200]}"
            )
            return None

        try:
            payload = resp.json()
        except ValueError:
            logger.warning(f"Box office provider returned non-JSON response for {movie_title!r}.")
            return None

        data = parse_box_office_payload(payload)
        if data is None:
            logger.warning(f"Box office provider returned unexpected JSON shape for {movie_title!r}.")
        return data


def build_box_office_client(
    settings: Settings,
    *,
    session: requests.Session | None = None,
) -> BoxOfficeClient | None:
    """
    Returns None when the provider URL or key is missing; enrichment is then skipped.
    """
    if not settings.enrichment_enabled:
        logger.info("Box office enrichment disabled (BOXOFFICE_URL/BOXOFFICE_API_KEY not set).")
        return None
    return HttpBoxOfficeClient(
        settings.boxoffice_url,
        settings.boxoffice_api_key,
        timeout_seconds=settings.boxoffice_timeout_seconds,
        session=session,
    )
