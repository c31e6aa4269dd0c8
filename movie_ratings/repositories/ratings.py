from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Iterable, Protocol

from postgrest.exceptions import APIError
from supabase import Client

from movie_ratings.db.supabase import describe_error
from movie_ratings.errors import StorageError
from movie_ratings.models.ratings import RatingAggregate, RatingRecord

logger = logging.getLogger(__name__)


class RatingStore(Protocol):
    """
    Port used by the services to persist ratings and read their aggregate.

    `upsert` must be a single atomic insert-or-replace per (movie_title, rater_id).
    """

    def upsert(self, rating: RatingRecord) -> RatingRecord: ...

    def get_by_movie_and_rater(self, movie_title: str, rater_id: str) -> RatingRecord | None: ...

    def get_aggregate_by_movie(self, movie_title: str) -> RatingAggregate: ...


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def round_average(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def aggregate_scores(scores: Iterable[float]) -> RatingAggregate:
    values = [float(s) for s in scores]
    if not values:
        return RatingAggregate(average=0.0, count=0)
    return RatingAggregate(average=round_average(sum(values) / len(values)), count=len(values))


class SupabaseRatingStore(RatingStore):
    """
    `core.ratings` accessed through the Supabase PostgREST client.

    The table's primary key is (movie_title, rater_id), so the upsert maps to
    `INSERT ... ON CONFLICT DO UPDATE` and never loses a concurrent write.
    """

    def __init__(self, db: Client, *, schema: str = "core", table: str = "ratings") -> None:
        self._db = db
        self._schema = schema
        self._table = table

    def _query(self):
        return self._db.schema(self._schema).table(self._table)

    def _execute(self, build: Callable[[], Any], context: str) -> Any:
        try:
            response = build().execute()
        except APIError as exc:
            logger.error(f"Supabase error during {context}: {describe_error(exc)}")
            raise StorageError(f"Supabase error during {context}: {describe_error(exc)}", code=exc.code) from exc

        error = getattr(response, "error", None)
        if error:
            logger.error(f"Supabase error during {context}: {describe_error(error)}")
            raise StorageError(f"Supabase error during {context}: {describe_error(error)}")
        return response.data

    def upsert(self, rating: RatingRecord) -> RatingRecord:
        payload = {
            "movie_title": rating.movie_title,
            "rater_id": rating.rater_id,
            "score": rating.score,
            "updated_at": _now_utc_iso(),
        }
        data = self._execute(
            lambda: self._query().upsert(payload, on_conflict="movie_title,rater_id"),
            "upserting rating",
        )
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return RatingRecord.from_row(data[0])
        return rating

    def get_by_movie_and_rater(self, movie_title: str, rater_id: str) -> RatingRecord | None:
        data = self._execute(
            lambda: self._query()
            .select("movie_title, rater_id, score")
            .eq("movie_title", movie_title)
            .eq("rater_id", rater_id)
            .limit(1),
            "finding rating by movie and rater",
        )
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return RatingRecord.from_row(data[0])
        return None

    def get_aggregate_by_movie(self, movie_title: str) -> RatingAggregate:
        data = self._execute(
            lambda: self._query().select("score").eq("movie_title", movie_title),
            "aggregating ratings",
        )
        rows = data if isinstance(data, list) else []
        return aggregate_scores(row["score"] for row in rows if isinstance(row, dict) and row.get("score") is not None)
