from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from postgrest.exceptions import APIError
from supabase import Client

from movie_ratings.db.supabase import describe_error, is_unique_violation
from movie_ratings.errors import ConflictError, NotFoundError, StorageError
from movie_ratings.models.movies import MovieFilter, MoviePage, MovieRecord
from movie_ratings.utils.cursor import decode_cursor, encode_cursor

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

_MUTABLE_COLUMNS = ("distributor", "budget", "mpa_rating", "box_office")


class MovieStore(Protocol):
    """
    Port used by the services to persist and query movies.

    Implementations must enforce title uniqueness atomically: `create` raises
    `ConflictError` when the title is taken, even if a concurrent request won
    the race after the caller's own existence check.
    """

    def create(self, movie: MovieRecord) -> str: ...

    def get_by_title(self, title: str) -> MovieRecord | None: ...

    def list(self, movie_filter: MovieFilter, limit: int | None = None, cursor: str | None = None) -> MoviePage: ...

    def update(self, movie: MovieRecord) -> MovieRecord: ...


def normalize_limit(limit: int | None) -> int:
    if limit is None or limit <= 0:
        return DEFAULT_PAGE_SIZE
    return int(limit)


def _quote_filter_value(value: str) -> str:
    # PostgREST logic-tree values containing reserved characters must be double-quoted.
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _substring_pattern(value: str) -> str:
    return f"%{value}%"


def _first_row(data: Any) -> dict[str, Any] | None:
    if isinstance(data, list) and data:
        row = data[0]
        return row if isinstance(row, dict) else None
    if isinstance(data, dict):
        return data
    return None


class SupabaseMovieStore(MovieStore):
    """
    `core.movies` accessed through the Supabase PostgREST client.
    """

    def __init__(self, db: Client, *, schema: str = "core", table: str = "movies") -> None:
        self._db = db
        self._schema = schema
        self._table = table

    def _query(self):
        return self._db.schema(self._schema).table(self._table)

    def _execute(self, build: Callable[[], Any], context: str) -> Any:
        try:
            response = build().execute()
        except APIError as exc:
            if is_unique_violation(exc):
                raise ConflictError(f"Movie already exists ({context}).") from exc
            logger.error(f"Supabase error during {context}: {describe_error(exc)}")
            raise StorageError(f"Supabase error during {context}: {describe_error(exc)}", code=exc.code) from exc

        error = getattr(response, "error", None)
        if error:
            if is_unique_violation(error):
                raise ConflictError(f"Movie already exists ({context}).")
            logger.error(f"Supabase error during {context}: {describe_error(error)}")
            raise StorageError(f"Supabase error during {context}: {describe_error(error)}")
        return response.data

    def create(self, movie: MovieRecord) -> str:
        try:
            data = self._execute(lambda: self._query().insert(movie.to_row()), "inserting movie")
        except ConflictError as exc:
            raise ConflictError(f"Movie with title '{movie.title}' already exists.") from exc
        row = _first_row(data)
        if row is None:
            raise StorageError("Supabase insert returned no data for movie.")
        return str(row.get("id") or movie.id)

    def get_by_title(self, title: str) -> MovieRecord | None:
        data = self._execute(
            lambda: self._query().select("*").eq("title", title).limit(1),
            "finding movie by title",
        )
        row = _first_row(data)
        return MovieRecord.from_row(row) if row is not None else None

    def list(self, movie_filter: MovieFilter, limit: int | None = None, cursor: str | None = None) -> MoviePage:
        page_size = normalize_limit(limit)
        after = decode_cursor(cursor) if cursor else None

        def build():
            query = self._query().select("*")
            if movie_filter.q:
                query = query.ilike("title", _substring_pattern(movie_filter.q))
            if movie_filter.year:
                year = int(movie_filter.year)
                query = query.gte("release_date", f"{year:04d}-01-01").lt("release_date", f"{year + 1:04d}-01-01")
            if movie_filter.genre:
                query = query.ilike("genre", _substring_pattern(movie_filter.genre))
            if movie_filter.distributor:
                query = query.ilike("distributor", _substring_pattern(movie_filter.distributor))
            if movie_filter.max_budget is not None:
                query = query.lte("budget", int(movie_filter.max_budget))
            if movie_filter.mpa_rating:
                query = query.eq("mpa_rating", movie_filter.mpa_rating)
            if after is not None:
                release_date = _quote_filter_value(after.release_date)
                query = query.or_(
                    f"release_date.lt.{release_date},"
                    f"and(release_date.eq.{release_date},title.gt.{_quote_filter_value(after.title)})"
                )
            # One extra row tells us whether another page exists.
            return query.order("release_date", desc=True).order("title").limit(page_size + 1)

        data = self._execute(build, "listing movies")
        rows = [row for row in (data or []) if isinstance(row, dict)]
        items = [MovieRecord.from_row(row) for row in rows]

        next_cursor: str | None = None
        if len(items) > page_size:
            items = items[:page_size]
            last = items[-1]
            next_cursor = encode_cursor(last.release_date, last.title)
        return MoviePage(items=items, next_cursor=next_cursor)

    def update(self, movie: MovieRecord) -> MovieRecord:
        row = movie.to_row()
        patch = {column: row[column] for column in _MUTABLE_COLUMNS}
        data = self._execute(
            lambda: self._query().update(patch).eq("title", movie.title),
            "updating movie",
        )
        updated = _first_row(data)
        if updated is None:
            raise NotFoundError(f"Movie '{movie.title}' not found.")
        return MovieRecord.from_row(updated)
