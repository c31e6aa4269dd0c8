from __future__ import annotations

import threading

import pytest

from movie_ratings.errors import ConflictError, NotFoundError
from movie_ratings.integrations.boxoffice.client import BoxOfficeData
from movie_ratings.models.movies import MovieFilter, MoviePage, MovieRecord
from movie_ratings.models.ratings import RatingAggregate, RatingRecord
from movie_ratings.repositories.movies import normalize_limit
from movie_ratings.repositories.ratings import aggregate_scores
from movie_ratings.utils.cursor import decode_cursor, encode_cursor


class InMemoryMovieStore:
    """Dict-backed MovieStore with the same ordering and uniqueness rules as `core.movies`."""

    def __init__(self) -> None:
        self.rows: dict[str, MovieRecord] = {}
        self.create_calls = 0
        self._lock = threading.Lock()

    def create(self, movie: MovieRecord) -> str:
        with self._lock:
            self.create_calls += 1
            if movie.title in self.rows:
                raise ConflictError(f"Movie with title '{movie.title}' already exists.")
            self.rows[movie.title] = movie
        return movie.id

    def get_by_title(self, title: str) -> MovieRecord | None:
        return self.rows.get(title)

    def list(self, movie_filter: MovieFilter, limit: int | None = None, cursor: str | None = None) -> MoviePage:
        page_size = normalize_limit(limit)
        after = decode_cursor(cursor) if cursor else None

        def matches(movie: MovieRecord) -> bool:
            if movie_filter.q and movie_filter.q.casefold() not in movie.title.casefold():
                return False
            if movie_filter.year and not movie.release_date.startswith(f"{movie_filter.year:04d}-"):
                return False
            if movie_filter.genre and movie_filter.genre.casefold() not in movie.genre.casefold():
                return False
            if movie_filter.distributor and movie_filter.distributor.casefold() not in (movie.distributor or "").casefold():
                return False
            if movie_filter.max_budget is not None and (movie.budget is None or movie.budget > movie_filter.max_budget):
                return False
            if movie_filter.mpa_rating and movie.mpa_rating != movie_filter.mpa_rating:
                return False
            if after is not None:
                if movie.release_date > after.release_date:
                    return False
                if movie.release_date == after.release_date and movie.title <= after.title:
                    return False
            return True

        rows = sorted((m for m in self.rows.values() if matches(m)), key=lambda m: m.title)
        rows.sort(key=lambda m: m.release_date, reverse=True)
        rows = rows[: page_size + 1]

        next_cursor = None
        if len(rows) > page_size:
            rows = rows[:page_size]
            next_cursor = encode_cursor(rows[-1].release_date, rows[-1].title)
        return MoviePage(items=rows, next_cursor=next_cursor)

    def update(self, movie: MovieRecord) -> MovieRecord:
        existing = self.rows.get(movie.title)
        if existing is None:
            raise NotFoundError(f"Movie '{movie.title}' not found.")
        updated = existing.with_updates(
            distributor=movie.distributor,
            budget=movie.budget,
            mpa_rating=movie.mpa_rating,
            box_office=movie.box_office,
        )
        self.rows[movie.title] = updated
        return updated


class InMemoryRatingStore:
    def __init__(self) -> None:
        self.rows: dict[tuple[str, str], RatingRecord] = {}
        self._lock = threading.Lock()

    def upsert(self, rating: RatingRecord) -> RatingRecord:
        with self._lock:
            self.rows[(rating.movie_title, rating.rater_id)] = rating
        return rating

    def get_by_movie_and_rater(self, movie_title: str, rater_id: str) -> RatingRecord | None:
        return self.rows.get((movie_title, rater_id))

    def get_aggregate_by_movie(self, movie_title: str) -> RatingAggregate:
        return aggregate_scores(r.score for (title, _), r in self.rows.items() if title == movie_title)


class FakeBoxOfficeClient:
    def __init__(self, data: BoxOfficeData | None = None) -> None:
        self.data = data
        self.calls: list[str] = []

    def get_box_office_data(self, movie_title: str) -> BoxOfficeData | None:
        self.calls.append(movie_title)
        return self.data


def make_box_office_data(**overrides) -> BoxOfficeData:  # noqa: ANN003
    values = {
        "title": "Dune",
        "distributor": "Warner Bros.",
        "budget": 165_000_000,
        "mpa_rating": "PG-13",
        "worldwide": 402_000_000,
        "opening_weekend_usa": 41_000_000,
    }
    values.update(overrides)
    return BoxOfficeData(**values)


@pytest.fixture
def movie_store() -> InMemoryMovieStore:
    return InMemoryMovieStore()


@pytest.fixture
def rating_store() -> InMemoryRatingStore:
    return InMemoryRatingStore()
