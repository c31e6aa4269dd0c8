from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from movie_ratings.errors import ConflictError, NotFoundError, ValidationError
from movie_ratings.integrations.boxoffice.client import BoxOfficeClient, BoxOfficeData
from movie_ratings.models.movies import (
    BOX_OFFICE_CURRENCY,
    BOX_OFFICE_SOURCE,
    BoxOffice,
    MovieCreate,
    MovieFilter,
    MoviePage,
    MovieRecord,
    Revenue,
    as_str,
)
from movie_ratings.repositories.movies import MovieStore

logger = logging.getLogger(__name__)

RELEASE_DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class RefreshResult:
    movie: MovieRecord
    changed: bool


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def generate_movie_id(title: str, created_at: datetime) -> str:
    clean_title = title.lower().replace(" ", "_")
    millis = int(created_at.timestamp() * 1000)
    return f"m_{clean_title[:10]}_{millis}"


def validate_movie_create(movie: MovieCreate) -> None:
    if not isinstance(movie.title, str) or not movie.title.strip():
        raise ValidationError("Title is required.")
    if not isinstance(movie.genre, str) or not movie.genre.strip():
        raise ValidationError("Genre is required.")
    if not isinstance(movie.release_date, str) or not movie.release_date.strip():
        raise ValidationError("Release date is required.")
    try:
        datetime.strptime(movie.release_date, RELEASE_DATE_FORMAT)
    except ValueError as exc:
        raise ValidationError("Release date must be in YYYY-MM-DD format.") from exc
    if movie.budget is not None:
        if isinstance(movie.budget, bool) or not isinstance(movie.budget, int) or movie.budget < 0:
            raise ValidationError("Budget must be a non-negative integer.")


def merge_box_office(movie: MovieRecord, data: BoxOfficeData, *, fetched_at: datetime) -> MovieRecord:
    """
    Fold provider data into a movie. Values already on the movie always win;
    the revenue snapshot itself only ever comes from the provider.
    """
    return movie.with_updates(
        distributor=movie.distributor if movie.distributor is not None else data.distributor,
        budget=movie.budget if movie.budget is not None else data.budget,
        mpa_rating=movie.mpa_rating if movie.mpa_rating is not None else data.mpa_rating,
        box_office=BoxOffice(
            revenue=Revenue(worldwide=data.worldwide, opening_weekend_usa=data.opening_weekend_usa),
            last_updated=fetched_at,
            currency=BOX_OFFICE_CURRENCY,
            source=BOX_OFFICE_SOURCE,
        ),
    )


class MovieService:
    def __init__(self, movies: MovieStore, box_office: BoxOfficeClient | None = None) -> None:
        self._movies = movies
        self._box_office = box_office

    def _fetch_box_office(self, title: str) -> BoxOfficeData | None:
        if self._box_office is None:
            return None
        data = self._box_office.get_box_office_data(title)
        if data is None:
            logger.info(f"No box office data for {title!r}; continuing without enrichment.")
        return data

    def create_movie(self, movie_create: MovieCreate) -> MovieRecord:
        validate_movie_create(movie_create)

        # Fast path for a friendly error; the unique constraint is the real guard.
        if self._movies.get_by_title(movie_create.title) is not None:
            raise ConflictError(f"Movie with title '{movie_create.title}' already exists.")

        movie = MovieRecord(
            id=generate_movie_id(movie_create.title, _now_utc()),
            title=movie_create.title,
            release_date=movie_create.release_date,
            genre=movie_create.genre,
            distributor=as_str(movie_create.distributor),
            budget=movie_create.budget,
            mpa_rating=as_str(movie_create.mpa_rating),
        )

        data = self._fetch_box_office(movie_create.title)
        if data is not None:
            movie = merge_box_office(movie, data, fetched_at=_now_utc())

        stored_id = self._movies.create(movie)
        if stored_id and stored_id != movie.id:
            movie = movie.with_updates(id=stored_id)
        logger.info(f"Created movie {movie.title!r} id={movie.id} enriched={movie.box_office is not None}")
        return movie

    def get_movie(self, title: str) -> MovieRecord:
        movie = self._movies.get_by_title(title)
        if movie is None:
            raise NotFoundError(f"Movie '{title}' not found.")
        return movie

    def list_movies(
        self,
        movie_filter: MovieFilter | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> MoviePage:
        return self._movies.list(movie_filter or MovieFilter(), limit, cursor)

    def refresh_box_office(self, title: str) -> RefreshResult:
        """
        Re-fetch provider data for an existing movie and persist the mutable fields.
        """
        movie = self.get_movie(title)
        data = self._fetch_box_office(title)
        if data is None:
            return RefreshResult(movie=movie, changed=False)

        merged = merge_box_office(movie, data, fetched_at=_now_utc())
        updated = self._movies.update(merged)
        return RefreshResult(movie=updated, changed=True)
