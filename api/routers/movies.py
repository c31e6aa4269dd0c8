"""
Movie and rating endpoints.

Movies are keyed by title in URLs. Creating a movie may enrich it with
box-office data; ratings are upserted per (movie, rater) and read back as a
live aggregate.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Header, HTTPException, Query, Request, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from api.auth import RequireToken
from api.deps import MovieServiceDep, RatingServiceDep
from movie_ratings.models.movies import MovieCreate, MovieFilter, MovieRecord
from movie_ratings.models.ratings import RatingAggregate, RatingSubmission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"], dependencies=[RequireToken])


# --- Pydantic models ---


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MovieIn(CamelModel):
    title: str
    release_date: str
    genre: str
    distributor: str | None = None
    budget: int | None = None
    mpa_rating: str | None = None


class RevenueOut(CamelModel):
    worldwide: int
    opening_weekend_usa: int | None = Field(default=None, alias="openingWeekendUSA")


class BoxOfficeOut(CamelModel):
    revenue: RevenueOut
    currency: str
    source: str
    last_updated: str


class MovieOut(CamelModel):
    id: str
    title: str
    release_date: str
    genre: str
    distributor: str | None = None
    budget: int | None = None
    mpa_rating: str | None = None
    box_office: BoxOfficeOut | None = None


class MoviePageOut(CamelModel):
    items: list[MovieOut]
    next_cursor: str | None = None


class RatingIn(CamelModel):
    rating: float


class RatingOut(CamelModel):
    movie_title: str
    rater_id: str
    rating: float
    updated: bool


class RatingAggregateOut(CamelModel):
    average: float
    count: int


# --- Serialization helpers ---


def _decode_title(request: Request, title: str) -> str:
    # Clients commonly send form-style '+' for spaces in the path; an encoded
    # %2B means the title really contains a plus.
    raw_path = request.scope.get("raw_path") or b""
    if b"%2b" in raw_path.lower():
        return title
    return title.replace("+", " ")


def _movie_payload(movie: MovieRecord) -> dict:
    box_office = None
    if movie.box_office is not None:
        box_office = {
            "revenue": {
                "worldwide": movie.box_office.revenue.worldwide,
                "opening_weekend_usa": movie.box_office.revenue.opening_weekend_usa,
            },
            "currency": movie.box_office.currency,
            "source": movie.box_office.source,
            "last_updated": movie.box_office.last_updated.isoformat(),
        }
    return {
        "id": movie.id,
        "title": movie.title,
        "release_date": movie.release_date,
        "genre": movie.genre,
        "distributor": movie.distributor,
        "budget": movie.budget,
        "mpa_rating": movie.mpa_rating,
        "box_office": box_office,
    }


def _rating_payload(submission: RatingSubmission) -> dict:
    return {
        "movie_title": submission.rating.movie_title,
        "rater_id": submission.rating.rater_id,
        "rating": submission.rating.score,
        "updated": submission.updated,
    }


def _aggregate_payload(aggregate: RatingAggregate) -> dict:
    return {"average": aggregate.average, "count": aggregate.count}


# --- Endpoints ---


@router.post("", response_model=MovieOut, status_code=201)
def create_movie(service: MovieServiceDep, payload: MovieIn, response: Response) -> dict:
    """
    Create a movie. User-supplied distributor/budget/mpaRating always win over
    box-office enrichment; enrichment failures never fail the request.
    """
    movie = service.create_movie(
        MovieCreate(
            title=payload.title,
            release_date=payload.release_date,
            genre=payload.genre,
            distributor=payload.distributor,
            budget=payload.budget,
            mpa_rating=payload.mpa_rating,
        )
    )
    response.headers["Location"] = f"/movies/{quote(movie.title, safe='')}"
    return _movie_payload(movie)


@router.get("", response_model=MoviePageOut)
def list_movies(
    service: MovieServiceDep,
    q: str | None = Query(default=None),
    year: int | None = Query(default=None),
    genre: str | None = Query(default=None),
    distributor: str | None = Query(default=None),
    budget: int | None = Query(default=None, ge=0),
    mpa_rating: str | None = Query(default=None, alias="mpaRating"),
    limit: int | None = Query(default=None),
    cursor: str | None = Query(default=None),
) -> dict:
    """List movies, newest release first, with an opaque continuation cursor."""
    movie_filter = MovieFilter(
        q=q or None,
        year=year if year and year > 0 else None,
        genre=genre or None,
        distributor=distributor or None,
        max_budget=budget,
        mpa_rating=mpa_rating or None,
    )
    page = service.list_movies(movie_filter, limit, cursor or None)
    return {
        "items": [_movie_payload(movie) for movie in page.items],
        "next_cursor": page.next_cursor,
    }


@router.get("/{title}", response_model=MovieOut)
def get_movie(service: MovieServiceDep, request: Request, title: str) -> dict:
    """Get a movie by exact title."""
    return _movie_payload(service.get_movie(_decode_title(request, title)))


@router.post("/{title}/ratings", response_model=RatingOut, status_code=201)
def submit_rating(
    service: RatingServiceDep,
    request: Request,
    title: str,
    payload: RatingIn,
    response: Response,
    rater_id: str | None = Query(default=None, alias="raterId"),
    x_rater_id: str | None = Header(default=None, alias="X-Rater-ID"),
) -> dict:
    """
    Submit or overwrite the caller's rating for a movie.

    Returns 201 for a first rating and 200 when an earlier rating was replaced.
    """
    resolved_rater = (rater_id or x_rater_id or "").strip()
    if not resolved_rater:
        raise HTTPException(status_code=400, detail="Rater ID is required.")

    submission = service.submit_rating(_decode_title(request, title), resolved_rater, payload.rating)
    if submission.updated:
        response.status_code = 200
    return _rating_payload(submission)


@router.get("/{title}/ratings", response_model=RatingAggregateOut)
def get_movie_ratings(service: RatingServiceDep, request: Request, title: str) -> dict:
    """Current average (one decimal) and rater count for a movie."""
    return _aggregate_payload(service.get_movie_ratings(_decode_title(request, title)))
