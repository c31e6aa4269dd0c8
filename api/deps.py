"""
Dependency injection for the Supabase client, stores and services.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from supabase import Client

from movie_ratings.config import Settings, get_settings
from movie_ratings.db.supabase import create_supabase_admin_client
from movie_ratings.integrations.boxoffice.client import BoxOfficeClient, build_box_office_client
from movie_ratings.repositories.movies import MovieStore, SupabaseMovieStore
from movie_ratings.repositories.ratings import RatingStore, SupabaseRatingStore
from movie_ratings.services.movies import MovieService
from movie_ratings.services.ratings import RatingService

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    return get_settings()


@lru_cache
def get_supabase_admin_client() -> Client:
    """
    Returns a Supabase client using the service role key (bypasses RLS).
    Shared across requests; the API is the only writer of movies and ratings.
    """
    return create_supabase_admin_client(get_settings())


@lru_cache
def get_box_office_client() -> BoxOfficeClient | None:
    return build_box_office_client(get_settings())


def get_movie_store(db: Annotated[Client, Depends(get_supabase_admin_client)]) -> MovieStore:
    return SupabaseMovieStore(db)


def get_rating_store(db: Annotated[Client, Depends(get_supabase_admin_client)]) -> RatingStore:
    return SupabaseRatingStore(db)


def get_movie_service(
    movies: Annotated[MovieStore, Depends(get_movie_store)],
    box_office: Annotated[BoxOfficeClient | None, Depends(get_box_office_client)],
) -> MovieService:
    return MovieService(movies, box_office)


def get_rating_service(
    ratings: Annotated[RatingStore, Depends(get_rating_store)],
    movies: Annotated[MovieStore, Depends(get_movie_store)],
) -> RatingService:
    return RatingService(ratings, movies)


# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_app_settings)]
MovieServiceDep = Annotated[MovieService, Depends(get_movie_service)]
RatingServiceDep = Annotated[RatingService, Depends(get_rating_service)]
