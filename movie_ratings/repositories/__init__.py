"""
Repository layer for DB access patterns.
"""

from movie_ratings.repositories.movies import MovieStore, SupabaseMovieStore
from movie_ratings.repositories.ratings import RatingStore, SupabaseRatingStore

__all__ = [
    "MovieStore",
    "RatingStore",
    "SupabaseMovieStore",
    "SupabaseRatingStore",
]
