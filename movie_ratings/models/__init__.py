"""
Domain models shared across the API, services and scripts.
"""

from movie_ratings.models.movies import (
    BoxOffice,
    MovieCreate,
    MovieFilter,
    MoviePage,
    MovieRecord,
    Revenue,
)
from movie_ratings.models.ratings import RatingAggregate, RatingRecord, RatingSubmission

__all__ = [
    "BoxOffice",
    "MovieCreate",
    "MovieFilter",
    "MoviePage",
    "MovieRecord",
    "RatingAggregate",
    "RatingRecord",
    "RatingSubmission",
    "Revenue",
]
