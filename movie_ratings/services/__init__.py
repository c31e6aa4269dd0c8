"""
Workflows the API and scripts call; the only layer that talks to stores and providers.
"""

from movie_ratings.services.movies import MovieService, RefreshResult
from movie_ratings.services.ratings import RatingService

__all__ = [
    "MovieService",
    "RatingService",
    "RefreshResult",
]
