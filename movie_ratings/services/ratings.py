from __future__ import annotations

import logging
import math

from movie_ratings.errors import NotFoundError, ValidationError
from movie_ratings.models.ratings import MAX_SCORE, MIN_SCORE, RatingAggregate, RatingRecord, RatingSubmission
from movie_ratings.repositories.movies import MovieStore
from movie_ratings.repositories.ratings import RatingStore

logger = logging.getLogger(__name__)


def validate_score(score: float) -> float:
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ValidationError(f"Rating must be a number between {MIN_SCORE:g} and {MAX_SCORE:g}.")
    value = float(score)
    if not math.isfinite(value) or value < MIN_SCORE or value > MAX_SCORE:
        raise ValidationError(f"Rating must be between {MIN_SCORE:g} and {MAX_SCORE:g}.")
    return value


class RatingService:
    def __init__(self, ratings: RatingStore, movies: MovieStore) -> None:
        self._ratings = ratings
        self._movies = movies

    def _require_movie(self, movie_title: str) -> None:
        if self._movies.get_by_title(movie_title) is None:
            raise NotFoundError(f"Movie '{movie_title}' not found.")

    def submit_rating(self, movie_title: str, rater_id: str, score: float) -> RatingSubmission:
        value = validate_score(score)
        if not isinstance(rater_id, str) or not rater_id.strip():
            raise ValidationError("Rater ID is required.")
        self._require_movie(movie_title)

        # Only decides created-vs-updated for the response; the upsert is the write.
        existing = self._ratings.get_by_movie_and_rater(movie_title, rater_id)
        stored = self._ratings.upsert(RatingRecord(movie_title=movie_title, rater_id=rater_id, score=value))

        updated = existing is not None
        logger.debug(f"Rating {'updated' if updated else 'created'} movie={movie_title!r} rater={rater_id!r}")
        return RatingSubmission(rating=stored, updated=updated)

    def get_movie_ratings(self, movie_title: str) -> RatingAggregate:
        self._require_movie(movie_title)
        return self._ratings.get_aggregate_by_movie(movie_title)
