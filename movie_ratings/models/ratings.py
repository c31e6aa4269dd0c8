from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

MIN_SCORE = 0.0
MAX_SCORE = 5.0


@dataclass(frozen=True)
class RatingRecord:
    """
    One rater's score for one movie (maps to `core.ratings`).

    Identity is the (movie_title, rater_id) pair; resubmissions overwrite.
    """

    movie_title: str
    rater_id: str
    score: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> RatingRecord:
        return cls(
            movie_title=str(row.get("movie_title") or ""),
            rater_id=str(row.get("rater_id") or ""),
            score=float(row.get("score") or 0.0),
        )


@dataclass(frozen=True)
class RatingAggregate:
    average: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class RatingSubmission:
    rating: RatingRecord
    updated: bool
