"""
Typed failures raised by the stores and services.

The API maps each class to its own HTTP status, so callers never need to
inspect error messages to tell them apart.
"""
from __future__ import annotations


class MovieRatingsError(RuntimeError):
    pass


class ValidationError(MovieRatingsError):
    """Malformed, missing or out-of-range input."""


class ConflictError(MovieRatingsError):
    """A movie with the same title already exists."""


class NotFoundError(MovieRatingsError):
    """The referenced movie does not exist."""


class StorageError(MovieRatingsError):
    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code
