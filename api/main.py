"""
Movie Ratings API - FastAPI application.

Provides endpoints for:
- Creating movies (with best-effort box-office enrichment)
- Listing and searching movies with cursor pagination
- Submitting per-rater movie ratings and reading the live aggregate
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import movies
from movie_ratings.config import get_settings
from movie_ratings.errors import (
    ConflictError,
    MovieRatingsError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting up Movie Ratings API...")
    if not settings.enrichment_enabled:
        logger.info("Box office enrichment is disabled.")
    yield
    logger.info("Shutting down Movie Ratings API...")


app = FastAPI(
    title="Movie Ratings API",
    description="Movies, box-office enrichment and user ratings",
    version="0.1.0",
    lifespan=lifespan,
)

# If no origins configured, allows all origins but disables credentials
cors_origins = list(settings.cors_allow_origins)
allow_credentials = len(cors_origins) > 0

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Rater-ID"],
)

_ERROR_STATUS: dict[type[MovieRatingsError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    StorageError: 502,
}


@app.exception_handler(MovieRatingsError)
async def movie_ratings_error_handler(request: Request, exc: MovieRatingsError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _ERROR_STATUS.items() if isinstance(exc, error_type)),
        500,
    )
    if isinstance(exc, StorageError):
        # Don't leak internal error details to client
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": "Database error"})
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


app.include_router(movies.router)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "movie-ratings"}


@app.get("/healthz")
def healthz():
    """Health check endpoint."""
    return {"status": "ok", "message": "Movie Rating API is running"}
