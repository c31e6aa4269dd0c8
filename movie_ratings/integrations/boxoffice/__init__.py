from movie_ratings.integrations.boxoffice.client import (
    BoxOfficeClient,
    BoxOfficeData,
    HttpBoxOfficeClient,
    build_box_office_client,
)

__all__ = [
    "BoxOfficeClient",
    "BoxOfficeData",
    "HttpBoxOfficeClient",
    "build_box_office_client",
]
