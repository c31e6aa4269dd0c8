#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys

from movie_ratings.config import get_settings
from movie_ratings.db.supabase import create_supabase_admin_client
from movie_ratings.errors import MovieRatingsError
from movie_ratings.integrations.boxoffice.client import build_box_office_client
from movie_ratings.models.movies import MovieFilter
from movie_ratings.repositories.movies import SupabaseMovieStore
from movie_ratings.services.movies import MovieService


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="refresh_box_office",
        description="Re-fetch box-office data for existing core.movies rows.",
    )
    parser.add_argument("--title", action="append", default=[], help="Exact movie title (repeatable).")
    parser.add_argument("--year", type=int, default=None, help="Refresh every movie released in this year.")
    parser.add_argument("--limit", type=int, default=50, help="Max movies to refresh when filtering by year.")
    parser.add_argument("--dry-run", action="store_true", help="List the titles that would be refreshed.")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def _collect_titles(service: MovieService, args: argparse.Namespace) -> list[str]:
    titles = [t for t in args.title if t.strip()]
    if args.year is None:
        return titles

    by_year: list[str] = []
    cursor: str | None = None
    while len(by_year) < args.limit:
        page = service.list_movies(MovieFilter(year=args.year), min(args.limit, 100), cursor)
        by_year.extend(movie.title for movie in page.items)
        if page.next_cursor is None:
            break
        cursor = page.next_cursor
    return list(dict.fromkeys(titles + by_year[: args.limit]))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")

    settings = get_settings()
    box_office = build_box_office_client(settings)
    if box_office is None:
        print("BOXOFFICE_URL and BOXOFFICE_API_KEY must be set to refresh box-office data.", file=sys.stderr)
        return 2

    service = MovieService(SupabaseMovieStore(create_supabase_admin_client(settings)), box_office)

    titles = _collect_titles(service, args)
    if not titles:
        print("No movies matched the filters.")
        return 0

    if args.dry_run:
        for title in titles:
            print(f"WOULD REFRESH {title!r}")
        return 0

    updated = skipped = failed = 0
    for title in titles:
        try:
            result = service.refresh_box_office(title)
        except MovieRatingsError as exc:
            failed += 1
            print(f"FAILED {title!r}: {exc}", file=sys.stderr)
            continue
        if result.changed:
            updated += 1
            if args.verbose:
                print(f"UPDATED {title!r} box_office={result.movie.box_office}")
        else:
            skipped += 1

    print(f"REFRESH summary attempted={len(titles)} updated={updated} skipped={skipped} failed={failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
