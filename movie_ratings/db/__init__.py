"""
Database helpers for the movie-ratings API and scripts.
"""

from movie_ratings.db.supabase import create_supabase_admin_client, is_unique_violation

__all__ = [
    "create_supabase_admin_client",
    "is_unique_violation",
]
