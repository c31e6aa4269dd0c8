"""
Runtime configuration resolved from environment variables.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from movie_ratings.utils.env import env_float, env_str, load_env

DEFAULT_BOXOFFICE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    auth_token: str = ""
    boxoffice_url: str = ""
    boxoffice_api_key: str = ""
    boxoffice_timeout_seconds: float = DEFAULT_BOXOFFICE_TIMEOUT_SECONDS
    cors_allow_origins: tuple[str, ...] = ()
    log_level: str = "INFO"

    @property
    def enrichment_enabled(self) -> bool:
        return bool(self.boxoffice_url and self.boxoffice_api_key)


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def load_settings() -> Settings:
    return Settings(
        supabase_url=env_str("SUPABASE_URL"),
        supabase_service_role_key=env_str("SUPABASE_SERVICE_ROLE_KEY"),
        auth_token=env_str("AUTH_TOKEN"),
        boxoffice_url=env_str("BOXOFFICE_URL"),
        boxoffice_api_key=env_str("BOXOFFICE_API_KEY"),
        boxoffice_timeout_seconds=env_float("BOXOFFICE_TIMEOUT_SECONDS", DEFAULT_BOXOFFICE_TIMEOUT_SECONDS),
        cors_allow_origins=_split_origins(env_str("CORS_ALLOW_ORIGINS")),
        log_level=env_str("LOG_LEVEL", "INFO").upper() or "INFO",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Load `.env` once and snapshot the environment. Tests call `get_settings.cache_clear()`.
    """
    load_env()
    return load_settings()
