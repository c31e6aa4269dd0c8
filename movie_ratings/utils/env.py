from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _env_file_candidates() -> list[Path]:
    explicit = (os.getenv("MOVIE_RATINGS_ENV_FILE") or "").strip()
    if explicit:
        return [Path(explicit)]
    repo_root = Path(__file__).resolve().parents[2]
    return [repo_root / ".env", Path.cwd() / ".env"]


def load_env(*, override: bool = False) -> Path | None:
    """
    Load the first `.env` file found; real environment variables win unless `override`.
    """
    for path in _env_file_candidates():
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
            logger.debug(f"Loaded environment from {path}")
            return path
    return None


def env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def env_float(name: str, default: float) -> float:
    raw = env_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}; using {default}")
        return default
