"""Runtime settings for the commentforest CLI, read from the environment and .env."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


def parse_log_level(value: str | None) -> str:
    """Normalise a level name; anything unrecognised becomes ``INFO``."""
    level = (value or "").strip().upper()
    return level if level in _LOG_LEVELS else "INFO"


# ── Analysis preparation ───────────────────────────────────────────────────
MAX_COMMENTS: int = int(os.getenv("COMMENTFOREST_MAX_COMMENTS", "500"))
SLIM_FORMAT: bool = os.getenv("COMMENTFOREST_SLIM_FORMAT", "true").strip().lower() in {
    "1", "true", "yes", "on",
}

# ── Logging ────────────────────────────────────────────────────────────────
LOG_LEVEL: str = parse_log_level(os.getenv("COMMENTFOREST_LOG_LEVEL"))
