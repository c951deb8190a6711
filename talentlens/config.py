# talentlens/config.py
from __future__ import annotations

import os

# --- Scoring (fixed contract) ---

SCORE_FLOOR = 50
SCORE_CEILING = 100

# Returned when no criteria are supplied, and for candidates whose scoring failed.
NEUTRAL_SCORE = 60


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# --- Paging ---

# Matches the results grid of the recruiter UI (3x3).
DEFAULT_PAGE_SIZE: int = max(1, _env_int("TALENTLENS_PAGE_SIZE", 9))

# --- Free-text context ---

# How many keywords are lifted out of the hiring narrative.
CONTEXT_KEYWORD_LIMIT: int = max(0, _env_int("TALENTLENS_CONTEXT_KEYWORDS", 5))

# --- Execution ---

# 1 = score sequentially. >1 = thread pool; order is preserved either way.
SCORING_WORKERS: int = max(1, _env_int("TALENTLENS_SCORING_WORKERS", 1))

# --- Logging ---

LOG_LEVEL: str = (os.environ.get("TALENTLENS_LOG_LEVEL", "WARNING").strip() or "WARNING").upper()
