"""Configuration constants and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Recognition language, note timestamp format,
session limits, and server binding are plain module-level constants —
not buried in logic — so they can be changed without touching code.

HOW: python-dotenv loads the .env file on import. Each constant reads
its environment variable with a default. Integer values go through
load_int() which gives a clear error when the value is malformed.

RULES:
- All defaults can be overridden via environment variables
- DICTATION_LANGUAGE is a BCP-47 tag handed to the recognition source
- NOTE_TIME_FORMAT is a strftime pattern (default: two-digit hour:minute)
- Malformed integers raise ValueError naming the variable
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def load_int(name: str, default: int) -> int:
    """Read an integer setting from the environment.

    WHY: Session limits and the server port come from the environment as
    strings. A typo should fail loudly at startup, not as a confusing
    TypeError deep inside the server.

    HOW: Reads os.environ[name], strips it, and parses it with int().

    RULES:
    - Missing or blank values return the default
    - Non-integer values raise ValueError naming the variable
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}. "
            "Fix the value in the environment or the .env file.".format(name, raw)
        ) from None


# ---------------------------------------------------------------------------
# Recognition and notes
# ---------------------------------------------------------------------------

DICTATION_LANGUAGE = os.getenv("DICTATION_LANGUAGE", "en-US")
"""Language tag the recognition source is started with."""

NOTE_TIME_FORMAT = os.getenv("NOTE_TIME_FORMAT", "%H:%M")
"""strftime pattern for a note's display timestamp."""

# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------

SESSION_TTL_SECONDS = load_int("SESSION_TTL_SECONDS", 3600)
MAX_SESSIONS = load_int("MAX_SESSIONS", 100)
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = load_int("API_PORT", 8000)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
