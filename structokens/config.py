"""Configuration constants and .env loading.

WHY: Centralizes every tunable value (log level, source encoding, limits,
API bind address) so they are easy to find and override without touching
the pipeline code.

HOW: python-dotenv loads the .env file on import. Constants are
module-level values read from the environment with sensible defaults.

RULES:
- All defaults can be overridden via environment variables
- Nothing in this module touches the parser or the vocabulary
- Invalid numeric overrides raise ValueError with the variable name
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load .env from the project root (where the tool is run from)
load_dotenv()


def _int_env(name: str, default: int) -> int:
    """Read an integer environment variable.

    RULES:
    - Missing or blank → default
    - Non-integer → ValueError naming the variable
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}".format(name, raw)
        ) from None


# ---------------------------------------------------------------------------
# Source handling
# ---------------------------------------------------------------------------

SOURCE_ENCODING = os.getenv("STRUCTOKENS_SOURCE_ENCODING", "utf-8")
"""Encoding used to read source files from disk."""

RECURSION_LIMIT = _int_env("STRUCTOKENS_RECURSION_LIMIT", 10_000)
"""Interpreter recursion limit applied by the CLI and API entry points.

The traversal is recursive; deeply nested (e.g. minified) sources need
more headroom than Python's default of 1000 frames.
"""

MAX_SOURCE_BYTES = _int_env("STRUCTOKENS_MAX_SOURCE_BYTES", 5 * 1024 * 1024)
"""Largest source accepted by the HTTP API (bytes)."""

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("STRUCTOKENS_LOG_LEVEL", "WARNING").upper()


def configure_logging(level: str | None = None) -> None:
    """Send log records to stderr at the configured level.

    WHY: Token streams are written to stdout; diagnostics such as the
    strict-parse fallback warning must never mix into that output.
    """
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# HTTP API defaults
# ---------------------------------------------------------------------------

API_HOST = os.getenv("STRUCTOKENS_API_HOST", "0.0.0.0")
API_PORT = _int_env("STRUCTOKENS_API_PORT", 8000)
