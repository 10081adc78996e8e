"""
Configuration loader.

- Reads env vars (.env supported by deploy)
- Provides strongly-typed Settings
- Fails closed when the generation credential is missing
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any, Optional


class ConfigError(RuntimeError):
    pass


_MISSING = object()

# /api/remix/batch accepts at most this many parallel calls
MAX_BATCH_SIZE = 10


def _get(o: dict, name: str, default: Any = _MISSING) -> Any:
    # Overrides win; env next; required keys have no default.
    # Blank (None, "" or whitespace) counts as unset in both.
    v = o[name] if name in o else os.environ.get(name)
    if v is None or (isinstance(v, str) and not v.strip()):
        if default is _MISSING:
            raise ConfigError(f"Missing required env: {name}")
        return default
    return v


@dataclass(frozen=True)
class Settings:
    SECRET_KEY: str

    # Text generation provider
    OPENAI_API_KEY: str
    OPENAI_MODEL: str
    MAX_OUTPUT_TOKENS: int

    # Variation handling
    BACKFILL_ATTEMPTS: int     # extra calls allowed when short of 4 variations
    BATCH_SIZE: int            # parallel single-style calls for /api/remix/batch

    # Storage / logs
    DATA_DIR: str
    LOG_DIR: str

    # Sharing
    SHARE_VIA: str

    # Server
    BASE_URL: str


def load_settings(override: Optional[dict] = None) -> Settings:
    o = override or {}
    return Settings(
        SECRET_KEY=str(_get(o, "SECRET_KEY", "change-me")),

        OPENAI_API_KEY=str(_get(o, "OPENAI_API_KEY")).strip(),
        OPENAI_MODEL=str(_get(o, "OPENAI_MODEL", "gpt-3.5-turbo")),
        MAX_OUTPUT_TOKENS=int(_get(o, "MAX_OUTPUT_TOKENS", 1000)),

        BACKFILL_ATTEMPTS=max(0, int(_get(o, "BACKFILL_ATTEMPTS", 1))),
        BATCH_SIZE=min(MAX_BATCH_SIZE, max(1, int(_get(o, "BATCH_SIZE", 3)))),

        DATA_DIR=str(_get(o, "DATA_DIR", "data")),
        LOG_DIR=str(_get(o, "LOG_DIR", "logs")),

        SHARE_VIA=str(_get(o, "SHARE_VIA", "RemixTool")),

        BASE_URL=str(_get(o, "BASE_URL", "http://localhost:10000")),
    )
