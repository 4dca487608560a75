"""
Environment variable loading for DegenScore.

- HELIUS_API_KEY: Helius API key for the activity retrieval client
- HELIUS_API_BASE: override for the Helius REST base URL
- DEGENSCORE_*: analysis overrides (see settings.get_settings)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is degenscore/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

HELIUS_API_BASE = "https://api.helius.xyz/v0"

_TRUTHY = ("1", "true", "yes", "on")


def load_degenscore_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def get_env(name: str, default: str = "") -> str:
    """Return a stripped env value, or default when unset/blank."""
    load_degenscore_env()
    raw = (os.getenv(name) or "").strip()
    return raw or default


def get_env_flag(name: str, default: bool = False) -> bool:
    """Return True for 1/true/yes/on (case-insensitive)."""
    raw = get_env(name)
    if not raw:
        return default
    return raw.lower() in _TRUTHY


def get_helius_api_key() -> str:
    """Return HELIUS_API_KEY or empty string."""
    return get_env("HELIUS_API_KEY")


def get_helius_api_base() -> str:
    return get_env("HELIUS_API_BASE", HELIUS_API_BASE).rstrip("/")


def mask_api_key(url: str) -> str:
    """Mask the api-key query value so URLs can be logged."""
    if "api-key=" not in url:
        return url
    head, _, tail = url.partition("api-key=")
    rest = tail.split("&", 1)
    return head + "api-key=***" + ("&" + rest[1] if len(rest) > 1 else "")
