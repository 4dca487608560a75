"""
Pytest fixtures for DegenScore tests. Activities are built as canonical dicts
unless a test targets a specific provider shape.
"""

from __future__ import annotations

import pytest

from degenscore.config.settings import SOL_MINT


@pytest.fixture(autouse=True)
def clean_degenscore_env(monkeypatch):
    """Unset DEGENSCORE_* and HELIUS_* so a developer's shell or .env cannot leak in."""
    for name in (
        "DEGENSCORE_PROFILE",
        "DEGENSCORE_DUST_THRESHOLD",
        "DEGENSCORE_MAX_TRADE_SIZE",
        "DEGENSCORE_MIN_PRICE",
        "DEGENSCORE_MAX_PRICE",
        "DEGENSCORE_VERBOSE",
        "DEGENSCORE_EXTRA_EXCLUDED_MINTS",
        "HELIUS_API_KEY",
        "HELIUS_API_BASE",
    ):
        monkeypatch.setenv(name, "")


@pytest.fixture
def make_swap():
    """
    Factory for canonical swap dicts.

        make_swap(ts, mint, "buy", sol=1.0, tokens=1000)
    """

    def _make(ts: int, mint: str, side: str, sol: float, tokens: float, **extra):
        base_dir, asset_dir = ("out", "in") if side == "buy" else ("in", "out")
        activity = {
            "timestamp": ts,
            "type": "SWAP",
            "signature": f"sig-{mint[:6]}-{ts}-{side}",
            "legs": [
                {"mint": SOL_MINT, "direction": base_dir, "amount": sol},
                {"mint": mint, "direction": asset_dir, "amount": tokens},
            ],
        }
        activity.update(extra)
        return activity

    return _make
