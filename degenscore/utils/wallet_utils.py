"""Wallet validation utilities."""

from __future__ import annotations

from solders.pubkey import Pubkey


def is_valid_wallet(w: str) -> bool:
    """Return True if w is a valid Solana wallet (Pubkey) address."""
    try:
        Pubkey.from_string((w or "").strip())
        return True
    except Exception:
        return False


def normalize_wallet(w: str | None) -> str:
    """Strip whitespace; None becomes an empty string."""
    return (w or "").strip()
