"""
Data models for normalized swap activity.

A NormalizedActivity is the provider-independent view of one on-chain event
from the perspective of a single subject account: which assets moved in or
out of that account, when, and whether the provider classified it as a swap.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class LegDirection(str, Enum):
    """Direction of an asset leg relative to the subject account."""

    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class AssetLeg:
    """One asset moving into or out of the subject account."""

    mint: str
    amount: float
    """UI amount (raw amount / 10**decimals). Never negative."""
    direction: LegDirection
    decimals: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mint": self.mint,
            "amount": self.amount,
            "direction": self.direction.value,
            "decimals": self.decimals,
        }


@dataclass(frozen=True)
class NormalizedActivity:
    """
    Canonical activity record consumed by the trade extractor.

    Only legs touching the subject account are kept; an activity that does
    not involve the account has no legs.
    """

    timestamp: int
    """Unix timestamp (seconds)."""
    is_swap: bool
    legs: tuple[AssetLeg, ...] = ()
    signature: str | None = None
    fee: float = 0.0
    """Network fee in SOL paid by the subject account; 0 if someone else paid."""
    source: str | None = None
    """Provider-reported program/DEX label (e.g. JUPITER), if any."""

    @property
    def involves_account(self) -> bool:
        return bool(self.legs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "is_swap": self.is_swap,
            "legs": [leg.to_dict() for leg in self.legs],
            "signature": self.signature,
            "fee": self.fee,
            "source": self.source,
        }
