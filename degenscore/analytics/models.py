"""
Data models for the DegenScore analytics pipeline.

Responsibilities:
- Trade: one clean two-party swap against the base currency.
- Position / PositionBook: per-asset holding lifecycle (open map + closed history).
- TradingStats / WalletMetrics: aggregate statistics and the final scored bundle.
- ExtractionStats: per-reason rejection counts from the trade extractor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Rejection reasons, in the order the extractor applies them.
SKIP_MALFORMED = "malformed"
SKIP_NOT_SWAP = "not_swap"
SKIP_NOT_INVOLVED = "not_involved"
SKIP_TOKEN_TO_TOKEN = "token_to_token"
SKIP_AMBIGUOUS_LEGS = "ambiguous_legs"
SKIP_INCONSISTENT_DIRECTION = "inconsistent_direction"
SKIP_EXCLUDED_ASSET = "excluded_asset"
SKIP_ZERO_AMOUNT = "zero_amount"
SKIP_DUST = "dust"
SKIP_PRICE_OUT_OF_BOUNDS = "price_out_of_bounds"
SKIP_OVERSIZED = "oversized"

SKIP_REASONS = (
    SKIP_MALFORMED,
    SKIP_NOT_SWAP,
    SKIP_NOT_INVOLVED,
    SKIP_TOKEN_TO_TOKEN,
    SKIP_AMBIGUOUS_LEGS,
    SKIP_INCONSISTENT_DIRECTION,
    SKIP_EXCLUDED_ASSET,
    SKIP_ZERO_AMOUNT,
    SKIP_DUST,
    SKIP_PRICE_OUT_OF_BOUNDS,
    SKIP_OVERSIZED,
)


class TradeDirection(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Trade:
    """
    A swap between the base currency and one speculative asset.

    base_amount and asset_amount are strictly positive;
    price_per_asset = base_amount / asset_amount.
    """

    timestamp: int
    asset_mint: str
    direction: TradeDirection
    base_amount: float
    asset_amount: float
    price_per_asset: float
    signature: str | None = None
    fee: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "asset_mint": self.asset_mint,
            "direction": self.direction.value,
            "base_amount": self.base_amount,
            "asset_amount": self.asset_amount,
            "price_per_asset": self.price_per_asset,
            "signature": self.signature,
            "fee": self.fee,
        }


@dataclass
class Position:
    """
    Holding lifecycle of one asset from first buy to (near) full disposal.

    Mutated by the position builder while open; never touched again once
    is_open is False.
    """

    asset_mint: str
    entry_time: int
    buy_base_total: float
    asset_bought: float
    entry_price: float
    is_open: bool = True
    exit_time: int | None = None
    sell_base_total: float | None = None
    asset_sold: float | None = None
    exit_price: float | None = None
    profit_loss: float | None = None
    profit_loss_percent: float | None = None
    hold_time: int | None = None
    """Seconds between entry and the sell that closed (or last touched) the position."""
    is_rug: bool = False
    is_moonshot: bool = False
    trade_count: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "asset_mint": self.asset_mint,
            "entry_time": self.entry_time,
            "buy_base_total": self.buy_base_total,
            "asset_bought": self.asset_bought,
            "entry_price": self.entry_price,
            "is_open": self.is_open,
            "exit_time": self.exit_time,
            "sell_base_total": self.sell_base_total,
            "asset_sold": self.asset_sold,
            "exit_price": self.exit_price,
            "profit_loss": self.profit_loss,
            "profit_loss_percent": self.profit_loss_percent,
            "hold_time": self.hold_time,
            "is_rug": self.is_rug,
            "is_moonshot": self.is_moonshot,
            "trade_count": self.trade_count,
        }


@dataclass
class PositionBook:
    """Append-only closed history plus the live open position per mint."""

    closed: list[Position] = field(default_factory=list)
    open: dict[str, Position] = field(default_factory=dict)
    orphan_sells: int = 0
    """Sells seen with no open position for their mint (ignored)."""

    def all_positions(self) -> list[Position]:
        return [*self.closed, *self.open.values()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "closed": [p.to_dict() for p in self.closed],
            "open": [p.to_dict() for p in self.open.values()],
            "orphan_sells": self.orphan_sells,
        }


@dataclass
class ExtractionStats:
    """Diagnostic counters for one extraction run."""

    total: int = 0
    extracted: int = 0
    skipped: dict[str, int] = field(default_factory=lambda: dict.fromkeys(SKIP_REASONS, 0))

    @property
    def extraction_rate(self) -> float:
        """Percent of input activities that became trades."""
        if self.total == 0:
            return 0.0
        return round(self.extracted / self.total * 100, 1)

    def skip(self, reason: str) -> None:
        self.skipped[reason] = self.skipped.get(reason, 0) + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "extracted": self.extracted,
            "skipped": dict(self.skipped),
            "extraction_rate": self.extraction_rate,
        }


@dataclass(frozen=True)
class FavoriteToken:
    mint: str
    count: int
    symbol: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"mint": self.mint, "count": self.count, "symbol": self.symbol}


@dataclass
class TradingStats:
    """
    Aggregate statistics over one account's trades and positions.

    Volumes and PnL are in SOL, hold times in seconds, rates in percent.
    """

    total_trades: int = 0
    total_volume: float = 0.0
    avg_trade_size: float = 0.0
    realized_pnl: float = 0.0
    unrealized_pnl: float = 0.0
    profit_loss: float = 0.0
    win_rate: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    rugs_survived: int = 0
    rugs_caught: int = 0
    total_rug_value: float = 0.0
    moonshots: int = 0
    quick_flips: int = 0
    diamond_hands: int = 0
    avg_hold_time: float = 0.0
    trading_days: int = 0
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    volatility_score: float = 0.0
    favorite_tokens: list[FavoriteToken] = field(default_factory=list)
    total_fees: float = 0.0
    first_trade_date: int = 0
    last_trade_date: int = 0
    open_positions: int = 0
    closed_positions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_trades": self.total_trades,
            "total_volume": self.total_volume,
            "avg_trade_size": self.avg_trade_size,
            "realized_pnl": self.realized_pnl,
            "unrealized_pnl": self.unrealized_pnl,
            "profit_loss": self.profit_loss,
            "win_rate": self.win_rate,
            "best_trade": self.best_trade,
            "worst_trade": self.worst_trade,
            "rugs_survived": self.rugs_survived,
            "rugs_caught": self.rugs_caught,
            "total_rug_value": self.total_rug_value,
            "moonshots": self.moonshots,
            "quick_flips": self.quick_flips,
            "diamond_hands": self.diamond_hands,
            "avg_hold_time": self.avg_hold_time,
            "trading_days": self.trading_days,
            "longest_win_streak": self.longest_win_streak,
            "longest_loss_streak": self.longest_loss_streak,
            "volatility_score": self.volatility_score,
            "favorite_tokens": [t.to_dict() for t in self.favorite_tokens],
            "total_fees": self.total_fees,
            "first_trade_date": self.first_trade_date,
            "last_trade_date": self.last_trade_date,
            "open_positions": self.open_positions,
            "closed_positions": self.closed_positions,
        }


@dataclass
class WalletMetrics(TradingStats):
    """TradingStats plus the composed DegenScore."""

    degen_score: float = 0.0
    scoring_profile: str = ""
    score_breakdown: dict[str, float] = field(default_factory=dict)
    """Per-term contributions; they sum to the unclamped score."""

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["degen_score"] = self.degen_score
        out["scoring_profile"] = self.scoring_profile
        out["score_breakdown"] = dict(self.score_breakdown)
        return out
