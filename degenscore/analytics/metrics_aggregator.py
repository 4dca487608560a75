"""
Metrics aggregator: trades + positions -> TradingStats.

Deterministic; no hidden state. Unrealized PnL is always 0 because open
positions are not priced against a live market.
"""

from __future__ import annotations

import statistics
from collections import Counter
from collections.abc import Iterable, Sequence

from degenscore.analytics.models import FavoriteToken, Position, PositionBook, Trade, TradingStats
from degenscore.config.settings import SECONDS_PER_DAY, AnalysisConfig

VOLATILITY_CAP = 100.0


def _streaks(closed: Sequence[Position]) -> tuple[int, int]:
    """Longest win / loss streak over closed positions ordered by exit time."""
    longest_win = longest_loss = 0
    win = loss = 0
    for position in sorted(closed, key=lambda p: p.exit_time or 0):
        if (position.profit_loss or 0.0) > 0:
            win += 1
            loss = 0
        else:
            loss += 1
            win = 0
        longest_win = max(longest_win, win)
        longest_loss = max(longest_loss, loss)
    return longest_win, longest_loss


def _volatility(closed: Sequence[Position]) -> float:
    pcts = [p.profit_loss_percent or 0.0 for p in closed]
    if len(pcts) < 2:
        return 0.0
    return min(VOLATILITY_CAP, statistics.pstdev(pcts))


def _favorite_tokens(trades: Sequence[Trade], limit: int) -> list[FavoriteToken]:
    # Counter keeps first-seen order, so most_common breaks ties by first appearance.
    counts = Counter(t.asset_mint for t in trades)
    return [FavoriteToken(mint=mint, count=count) for mint, count in counts.most_common(limit)]


def aggregate_metrics(
    trades: Sequence[Trade],
    positions: PositionBook | Iterable[Position],
    config: AnalysisConfig | None = None,
) -> TradingStats:
    """
    Compute TradingStats from the full trade sequence and every position.

    positions may be a PositionBook or any iterable of Position; closed means
    is_open is False.
    """
    config = config or AnalysisConfig()
    if isinstance(positions, PositionBook):
        all_positions = positions.all_positions()
    else:
        all_positions = list(positions)
    closed = [p for p in all_positions if not p.is_open]
    open_count = len(all_positions) - len(closed)

    total_trades = len(trades)
    total_volume = sum(t.base_amount for t in trades)
    pnls = [p.profit_loss or 0.0 for p in closed]
    hold_times = [p.hold_time or 0 for p in closed]
    rugs = [p for p in closed if p.is_rug]
    wins = sum(1 for pnl in pnls if pnl > 0)
    realized_pnl = sum(pnls)
    unrealized_pnl = 0.0
    longest_win, longest_loss = _streaks(closed)
    timestamps = [t.timestamp for t in trades]

    return TradingStats(
        total_trades=total_trades,
        total_volume=total_volume,
        avg_trade_size=total_volume / total_trades if total_trades else 0.0,
        realized_pnl=realized_pnl,
        unrealized_pnl=unrealized_pnl,
        profit_loss=realized_pnl + unrealized_pnl,
        win_rate=wins / len(closed) * 100 if closed else 0.0,
        best_trade=max(pnls) if pnls else 0.0,
        worst_trade=min(pnls) if pnls else 0.0,
        rugs_survived=len(closed) - len(rugs),
        rugs_caught=len(rugs),
        total_rug_value=sum(abs(p.profit_loss or 0.0) for p in rugs),
        moonshots=sum(1 for p in closed if p.is_moonshot),
        quick_flips=sum(1 for h in hold_times if h < config.quick_flip_seconds),
        diamond_hands=sum(1 for h in hold_times if h > config.diamond_hands_seconds),
        avg_hold_time=statistics.fmean(hold_times) if hold_times else 0.0,
        trading_days=len({ts // SECONDS_PER_DAY for ts in timestamps}),
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
        volatility_score=_volatility(closed),
        favorite_tokens=_favorite_tokens(trades, config.favorite_tokens_limit),
        total_fees=sum(t.fee for t in trades),
        first_trade_date=min(timestamps) if timestamps else 0,
        last_trade_date=max(timestamps) if timestamps else 0,
        open_positions=open_count,
        closed_positions=len(closed),
    )
