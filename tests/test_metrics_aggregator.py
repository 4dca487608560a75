"""
Tests for metrics aggregation: win rate, PnL, rugs, hold-time buckets,
trading days, streaks, volatility and favorite tokens.
"""

from __future__ import annotations

import pytest

from degenscore.analytics.metrics_aggregator import aggregate_metrics
from degenscore.analytics.models import Position, PositionBook, Trade, TradeDirection
from degenscore.config.settings import SECONDS_PER_DAY, AnalysisConfig

BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
WIF = "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm"
POPCAT = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"
T0 = 1_700_006_400  # 2023-11-15 00:00:00 UTC, a day boundary


def _closed(mint: str, pnl: float, pct: float, exit_time: int, hold: int, rug=False, moon=False) -> Position:
    return Position(
        asset_mint=mint,
        entry_time=exit_time - hold,
        buy_base_total=1.0,
        asset_bought=1000,
        entry_price=0.001,
        is_open=False,
        exit_time=exit_time,
        sell_base_total=1.0 + pnl,
        asset_sold=1000,
        exit_price=(1.0 + pnl) / 1000,
        profit_loss=pnl,
        profit_loss_percent=pct,
        hold_time=hold,
        is_rug=rug,
        is_moonshot=moon,
    )


def _trade(ts: int, mint: str, sol: float = 1.0, fee: float = 0.0) -> Trade:
    return Trade(
        timestamp=ts,
        asset_mint=mint,
        direction=TradeDirection.BUY,
        base_amount=sol,
        asset_amount=1000,
        price_per_asset=sol / 1000,
        fee=fee,
    )


def test_empty_inputs_all_zero():
    stats = aggregate_metrics([], PositionBook())
    assert stats.total_trades == 0
    assert stats.total_volume == 0.0
    assert stats.avg_trade_size == 0.0
    assert stats.win_rate == 0.0
    assert stats.best_trade == 0.0
    assert stats.worst_trade == 0.0
    assert stats.volatility_score == 0.0
    assert stats.favorite_tokens == []
    assert stats.first_trade_date == 0
    assert stats.last_trade_date == 0


def test_volume_and_trade_size():
    trades = [_trade(T0, BONK, 1.0, fee=0.001), _trade(T0 + 1, BONK, 3.0, fee=0.002)]
    stats = aggregate_metrics(trades, [])
    assert stats.total_trades == 2
    assert stats.total_volume == pytest.approx(4.0)
    assert stats.avg_trade_size == pytest.approx(2.0)
    assert stats.total_fees == pytest.approx(0.003)
    assert stats.first_trade_date == T0
    assert stats.last_trade_date == T0 + 1


def test_win_rate_breakeven_is_not_a_win():
    positions = [
        _closed(BONK, 1.0, 100.0, T0 + 10, 10),
        _closed(WIF, 0.0, 0.0, T0 + 20, 10),
        _closed(POPCAT, -0.5, -50.0, T0 + 30, 10),
        _closed(BONK, 2.0, 200.0, T0 + 40, 10),
    ]
    stats = aggregate_metrics([], positions)
    assert stats.win_rate == pytest.approx(50.0)
    assert stats.realized_pnl == pytest.approx(2.5)
    assert stats.unrealized_pnl == 0.0
    assert stats.profit_loss == pytest.approx(2.5)
    assert stats.best_trade == pytest.approx(2.0)
    assert stats.worst_trade == pytest.approx(-0.5)
    assert stats.closed_positions == 4


def test_open_positions_excluded_from_closed_stats():
    open_position = Position(
        asset_mint=WIF,
        entry_time=T0,
        buy_base_total=1.0,
        asset_bought=1000,
        entry_price=0.001,
        sell_base_total=0.5,
        asset_sold=400,
        profit_loss=-0.5,
        profit_loss_percent=-50.0,
        hold_time=100,
    )
    book = PositionBook(closed=[_closed(BONK, 1.0, 100.0, T0 + 10, 10)], open={WIF: open_position})
    stats = aggregate_metrics([], book)
    assert stats.closed_positions == 1
    assert stats.open_positions == 1
    assert stats.win_rate == pytest.approx(100.0)
    assert stats.realized_pnl == pytest.approx(1.0)


def test_rugs_and_moonshots():
    positions = [
        _closed(BONK, -0.9, -90.0, T0 + 10, 10, rug=True),
        _closed(WIF, -0.85, -85.0, T0 + 20, 10, rug=True),
        _closed(POPCAT, 10.0, 1000.0, T0 + 30, 10, moon=True),
    ]
    stats = aggregate_metrics([], positions)
    assert stats.rugs_caught == 2
    assert stats.rugs_survived == 1
    assert stats.total_rug_value == pytest.approx(1.75)
    assert stats.moonshots == 1


def test_hold_time_buckets():
    positions = [
        _closed(BONK, 1.0, 100.0, T0 + 10, 1800),
        _closed(WIF, 1.0, 100.0, T0 + 20, 3600),
        _closed(POPCAT, 1.0, 100.0, T0 + 30, 8 * SECONDS_PER_DAY),
    ]
    stats = aggregate_metrics([], positions)
    assert stats.quick_flips == 1
    assert stats.diamond_hands == 1
    assert stats.avg_hold_time == pytest.approx((1800 + 3600 + 8 * SECONDS_PER_DAY) / 3)


def test_hold_time_buckets_configurable():
    config = AnalysisConfig(quick_flip_seconds=7200, diamond_hands_seconds=SECONDS_PER_DAY)
    positions = [_closed(BONK, 1.0, 100.0, T0 + 10, 3600), _closed(WIF, 1.0, 100.0, T0, 2 * SECONDS_PER_DAY)]
    stats = aggregate_metrics([], positions, config)
    assert stats.quick_flips == 1
    assert stats.diamond_hands == 1


def test_trading_days_counts_distinct_day_buckets():
    trades = [
        _trade(T0, BONK),
        _trade(T0 + 3600, BONK),
        _trade(T0 + SECONDS_PER_DAY - 1, WIF),
        _trade(T0 + SECONDS_PER_DAY, WIF),
        _trade(T0 + 5 * SECONDS_PER_DAY, BONK),
    ]
    stats = aggregate_metrics(trades, [])
    assert stats.trading_days == 3


def test_streaks_follow_exit_time_order():
    # Listed out of order; by exit time: W W L L L W
    positions = [
        _closed(BONK, -1.0, -10.0, T0 + 40, 1),
        _closed(BONK, 1.0, 10.0, T0 + 10, 1),
        _closed(BONK, 1.0, 10.0, T0 + 60, 1),
        _closed(BONK, 1.0, 10.0, T0 + 20, 1),
        _closed(BONK, 0.0, 0.0, T0 + 30, 1),
        _closed(BONK, -1.0, -10.0, T0 + 50, 1),
    ]
    stats = aggregate_metrics([], positions)
    assert stats.longest_win_streak == 2
    assert stats.longest_loss_streak == 3


def test_volatility_is_population_stddev_capped():
    positions = [_closed(BONK, 1.0, 100.0, T0 + 10, 1), _closed(WIF, -0.9, -90.0, T0 + 20, 1)]
    stats = aggregate_metrics([], positions)
    assert stats.volatility_score == pytest.approx(95.0)

    positions = [_closed(BONK, 10.0, 1000.0, T0 + 10, 1), _closed(WIF, -0.9, -90.0, T0 + 20, 1)]
    assert aggregate_metrics([], positions).volatility_score == 100.0

    assert aggregate_metrics([], positions[:1]).volatility_score == 0.0


def test_favorite_tokens_top_five_ties_by_first_appearance():
    mints = ["M1", "M2", "M3", "M4", "M5", "M6"]
    trades = []
    ts = T0
    for mint in mints:
        trades.append(_trade(ts, mint))
        ts += 1
    trades.append(_trade(ts, "M6"))
    stats = aggregate_metrics(trades, [])
    favorites = [(t.mint, t.count) for t in stats.favorite_tokens]
    assert favorites == [("M6", 2), ("M1", 1), ("M2", 1), ("M3", 1), ("M4", 1)]
    assert stats.favorite_tokens[0].symbol is None


def test_to_dict_is_json_ready():
    stats = aggregate_metrics([_trade(T0, BONK)], [_closed(BONK, 1.0, 100.0, T0 + 10, 10)])
    out = stats.to_dict()
    assert out["total_trades"] == 1
    assert out["favorite_tokens"] == [{"mint": BONK, "count": 1, "symbol": None}]
