"""
DegenScore analytics: trade extraction, position tracking, metrics and scoring.

Entry point: run_wallet_analysis(activities, wallet, config=None, progress=None).
"""

from degenscore.analytics.analytics_pipeline import default_wallet_metrics, run_wallet_analysis
from degenscore.analytics.metrics_aggregator import aggregate_metrics
from degenscore.analytics.models import (
    ExtractionStats,
    FavoriteToken,
    Position,
    PositionBook,
    Trade,
    TradeDirection,
    TradingStats,
    WalletMetrics,
)
from degenscore.analytics.position_builder import build_positions
from degenscore.analytics.score_composer import calculate_degen_score, compose_wallet_metrics
from degenscore.analytics.trade_extractor import extract_trades, extract_trades_with_stats

__all__ = [
    "ExtractionStats",
    "FavoriteToken",
    "Position",
    "PositionBook",
    "Trade",
    "TradeDirection",
    "TradingStats",
    "WalletMetrics",
    "aggregate_metrics",
    "build_positions",
    "calculate_degen_score",
    "compose_wallet_metrics",
    "default_wallet_metrics",
    "extract_trades",
    "extract_trades_with_stats",
    "run_wallet_analysis",
]
