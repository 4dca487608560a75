"""
Analytics pipeline: run full wallet analysis (extract -> positions -> metrics -> score).

Single entrypoint for the CLI and library callers. Takes an already-retrieved
batch of raw activities; performs no I/O. Empty or fully filtered input is
not an error and yields baseline metrics.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from degenscore.analytics.metrics_aggregator import aggregate_metrics
from degenscore.analytics.models import TradingStats, WalletMetrics
from degenscore.analytics.position_builder import build_positions
from degenscore.analytics.score_composer import compose_wallet_metrics
from degenscore.analytics.trade_extractor import extract_trades_with_stats
from degenscore.config.settings import AnalysisConfig
from degenscore.core.exceptions import InvalidWalletError
from degenscore.degen_logging import get_logger, short_wallet
from degenscore.utils.wallet_utils import normalize_wallet

logger = get_logger(__name__)

ProgressCallback = Callable[[int, str], None]

PROGRESS_START = 5
PROGRESS_EXTRACTED = 50
PROGRESS_POSITIONS = 75
PROGRESS_DONE = 100


def _report(progress: ProgressCallback | None, percent: int, message: str) -> None:
    """Invoke the progress callback; failures are logged and never abort the run."""
    if progress is None:
        return
    try:
        progress(percent, message)
    except Exception as e:
        logger.warning("progress_callback_failed", percent=percent, error=str(e))


def default_wallet_metrics(config: AnalysisConfig | None = None) -> WalletMetrics:
    """Baseline metrics: all counters zero, score = profile baseline."""
    return compose_wallet_metrics(TradingStats(), config)


def run_wallet_analysis(
    activities: Iterable[Any],
    wallet: str,
    config: AnalysisConfig | None = None,
    progress: ProgressCallback | None = None,
) -> WalletMetrics:
    """
    Analyze one wallet's activity batch and return its WalletMetrics.

    Raises InvalidWalletError if wallet is missing or blank.
    """
    wallet = normalize_wallet(wallet)
    if not wallet:
        raise InvalidWalletError("wallet address is required")
    config = config or AnalysisConfig()
    log_wallet = short_wallet(wallet)

    logger.info("analytics_pipeline_start", wallet=log_wallet, profile=config.scoring_profile.name)
    _report(progress, PROGRESS_START, "Analyzing activity")

    trades, extraction = extract_trades_with_stats(activities, wallet, config)
    _report(progress, PROGRESS_EXTRACTED, f"Extracted {len(trades)} trades")

    if not trades:
        metrics = default_wallet_metrics(config)
        _report(progress, PROGRESS_DONE, "No trades found")
        logger.info(
            "analytics_pipeline_done",
            wallet=log_wallet,
            total_activities=extraction.total,
            total_trades=0,
            degen_score=metrics.degen_score,
        )
        return metrics

    book = build_positions(trades, config)
    _report(progress, PROGRESS_POSITIONS, f"Built {len(book.closed) + len(book.open)} positions")

    stats = aggregate_metrics(trades, book, config)
    metrics = compose_wallet_metrics(stats, config)
    _report(progress, PROGRESS_DONE, "Score calculated")

    logger.info(
        "analytics_pipeline_done",
        wallet=log_wallet,
        total_activities=extraction.total,
        total_trades=metrics.total_trades,
        closed_positions=metrics.closed_positions,
        degen_score=metrics.degen_score,
        profile=metrics.scoring_profile,
    )
    return metrics
