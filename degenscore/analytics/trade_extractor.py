"""
Trade extractor: raw activity batch -> time-ordered Trade sequence.

Each activity is normalized, then passed through a fixed chain of filters.
The first filter that rejects it names the reason; counts per reason are
returned in ExtractionStats and logged once as trade_extraction_stats.
With config.verbose_diagnostics every rejection is also logged at debug.

Pure: no I/O besides logging, output length <= input length.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from degenscore.activity import LegDirection, NormalizedActivity, normalize_activity
from degenscore.analytics.models import (
    SKIP_AMBIGUOUS_LEGS,
    SKIP_DUST,
    SKIP_EXCLUDED_ASSET,
    SKIP_INCONSISTENT_DIRECTION,
    SKIP_MALFORMED,
    SKIP_NOT_INVOLVED,
    SKIP_NOT_SWAP,
    SKIP_OVERSIZED,
    SKIP_PRICE_OUT_OF_BOUNDS,
    SKIP_TOKEN_TO_TOKEN,
    SKIP_ZERO_AMOUNT,
    ExtractionStats,
    Trade,
    TradeDirection,
)
from degenscore.config.settings import AnalysisConfig
from degenscore.core.exceptions import InvalidWalletError
from degenscore.degen_logging import get_logger, short_wallet
from degenscore.utils.wallet_utils import normalize_wallet

logger = get_logger(__name__)


def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def _to_trade(activity: NormalizedActivity, config: AnalysisConfig) -> tuple[Trade | None, str | None]:
    """Return (trade, None) or (None, rejection_reason)."""
    if not activity.is_swap:
        return None, SKIP_NOT_SWAP
    if not activity.involves_account:
        return None, SKIP_NOT_INVOLVED

    base_legs = [leg for leg in activity.legs if leg.mint in config.base_mints]
    asset_legs = [leg for leg in activity.legs if leg.mint not in config.base_mints]
    if not base_legs:
        return None, SKIP_TOKEN_TO_TOKEN
    if len(base_legs) != 1 or len(asset_legs) != 1:
        return None, SKIP_AMBIGUOUS_LEGS
    base, asset = base_legs[0], asset_legs[0]

    if base.direction == asset.direction:
        return None, SKIP_INCONSISTENT_DIRECTION
    # Base leaving the account pays for the asset.
    direction = TradeDirection.BUY if base.direction == LegDirection.OUT else TradeDirection.SELL

    if asset.mint in config.excluded_mints:
        return None, SKIP_EXCLUDED_ASSET
    if not _positive(base.amount) or not _positive(asset.amount):
        return None, SKIP_ZERO_AMOUNT
    if base.amount < config.dust_threshold:
        return None, SKIP_DUST

    price = base.amount / asset.amount
    if not math.isfinite(price) or not (config.min_price <= price <= config.max_price):
        return None, SKIP_PRICE_OUT_OF_BOUNDS
    if base.amount > config.max_trade_size:
        return None, SKIP_OVERSIZED

    trade = Trade(
        timestamp=activity.timestamp,
        asset_mint=asset.mint,
        direction=direction,
        base_amount=base.amount,
        asset_amount=asset.amount,
        price_per_asset=price,
        signature=activity.signature,
        fee=activity.fee,
    )
    return trade, None


def extract_trades_with_stats(
    activities: Iterable[Any],
    wallet: str,
    config: AnalysisConfig | None = None,
) -> tuple[list[Trade], ExtractionStats]:
    """
    Extract trades for wallet and return them with per-reason rejection counts.

    Raises InvalidWalletError if wallet is missing or blank; direction cannot
    be determined without it.
    """
    wallet = normalize_wallet(wallet)
    if not wallet:
        raise InvalidWalletError("wallet address is required to determine trade direction")
    config = config or AnalysisConfig()

    stats = ExtractionStats()
    trades: list[Trade] = []
    for index, raw in enumerate(activities):
        stats.total += 1
        activity = normalize_activity(raw, wallet, config)
        if activity is None:
            trade, reason = None, SKIP_MALFORMED
        else:
            trade, reason = _to_trade(activity, config)
        if trade is None:
            stats.skip(reason)
            if config.verbose_diagnostics:
                logger.debug(
                    "activity_skipped",
                    wallet=short_wallet(wallet),
                    index=index,
                    reason=reason,
                    signature=activity.signature if activity is not None else None,
                )
            continue
        trades.append(trade)

    # Stable: same-timestamp trades keep input order.
    trades.sort(key=lambda t: t.timestamp)
    stats.extracted = len(trades)

    logger.info(
        "trade_extraction_stats",
        wallet=short_wallet(wallet),
        total=stats.total,
        extracted=stats.extracted,
        extraction_rate=stats.extraction_rate,
        skipped={k: v for k, v in stats.skipped.items() if v},
    )
    return trades, stats


def extract_trades(
    activities: Iterable[Any],
    wallet: str,
    config: AnalysisConfig | None = None,
) -> list[Trade]:
    """Extract clean, time-ordered trades for wallet from raw activities."""
    trades, _ = extract_trades_with_stats(activities, wallet, config)
    return trades
