"""
Score composer: TradingStats -> DegenScore (0-100) and the WalletMetrics bundle.

One formula, weighted by a ScoringProfile:

    baseline
    + min(win_rate / 100 * win_weight, win_cap)
    + min(total_volume / volume_normalizer, 1) * volume_weight
    + min(moonshots * moonshot_unit, moonshot_cap)
    - min(rugs_caught * rug_unit, rug_cap)
    + consistency bonus (trading_days > 30 -> 10, > 7 -> 5)
    + clamp(realized_pnl / max(total_volume, 1) * 100, -cap, cap)

clamped to [score_min, score_max] and rounded to 2 decimals.
"""

from __future__ import annotations

from dataclasses import fields

from degenscore.analytics.models import TradingStats, WalletMetrics
from degenscore.config.settings import AnalysisConfig, ScoringProfile

TERM_BASELINE = "baseline"
TERM_WIN_RATE = "win_rate"
TERM_VOLUME = "volume"
TERM_MOONSHOTS = "moonshots"
TERM_RUGS = "rugs"
TERM_CONSISTENCY = "consistency"
TERM_PROFITABILITY = "profitability"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _consistency_bonus(trading_days: int, profile: ScoringProfile) -> float:
    if trading_days > profile.consistency_long_days:
        return profile.consistency_long_bonus
    if trading_days > profile.consistency_short_days:
        return profile.consistency_short_bonus
    return 0.0


def score_breakdown(stats: TradingStats, profile: ScoringProfile) -> dict[str, float]:
    """Per-term contributions; their sum is the unclamped score."""
    return {
        TERM_BASELINE: profile.baseline,
        TERM_WIN_RATE: min(stats.win_rate / 100 * profile.win_weight, profile.win_cap),
        TERM_VOLUME: min(stats.total_volume / profile.volume_normalizer, 1.0) * profile.volume_weight,
        TERM_MOONSHOTS: min(stats.moonshots * profile.moonshot_unit, profile.moonshot_cap),
        TERM_RUGS: -min(stats.rugs_caught * profile.rug_unit, profile.rug_cap),
        TERM_CONSISTENCY: _consistency_bonus(stats.trading_days, profile),
        TERM_PROFITABILITY: _clamp(
            stats.realized_pnl / max(stats.total_volume, 1.0) * 100,
            -profile.profitability_cap,
            profile.profitability_cap,
        ),
    }


def calculate_degen_score(stats: TradingStats, profile: ScoringProfile) -> tuple[float, dict[str, float]]:
    """Return (degen_score, breakdown). Score is clamped and rounded to 2 decimals."""
    breakdown = score_breakdown(stats, profile)
    raw = sum(breakdown.values())
    score = round(_clamp(raw, profile.score_min, profile.score_max), 2)
    return score, breakdown


def compose_wallet_metrics(stats: TradingStats, config: AnalysisConfig | None = None) -> WalletMetrics:
    """Score stats with the configured profile and return the full WalletMetrics."""
    config = config or AnalysisConfig()
    profile = config.scoring_profile
    score, breakdown = calculate_degen_score(stats, profile)
    values = {f.name: getattr(stats, f.name) for f in fields(TradingStats)}
    return WalletMetrics(
        **values,
        degen_score=score,
        scoring_profile=profile.name,
        score_breakdown=breakdown,
    )
