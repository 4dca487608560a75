"""
Analysis settings and scoring profiles.

Responsibilities:
- Hold every threshold the pipeline uses in one AnalysisConfig dataclass
  (exclusion list, dust threshold, price bounds, max trade size, close
  tolerance, rug/moonshot thresholds, hold-time buckets, scoring profile).
- Define the scoring profiles as data; one formula, many weightings.
- Build an AnalysisConfig from environment variables (get_settings).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from degenscore.config.env import get_env, get_env_flag
from degenscore.core.exceptions import ConfigError

# Wrapped SOL mint; native SOL legs are normalized onto it.
SOL_MINT = "So11111111111111111111111111111111111111112"
LAMPORTS_PER_SOL = 1_000_000_000

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Non-speculative assets: stablecoins, wrapped majors, liquid staking.
DEFAULT_EXCLUDED_MINTS = frozenset({
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",  # USDC
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",  # USDT
    "Ea5SjE2Y6yvCeW5dYTn7PYMuW5ikXkvbGdcmSnXeaLjS",  # PAI
    "EPeUFDgHRxs9xxEPVaL6kfGQvCon7jmAWKVUHuux1Tpz",  # BAI
    "AGFEad2et2ZJif9jaGpdMixQqvW5i81aBdvKe7PHNfz3",  # FakeUSDC
    "7vfCXTUXx5WJV5JADk17DUJ4ksgau7utNKj4b963voxs",  # WETH (Wormhole)
    "9n4nbM75f5Ui33ZbPYXn59EwSgE8CGsHtAeTH5YFeJ9E",  # WBTC (Sollet)
    "3NZ9JMVBmGAqocybic2c7LQCJScmgsAZ6vQqTDzcqmJh",  # WBTC (Wormhole)
    "2FPyTwcZLUg1MDrwsyoP4D6s1tM7hAkHYRjkNb5w6Pxk",  # WETH (Sollet)
    "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So",  # mSOL
    "7dHbWXmci3dT8UFYWYZweBLXgycu7Y3iL6trKn1Y7ARj",  # stSOL
    "He3iAEV5rYjv6Xf7PxKro19eVrC3QAcdic5CF2D2obPt",  # scnSOL
    "DdFPRnccQqLD4zCHrBqdY95D6hvw6PLWp9DEXj1fLCL9",  # daoSOL
})

# Helius "source" values that identify a DEX swap even when type != SWAP.
KNOWN_DEX_SOURCES = frozenset({
    "PUMP_AMM",
    "PUMP_FUN",
    "JUPITER",
    "RAYDIUM",
    "ORCA",
    "SERUM",
    "OPENBOOK",
    "METEORA",
    "DFLOW",
    "LIFINITY",
    "SABER",
    "ALDRIN",
    "MERCURIAL",
    "MARINADE",
    "PHOENIX",
})

PROFILE_NEUTRAL = "neutral"
PROFILE_STRICT = "strict"
DEFAULT_PROFILE = PROFILE_NEUTRAL


@dataclass(frozen=True)
class ScoringProfile:
    """
    Weights for the DegenScore formula.

    Every profile feeds the same formula in score_composer; profiles differ
    only in numbers. Volume and profitability are in SOL.
    """

    name: str
    baseline: float
    win_weight: float = 20.0
    win_cap: float = 20.0
    volume_normalizer: float = 100.0
    volume_weight: float = 15.0
    moonshot_unit: float = 5.0
    moonshot_cap: float = 15.0
    rug_unit: float = 3.0
    rug_cap: float = 15.0
    consistency_long_days: int = 30
    consistency_long_bonus: float = 10.0
    consistency_short_days: int = 7
    consistency_short_bonus: float = 5.0
    profitability_cap: float = 10.0
    score_min: float = 0.0
    score_max: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "baseline": self.baseline,
            "win_weight": self.win_weight,
            "win_cap": self.win_cap,
            "volume_normalizer": self.volume_normalizer,
            "volume_weight": self.volume_weight,
            "moonshot_unit": self.moonshot_unit,
            "moonshot_cap": self.moonshot_cap,
            "rug_unit": self.rug_unit,
            "rug_cap": self.rug_cap,
            "consistency_long_days": self.consistency_long_days,
            "consistency_long_bonus": self.consistency_long_bonus,
            "consistency_short_days": self.consistency_short_days,
            "consistency_short_bonus": self.consistency_short_bonus,
            "profitability_cap": self.profitability_cap,
        }


SCORING_PROFILES: dict[str, ScoringProfile] = {
    PROFILE_NEUTRAL: ScoringProfile(name=PROFILE_NEUTRAL, baseline=50.0),
    PROFILE_STRICT: ScoringProfile(name=PROFILE_STRICT, baseline=0.0),
}


def get_scoring_profile(name: str | None = None) -> ScoringProfile:
    """Look up a profile by name (case-insensitive). None -> default profile."""
    key = (name or DEFAULT_PROFILE).strip().lower()
    profile = SCORING_PROFILES.get(key)
    if profile is None:
        raise ConfigError(
            f"Unknown scoring profile {name!r}",
            available=sorted(SCORING_PROFILES),
        )
    return profile


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Thresholds for trade extraction, position tracking and aggregation.

    Amounts are in SOL, prices in SOL per token, times in seconds.
    Defaults match production; tests override with with_overrides().
    """

    excluded_mints: frozenset[str] = DEFAULT_EXCLUDED_MINTS
    base_mints: frozenset[str] = frozenset({SOL_MINT})
    swap_sources: frozenset[str] = KNOWN_DEX_SOURCES

    # Extraction noise filters
    dust_threshold: float = 0.000001
    min_price: float = 0.000000001
    max_price: float = 1_000_000.0
    max_trade_size: float = 1000.0

    # Position lifecycle
    close_tolerance: float = 0.95
    rug_threshold_pct: float = -80.0
    moonshot_threshold_pct: float = 900.0

    # Aggregation buckets
    quick_flip_seconds: int = SECONDS_PER_HOUR
    diamond_hands_seconds: int = 7 * SECONDS_PER_DAY
    favorite_tokens_limit: int = 5

    scoring_profile: ScoringProfile = field(
        default_factory=lambda: SCORING_PROFILES[DEFAULT_PROFILE]
    )
    # Log every rejected activity at debug level, not just the summary.
    verbose_diagnostics: bool = False

    def with_overrides(self, **changes: Any) -> "AnalysisConfig":
        """Return a copy with the given fields replaced; 'profile' accepts a name."""
        profile_name = changes.pop("profile", None)
        if profile_name is not None:
            changes["scoring_profile"] = get_scoring_profile(profile_name)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "excluded_mints": sorted(self.excluded_mints),
            "base_mints": sorted(self.base_mints),
            "dust_threshold": self.dust_threshold,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "max_trade_size": self.max_trade_size,
            "close_tolerance": self.close_tolerance,
            "rug_threshold_pct": self.rug_threshold_pct,
            "moonshot_threshold_pct": self.moonshot_threshold_pct,
            "quick_flip_seconds": self.quick_flip_seconds,
            "diamond_hands_seconds": self.diamond_hands_seconds,
            "favorite_tokens_limit": self.favorite_tokens_limit,
            "scoring_profile": self.scoring_profile.name,
            "verbose_diagnostics": self.verbose_diagnostics,
        }


def _env_float(name: str, default: float) -> float:
    raw = get_env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}", variable=name) from e


def get_settings() -> AnalysisConfig:
    """
    Return an AnalysisConfig with environment overrides applied.

    DEGENSCORE_PROFILE, DEGENSCORE_DUST_THRESHOLD, DEGENSCORE_MIN_PRICE,
    DEGENSCORE_MAX_PRICE, DEGENSCORE_MAX_TRADE_SIZE, DEGENSCORE_VERBOSE,
    DEGENSCORE_EXTRA_EXCLUDED_MINTS (comma-separated mint list).
    """
    defaults = AnalysisConfig()
    extra = {
        m.strip()
        for m in get_env("DEGENSCORE_EXTRA_EXCLUDED_MINTS").split(",")
        if m.strip()
    }
    min_price = _env_float("DEGENSCORE_MIN_PRICE", defaults.min_price)
    max_price = _env_float("DEGENSCORE_MAX_PRICE", defaults.max_price)
    if min_price > max_price:
        raise ConfigError(
            "DEGENSCORE_MIN_PRICE must not exceed DEGENSCORE_MAX_PRICE",
            min_price=min_price,
            max_price=max_price,
        )
    return AnalysisConfig(
        excluded_mints=defaults.excluded_mints | frozenset(extra),
        dust_threshold=_env_float("DEGENSCORE_DUST_THRESHOLD", defaults.dust_threshold),
        min_price=min_price,
        max_price=max_price,
        max_trade_size=_env_float("DEGENSCORE_MAX_TRADE_SIZE", defaults.max_trade_size),
        scoring_profile=get_scoring_profile(get_env("DEGENSCORE_PROFILE", DEFAULT_PROFILE)),
        verbose_diagnostics=get_env_flag("DEGENSCORE_VERBOSE"),
    )
