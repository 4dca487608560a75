"""
Configuration management for DegenScore.

Loads analysis thresholds and the scoring profile from environment variables
(and an optional .env file). AnalysisConfig is the single source of truth for
every threshold the pipeline uses.
"""

from degenscore.config.settings import (  # noqa: F401
    DEFAULT_PROFILE,
    SCORING_PROFILES,
    SOL_MINT,
    AnalysisConfig,
    ScoringProfile,
    get_scoring_profile,
    get_settings,
)

__all__ = [
    "DEFAULT_PROFILE",
    "SCORING_PROFILES",
    "SOL_MINT",
    "AnalysisConfig",
    "ScoringProfile",
    "get_scoring_profile",
    "get_settings",
]
