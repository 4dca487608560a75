"""
Activity normalization package.

Converts provider-specific activity payloads (Helius enhanced transactions,
Solscan DeFi activities, canonical dicts) into NormalizedActivity records
for the trade extractor.
"""

from degenscore.activity.models import AssetLeg, LegDirection, NormalizedActivity
from degenscore.activity.normalizer import detect_provider, normalize_activity

__all__ = [
    "AssetLeg",
    "LegDirection",
    "NormalizedActivity",
    "detect_provider",
    "normalize_activity",
]
