"""
Activity normalizer: provider payloads to NormalizedActivity.

Supported shapes:
- Helius enhanced transactions (type, source, nativeTransfers, tokenTransfers)
- Solscan DeFi activities (activity_type, routers with raw integer amounts)
- Canonical dicts (timestamp, type/is_swap, legs with mint/direction/amount)
- NormalizedActivity instances (returned unchanged)

Purely structural; no filtering beyond "which legs touch the account".
Malformed records (no timestamp, unparsable amounts, unknown shape) yield None
so the caller can count them and move on.
"""

from __future__ import annotations

import math
from typing import Any

from degenscore.activity.models import AssetLeg, LegDirection, NormalizedActivity
from degenscore.config.settings import LAMPORTS_PER_SOL, SOL_MINT, AnalysisConfig
from degenscore.degen_logging import get_logger

logger = get_logger(__name__)

PROVIDER_NORMALIZED = "normalized"
PROVIDER_CANONICAL = "canonical"
PROVIDER_HELIUS = "helius"
PROVIDER_SOLSCAN = "solscan"

HELIUS_SWAP_TYPE = "SWAP"
SOL_DECIMALS = 9

SOLSCAN_SWAP_TYPES = frozenset({
    "ACTIVITY_TOKEN_SWAP",
    "ACTIVITY_AGG_TOKEN_SWAP",
})


def _to_float(value: Any) -> float | None:
    """Parse a finite float; None for missing, bool, non-numeric, NaN or inf."""
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(out):
        return None
    return out


def _to_timestamp(value: Any) -> int | None:
    ts = _to_float(value)
    if ts is None or ts < 0:
        return None
    return int(ts)


def _to_decimals(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        dec = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return dec if 0 <= dec <= 36 else None


def detect_provider(raw: Any) -> str | None:
    """Return the provider shape of raw, or None if it is not recognized."""
    if isinstance(raw, NormalizedActivity):
        return PROVIDER_NORMALIZED
    if not isinstance(raw, dict):
        return None
    if "legs" in raw:
        return PROVIDER_CANONICAL
    if "routers" in raw or "activity_type" in raw:
        return PROVIDER_SOLSCAN
    if "nativeTransfers" in raw or "tokenTransfers" in raw or "feePayer" in raw:
        return PROVIDER_HELIUS
    return None


def _base_leg(delta: float) -> AssetLeg | None:
    if delta == 0:
        return None
    direction = LegDirection.IN if delta > 0 else LegDirection.OUT
    return AssetLeg(mint=SOL_MINT, amount=abs(delta), direction=direction, decimals=SOL_DECIMALS)


def _normalize_helius(raw: dict[str, Any], wallet: str, config: AnalysisConfig) -> NormalizedActivity | None:
    """
    Helius enhanced transaction. nativeTransfers amounts are lamports;
    tokenTransfers tokenAmount is already in UI units.
    """
    timestamp = _to_timestamp(raw.get("timestamp"))
    if timestamp is None:
        return None

    tx_type = str(raw.get("type") or "").upper()
    source = raw.get("source")
    source_label = str(source).upper() if source else None
    is_swap = tx_type == HELIUS_SWAP_TYPE or (source_label in config.swap_sources)

    native_net = 0.0
    for nt in raw.get("nativeTransfers") or []:
        if not isinstance(nt, dict):
            return None
        amount = _to_float(nt.get("amount"))
        if amount is None:
            return None
        if nt.get("fromUserAccount") == wallet:
            native_net -= amount
        if nt.get("toUserAccount") == wallet:
            native_net += amount

    wrapped_net = 0.0
    token_net: dict[str, float] = {}
    incoming: set[str] = set()
    for tt in raw.get("tokenTransfers") or []:
        if not isinstance(tt, dict):
            return None
        mint = tt.get("mint")
        amount = _to_float(tt.get("tokenAmount"))
        if not mint or amount is None:
            return None
        delta = 0.0
        touched = False
        if tt.get("toUserAccount") == wallet:
            delta += amount
            touched = True
        if tt.get("fromUserAccount") == wallet:
            delta -= amount
            touched = True
        if not touched:
            continue
        if mint in config.base_mints:
            wrapped_net += delta
            continue
        token_net[mint] = token_net.get(mint, 0.0) + delta
        if tt.get("toUserAccount") == wallet:
            incoming.add(mint)

    legs: list[AssetLeg] = []
    # Native SOL first; wrapped SOL only when the swap never touched native balance.
    base_delta = native_net / LAMPORTS_PER_SOL
    if base_delta == 0:
        base_delta = wrapped_net
    base = _base_leg(base_delta)
    if base is not None:
        legs.append(base)
    for mint, net in token_net.items():
        if net > 0 or (net == 0 and mint in incoming):
            direction = LegDirection.IN
        else:
            direction = LegDirection.OUT
        legs.append(AssetLeg(mint=mint, amount=abs(net), direction=direction))

    fee = 0.0
    if raw.get("feePayer") == wallet:
        fee_lamports = _to_float(raw.get("fee"))
        fee = (fee_lamports or 0.0) / LAMPORTS_PER_SOL

    return NormalizedActivity(
        timestamp=timestamp,
        is_swap=is_swap,
        legs=tuple(legs),
        signature=raw.get("signature"),
        fee=fee,
        source=source_label,
    )


def _solscan_leg(router: dict[str, Any], side: str, direction: LegDirection) -> AssetLeg | None:
    token = router.get(f"{side}_token")
    if not isinstance(token, dict) or not token.get("address"):
        return None
    decimals = _to_decimals(token.get("decimals"))
    raw_amount = _to_float(router.get(f"{side}_amount"))
    if decimals is None or raw_amount is None or raw_amount < 0:
        return None
    return AssetLeg(
        mint=token["address"],
        amount=raw_amount / (10 ** decimals),
        direction=direction,
        decimals=decimals,
    )


def _normalize_solscan(raw: dict[str, Any], wallet: str, config: AnalysisConfig) -> NormalizedActivity | None:
    """
    Solscan DeFi activity. Amounts are raw integers scaled by token decimals.
    Multi-router aggregator swaps collapse to their endpoints: first router's
    from_token leaves, last router's to_token arrives.
    """
    timestamp = _to_timestamp(raw.get("time", raw.get("block_time")))
    if timestamp is None:
        return None
    is_swap = str(raw.get("activity_type") or "").upper() in SOLSCAN_SWAP_TYPES
    signature = raw.get("trans_id")

    from_address = raw.get("from_address")
    to_address = raw.get("to_address")
    if from_address and from_address != wallet and to_address != wallet:
        return NormalizedActivity(timestamp=timestamp, is_swap=is_swap, signature=signature)

    routers = [r for r in raw.get("routers") or [] if isinstance(r, dict)]
    if not routers:
        if is_swap:
            return None
        return NormalizedActivity(timestamp=timestamp, is_swap=False, signature=signature)

    out_leg = _solscan_leg(routers[0], "from", LegDirection.OUT)
    in_leg = _solscan_leg(routers[-1], "to", LegDirection.IN)
    if out_leg is None or in_leg is None:
        return None

    platform = raw.get("platform")
    source = platform.get("name") if isinstance(platform, dict) else None
    return NormalizedActivity(
        timestamp=timestamp,
        is_swap=is_swap,
        legs=(out_leg, in_leg),
        signature=signature,
        source=source,
    )


def _canonical_leg(leg: Any) -> AssetLeg | None:
    if not isinstance(leg, dict) or not leg.get("mint"):
        return None
    try:
        direction = LegDirection(str(leg.get("direction") or "").lower())
    except ValueError:
        return None
    decimals = _to_decimals(leg.get("decimals")) if leg.get("decimals") is not None else None
    if "amount" in leg:
        amount = _to_float(leg.get("amount"))
    else:
        raw_amount = _to_float(leg.get("raw_amount"))
        if raw_amount is None or decimals is None:
            return None
        amount = raw_amount / (10 ** decimals)
    if amount is None or amount < 0:
        return None
    return AssetLeg(mint=leg["mint"], amount=amount, direction=direction, decimals=decimals)


def _normalize_canonical(raw: dict[str, Any], wallet: str, config: AnalysisConfig) -> NormalizedActivity | None:
    timestamp = _to_timestamp(raw.get("timestamp"))
    if timestamp is None:
        return None
    if "is_swap" in raw:
        is_swap = bool(raw["is_swap"])
    else:
        is_swap = str(raw.get("type") or "").upper() == HELIUS_SWAP_TYPE
    signature = raw.get("signature")

    account = raw.get("account")
    if account and account != wallet:
        return NormalizedActivity(timestamp=timestamp, is_swap=is_swap, signature=signature)

    legs: list[AssetLeg] = []
    for item in raw.get("legs") or []:
        leg = _canonical_leg(item)
        if leg is None:
            return None
        legs.append(leg)

    fee = _to_float(raw.get("fee")) or 0.0
    return NormalizedActivity(
        timestamp=timestamp,
        is_swap=is_swap,
        legs=tuple(legs),
        signature=signature,
        fee=fee,
        source=raw.get("source"),
    )


_NORMALIZERS = {
    PROVIDER_CANONICAL: _normalize_canonical,
    PROVIDER_HELIUS: _normalize_helius,
    PROVIDER_SOLSCAN: _normalize_solscan,
}


def normalize_activity(
    raw: Any,
    wallet: str,
    config: AnalysisConfig | None = None,
) -> NormalizedActivity | None:
    """
    Normalize one raw activity from the perspective of wallet.

    Returns None for unrecognized or malformed records. Never raises for bad
    input data; the trade extractor counts None results as malformed.
    """
    provider = detect_provider(raw)
    if provider is None:
        return None
    if provider == PROVIDER_NORMALIZED:
        return raw
    config = config or AnalysisConfig()
    try:
        return _NORMALIZERS[provider](raw, wallet, config)
    except (AttributeError, TypeError, KeyError, ValueError, OverflowError) as e:
        logger.debug(
            "activity_normalize_failed",
            provider=provider,
            signature=str(raw.get("signature") or raw.get("trans_id") or "")[:44],
            error=str(e),
        )
        return None
