"""
Tests for activity normalization (Helius, Solscan, canonical dict, pass-through).
"""

from __future__ import annotations

import pytest

from degenscore.activity import (
    AssetLeg,
    LegDirection,
    NormalizedActivity,
    detect_provider,
    normalize_activity,
)
from degenscore.config.settings import SOL_MINT

WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
POOL = "PooL1111111111111111111111111111111111111111"
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
WIF = "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm"


def _helius_buy(**overrides) -> dict:
    tx = {
        "signature": "5xHeliusBuy",
        "timestamp": 1_700_000_000,
        "type": "SWAP",
        "source": "JUPITER",
        "fee": 5000,
        "feePayer": WALLET,
        "nativeTransfers": [
            {"fromUserAccount": WALLET, "toUserAccount": POOL, "amount": 500_000_000},
        ],
        "tokenTransfers": [
            {"fromUserAccount": POOL, "toUserAccount": WALLET, "mint": BONK, "tokenAmount": 1000.0},
        ],
    }
    tx.update(overrides)
    return tx


def _legs_by_mint(activity: NormalizedActivity) -> dict[str, AssetLeg]:
    return {leg.mint: leg for leg in activity.legs}


def test_detect_provider():
    assert detect_provider(_helius_buy()) == "helius"
    assert detect_provider({"activity_type": "ACTIVITY_TOKEN_SWAP", "routers": []}) == "solscan"
    assert detect_provider({"timestamp": 1, "legs": []}) == "canonical"
    assert detect_provider(NormalizedActivity(timestamp=1, is_swap=True)) == "normalized"
    assert detect_provider({"foo": "bar"}) is None
    assert detect_provider("not a dict") is None


def test_helius_buy_native_sol():
    """Native SOL leaving the wallet becomes an OUT base leg in SOL units."""
    activity = normalize_activity(_helius_buy(), WALLET)
    assert activity is not None
    assert activity.is_swap is True
    assert activity.timestamp == 1_700_000_000
    assert activity.signature == "5xHeliusBuy"
    legs = _legs_by_mint(activity)
    assert legs[SOL_MINT].direction == LegDirection.OUT
    assert legs[SOL_MINT].amount == pytest.approx(0.5)
    assert legs[BONK].direction == LegDirection.IN
    assert legs[BONK].amount == pytest.approx(1000.0)
    assert activity.fee == pytest.approx(0.000005)


def test_helius_fee_only_when_wallet_pays():
    activity = normalize_activity(_helius_buy(feePayer=POOL), WALLET)
    assert activity.fee == 0.0


def test_helius_sell_via_wrapped_sol():
    """No native movement: wrapped-SOL token transfer is used as the base leg."""
    tx = _helius_buy(
        nativeTransfers=[],
        tokenTransfers=[
            {"fromUserAccount": WALLET, "toUserAccount": POOL, "mint": BONK, "tokenAmount": 1000.0},
            {"fromUserAccount": POOL, "toUserAccount": WALLET, "mint": SOL_MINT, "tokenAmount": 2.0},
        ],
    )
    activity = normalize_activity(tx, WALLET)
    legs = _legs_by_mint(activity)
    assert legs[SOL_MINT].direction == LegDirection.IN
    assert legs[SOL_MINT].amount == pytest.approx(2.0)
    assert legs[BONK].direction == LegDirection.OUT
    assert len(activity.legs) == 2


def test_helius_known_dex_source_counts_as_swap():
    activity = normalize_activity(_helius_buy(type="UNKNOWN", source="RAYDIUM"), WALLET)
    assert activity.is_swap is True
    activity = normalize_activity(_helius_buy(type="TRANSFER", source="SYSTEM_PROGRAM"), WALLET)
    assert activity.is_swap is False


def test_helius_not_involved_has_no_legs():
    other = "Other111111111111111111111111111111111111111"
    activity = normalize_activity(_helius_buy(), other)
    assert activity is not None
    assert activity.legs == ()
    assert activity.involves_account is False


def test_helius_token_nets_per_mint():
    tx = _helius_buy(
        tokenTransfers=[
            {"fromUserAccount": POOL, "toUserAccount": WALLET, "mint": BONK, "tokenAmount": 600.0},
            {"fromUserAccount": POOL, "toUserAccount": WALLET, "mint": BONK, "tokenAmount": 400.0},
        ],
    )
    legs = _legs_by_mint(normalize_activity(tx, WALLET))
    assert legs[BONK].amount == pytest.approx(1000.0)
    assert legs[BONK].direction == LegDirection.IN


def test_helius_missing_timestamp_is_malformed():
    tx = _helius_buy()
    del tx["timestamp"]
    assert normalize_activity(tx, WALLET) is None


def test_helius_bad_amount_is_malformed():
    tx = _helius_buy(nativeTransfers=[{"fromUserAccount": WALLET, "toUserAccount": POOL, "amount": "abc"}])
    assert normalize_activity(tx, WALLET) is None


def _solscan_swap(routers: list[dict], **overrides) -> dict:
    activity = {
        "block_id": 250_000_000,
        "trans_id": "3xSolscan",
        "block_time": 1_700_000_100,
        "activity_type": "ACTIVITY_AGG_TOKEN_SWAP",
        "from_address": WALLET,
        "routers": routers,
        "platform": {"name": "Jupiter"},
    }
    activity.update(overrides)
    return activity


def test_solscan_swap_scales_raw_amounts():
    routers = [
        {
            "from_token": {"address": SOL_MINT, "decimals": 9},
            "from_amount": 1_500_000_000,
            "to_token": {"address": BONK, "decimals": 5},
            "to_amount": 250_000_000,
        }
    ]
    activity = normalize_activity(_solscan_swap(routers), WALLET)
    assert activity.is_swap is True
    assert activity.timestamp == 1_700_000_100
    assert activity.signature == "3xSolscan"
    assert activity.source == "Jupiter"
    legs = _legs_by_mint(activity)
    assert legs[SOL_MINT].amount == pytest.approx(1.5)
    assert legs[SOL_MINT].direction == LegDirection.OUT
    assert legs[BONK].amount == pytest.approx(2500.0)
    assert legs[BONK].decimals == 5


def test_solscan_multi_router_collapses_to_endpoints():
    """SOL -> WIF -> BONK keeps only SOL out and BONK in."""
    routers = [
        {
            "from_token": {"address": SOL_MINT, "decimals": 9},
            "from_amount": 1_000_000_000,
            "to_token": {"address": WIF, "decimals": 6},
            "to_amount": 5_000_000,
        },
        {
            "from_token": {"address": WIF, "decimals": 6},
            "from_amount": 5_000_000,
            "to_token": {"address": BONK, "decimals": 5},
            "to_amount": 100_000_000,
        },
    ]
    activity = normalize_activity(_solscan_swap(routers), WALLET)
    assert [leg.mint for leg in activity.legs] == [SOL_MINT, BONK]


def test_solscan_other_account_not_involved():
    routers = [
        {
            "from_token": {"address": SOL_MINT, "decimals": 9},
            "from_amount": 1,
            "to_token": {"address": BONK, "decimals": 5},
            "to_amount": 1,
        }
    ]
    activity = normalize_activity(_solscan_swap(routers, from_address=POOL), WALLET)
    assert activity.legs == ()


def test_solscan_swap_without_routers_is_malformed():
    assert normalize_activity(_solscan_swap([]), WALLET) is None


def test_canonical_raw_amount_with_decimals():
    raw = {
        "timestamp": 1_700_000_000,
        "is_swap": True,
        "legs": [
            {"mint": SOL_MINT, "direction": "out", "raw_amount": 2_000_000_000, "decimals": 9},
            {"mint": BONK, "direction": "in", "raw_amount": 12345, "decimals": 2},
        ],
    }
    legs = _legs_by_mint(normalize_activity(raw, WALLET))
    assert legs[SOL_MINT].amount == pytest.approx(2.0)
    assert legs[BONK].amount == pytest.approx(123.45)


def test_canonical_bad_direction_is_malformed():
    raw = {"timestamp": 1, "type": "SWAP", "legs": [{"mint": BONK, "direction": "sideways", "amount": 1}]}
    assert normalize_activity(raw, WALLET) is None


def test_canonical_zero_amount_is_kept_for_extractor():
    """Zero amounts are structurally valid; the extractor rejects them."""
    raw = {"timestamp": 1, "type": "SWAP", "legs": [{"mint": BONK, "direction": "in", "amount": 0}]}
    activity = normalize_activity(raw, WALLET)
    assert activity.legs[0].amount == 0.0


def test_normalized_activity_passes_through():
    activity = NormalizedActivity(timestamp=5, is_swap=True)
    assert normalize_activity(activity, WALLET) is activity


def test_unknown_shape_returns_none():
    assert normalize_activity({"hello": "world"}, WALLET) is None
    assert normalize_activity(None, WALLET) is None
    assert normalize_activity(42, WALLET) is None


def test_solscan_amount_too_large_for_float_is_malformed():
    routers = [
        {
            "from_token": {"address": SOL_MINT, "decimals": 9},
            "from_amount": 10 ** 400,
            "to_token": {"address": BONK, "decimals": 5},
            "to_amount": 250_000_000,
        }
    ]
    assert normalize_activity(_solscan_swap(routers), WALLET) is None


def test_canonical_infinite_decimals_is_malformed():
    raw = {
        "timestamp": 1_700_000_000,
        "type": "SWAP",
        "legs": [
            {"mint": SOL_MINT, "direction": "out", "raw_amount": 1_000_000_000, "decimals": float("inf")},
            {"mint": BONK, "direction": "in", "amount": 10},
        ],
    }
    assert normalize_activity(raw, WALLET) is None
