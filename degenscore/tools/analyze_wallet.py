"""
Analyze one wallet and print its DegenScore metrics as JSON.

Activities come from a JSON file (--input: a list of raw activities, or an
object with a "transactions" list) or, without --input, from the Helius API
(HELIUS_API_KEY required).

Usage:
  python -m degenscore.tools.analyze_wallet --wallet ADDR
  python -m degenscore.tools.analyze_wallet --wallet ADDR --input txs.json --profile strict
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable

from degenscore.analytics import run_wallet_analysis
from degenscore.config import SCORING_PROFILES, get_settings
from degenscore.config.env import load_degenscore_env
from degenscore.core.exceptions import DegenScoreError
from degenscore.degen_logging import bind_wallet, configure_structlog
from degenscore.ingestion import HeliusActivityClient, HeliusClientConfig
from degenscore.utils.wallet_utils import is_valid_wallet, normalize_wallet


def load_activities(path: Path) -> list[Any]:
    """Load raw activities from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("transactions") or data.get("activities") or []
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of activities")
    return data


def _print_progress(percent: int, message: str) -> None:
    print(f"[analyze_wallet] {percent:3d}% {message}", file=sys.stderr)


def _monotonic_progress(report: Callable[[int, str], None]) -> Callable[[int, str], None]:
    """Drop checkpoints below the highest percent already shown."""
    shown = 0

    def _report(percent: int, message: str) -> None:
        nonlocal shown
        if percent < shown:
            return
        shown = percent
        report(percent, message)

    return _report


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Compute the DegenScore for a Solana wallet")
    ap.add_argument("--wallet", required=True, help="Wallet address (base58)")
    ap.add_argument("--input", type=str, default=None, help="JSON file with raw activities (skips Helius)")
    ap.add_argument("--profile", choices=sorted(SCORING_PROFILES), default=None, help="Scoring profile")
    ap.add_argument("--verbose", action="store_true", help="Log every rejected activity and show progress")
    return ap


def main(argv: list[str] | None = None) -> int:
    load_degenscore_env()
    args = build_parser().parse_args(argv)

    wallet = normalize_wallet(args.wallet)
    if not is_valid_wallet(wallet):
        print("[analyze_wallet] ERROR: invalid wallet address:", wallet or "<empty>", file=sys.stderr)
        return 1
    if args.verbose:
        configure_structlog(level="DEBUG")
    logger = bind_wallet(wallet)

    try:
        config = get_settings()
        if args.profile:
            config = config.with_overrides(profile=args.profile)
        if args.verbose:
            config = config.with_overrides(verbose_diagnostics=True)
        progress = _monotonic_progress(_print_progress) if args.verbose else None

        if args.input:
            activities = load_activities(Path(args.input))
        else:
            client = HeliusActivityClient(HeliusClientConfig.from_env())
            activities = client.fetch_activities(wallet, progress=progress)

        metrics = run_wallet_analysis(activities, wallet, config, progress=progress)
    except DegenScoreError as e:
        logger.error("analyze_wallet_failed", code=e.code, error=e.message)
        print("[analyze_wallet] ERROR:", e.message, file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        logger.error("analyze_wallet_input_failed", error=str(e))
        print("[analyze_wallet] ERROR:", e, file=sys.stderr)
        return 1

    out = {"wallet": wallet, **metrics.to_dict()}
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
