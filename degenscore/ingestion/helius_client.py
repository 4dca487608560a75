"""
Paginated Helius activity retrieval.

GET {api_base}/addresses/{wallet}/transactions?api-key=..&limit=..&before=..
returns enhanced transactions newest first. Pages walk backwards with the
signature of the last item as the before cursor. Each page request runs
through an injectable RetryExecutor.

Stops after max_pages, max_empty_pages consecutive empty pages, or
max_failed_pages consecutive failed pages. On failure with partial data the
batch is returned truncated; with no data at all RetrieverError is raised.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

import requests

from degenscore.config.env import get_helius_api_base, get_helius_api_key, mask_api_key
from degenscore.core.exceptions import CircuitOpenError, ConfigError, RetrieverError
from degenscore.degen_logging import get_logger, short_wallet
from degenscore.ingestion.retry import CircuitBreaker, RetryExecutor, RetryingExecutor

logger = get_logger(__name__)

ProgressCallback = Callable[[int, str], None]

# Fetch progress runs from 5% to 70% of the overall analysis.
PROGRESS_FETCH_START = 5
PROGRESS_FETCH_SPAN = 65


@dataclass(frozen=True)
class HeliusClientConfig:
    api_key: str
    api_base: str = "https://api.helius.xyz/v0"
    page_size: int = 100
    max_pages: int = 100
    max_empty_pages: int = 3
    max_failed_pages: int = 5
    page_delay_sec: float = 0.3
    error_delay_sec: float = 0.5
    timeout_sec: float = 30.0

    @classmethod
    def from_env(cls, **overrides: Any) -> "HeliusClientConfig":
        """Build from HELIUS_API_KEY / HELIUS_API_BASE. Raises ConfigError without a key."""
        api_key = overrides.pop("api_key", None) or get_helius_api_key()
        if not api_key:
            raise ConfigError("HELIUS_API_KEY is not set", variable="HELIUS_API_KEY")
        overrides.setdefault("api_base", get_helius_api_base())
        return cls(api_key=api_key, **overrides)


class HeliusActivityClient:
    """Fetch a wallet's enhanced transaction history from Helius."""

    def __init__(
        self,
        config: HeliusClientConfig,
        executor: RetryExecutor | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.executor = executor or RetryingExecutor(breaker=CircuitBreaker(name="helius"))
        self.session = session or requests.Session()
        self._sleep = sleep

    def _url(self, wallet: str) -> str:
        return f"{self.config.api_base.rstrip('/')}/addresses/{wallet}/transactions"

    def fetch_page(self, wallet: str, before: str | None = None) -> list[dict[str, Any]]:
        """Fetch one page (single HTTP request, no retry)."""
        params: dict[str, Any] = {"api-key": self.config.api_key, "limit": self.config.page_size}
        if before:
            params["before"] = before
        response = self.session.get(self._url(wallet), params=params, timeout=self.config.timeout_sec)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, list):
            raise RetrieverError(
                "unexpected Helius response shape",
                url=mask_api_key(str(getattr(response, "url", "") or self._url(wallet))),
                payload_type=type(data).__name__,
            )
        return data

    def fetch_activities(
        self,
        wallet: str,
        progress: ProgressCallback | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch all pages for wallet and return transactions sorted by timestamp.

        Raises RetrieverError only when nothing could be fetched and the last
        page failed; partial batches are returned as-is.
        """
        cfg = self.config
        log_wallet = short_wallet(wallet)
        activities: list[dict[str, Any]] = []
        before: str | None = None
        pages = 0
        empty_pages = 0
        failed_pages = 0
        last_error: Exception | None = None

        logger.info("helius_fetch_start", wallet=log_wallet, max_pages=cfg.max_pages, page_size=cfg.page_size)

        while pages < cfg.max_pages:
            try:
                batch = self.executor.execute(partial(self.fetch_page, wallet, before))
            except CircuitOpenError as e:
                last_error = e
                logger.error("helius_circuit_open", wallet=log_wallet, fetched=len(activities))
                break
            except (RetrieverError, requests.RequestException, ValueError) as e:
                last_error = e
                failed_pages += 1
                pages += 1
                logger.error(
                    "helius_page_failed",
                    wallet=log_wallet,
                    page=pages,
                    before=(before[:20] + "...") if before else None,
                    failed_pages=failed_pages,
                    error=str(e),
                )
                if failed_pages >= cfg.max_failed_pages:
                    logger.error("helius_too_many_failures", wallet=log_wallet, failed_pages=failed_pages)
                    break
                self._sleep(cfg.error_delay_sec)
                continue

            failed_pages = 0
            last_error = None
            pages += 1
            if batch:
                activities.extend(tx for tx in batch if isinstance(tx, dict))
                before = batch[-1].get("signature") if isinstance(batch[-1], dict) else None
                empty_pages = 0
                logger.debug("helius_page_fetched", wallet=log_wallet, page=pages, count=len(batch), total=len(activities))
                if not before:
                    break
            else:
                empty_pages += 1
                logger.debug("helius_page_empty", wallet=log_wallet, page=pages, empty_pages=empty_pages)
                if empty_pages >= cfg.max_empty_pages:
                    break

            if progress is not None:
                pct = PROGRESS_FETCH_START + math.floor(pages / cfg.max_pages * PROGRESS_FETCH_SPAN)
                try:
                    progress(pct, f"Batch {pages}/{cfg.max_pages} ({len(activities)} txs)")
                except Exception as e:
                    logger.warning("progress_callback_failed", percent=pct, error=str(e))
            self._sleep(cfg.page_delay_sec)

        if last_error is not None and not activities:
            raise RetrieverError(
                f"no transactions fetched for {log_wallet}: {last_error}",
                wallet=log_wallet,
                pages=pages,
            ) from last_error
        if last_error is not None:
            logger.warning("helius_fetch_truncated", wallet=log_wallet, fetched=len(activities))

        activities.sort(key=lambda tx: tx.get("timestamp") or 0)
        logger.info("helius_fetch_done", wallet=log_wallet, pages=pages, total=len(activities))
        return activities
