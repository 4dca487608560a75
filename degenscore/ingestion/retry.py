"""
Retry with exponential backoff + jitter, and a circuit breaker.

Both are plain objects injected into the retrieval client (no module-level
singletons). sleep, clock and rng are injectable so tests run instantly and
deterministically.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeVar

import requests

from degenscore.core.exceptions import CircuitOpenError, RetryExhaustedError
from degenscore.degen_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class RetryExecutor(Protocol):
    """Anything that can run a zero-argument callable with retries."""

    def execute(self, fn: Callable[[], T]) -> T: ...


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0
    max_delay_sec: float = 10.0
    backoff_multiplier: float = 2.0
    jitter_ratio: float = 0.3
    retryable_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES

    def delay_for(self, attempt: int, rng: Callable[[], float] = random.random) -> float:
        """Delay before retry number attempt+1 (attempt is 0-based), capped at max_delay_sec."""
        delay = self.initial_delay_sec * (self.backoff_multiplier ** attempt)
        jitter = rng() * self.jitter_ratio * delay
        return min(delay + jitter, self.max_delay_sec)


def _status_code(error: BaseException) -> int | None:
    response = getattr(error, "response", None)
    if response is not None and getattr(response, "status_code", None) is not None:
        return int(response.status_code)
    status = getattr(error, "status_code", None)
    return int(status) if status is not None else None


def is_retryable_error(error: BaseException, retryable_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES) -> bool:
    """Connection errors and timeouts, or HTTP errors with a retryable status."""
    if isinstance(error, CircuitOpenError):
        return False
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    status = _status_code(error)
    return status is not None and status in retryable_status_codes


class CircuitState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitBreaker:
    """
    Opens after threshold consecutive failures; rejects calls with
    CircuitOpenError until reset_timeout_sec has passed, then lets one trial
    call through (HALF_OPEN). Success closes it, failure reopens it.
    """

    def __init__(
        self,
        threshold: int = 5,
        reset_timeout_sec: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        name: str = "default",
    ) -> None:
        self.threshold = threshold
        self.reset_timeout_sec = reset_timeout_sec
        self.name = name
        self._clock = clock
        self._failures = 0
        self._last_failure_at = 0.0
        self._state = CircuitState.CLOSED

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failures(self) -> int:
        return self._failures

    def execute(self, fn: Callable[[], T]) -> T:
        if self._state == CircuitState.OPEN:
            if self._clock() - self._last_failure_at > self.reset_timeout_sec:
                self._state = CircuitState.HALF_OPEN
                logger.info("circuit_half_open", breaker=self.name)
            else:
                raise CircuitOpenError(f"circuit breaker {self.name!r} is open", breaker=self.name)
        try:
            result = fn()
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _on_success(self) -> None:
        self._failures = 0
        if self._state == CircuitState.HALF_OPEN:
            self._state = CircuitState.CLOSED
            logger.info("circuit_closed", breaker=self.name)

    def _on_failure(self) -> None:
        self._failures += 1
        self._last_failure_at = self._clock()
        if self._state == CircuitState.HALF_OPEN or self._failures >= self.threshold:
            if self._state != CircuitState.OPEN:
                logger.error("circuit_opened", breaker=self.name, failures=self._failures)
            self._state = CircuitState.OPEN

    def reset(self) -> None:
        self._failures = 0
        self._last_failure_at = 0.0
        self._state = CircuitState.CLOSED


class RetryingExecutor:
    """
    RetryExecutor with exponential backoff; optionally routes every attempt
    through a CircuitBreaker. Non-retryable errors propagate unchanged; when
    retries run out, RetryExhaustedError is raised from the last error.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Callable[[], float] = random.random,
    ) -> None:
        self.policy = policy or RetryPolicy()
        self.breaker = breaker
        self._sleep = sleep
        self._rng = rng

    def _call(self, fn: Callable[[], T]) -> T:
        if self.breaker is not None:
            return self.breaker.execute(fn)
        return fn()

    def execute(self, fn: Callable[[], T]) -> T:
        policy = self.policy
        last_error: Exception | None = None
        for attempt in range(policy.max_retries + 1):
            try:
                return self._call(fn)
            except Exception as e:
                last_error = e
                if not is_retryable_error(e, policy.retryable_status_codes):
                    raise
                if attempt == policy.max_retries:
                    break
                delay = policy.delay_for(attempt, self._rng)
                logger.warning(
                    "retry_scheduled",
                    attempt=attempt + 1,
                    max_retries=policy.max_retries,
                    delay_sec=round(delay, 3),
                    error=str(e),
                )
                self._sleep(delay)
        raise RetryExhaustedError(
            f"max retries ({policy.max_retries}) exceeded: {last_error}",
            attempts=policy.max_retries + 1,
        ) from last_error
