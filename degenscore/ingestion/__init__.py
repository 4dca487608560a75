"""
Activity retrieval collaborators.

HeliusActivityClient pages a wallet's enhanced transaction history; every
request runs through an injectable RetryExecutor (RetryingExecutor with an
optional CircuitBreaker). The analytics core never imports this package.
"""

from degenscore.ingestion.helius_client import HeliusActivityClient, HeliusClientConfig
from degenscore.ingestion.retry import (
    CircuitBreaker,
    CircuitState,
    RetryExecutor,
    RetryingExecutor,
    RetryPolicy,
    is_retryable_error,
)

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "HeliusActivityClient",
    "HeliusClientConfig",
    "RetryExecutor",
    "RetryPolicy",
    "RetryingExecutor",
    "is_retryable_error",
]
