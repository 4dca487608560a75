"""
Core utilities: exceptions and cross-cutting concerns shared by the
analytics pipeline, the retrieval client and the CLI.
"""

from degenscore.core.exceptions import (
    CircuitOpenError,
    ConfigError,
    DegenScoreError,
    InvalidWalletError,
    RetrieverError,
    RetryExhaustedError,
)

__all__ = [
    "CircuitOpenError",
    "ConfigError",
    "DegenScoreError",
    "InvalidWalletError",
    "RetrieverError",
    "RetryExhaustedError",
]
