"""
Application-level exceptions.

The analytics core raises only on caller-contract violations (InvalidWalletError)
and bad configuration (ConfigError). Malformed activity records are skipped and
counted, never raised. Retrieval collaborators raise RetrieverError subclasses.
"""

from __future__ import annotations


class DegenScoreError(Exception):
    """Base class for all DegenScore errors."""

    code = "DEGENSCORE_ERROR"

    def __init__(self, message: str, **details: object) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "message": self.message, "details": dict(self.details)}


class InvalidWalletError(DegenScoreError, ValueError):
    """Subject account missing or blank; trade direction cannot be determined."""

    code = "INVALID_WALLET"


class ConfigError(DegenScoreError, ValueError):
    """Unknown scoring profile or unparsable configuration value."""

    code = "CONFIG_ERROR"


class RetrieverError(DegenScoreError):
    """Activity retrieval failed (network, HTTP status, payload shape)."""

    code = "RETRIEVER_ERROR"


class CircuitOpenError(RetrieverError):
    """Call rejected because the circuit breaker is open."""

    code = "CIRCUIT_OPEN"


class RetryExhaustedError(RetrieverError):
    """All retry attempts failed; the last error is chained as __cause__."""

    code = "RETRY_EXHAUSTED"

    def __init__(self, message: str, attempts: int, **details: object) -> None:
        super().__init__(message, attempts=attempts, **details)
        self.attempts = attempts
