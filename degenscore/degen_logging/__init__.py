"""
Structured logging for DegenScore.

JSON logs with timestamp, wallet, event_type. Use get_logger() in every module.
"""

from degenscore.degen_logging.logger import bind_wallet, configure_structlog, get_logger, short_wallet

__all__ = ["bind_wallet", "configure_structlog", "get_logger", "short_wallet"]
