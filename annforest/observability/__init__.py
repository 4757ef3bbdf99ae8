"""
Observability module: structured logging.
"""

from annforest.observability.logging import (
    JsonFormatter,
    LogLevel,
    StructuredLogger,
    log_context,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    "JsonFormatter",
    "LogLevel",
    "StructuredLogger",
    "log_context",
    "setup_logging",
    "setup_logging_from_config",
]
