from __future__ import annotations

import logging
from typing import Optional

from .config import ObservabilityConfig, get_config

logger = logging.getLogger("osmnav")


class _ExtraFormatter(logging.Formatter):
    """Appends the ``extra={...}`` context of a record to its message."""

    _STANDARD = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = {
            k: v for k, v in vars(record).items() if k not in self._STANDARD
        }
        if context:
            pairs = " ".join(f"{k}={v!r}" for k, v in sorted(context.items()))
            text = f"{text} [{pairs}]"
        return text


def configure_logging(config: Optional[ObservabilityConfig] = None) -> logging.Logger:
    """Attach a stream handler to the ``osmnav`` logger once.

    Returns:
        The package logger.
    """
    config = config or get_config().observability
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_ExtraFormatter(config.format))
        logger.addHandler(handler)
    logger.setLevel(config.level.upper())
    return logger
