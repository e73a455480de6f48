"""Logger helpers.

The package never configures handlers itself; applications opt in with
``logging.basicConfig`` or their own setup.
"""
from __future__ import annotations

import logging
from typing import Any

ROOT_LOGGER = "tick_countdown"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


class _ContextAdapter(logging.LoggerAdapter):
    """Prefix every message with ``[key=value ...]``."""

    def process(self, msg, kwargs):  # type: ignore[override]
        ctx = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"[{ctx}] {msg}", kwargs


def get_logger(
    name: str, context: dict[str, Any] | None = None
) -> logging.Logger | logging.LoggerAdapter:
    """Return the named logger, wrapped to prefix context when one is given."""
    logger = logging.getLogger(name)
    if context:
        return _ContextAdapter(logger, dict(context))
    return logger
