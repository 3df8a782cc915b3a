"""Minimal helpers for opt-in debug logging."""

from __future__ import annotations

import os

DEBUG_SENSORLOG = os.getenv("SENSORLOG_DEBUG", "").lower() in {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """Return True when ``SENSORLOG_DEBUG`` asks for verbose logging."""
    return DEBUG_SENSORLOG
