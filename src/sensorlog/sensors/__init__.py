"""Sensor and location sources.

:mod:`source` turns raw backend events into formatted readings.
:mod:`backends` defines the subscription contracts, which are implemented by
the :mod:`simulated` backends (no hardware needed) and the :mod:`termux`
backends (Android handsets via Termux:API).
"""

from __future__ import annotations

from .backends import LocationBackend, MotionBackend
from .simulated import SimulatedLocationBackend, SimulatedMotionBackend
from .source import SensorSource, format_location, format_motion
from .termux import TermuxLocationBackend, TermuxMotionBackend


def create_backends(
    name: str, *, start: tuple[float, float] | None = None
) -> tuple[MotionBackend, LocationBackend]:
    """
    Return ``(motion, location)`` backends for ``simulated`` or ``termux``.

    ``start`` seeds the simulated location walk; real backends ignore it.
    """
    key = name.strip().lower()
    if key == "termux":
        return TermuxMotionBackend(), TermuxLocationBackend()
    if key == "simulated":
        location = SimulatedLocationBackend(start) if start else SimulatedLocationBackend()
        return SimulatedMotionBackend(), location
    raise ValueError(f"Unknown sensor backend {name!r}")


__all__ = [
    "LocationBackend",
    "MotionBackend",
    "SensorSource",
    "SimulatedLocationBackend",
    "SimulatedMotionBackend",
    "TermuxLocationBackend",
    "TermuxMotionBackend",
    "create_backends",
    "format_location",
    "format_motion",
]
