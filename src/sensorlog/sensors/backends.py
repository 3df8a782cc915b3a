"""
Contracts for the platform services the sensor source subscribes to.

A backend delivers events by calling the registered callback, usually from
its own thread. The source never assumes a particular delivery thread.
"""

from __future__ import annotations

from typing import Callable, List

from ..config.sampling import LocationRequest, SamplingPreset
from ..core.models import LocationFix, MotionEvent

MotionCallback = Callable[[MotionEvent], None]
LocationCallback = Callable[[LocationFix], None]


class MotionBackend:
    """
    Motion-sensor event subscription.

    Implementations must support:
    - subscribe(callback, preset): start delivering events for every
      accelerometer, gyroscope and magnetometer present.
    - unsubscribe(): stop delivery; safe to call when not subscribed.
    """

    def available_sensors(self) -> List[str]:
        return []

    def subscribe(self, callback: MotionCallback, preset: SamplingPreset) -> None:
        raise NotImplementedError

    def unsubscribe(self) -> None:
        raise NotImplementedError


class LocationBackend:
    """Location-update subscription with a configurable interval and priority."""

    def request_updates(self, callback: LocationCallback, request: LocationRequest) -> None:
        raise NotImplementedError

    def remove_updates(self) -> None:
        raise NotImplementedError
