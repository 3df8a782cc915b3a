"""Sensor/location source: turns backend events into formatted readings."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..config.sampling import DEFAULT_PRESET_KEY, SAMPLING_PRESETS, LocationRequest
from ..core.models import LocationFix, MotionEvent, Reading, SensorKind, format_timestamp
from .backends import LocationBackend, MotionBackend

logger = logging.getLogger(__name__)

GPS_SENSOR_TYPE = "GPS"

ReadingListener = Callable[[Reading], None]
LocationListener = Callable[[float, float], None]

_KIND_LABELS = {
    SensorKind.ACCELEROMETER: "Accelerometer",
    SensorKind.GYROSCOPE: "Gyroscope",
    SensorKind.MAGNETOMETER: "Magnetometer",
}


def format_motion(kind: SensorKind, values: tuple[float, ...]) -> str:
    """
    Format an axis triple as ``"<Label>: x=<v0>, y=<v1>, z=<v2>"``.

    Unknown sensor kinds produce an empty string.
    """
    label = _KIND_LABELS.get(kind)
    if label is None:
        return ""
    x, y, z = (float(v) for v in values[:3])
    return f"{label}: x={x}, y={y}, z={z}"


def format_location(latitude: float, longitude: float) -> str:
    return f"GPS: Lat={float(latitude)}, Lon={float(longitude)}"


class SensorSource:
    """
    Subscribe to motion and location backends and fan events out to listeners.

    Listeners run on whichever thread the backend delivers on; consumers that
    touch UI state must marshal onto their own thread. ``start()`` and
    ``stop()`` are idempotent, so repeated calls never stack subscriptions.
    """

    def __init__(
        self,
        motion: MotionBackend,
        location: Optional[LocationBackend] = None,
        *,
        location_request: Optional[LocationRequest] = None,
        location_permitted: bool = True,
    ) -> None:
        self._motion = motion
        self._location = location
        self._location_request = location_request or LocationRequest()
        self._location_permitted = bool(location_permitted)

        self._running = False
        self._location_active = False
        self._reading_listeners: List[ReadingListener] = []
        self._location_listeners: List[LocationListener] = []

    # --------------------------------------------------------------- observers
    def add_reading_listener(self, listener: ReadingListener) -> None:
        if listener not in self._reading_listeners:
            self._reading_listeners.append(listener)

    def remove_reading_listener(self, listener: ReadingListener) -> None:
        try:
            self._reading_listeners.remove(listener)
        except ValueError:
            pass

    def add_location_listener(self, listener: LocationListener) -> None:
        if listener not in self._location_listeners:
            self._location_listeners.append(listener)

    def remove_location_listener(self, listener: LocationListener) -> None:
        try:
            self._location_listeners.remove(listener)
        except ValueError:
            pass

    # --------------------------------------------------------------- state
    @property
    def running(self) -> bool:
        return self._running

    @property
    def location_active(self) -> bool:
        return self._location_active

    @property
    def location_permitted(self) -> bool:
        return self._location_permitted

    def set_location_permitted(self, permitted: bool) -> None:
        """Record the permission outcome; starts location updates if already running."""
        self._location_permitted = bool(permitted)
        if self._location_permitted and self._running:
            self._start_location()
        elif not self._location_permitted:
            self._stop_location()

    # --------------------------------------------------------------- start/stop
    def start(self) -> None:
        if self._running:
            return
        preset = SAMPLING_PRESETS[DEFAULT_PRESET_KEY]
        logger.info("Subscribing to motion sensors (preset=%s)", preset.label)
        self._motion.subscribe(self._on_motion_event, preset)
        self._running = True
        self._start_location()

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._motion.unsubscribe()
        self._stop_location()
        logger.info("Sensor source stopped")

    def _start_location(self) -> None:
        if self._location_active or self._location is None:
            return
        if not self._location_permitted:
            logger.info("Location permission not granted; location updates not started")
            return
        self._location.request_updates(self._on_location_fix, self._location_request)
        self._location_active = True

    def _stop_location(self) -> None:
        if not self._location_active or self._location is None:
            return
        self._location.remove_updates()
        self._location_active = False

    # --------------------------------------------------------------- backend callbacks
    def _on_motion_event(self, event: MotionEvent) -> None:
        if len(event.values) < 3:
            logger.warning("Dropping %s event with %d values", event.sensor_name, len(event.values))
            return
        data = format_motion(event.kind, event.values)
        self._emit_reading(Reading(sensor_type=event.sensor_name, data=data, timestamp=format_timestamp()))

    def _on_location_fix(self, fix: LocationFix) -> None:
        for listener in list(self._location_listeners):
            try:
                listener(fix.latitude, fix.longitude)
            except Exception as exc:  # pragma: no cover - defensive guard
                logger.exception("Error in location listener for %r: %s", fix, exc)
        data = format_location(fix.latitude, fix.longitude)
        self._emit_reading(Reading(sensor_type=GPS_SENSOR_TYPE, data=data, timestamp=format_timestamp()))

    def _emit_reading(self, reading: Reading) -> None:
        for listener in list(self._reading_listeners):
            try:
                listener(reading)
            except Exception as exc:  # pragma: no cover - defensive guard
                logger.exception("Error in reading listener for %r: %s", reading, exc)
