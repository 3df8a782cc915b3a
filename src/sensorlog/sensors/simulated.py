"""
Simulated motion and location backends for development without a handset.

Signals are simple: gravity plus uniform noise on the accelerometer, small
noise around zero on the gyroscope, a constant geomagnetic field with noise
on the magnetometer, and a slow random walk for location fixes.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence

import numpy as np

from ..config.sampling import LocationRequest, SamplingPreset
from ..core.models import LocationFix, MotionEvent, SensorKind
from .backends import LocationBackend, LocationCallback, MotionBackend, MotionCallback

logger = logging.getLogger(__name__)

GRAVITY = 9.80665
# Seconds between events when the preset asks for "as fast as possible".
_MIN_PERIOD_S = 0.005

DEFAULT_SIMULATED_SENSORS: Sequence[tuple[str, SensorKind]] = (
    ("Simulated Accelerometer", SensorKind.ACCELEROMETER),
    ("Simulated Gyroscope", SensorKind.GYROSCOPE),
    ("Simulated Magnetometer", SensorKind.MAGNETOMETER),
)


class SimulatedMotionBackend(MotionBackend):
    def __init__(
        self,
        sensors: Sequence[tuple[str, SensorKind]] = DEFAULT_SIMULATED_SENSORS,
        *,
        noise: float = 0.05,
        seed: Optional[int] = None,
    ) -> None:
        self._sensors = list(sensors)
        self._noise = float(noise)
        self._rng = np.random.default_rng(seed)
        self._base = {
            SensorKind.ACCELEROMETER: np.array([0.0, 0.0, GRAVITY]),
            SensorKind.GYROSCOPE: np.zeros(3),
            SensorKind.MAGNETOMETER: np.array([20.0, 0.0, -40.0]),
        }
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def available_sensors(self) -> List[str]:
        return [name for name, _ in self._sensors]

    def sample(self, name: str, kind: SensorKind) -> MotionEvent:
        """Produce one synthetic event for ``name``."""
        base = self._base.get(kind, np.zeros(3))
        values = base + self._rng.uniform(-self._noise, self._noise, size=3)
        return MotionEvent(sensor_name=name, kind=kind, values=tuple(float(v) for v in values))

    def subscribe(self, callback: MotionCallback, preset: SamplingPreset) -> None:
        if self._thread is not None:
            raise RuntimeError("Simulated motion backend is already subscribed.")
        period_s = max(_MIN_PERIOD_S, preset.delay_ms / 1000.0)
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(callback, period_s),
            name="simulated-motion",
            daemon=True,
        )
        self._thread.start()
        logger.info("Simulated motion started for %d sensors every %.3f s", len(self._sensors), period_s)

    def unsubscribe(self) -> None:
        thread = self._thread
        self._thread = None
        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _run(self, callback: MotionCallback, period_s: float) -> None:
        while not self._stop_event.wait(period_s):
            for name, kind in self._sensors:
                callback(self.sample(name, kind))


class SimulatedLocationBackend(LocationBackend):
    def __init__(
        self,
        start: tuple[float, float] = (52.5200, 13.4050),
        *,
        step_deg: float = 0.0001,
        seed: Optional[int] = None,
    ) -> None:
        self._position = np.array(start, dtype=float)
        self._step_deg = float(step_deg)
        self._rng = np.random.default_rng(seed)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def next_fix(self) -> LocationFix:
        self._position = self._position + self._rng.normal(0.0, self._step_deg, size=2)
        lat = float(np.clip(self._position[0], -90.0, 90.0))
        lon = float(np.clip(self._position[1], -180.0, 180.0))
        return LocationFix(latitude=lat, longitude=lon)

    def request_updates(self, callback: LocationCallback, request: LocationRequest) -> None:
        if self._thread is not None:
            raise RuntimeError("Simulated location backend already has an active request.")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(callback, request.interval_s),
            name="simulated-location",
            daemon=True,
        )
        self._thread.start()
        logger.info("Simulated location updates every %.1f s", request.interval_s)

    def remove_updates(self) -> None:
        thread = self._thread
        self._thread = None
        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _run(self, callback: LocationCallback, interval_s: float) -> None:
        # First fix right away, then one per interval.
        callback(self.next_fix())
        while not self._stop_event.wait(interval_s):
            callback(self.next_fix())
