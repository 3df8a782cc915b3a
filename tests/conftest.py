from __future__ import annotations

from typing import List, Optional

import pytest
from PySide6.QtCore import QCoreApplication

from sensorlog.config.sampling import LocationRequest, SamplingPreset
from sensorlog.core.models import LocationFix, MotionEvent, SensorKind
from sensorlog.sensors.backends import LocationBackend, LocationCallback, MotionBackend, MotionCallback


@pytest.fixture(scope="session")
def qcore_app() -> QCoreApplication:
    return QCoreApplication.instance() or QCoreApplication([])


class FakeMotionBackend(MotionBackend):
    """Records subscriptions; tests push events through :meth:`emit`."""

    def __init__(self) -> None:
        self.callback: Optional[MotionCallback] = None
        self.presets: List[SamplingPreset] = []
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0

    def subscribe(self, callback: MotionCallback, preset: SamplingPreset) -> None:
        self.subscribe_calls += 1
        self.presets.append(preset)
        self.callback = callback

    def unsubscribe(self) -> None:
        self.unsubscribe_calls += 1
        self.callback = None

    def emit(self, name: str, kind: SensorKind, values: tuple[float, ...]) -> None:
        assert self.callback is not None, "not subscribed"
        self.callback(MotionEvent(sensor_name=name, kind=kind, values=values))


class FakeLocationBackend(LocationBackend):
    def __init__(self) -> None:
        self.callback: Optional[LocationCallback] = None
        self.requests: List[LocationRequest] = []
        self.remove_calls = 0

    def request_updates(self, callback: LocationCallback, request: LocationRequest) -> None:
        self.requests.append(request)
        self.callback = callback

    def remove_updates(self) -> None:
        self.remove_calls += 1
        self.callback = None

    def emit(self, lat: float, lon: float) -> None:
        assert self.callback is not None, "no active location request"
        self.callback(LocationFix(latitude=lat, longitude=lon))


@pytest.fixture
def motion_backend() -> FakeMotionBackend:
    return FakeMotionBackend()


@pytest.fixture
def location_backend() -> FakeLocationBackend:
    return FakeLocationBackend()
