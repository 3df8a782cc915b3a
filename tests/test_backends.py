from __future__ import annotations

import subprocess
import threading

from sensorlog.config.sampling import SAMPLING_PRESETS, LocationRequest
from sensorlog.core.models import LocationFix, MotionEvent, SensorKind
from sensorlog.sensors import create_backends
from sensorlog.sensors.simulated import SimulatedLocationBackend, SimulatedMotionBackend
from sensorlog.sensors.termux import (
    TermuxLocationBackend,
    TermuxMotionBackend,
    iter_json_objects,
    parse_location_payload,
    parse_sensor_list,
    parse_sensor_payload,
)

PRETTY_STREAM = """\
{
  "BMI160 Accelerometer": {
    "values": [
      0.5,
      -0.25,
      9.75
    ]
  }
}
not json at all }
{
  "AK09918 Magnetometer": {
    "values": [20, 1, -40]
  },
  "BMI160 Gyroscope": {
    "values": [0.0, 0.1, 0.2]
  }
}
"""


def test_iter_json_objects_reassembles_multiline_objects() -> None:
    objects = list(iter_json_objects(PRETTY_STREAM.splitlines(keepends=True)))

    assert len(objects) == 2
    assert objects[0]["BMI160 Accelerometer"]["values"] == [0.5, -0.25, 9.75]
    assert set(objects[1]) == {"AK09918 Magnetometer", "BMI160 Gyroscope"}


def test_parse_sensor_payload_classifies_by_name() -> None:
    payload = {
        "AK09918 Magnetometer": {"values": [20, 1, -40]},
        "BMI160 Gyroscope": {"values": [0.0, 0.1, 0.2]},
        "Light": {"values": [120.0]},
        "broken": {"values": ["x", 1, 2]},
        "no-values": {},
    }

    events = parse_sensor_payload(payload)

    assert events == [
        MotionEvent("AK09918 Magnetometer", SensorKind.MAGNETOMETER, (20.0, 1.0, -40.0)),
        MotionEvent("BMI160 Gyroscope", SensorKind.GYROSCOPE, (0.0, 0.1, 0.2)),
        MotionEvent("Light", SensorKind.UNKNOWN, (120.0,)),
    ]


def test_parse_location_payload() -> None:
    fix = parse_location_payload({"latitude": 52.52, "longitude": 13.405, "accuracy": 4.0})
    assert fix == LocationFix(52.52, 13.405)
    assert parse_location_payload({"latitude": 1.0}) is None
    assert parse_location_payload([1, 2]) is None


def test_parse_sensor_list_json_and_plain() -> None:
    assert parse_sensor_list('{"sensors": ["A Accelerometer", "B Light"]}') == ["A Accelerometer", "B Light"]
    assert parse_sensor_list("A Accelerometer\n\nB Gyroscope\n") == ["A Accelerometer", "B Gyroscope"]
    assert parse_sensor_list("") == []


def test_termux_motion_subscribe_without_motion_sensors_is_silent() -> None:
    backend = TermuxMotionBackend(sensor_names=["Light", "Proximity"])
    backend.subscribe(lambda event: None, SAMPLING_PRESETS["normal"])
    backend.unsubscribe()


def test_termux_location_missing_tool_yields_no_fix(monkeypatch) -> None:
    def _missing(*args, **kwargs):
        raise FileNotFoundError("termux-location")

    monkeypatch.setattr(subprocess, "run", _missing)
    assert TermuxLocationBackend().read_fix() is None


def test_termux_location_parses_command_output(monkeypatch) -> None:
    def _fake_run(cmd, **kwargs):
        assert cmd == ["termux-location", "-p", "gps"]
        return subprocess.CompletedProcess(cmd, 0, stdout='{"latitude": 48.1, "longitude": 11.5}', stderr="")

    monkeypatch.setattr(subprocess, "run", _fake_run)
    assert TermuxLocationBackend().read_fix("gps") == LocationFix(48.1, 11.5)


def test_simulated_motion_sample_is_near_gravity() -> None:
    backend = SimulatedMotionBackend(seed=1, noise=0.01)
    event = backend.sample("Simulated Accelerometer", SensorKind.ACCELEROMETER)

    assert event.kind is SensorKind.ACCELEROMETER
    assert len(event.values) == 3
    assert abs(event.values[2] - 9.80665) <= 0.01


def test_simulated_motion_delivers_until_unsubscribed() -> None:
    backend = SimulatedMotionBackend(seed=2)
    received: list[MotionEvent] = []
    got_one = threading.Event()

    def _collect(event: MotionEvent) -> None:
        received.append(event)
        got_one.set()

    backend.subscribe(_collect, SAMPLING_PRESETS["fastest"])
    try:
        assert got_one.wait(2.0)
    finally:
        backend.unsubscribe()

    count = len(received)
    assert {e.sensor_name for e in received} <= set(backend.available_sensors())
    threading.Event().wait(0.05)
    assert len(received) == count


def test_simulated_location_first_fix_is_immediate() -> None:
    backend = SimulatedLocationBackend(start=(10.0, 20.0), seed=3)
    fixes: list[LocationFix] = []
    got_fix = threading.Event()

    def _collect(fix: LocationFix) -> None:
        fixes.append(fix)
        got_fix.set()

    backend.request_updates(_collect, LocationRequest(interval_ms=60_000))
    try:
        assert got_fix.wait(2.0)
    finally:
        backend.remove_updates()

    assert abs(fixes[0].latitude - 10.0) < 0.01
    assert abs(fixes[0].longitude - 20.0) < 0.01


def test_create_backends() -> None:
    motion, location = create_backends("termux")
    assert isinstance(motion, TermuxMotionBackend)
    assert isinstance(location, TermuxLocationBackend)

    motion, location = create_backends("simulated", start=(1.0, 2.0))
    assert isinstance(motion, SimulatedMotionBackend)
    assert isinstance(location, SimulatedLocationBackend)
