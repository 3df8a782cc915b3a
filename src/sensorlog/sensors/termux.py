"""
Android backends built on the Termux:API command-line tools.

``termux-sensor -s <names> -d <delay_ms>`` streams pretty-printed JSON
objects such as::

    {
      "BMI160 Accelerometer": {
        "values": [0.01, 0.12, 9.79]
      }
    }

Objects span several lines, so the stream is split by brace depth.
``termux-location -p <provider>`` prints a single JSON object with
``latitude``/``longitude`` (and more) per call; it is polled once per
location interval. When the Termux:API app lacks the location permission
the command fails or prints nothing, and no fixes are delivered.
"""

from __future__ import annotations

import json
import logging
import subprocess
import threading
from typing import Any, Iterable, Iterator, List, Mapping, Optional

from ..config.sampling import (
    PRIORITY_BALANCED,
    PRIORITY_HIGH_ACCURACY,
    LocationRequest,
    SamplingPreset,
)
from ..core.models import LocationFix, MotionEvent, SensorKind
from .backends import LocationBackend, LocationCallback, MotionBackend, MotionCallback

logger = logging.getLogger(__name__)

SENSOR_CMD = "termux-sensor"
LOCATION_CMD = "termux-location"

_PROVIDERS = {
    PRIORITY_HIGH_ACCURACY: "gps",
    PRIORITY_BALANCED: "network",
}


def iter_json_objects(lines: Iterable[str]) -> Iterator[Any]:
    """
    Reassemble multi-line JSON objects from ``lines`` by tracking brace depth.

    Malformed objects are logged and skipped.
    """
    buffer: List[str] = []
    depth = 0
    for line in lines:
        if not line.strip() and not buffer:
            continue
        buffer.append(line)
        depth += line.count("{") - line.count("}")
        if depth > 0:
            continue
        text = "".join(buffer).strip()
        buffer.clear()
        depth = 0
        if not text:
            continue
        try:
            yield json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Bad JSON from %s: %r (%s)", SENSOR_CMD, text[:80], exc)


def parse_sensor_payload(payload: Any) -> List[MotionEvent]:
    """Convert one ``termux-sensor`` object into motion events (one per sensor key)."""
    if not isinstance(payload, Mapping):
        return []
    events: List[MotionEvent] = []
    for name, block in payload.items():
        if not isinstance(block, Mapping):
            continue
        values = block.get("values")
        if not isinstance(values, list):
            continue
        try:
            numbers = tuple(float(v) for v in values)
        except (TypeError, ValueError) as exc:
            logger.warning("Bad values for sensor %r: %r (%s)", name, values, exc)
            continue
        events.append(
            MotionEvent(sensor_name=str(name), kind=SensorKind.from_sensor_name(str(name)), values=numbers)
        )
    return events


def parse_location_payload(payload: Any) -> Optional[LocationFix]:
    """Extract a :class:`LocationFix` from ``termux-location`` output, if present."""
    if not isinstance(payload, Mapping):
        return None
    try:
        lat = float(payload["latitude"])
        lon = float(payload["longitude"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Missing latitude/longitude in location output: %r", payload)
        return None
    return LocationFix(latitude=lat, longitude=lon)


def parse_sensor_list(output: str) -> List[str]:
    """Parse ``termux-sensor -l`` output (JSON ``{"sensors": [...]}`` or one name per line)."""
    text = output.strip()
    if not text:
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return [line.strip() for line in text.splitlines() if line.strip()]
    if isinstance(data, Mapping):
        sensors = data.get("sensors", [])
        return [str(s) for s in sensors] if isinstance(sensors, list) else []
    return []


class TermuxMotionBackend(MotionBackend):
    def __init__(self, sensor_names: Optional[List[str]] = None) -> None:
        self._sensor_names = sensor_names
        self._process: Optional[subprocess.Popen] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def available_sensors(self) -> List[str]:
        try:
            output = subprocess.run(
                [SENSOR_CMD, "-l"],
                capture_output=True,
                text=True,
                timeout=10,
                check=True,
            ).stdout
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("Could not list sensors with %s: %s", SENSOR_CMD, exc)
            return []
        return parse_sensor_list(output)

    def _motion_sensor_names(self) -> List[str]:
        names = self._sensor_names or self.available_sensors()
        return [n for n in names if SensorKind.from_sensor_name(n) is not SensorKind.UNKNOWN]

    def subscribe(self, callback: MotionCallback, preset: SamplingPreset) -> None:
        if self._process is not None:
            raise RuntimeError("termux-sensor is already running.")

        names = self._motion_sensor_names()
        if not names:
            logger.warning("No accelerometer/gyroscope/magnetometer found via %s", SENSOR_CMD)
            return

        cmd = [SENSOR_CMD, "-s", ",".join(names), "-d", str(max(1, preset.delay_ms))]
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
                close_fds=True,
            )
        except OSError as exc:
            logger.error("Failed to start %s: %s", SENSOR_CMD, exc)
            return

        self._process = process
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._read_loop,
            args=(process, callback),
            name="termux-sensor",
            daemon=True,
        )
        self._thread.start()
        logger.info("Started %s (PID %s) for %s", SENSOR_CMD, process.pid, names)

    def unsubscribe(self) -> None:
        process = self._process
        thread = self._thread
        self._process = None
        self._thread = None
        self._stop_event.set()
        if process is None:
            return
        process.terminate()
        try:
            process.wait(timeout=2.0)
        except subprocess.TimeoutExpired:
            process.kill()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        # Release the sensors held by the Termux:API service.
        try:
            subprocess.run([SENSOR_CMD, "-c"], capture_output=True, timeout=5)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("%s cleanup failed: %s", SENSOR_CMD, exc)

    def _read_loop(self, process: subprocess.Popen, callback: MotionCallback) -> None:
        assert process.stdout is not None
        for payload in iter_json_objects(process.stdout):
            if self._stop_event.is_set():
                break
            for event in parse_sensor_payload(payload):
                callback(event)
        if not self._stop_event.is_set():
            logger.warning("%s stream ended (exit code %s)", SENSOR_CMD, process.poll())


class TermuxLocationBackend(LocationBackend):
    def __init__(self, timeout_s: float = 30.0) -> None:
        self._timeout_s = float(timeout_s)
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def read_fix(self, provider: str = "gps") -> Optional[LocationFix]:
        """Run ``termux-location`` once and return the fix, or ``None`` on failure."""
        try:
            result = subprocess.run(
                [LOCATION_CMD, "-p", provider],
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("%s failed: %s", LOCATION_CMD, exc)
            return None
        if result.returncode != 0 or not result.stdout.strip():
            logger.warning(
                "%s returned no fix (exit code %s): %s",
                LOCATION_CMD,
                result.returncode,
                result.stderr.strip(),
            )
            return None
        try:
            payload = json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            logger.warning("Bad JSON from %s: %s", LOCATION_CMD, exc)
            return None
        return parse_location_payload(payload)

    def request_updates(self, callback: LocationCallback, request: LocationRequest) -> None:
        if self._thread is not None:
            raise RuntimeError("termux-location polling is already running.")
        provider = _PROVIDERS.get(request.priority, "passive")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            args=(callback, provider, request.interval_s),
            name="termux-location",
            daemon=True,
        )
        self._thread.start()

    def remove_updates(self) -> None:
        thread = self._thread
        self._thread = None
        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=0.5)

    def _poll_loop(self, callback: LocationCallback, provider: str, interval_s: float) -> None:
        while not self._stop_event.is_set():
            fix = self.read_fix(provider)
            if fix is not None and not self._stop_event.is_set():
                callback(fix)
            if self._stop_event.wait(interval_s):
                break
