"""Shared dataclasses for sensor events, location fixes and readings."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default: now, local wall clock) as ``yyyy-MM-dd HH:mm:ss``."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


class SensorKind(str, Enum):
    ACCELEROMETER = "accelerometer"
    GYROSCOPE = "gyroscope"
    MAGNETOMETER = "magnetometer"
    UNKNOWN = "unknown"

    @classmethod
    def from_sensor_name(cls, name: str) -> "SensorKind":
        """Guess the kind from a hardware sensor name such as ``"BMI160 Accelerometer"``."""
        lowered = name.lower()
        if "accel" in lowered:
            return cls.ACCELEROMETER
        if "gyro" in lowered:
            return cls.GYROSCOPE
        if "magnet" in lowered:
            return cls.MAGNETOMETER
        return cls.UNKNOWN


class CollectionState(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


@dataclass(frozen=True)
class MotionEvent:
    sensor_name: str
    kind: SensorKind
    values: tuple[float, ...]


@dataclass(frozen=True)
class LocationFix:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Reading:
    """One formatted sensor or location data point with a timestamp."""

    sensor_type: str
    data: str
    timestamp: str

    def to_document(self) -> dict:
        """Return the persisted JSON mapping (key order is part of the format)."""
        return {
            "sensorType": self.sensor_type,
            "data": self.data,
            "timestamp": self.timestamp,
        }
