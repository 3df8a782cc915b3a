"""Sampling presets for motion sensors and the location request."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class SamplingPreset:
    """User-facing motion sampling presets (labels only; see ``DEFAULT_PRESET_KEY``)."""

    key: str
    label: str
    delay_ms: int


SAMPLING_PRESETS: Dict[str, SamplingPreset] = {
    "normal": SamplingPreset(key="normal", label="Normal", delay_ms=200),
    "ui": SamplingPreset(key="ui", label="UI", delay_ms=60),
    "game": SamplingPreset(key="game", label="Game", delay_ms=20),
    "fastest": SamplingPreset(key="fastest", label="Fastest", delay_ms=0),
}

# Subscriptions are always made with this preset; the selector only records
# the user's choice.
DEFAULT_PRESET_KEY = "normal"


def resolve_preset(value: Any, default: str = DEFAULT_PRESET_KEY) -> SamplingPreset:
    """
    Resolve a preset key or label (case-insensitive) to a :class:`SamplingPreset`.

    Unknown values fall back to ``default``.
    """
    raw = str(value or "").strip().lower()
    if raw in SAMPLING_PRESETS:
        return SAMPLING_PRESETS[raw]
    for preset in SAMPLING_PRESETS.values():
        if preset.label.lower() == raw:
            return preset
    return SAMPLING_PRESETS[default]


PRIORITY_HIGH_ACCURACY = "high_accuracy"
PRIORITY_BALANCED = "balanced"
PRIORITY_LOW_POWER = "low_power"
_PRIORITIES = {PRIORITY_HIGH_ACCURACY, PRIORITY_BALANCED, PRIORITY_LOW_POWER}


@dataclass
class LocationRequest:
    """
    How often location fixes are requested from the backend.

    interval_ms: the desired update interval.
    fastest_interval_ms: the fastest rate the app is willing to accept.
    """

    interval_ms: int = 5000
    fastest_interval_ms: int = 2000
    priority: str = PRIORITY_HIGH_ACCURACY

    @property
    def interval_s(self) -> float:
        return self.interval_ms / 1000.0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "LocationRequest":
        """
        Construct a LocationRequest from a mapping such as ``sensorlog.yaml``.

        Supported shape::

            location:
              interval_ms: 5000
              fastest_interval_ms: 2000
              priority: high_accuracy
        """
        payload: Mapping[str, Any] = mapping or {}
        block = payload.get("location") if isinstance(payload, Mapping) else None
        defaults = cls()
        if not isinstance(block, Mapping):
            return defaults

        def _ms(key: str, fallback: int) -> int:
            try:
                value = int(block.get(key, fallback))
            except (TypeError, ValueError):
                return fallback
            return value if value > 0 else fallback

        interval = _ms("interval_ms", defaults.interval_ms)
        fastest = min(_ms("fastest_interval_ms", defaults.fastest_interval_ms), interval)

        priority = str(block.get("priority", defaults.priority)).strip().lower().replace("-", "_")
        if priority not in _PRIORITIES:
            priority = defaults.priority

        return cls(interval_ms=interval, fastest_interval_ms=fastest, priority=priority)

    def to_mapping(self) -> dict:
        return {
            "location": {
                "interval_ms": int(self.interval_ms),
                "fastest_interval_ms": int(self.fastest_interval_ms),
                "priority": self.priority,
            }
        }
