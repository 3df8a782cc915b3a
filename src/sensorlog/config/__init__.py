"""Configuration objects and helpers for SensorLog.

This package loads the YAML descriptor (``sensorlog.yaml``) that selects the
sensor backend, the storage file name, the motion sampling preset, the
location request and the initial map view. The resulting typed dataclasses
are imported everywhere else so the GUI and the sensor source agree on them.
"""

from .app_config import AppConfig, AppPaths, load_app_config
from .sampling import SAMPLING_PRESETS, LocationRequest, SamplingPreset, resolve_preset

__all__ = [
    "AppConfig",
    "AppPaths",
    "load_app_config",
    "SAMPLING_PRESETS",
    "LocationRequest",
    "SamplingPreset",
    "resolve_preset",
]
