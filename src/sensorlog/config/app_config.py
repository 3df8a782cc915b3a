"""Default application paths and configuration helpers."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Tuple

import yaml

from .sampling import DEFAULT_PRESET_KEY, LocationRequest, resolve_preset


DEFAULT_STORAGE_FILENAME = "sensor_data.json"
DEFAULT_MAP_CENTER: Tuple[float, float] = (52.5200, 13.4050)  # Berlin
DEFAULT_MAP_ZOOM = 15.0
BACKENDS = ("simulated", "termux")


@dataclass
class AppPaths:
    """
    Commonly used paths for the application.

    ``SENSORLOG_DATA_ROOT`` and ``SENSORLOG_LOG_DIR`` override the default
    ``data``/``logs`` folders relative to the repository root so that
    packaged installs and handsets can store files elsewhere.
    """

    # repo_root points at the project root (one level above src/)
    repo_root: Path = Path(__file__).resolve().parents[3]
    data_root: Path = field(init=False)
    logs: Path = field(init=False)
    config_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        env_data_root = os.environ.get("SENSORLOG_DATA_ROOT")
        if env_data_root:
            self.data_root = Path(env_data_root).expanduser()
        else:
            self.data_root = self.repo_root / "data"

        env_logs_dir = os.environ.get("SENSORLOG_LOG_DIR")
        if env_logs_dir:
            self.logs = Path(env_logs_dir).expanduser()
        else:
            self.logs = self.repo_root / "logs"

        self.config_dir = Path(__file__).resolve().parent

    def ensure(self) -> None:
        """Create directories if they do not yet exist."""
        for path in (self.data_root, self.logs):
            path.mkdir(parents=True, exist_ok=True)

    @property
    def default_config_file(self) -> Path:
        return self.config_dir / "sensorlog.yaml"


def _coerce_center(value: Any) -> Tuple[float, float]:
    """Return a valid ``(lat, lon)`` pair or the default map center."""
    try:
        lat, lon = (float(v) for v in value)
    except (TypeError, ValueError):
        return DEFAULT_MAP_CENTER
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return DEFAULT_MAP_CENTER
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return DEFAULT_MAP_CENTER
    return lat, lon


@dataclass
class AppConfig:
    """In-memory configuration snapshot used by the GUI and the sensor source."""

    backend: str = "simulated"
    storage_filename: str = DEFAULT_STORAGE_FILENAME
    sampling_preset: str = DEFAULT_PRESET_KEY
    location: LocationRequest = field(default_factory=LocationRequest)
    map_center: Tuple[float, float] = DEFAULT_MAP_CENTER
    map_zoom: float = DEFAULT_MAP_ZOOM

    def normalized_backend(self) -> str:
        """Return the canonical backend identifier (``simulated`` or ``termux``)."""
        backend = str(self.backend or "").strip().lower()
        if backend in {"termux", "android"}:
            return "termux"
        return "simulated"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "AppConfig":
        """
        Build an :class:`AppConfig` from a parsed YAML mapping.

        Unknown keys are ignored and invalid values fall back to defaults::

            backend: simulated
            storage_filename: sensor_data.json
            sampling_preset: normal
            location:
              interval_ms: 5000
            map:
              center: [52.52, 13.405]
              zoom: 15
        """
        payload: Mapping[str, Any] = data or {}
        defaults = cls()

        storage_filename = str(payload.get("storage_filename") or "").strip()
        # Only a bare file name is allowed; the directory comes from AppPaths.
        if not storage_filename or Path(storage_filename).name != storage_filename:
            storage_filename = defaults.storage_filename

        map_block = payload.get("map")
        if not isinstance(map_block, Mapping):
            map_block = {}
        try:
            zoom = float(map_block.get("zoom", defaults.map_zoom))
        except (TypeError, ValueError):
            zoom = defaults.map_zoom
        if not math.isfinite(zoom) or zoom <= 0.0:
            zoom = defaults.map_zoom

        cfg = cls(
            backend=str(payload.get("backend", defaults.backend)),
            storage_filename=storage_filename,
            sampling_preset=resolve_preset(payload.get("sampling_preset")).key,
            location=LocationRequest.from_mapping(payload),
            map_center=_coerce_center(map_block.get("center", defaults.map_center)),
            map_zoom=zoom,
        )
        cfg.backend = cfg.normalized_backend()
        return cfg

    def to_mapping(self) -> dict:
        data = {
            "backend": self.normalized_backend(),
            "storage_filename": self.storage_filename,
            "sampling_preset": self.sampling_preset,
            "map": {"center": list(self.map_center), "zoom": float(self.map_zoom)},
        }
        data.update(self.location.to_mapping())
        return data


def load_app_config(path: str | Path | None) -> AppConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`AppConfig`.
    """
    if path is None:
        return AppConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return AppConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return AppConfig.from_mapping(raw)
