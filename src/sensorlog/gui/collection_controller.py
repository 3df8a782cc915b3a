"""Non-visual controller that sits between the sensor source and the main window."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtCore import QMimeDatabase, QObject, Signal, Slot

from ..config.sampling import DEFAULT_PRESET_KEY, SamplingPreset, resolve_preset
from ..core.map_state import MapState
from ..core.models import CollectionState, Reading
from ..dataio.json_store import EXPORT_MIME_TYPE, ExportDestination, ExportError, ReadingStore
from ..sensors.source import SensorSource

logger = logging.getLogger(__name__)

EXPORT_SUCCESS_NOTICE = "Data saved successfully"
EXPORT_FAILURE_NOTICE = "Failed to save data"
PERMISSION_REQUIRED_NOTICE = "Location permission required"
FALLBACK_EXPORT_FILTER = "JSON (*.json)"


def export_name_filter(mime_type: str = EXPORT_MIME_TYPE) -> str:
    """Return the file dialog name filter Qt knows for ``mime_type``."""
    mime = QMimeDatabase().mimeTypeForName(mime_type)
    if not mime.isValid() or not mime.globPatterns():
        return FALLBACK_EXPORT_FILTER
    return mime.filterString()


class CollectionController(QObject):
    """
    Non-visual controller that owns the collection state and the latest readings.

    Source callbacks arrive on backend threads and are re-emitted through
    private signals; Qt queues them onto the thread this object lives in, so
    the readings map, the map state and the file writes are only touched
    from that thread.
    """

    collection_state_changed = Signal(bool)
    readings_text_changed = Signal(str)
    map_updated = Signal(object)
    notice = Signal(str)
    export_requested = Signal(str)
    sampling_preset_changed = Signal(str)

    # Cross-thread bridge from the sensor source.
    _reading_arrived = Signal(object)
    _location_arrived = Signal(float, float)

    def __init__(
        self,
        source: SensorSource,
        store: ReadingStore,
        map_state: Optional[MapState] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._source = source
        self._store = store
        self._map_state = map_state or MapState()
        self._state = CollectionState.IDLE
        self._latest: Dict[str, str] = {}
        self._sampling_preset: SamplingPreset = resolve_preset(DEFAULT_PRESET_KEY)

        self._reading_arrived.connect(self._on_reading)
        self._location_arrived.connect(self._on_location)
        self._source.add_reading_listener(self._reading_arrived.emit)
        self._source.add_location_listener(self._location_arrived.emit)

    # --------------------------------------------------------------- state
    @property
    def state(self) -> CollectionState:
        return self._state

    def is_collecting(self) -> bool:
        return self._state is CollectionState.COLLECTING

    def latest_readings(self) -> Dict[str, str]:
        return dict(self._latest)

    def map_state(self) -> MapState:
        return self._map_state

    def store(self) -> ReadingStore:
        return self._store

    def sampling_preset(self) -> SamplingPreset:
        return self._sampling_preset

    def render_text(self) -> str:
        return "\n".join(f"{sensor}: {data}" for sensor, data in self._latest.items())

    # --------------------------------------------------------------- start/stop
    @Slot()
    def toggle_collection(self) -> CollectionState:
        if self.is_collecting():
            self.stop_collection()
        else:
            self.start_collection()
        return self._state

    def start_collection(self) -> None:
        if self.is_collecting():
            return
        self._source.start()
        self._state = CollectionState.COLLECTING
        logger.info("Collection started")
        self.collection_state_changed.emit(True)

    def stop_collection(self) -> None:
        if not self.is_collecting():
            return
        self._source.stop()
        self._state = CollectionState.IDLE
        logger.info("Collection stopped")
        self.collection_state_changed.emit(False)

    @Slot(str)
    def set_sampling_preset(self, key: str) -> None:
        # Recorded only; subscriptions keep the default preset.
        preset = resolve_preset(key)
        if preset == self._sampling_preset:
            return
        self._sampling_preset = preset
        logger.info("Sampling preset selected: %s (not applied to subscriptions)", preset.label)
        self.sampling_preset_changed.emit(preset.key)

    # --------------------------------------------------------------- host entry points
    def on_location_permission_result(self, granted: bool) -> None:
        """Called once per location permission request with the user's answer."""
        self._source.set_location_permitted(granted)
        if not granted:
            logger.warning("Location permission denied")
            self.notice.emit(PERMISSION_REQUIRED_NOTICE)

    @Slot()
    def request_export(self) -> None:
        self.export_requested.emit(self._store.filename)

    def on_export_destination_chosen(self, destination: ExportDestination | None) -> bool:
        """
        Called once after the destination picker closes.

        ``None`` means the user cancelled. Returns True when the export succeeded.
        """
        if destination is None or (isinstance(destination, (str, Path)) and not str(destination)):
            logger.info("Export cancelled")
            return False
        try:
            self._store.export_to(destination)
        except ExportError as exc:
            logger.exception("Failed to save data: %s", exc)
            self.notice.emit(EXPORT_FAILURE_NOTICE)
            return False
        self.notice.emit(EXPORT_SUCCESS_NOTICE)
        return True

    # --------------------------------------------------------------- source callbacks
    @Slot(object)
    def _on_reading(self, reading: Reading) -> None:
        if not self.is_collecting():
            logger.debug("Dropping reading from %s while idle", reading.sensor_type)
            return
        self._latest[reading.sensor_type] = reading.data
        self.readings_text_changed.emit(self.render_text())
        try:
            self._store.save(reading)
        except OSError:
            logger.exception("CollectionController: failed to save reading to %s", self._store.path)

    @Slot(float, float)
    def _on_location(self, latitude: float, longitude: float) -> None:
        if not self.is_collecting():
            return
        self._map_state.update_location(latitude, longitude)
        self.map_updated.emit(self._map_state)
