"""Lightweight pyqtgraph view of :class:`~sensorlog.core.map_state.MapState`."""

from __future__ import annotations

from typing import Optional

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Slot
from PySide6.QtWidgets import QVBoxLayout, QWidget

from ..core.map_state import MapState


def visible_span_deg(zoom: float) -> float:
    """Degrees of longitude visible at a web-map style zoom level."""
    return 360.0 / (2.0 ** max(0.0, float(zoom)))


class MapWidget(QWidget):
    """Plots marker overlays in lon/lat coordinates, centered on the map state."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._plot = pg.PlotWidget()
        self._plot.setLabel("bottom", "Longitude")
        self._plot.setLabel("left", "Latitude")
        self._plot.showGrid(x=True, y=True, alpha=0.3)
        self._plot.setMouseEnabled(x=True, y=True)

        self._markers = pg.ScatterPlotItem(size=12, brush=pg.mkBrush(220, 40, 40), pen=pg.mkPen("w"))
        self._plot.addItem(self._markers)
        self._label = pg.TextItem(anchor=(0.5, 1.6))
        self._plot.addItem(self._label)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._plot)

    @Slot(object)
    def render_state(self, state: MapState) -> None:
        lat, lon = state.center
        half = visible_span_deg(state.zoom) / 2.0
        self._plot.setXRange(lon - half, lon + half, padding=0.0)
        self._plot.setYRange(lat - half, lat + half, padding=0.0)

        if state.overlays:
            lons = np.array([m.longitude for m in state.overlays], dtype=float)
            lats = np.array([m.latitude for m in state.overlays], dtype=float)
            self._markers.setData(x=lons, y=lats)
        else:
            self._markers.clear()

        marker = state.location_marker
        if marker is None:
            self._label.setText("")
        else:
            self._label.setText(marker.title)
            self._label.setPos(marker.longitude, marker.latitude)
