"""Toolkit-independent state behind the map view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

CURRENT_LOCATION_TITLE = "Current Location"


@dataclass(frozen=True)
class MapMarker:
    latitude: float
    longitude: float
    title: str = CURRENT_LOCATION_TITLE


@dataclass
class MapState:
    """
    Center point, zoom level and marker overlays of the map.

    ``update_location`` keeps at most one "current location" marker: the
    previous one is removed before the new one is inserted.
    """

    center: Tuple[float, float] = (52.5200, 13.4050)
    zoom: float = 15.0
    overlays: List[MapMarker] = field(default_factory=list)
    _location_marker: Optional[MapMarker] = field(default=None, init=False, repr=False)

    @property
    def location_marker(self) -> Optional[MapMarker]:
        return self._location_marker

    def set_center(self, latitude: float, longitude: float) -> None:
        self.center = (float(latitude), float(longitude))

    def update_location(self, latitude: float, longitude: float) -> MapMarker:
        self.set_center(latitude, longitude)

        if self._location_marker is not None:
            try:
                self.overlays.remove(self._location_marker)
            except ValueError:
                pass

        marker = MapMarker(latitude=float(latitude), longitude=float(longitude))
        self.overlays.append(marker)
        self._location_marker = marker
        return marker
