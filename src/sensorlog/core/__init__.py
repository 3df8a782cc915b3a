"""Core data model: readings, raw sensor events, collection state and map state.

Nothing in this package depends on Qt, so the sensor source, the JSON store
and the tests can share these types without a running event loop.
"""

from .map_state import MapMarker, MapState
from .models import (
    CollectionState,
    LocationFix,
    MotionEvent,
    Reading,
    SensorKind,
    format_timestamp,
)

__all__ = [
    "CollectionState",
    "LocationFix",
    "MapMarker",
    "MapState",
    "MotionEvent",
    "Reading",
    "SensorKind",
    "format_timestamp",
]
