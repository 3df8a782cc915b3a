"""Desktop GUI implementation built with PySide6/Qt.

:mod:`collection_controller` holds the non-visual state (collecting or idle,
latest readings, map state) and routes readings to the JSON store.
:mod:`main_window` and :mod:`map_widget` only render that state. This layer
runs the Qt event loop and delegates sensor access to :mod:`sensorlog.sensors`.
"""
