"""Qt application entry point for the SensorLog GUI.

This module parses arguments, configures logging, builds the sensor source,
the JSON store and the :class:`~sensorlog.gui.collection_controller.CollectionController`,
and starts the Qt event loop. All launches, whether through ``python main.py``,
the ``sensorlog`` console script or ``python -m sensorlog.gui.application``,
go through ``main()`` here.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Tuple

from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication, QMainWindow

from .collection_controller import CollectionController
from .main_window import MainWindow
from ..config.app_config import BACKENDS, AppConfig, AppPaths, load_app_config
from ..core.map_state import MapState
from ..dataio.json_store import ReadingStore
from ..sensors import SensorSource, create_backends
from ..tools.debug import debug_enabled

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure the root logger once; ``SENSORLOG_DEBUG`` forces DEBUG."""
    resolved = logging.DEBUG if debug_enabled() else getattr(logging, level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=resolved, format=LOG_FORMAT, handlers=handlers, force=True)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SensorLog motion and location logger")
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Sensor backend (default: from config, otherwise simulated)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a sensorlog.yaml file (default: bundled defaults)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory for the stored JSON document (default: SENSORLOG_DATA_ROOT or ./data)",
    )
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Remove the previously stored document before starting",
    )
    parser.add_argument(
        "--no-location",
        action="store_true",
        help="Run as if location permission was denied",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write logs to <log dir>/sensorlog.log",
    )
    return parser


def _parse_cli_args(
    argv: list[str],
) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def build_controller(
    app_config: AppConfig,
    *,
    data_dir: Path | None = None,
    fresh: bool = False,
) -> CollectionController:
    """Wire source, store and map state into a controller (no widgets involved)."""
    paths = AppPaths()
    store = ReadingStore((data_dir or paths.data_root) / app_config.storage_filename)
    if fresh:
        store.clear()

    motion, location = create_backends(app_config.normalized_backend(), start=app_config.map_center)
    # Location stays off until the host reports the permission result.
    source = SensorSource(
        motion, location, location_request=app_config.location, location_permitted=False
    )
    map_state = MapState(center=app_config.map_center, zoom=app_config.map_zoom)

    controller = CollectionController(source, store, map_state)
    controller.set_sampling_preset(app_config.sampling_preset)
    logger.info(
        "Using %s backend; storing latest reading in %s",
        app_config.normalized_backend(),
        store.path,
    )
    return controller


def create_app(
    argv: list[str] | None = None,
    *,
    controller: CollectionController,
) -> Tuple[QApplication, QMainWindow]:
    """
    Create the QApplication and main SensorLog window.

    Returns
    -------
    app:
        The QApplication instance (owned by caller).
    window:
        The main window bound to ``controller``.
    """
    qt_args = argv if argv is not None else sys.argv
    app = QApplication.instance() or QApplication(qt_args)

    # Suppress noisy QObject::connect warnings from QStyleHints and similar internals
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")

    window = MainWindow(controller)
    return app, window


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)

    paths = AppPaths()
    paths.ensure()
    configure_logging(args.log_level, paths.logs / "sensorlog.log" if args.log_file else None)

    app_config = load_app_config(args.config or paths.default_config_file)
    if args.backend:
        app_config.backend = args.backend
    data_dir = Path(args.data_dir).expanduser() if args.data_dir else None

    # The QApplication must exist before any QObject is created.
    app = QApplication.instance() or QApplication(qt_argv)
    controller = build_controller(app_config, data_dir=data_dir, fresh=args.fresh)
    app, win = create_app(qt_argv, controller=controller)

    win.show()
    # Desktop hosts have no permission dialog; the flag stands in for the answer.
    controller.on_location_permission_result(not args.no_location)
    raise SystemExit(app.exec())


if __name__ == "__main__":
    main()
