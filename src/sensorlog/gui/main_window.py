"""Main window for the SensorLog GUI."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from ..config.sampling import SAMPLING_PRESETS
from .collection_controller import CollectionController, export_name_filter
from .map_widget import MapWidget

NOTICE_TIMEOUT_MS = 2000
START_LABEL = "Start Collection"
STOP_LABEL = "Stop Collection"


class MainWindow(QMainWindow):
    """Start/stop button, preset selector, live readings text and the map."""

    def __init__(self, controller: CollectionController) -> None:
        super().__init__()
        self.setWindowTitle("SensorLog")
        self._controller = controller
        self._logger = logging.getLogger(__name__)

        self._build_ui()
        self._connect_controller()
        self.map_widget.render_state(self._controller.map_state())

    def closeEvent(self, event: QCloseEvent) -> None:
        try:
            self._controller.stop_collection()
        except Exception:  # pragma: no cover - best-effort shutdown
            self._logger.exception("Failed to stop collection on close")
        super().closeEvent(event)

    def _build_ui(self) -> None:
        self.start_stop_button = QPushButton(START_LABEL)
        self.export_button = QPushButton(self.tr("Save Data"))

        self.frequency_combo = QComboBox()
        for preset in SAMPLING_PRESETS.values():
            self.frequency_combo.addItem(preset.label, preset.key)
        current = self._controller.sampling_preset()
        self.frequency_combo.setCurrentIndex(max(0, self.frequency_combo.findData(current.key)))

        controls = QHBoxLayout()
        controls.addWidget(self.start_stop_button)
        controls.addWidget(QLabel(self.tr("Frequency:")))
        controls.addWidget(self.frequency_combo)
        controls.addStretch(1)
        controls.addWidget(self.export_button)

        self.sensor_text = QPlainTextEdit()
        self.sensor_text.setReadOnly(True)
        self.sensor_text.setPlaceholderText(self.tr("No sensor data yet"))

        self.map_widget = MapWidget()

        splitter = QSplitter(Qt.Vertical)
        splitter.addWidget(self.sensor_text)
        splitter.addWidget(self.map_widget)
        splitter.setStretchFactor(1, 2)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.addLayout(controls)
        layout.addWidget(splitter)
        self.setCentralWidget(container)
        self.statusBar()

    def _connect_controller(self) -> None:
        self.start_stop_button.clicked.connect(self._controller.toggle_collection)
        self.export_button.clicked.connect(self._controller.request_export)
        self.frequency_combo.currentIndexChanged.connect(self._on_frequency_changed)

        self._controller.collection_state_changed.connect(self._on_collection_state_changed)
        self._controller.readings_text_changed.connect(self.sensor_text.setPlainText)
        self._controller.map_updated.connect(self.map_widget.render_state)
        self._controller.notice.connect(self.show_notice)
        self._controller.export_requested.connect(self._on_export_requested)

    @Slot(int)
    def _on_frequency_changed(self, index: int) -> None:
        key = self.frequency_combo.itemData(index)
        if key:
            self._controller.set_sampling_preset(str(key))

    @Slot(bool)
    def _on_collection_state_changed(self, collecting: bool) -> None:
        self.start_stop_button.setText(STOP_LABEL if collecting else START_LABEL)

    @Slot(str)
    def show_notice(self, message: str) -> None:
        self.statusBar().showMessage(message, NOTICE_TIMEOUT_MS)

    @Slot(str)
    def _on_export_requested(self, suggested_name: str) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self,
            self.tr("Save sensor data"),
            suggested_name,
            export_name_filter(),
        )
        self._controller.on_export_destination_chosen(path or None)
