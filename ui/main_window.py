"""
Main window for the Geomagnetic Timeseries Viewer.
"""
import logging

from PyQt5 import QtCore
from PyQt5.QtWidgets import (
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from ui.canvases import TimeSeriesCanvas
from ui.styles import DARK_STYLESHEET
from ui.time_range_panel import TimeRangePanel

logger = logging.getLogger(__name__)

NO_OBSERVATORY = "(any)"


class MainWindow(QMainWindow):
    """
    Viewer window.

    Displays:
    - Channel / observatory selection
    - Time range controls
    - Interactive time series chart
    - Load status
    """

    def __init__(self, navigator, settings):
        super().__init__()

        self.navigator = navigator
        self.settings = settings

        self.setWindowTitle("Geomagnetic Timeseries Viewer")
        self.resize(settings.width + 320, settings.height + 160)

        # Create central widget and root layout
        central = QWidget()
        self.setCentralWidget(central)

        root_layout = QHBoxLayout()
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.setSpacing(10)
        central.setLayout(root_layout)

        root_layout.addLayout(self._build_left_column(), 1)
        root_layout.addLayout(self._build_chart_column(), 4)

        # Apply dark theme
        self.setStyleSheet(DARK_STYLESHEET)

    def _build_left_column(self):
        """Build left column: selection + time range."""
        left_col = QVBoxLayout()
        left_col.setSpacing(10)

        selection_group = QGroupBox("Selection")
        selection_layout = QVBoxLayout()
        selection_group.setLayout(selection_layout)

        selection_layout.addWidget(QLabel("Channel"))
        self.channel_combo = QComboBox()
        self.channel_combo.addItems(list(self.settings.channels))
        self.channel_combo.setCurrentText(self.navigator.config.channel)
        self.channel_combo.currentTextChanged.connect(self.navigator.set_channel)
        selection_layout.addWidget(self.channel_combo)

        selection_layout.addWidget(QLabel("Observatory"))
        self.observatory_combo = QComboBox()
        self.observatory_combo.addItems([NO_OBSERVATORY] + list(self.settings.observatories))
        self.observatory_combo.setCurrentText(self.navigator.config.observatory or NO_OBSERVATORY)
        self.observatory_combo.currentTextChanged.connect(self._on_observatory_changed)
        selection_layout.addWidget(self.observatory_combo)

        self.time_panel = TimeRangePanel(self.navigator, self)

        left_col.addWidget(selection_group)
        left_col.addWidget(self.time_panel)
        left_col.addStretch()
        return left_col

    def _build_chart_column(self):
        """Build chart column: chart + status line."""
        chart_col = QVBoxLayout()
        chart_col.setSpacing(4)

        self.canvas = TimeSeriesCanvas(
            "Magnetic Field [nT]",
            self,
            width=self.settings.width / 100,
            height=self.settings.height / 100,
            dpi=100,
            point_radius=self.settings.point_radius,
        )
        chart_col.addWidget(self.canvas)

        self.status_label = QLabel("Status: ⏸️ WAITING")
        self.status_label.setAlignment(QtCore.Qt.AlignLeft)
        chart_col.addWidget(self.status_label)
        return chart_col

    def _on_observatory_changed(self, text):
        self.navigator.set_observatory(None if text == NO_OBSERVATORY else text)

    # ==========================================================================
    # Data Update Methods
    # ==========================================================================

    def handle_request(self, request):
        """
        Show that a request is in flight.

        Args:
            request: TimeseriesRequest that was issued
        """
        self.status_label.setText(
            f"Status: ⏳ LOADING {request.observatory or NO_OBSERVATORY} {request.channel}"
        )

    def handle_timeseries(self, timeseries):
        """
        Plot a newly loaded series.

        Args:
            timeseries: Timeseries accepted by the app
        """
        missing = sum(1 for v in timeseries.values if v is None)
        if len(timeseries) == 0:
            self.status_label.setText("Status: ⚠️ NO DATA")
        else:
            self.status_label.setText(
                f"Status: ✅ {len(timeseries)} samples, {missing} missing, "
                f"{len(timeseries.gaps())} gap(s)"
            )
        self.canvas.set_timeseries(timeseries)

    def closeEvent(self, event):
        self.canvas.close()
        self.time_panel.close()
        super().closeEvent(event)
