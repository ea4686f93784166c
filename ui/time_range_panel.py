"""
Time range controls bound to a TimeRangeNavigator.
"""
import logging

from PyQt5.QtWidgets import (
    QButtonGroup,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
)

from timeseries.navigator import (
    CUSTOM,
    END_FIELD,
    PAST_DAY,
    PAST_HOUR,
    REALTIME,
    START_FIELD,
    TIME_FIELD,
    UPDATE_BUTTON,
)

logger = logging.getLogger(__name__)

MODE_LABELS = [
    (REALTIME, "Realtime"),
    (PAST_HOUR, "Past Hour"),
    (PAST_DAY, "Past 24 Hours"),
    (CUSTOM, "Custom"),
]


class TimeRangePanel(QGroupBox):
    """
    Preset radio buttons, previous/next stepping and start/end inputs.

    All decisions are made by the navigator; the panel forwards user intent
    and mirrors the navigator state (field texts, errors, next button).
    """

    def __init__(self, navigator, parent=None):
        super().__init__("Time", parent)
        self.navigator = navigator

        layout = QVBoxLayout()
        layout.setSpacing(4)
        self.setLayout(layout)

        # Presets
        self.mode_group = QButtonGroup(self)
        self.mode_buttons = {}
        for mode, label in MODE_LABELS:
            button = QRadioButton(label)
            self.mode_group.addButton(button)
            self.mode_buttons[mode] = button
            button.toggled.connect(lambda checked, m=mode: self._on_mode_toggled(m, checked))
            layout.addWidget(button)

        # Stepping
        step_row = QHBoxLayout()
        self.previous_button = QPushButton("◀ Previous")
        self.next_button = QPushButton("Next ▶")
        self.previous_button.clicked.connect(self._on_previous)
        self.next_button.clicked.connect(self._on_next)
        step_row.addWidget(self.previous_button)
        step_row.addWidget(self.next_button)
        layout.addLayout(step_row)

        # Custom window inputs
        self.time_error = self._error_label()
        layout.addWidget(self.time_error)

        layout.addWidget(QLabel("Start Time (UTC)"))
        self.start_error = self._error_label()
        layout.addWidget(self.start_error)
        self.start_input = QLineEdit()
        self.start_input.setPlaceholderText("YYYY-MM-DD HH:MM:SS")
        self.start_input.textEdited.connect(self.navigator.set_start_text)
        self.start_input.editingFinished.connect(lambda: self._on_commit(START_FIELD))
        layout.addWidget(self.start_input)

        layout.addWidget(QLabel("End Time (UTC)"))
        self.end_error = self._error_label()
        layout.addWidget(self.end_error)
        self.end_input = QLineEdit()
        self.end_input.setPlaceholderText("YYYY-MM-DD HH:MM:SS")
        self.end_input.textEdited.connect(self.navigator.set_end_text)
        self.end_input.editingFinished.connect(lambda: self._on_commit(END_FIELD))
        layout.addWidget(self.end_input)

        self.update_button = QPushButton("Update")
        self.update_button.clicked.connect(lambda: self._on_commit(UPDATE_BUTTON))
        layout.addWidget(self.update_button)
        layout.addStretch()

        self._unsubscribe = self.navigator.on_change(lambda _config: self.render())
        self.render()

    @staticmethod
    def _error_label():
        label = QLabel("")
        label.setProperty("role", "error")
        label.setWordWrap(True)
        label.setVisible(False)
        return label

    # ------------------ User intent ------------------ #

    def _on_mode_toggled(self, mode, checked):
        if not checked:
            return
        logger.debug(f"Time mode selected: {mode}")
        self.navigator.select_mode(mode)
        self.render()

    def _on_previous(self):
        self.navigator.step_previous()
        self.render()

    def _on_next(self):
        self.navigator.step_next()
        self.render()

    def _on_commit(self, source):
        self.navigator.set_start_text(self.start_input.text())
        self.navigator.set_end_text(self.end_input.text())
        self.navigator.commit(source)
        self.render()

    # ------------------ Mirror navigator state ------------------ #

    def render(self):
        """Update controls from the navigator"""
        navigator = self.navigator
        mode = navigator.mode
        custom = mode == CUSTOM

        self.mode_group.blockSignals(True)
        for button_mode, button in self.mode_buttons.items():
            button.blockSignals(True)
            button.setChecked(button_mode == mode)
            button.blockSignals(False)
        self.mode_group.blockSignals(False)

        for field_input, text in ((self.start_input, navigator.start_text),
                                  (self.end_input, navigator.end_text)):
            if field_input.text() != text:
                field_input.setText(text)
            field_input.setEnabled(custom)
        self.update_button.setEnabled(custom)
        self.next_button.setEnabled(navigator.next_enabled)

        self._show_error(self.start_error, self.start_input, navigator.errors.get(START_FIELD))
        self._show_error(self.end_error, self.end_input, navigator.errors.get(END_FIELD))
        self._show_error(self.time_error, None, navigator.errors.get(TIME_FIELD))

    def _show_error(self, label, field_input, message):
        label.setText(message or "")
        label.setVisible(bool(message))
        if field_input is not None:
            field_input.setProperty("invalid", "true" if message else "false")
            # re-evaluate the property selector
            field_input.style().unpolish(field_input)
            field_input.style().polish(field_input)

    def closeEvent(self, event):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        super().closeEvent(event)
