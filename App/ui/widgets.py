"""Widget helpers for the filter controls.

WidgetFactory builds the labeled slider and spinbox rows the filter panel
repeats for every numeric setting; ColorButton is the palette swatch.
"""

from typing import Optional, Tuple

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QColorDialog,
    QDoubleSpinBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QWidget,
)

from ui.styles import SIZES, swatch_stylesheet


class WidgetFactory:
    """Factory class for the control rows used by FilterPanel."""

    @staticmethod
    def create_slider_row(
        label_text: str,
        value_range: Tuple[float, float],
        value: float,
        label_format: str = "{}",
        tooltip: str = "",
    ) -> Tuple[QHBoxLayout, QSlider, QLabel]:
        """Create 'Label: [slider] value' with an auto-updating value label.

        Args:
            label_text: Text shown before the slider
            value_range: (min, max) of the setting; floats are rounded
            value: Initial value (rounded to the slider's integer steps)
            label_format: Format string for the value label ({} is the value)
            tooltip: Tooltip text

        Returns:
            Tuple of (row layout, slider, value label)
        """
        low, high = (int(round(v)) for v in value_range)
        start = int(round(value))

        slider = QSlider(Qt.Orientation.Horizontal)
        slider.setRange(low, high)
        slider.setValue(start)
        if tooltip:
            slider.setToolTip(tooltip)

        value_label = QLabel(label_format.format(start))
        value_label.setMinimumWidth(SIZES.LABEL_MIN_WIDTH)
        slider.valueChanged.connect(lambda v: value_label.setText(label_format.format(v)))

        row = WidgetFactory.create_labeled_row(label_text, slider)
        row.addWidget(value_label)
        return row, slider, value_label

    @staticmethod
    def create_double_spinbox(
        range_min: float,
        range_max: float,
        value: float,
        decimals: int = 2,
        step: float = 0.1,
        tooltip: str = "",
    ) -> QDoubleSpinBox:
        """Create a QDoubleSpinBox for a fractional setting."""
        spinbox = QDoubleSpinBox()
        spinbox.setRange(range_min, range_max)
        spinbox.setDecimals(decimals)
        spinbox.setSingleStep(step)
        spinbox.setValue(value)
        if tooltip:
            spinbox.setToolTip(tooltip)
        return spinbox

    @staticmethod
    def create_labeled_row(label_text: str, widget: QWidget) -> QHBoxLayout:
        layout = QHBoxLayout()
        layout.addWidget(QLabel(label_text))
        layout.addWidget(widget)
        return layout


class ColorButton(QPushButton):
    """Swatch button that opens a color picker and reports '#RRGGBB'."""

    color_changed = pyqtSignal(str)

    def __init__(self, color: str, title: str = "Choose Color", parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._title = title
        self._color = color
        self.setMinimumWidth(SIZES.BUTTON_MIN_WIDTH)
        self.clicked.connect(self._pick_color)
        self._refresh()

    @property
    def color(self) -> str:
        return self._color

    def set_color(self, color: str):
        """Update the swatch without emitting color_changed."""
        self._color = color
        self._refresh()

    def _pick_color(self):
        chosen = QColorDialog.getColor(QColor(self._color), self, self._title)
        if chosen.isValid():
            self._color = chosen.name().upper()
            self._refresh()
            self.color_changed.emit(self._color)

    def _refresh(self):
        self.setText(self._color.upper())
        self.setStyleSheet(swatch_stylesheet(self._color))
