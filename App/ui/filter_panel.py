"""Filter controls panel editing FilterSettings."""

from dataclasses import replace

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from models import (
    BRIGHTNESS_RANGE,
    COLOR_PRESETS,
    CONTRAST_RANGE,
    PIXEL_SIZE_RANGE,
    THRESHOLD_RANGE,
    DitherMode,
    FilterSettings,
)
from ui.styles import SIZES
from ui.widgets import ColorButton, WidgetFactory


class FilterPanel(QGroupBox):
    """Panel with sliders, mode selector and palette controls.

    AIDEV-NOTE: Every control change emits settings_changed with a fresh
    FilterSettings copy. set_settings() syncs the controls without emitting,
    used when the driver applies an AI suggestion.
    """

    settings_changed = pyqtSignal(object)  # FilterSettings

    def __init__(self, settings: FilterSettings, parent: QWidget | None = None):
        super().__init__("Filter", parent)
        self.settings = replace(settings)
        self.setMinimumWidth(SIZES.CONTROLS_MIN_WIDTH)

        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self):
        """Initialize the UI components."""
        layout = QVBoxLayout()

        self._create_pixel_controls(layout)
        self._create_mode_controls(layout)
        self._create_palette_controls(layout)

        self.reset_btn = QPushButton("Reset All")
        self.reset_btn.setToolTip("Restore the default filter settings")
        self.reset_btn.clicked.connect(lambda: self._apply(FilterSettings()))
        layout.addWidget(self.reset_btn)

        layout.addStretch()
        self.setLayout(layout)

    def _create_pixel_controls(self, parent_layout: QVBoxLayout):
        """Create block size and tone sliders."""
        group = QGroupBox("Pixelation")
        layout = QVBoxLayout()

        row, self.pixel_size_slider, self.pixel_size_label = WidgetFactory.create_slider_row(
            "Pixel Size:",
            PIXEL_SIZE_RANGE,
            self.settings.pixel_size,
            label_format="{} px",
            tooltip="Source pixels per output block",
        )
        layout.addLayout(row)

        row, self.contrast_slider, self.contrast_label = WidgetFactory.create_slider_row(
            "Contrast:", CONTRAST_RANGE, self.settings.contrast
        )
        layout.addLayout(row)

        row, self.brightness_slider, self.brightness_label = WidgetFactory.create_slider_row(
            "Brightness:", BRIGHTNESS_RANGE, self.settings.brightness
        )
        layout.addLayout(row)

        row, self.threshold_slider, self.threshold_label = WidgetFactory.create_slider_row(
            "Threshold:",
            THRESHOLD_RANGE,
            self.settings.threshold,
            tooltip="Luminance cut point",
        )
        layout.addLayout(row)

        group.setLayout(layout)
        parent_layout.addWidget(group)

    def _create_mode_controls(self, parent_layout: QVBoxLayout):
        """Create dither mode selector and halftone options."""
        group = QGroupBox("Dithering")
        layout = QVBoxLayout()

        self.mode_combo = QComboBox()
        self.mode_combo.addItems([mode.name.title() for mode in DitherMode])
        self.mode_combo.setCurrentIndex(list(DitherMode).index(self.settings.mode))
        layout.addLayout(WidgetFactory.create_labeled_row("Mode:", self.mode_combo))

        self.dot_scale_spin = WidgetFactory.create_double_spinbox(
            range_min=0.1,
            range_max=4.0,
            value=self.settings.dot_scale,
            tooltip="Halftone dot radius scale",
        )
        layout.addLayout(
            WidgetFactory.create_labeled_row("Dot Scale:", self.dot_scale_spin)
        )

        self.invert_check = QCheckBox("Invert colors")
        self.invert_check.setChecked(self.settings.invert)
        layout.addWidget(self.invert_check)

        group.setLayout(layout)
        parent_layout.addWidget(group)

    def _create_palette_controls(self, parent_layout: QVBoxLayout):
        """Create color swatches and preset buttons."""
        group = QGroupBox("Palette")
        layout = QVBoxLayout()

        self.color_a_btn = ColorButton(self.settings.color_a, "Background Color")
        layout.addLayout(WidgetFactory.create_labeled_row("Background:", self.color_a_btn))
        self.color_b_btn = ColorButton(self.settings.color_b, "Foreground Color")
        layout.addLayout(WidgetFactory.create_labeled_row("Foreground:", self.color_b_btn))

        presets_layout = QHBoxLayout()
        self.preset_buttons: "list[QPushButton]" = []
        for preset in COLOR_PRESETS:
            btn = QPushButton(preset.name)
            btn.setToolTip(f"{preset.color_a} / {preset.color_b}")
            btn.clicked.connect(lambda _, p=preset: self._apply(self.settings.with_preset(p)))
            presets_layout.addWidget(btn)
            self.preset_buttons.append(btn)
        layout.addLayout(presets_layout)

        group.setLayout(layout)
        parent_layout.addWidget(group)

    def _connect_signals(self):
        """Connect control signals to settings updates."""
        self.pixel_size_slider.valueChanged.connect(
            lambda v: self._update(pixel_size=v)
        )
        self.contrast_slider.valueChanged.connect(
            lambda v: self._update(contrast=float(v))
        )
        self.brightness_slider.valueChanged.connect(
            lambda v: self._update(brightness=float(v))
        )
        self.threshold_slider.valueChanged.connect(
            lambda v: self._update(threshold=float(v))
        )
        self.mode_combo.currentIndexChanged.connect(
            lambda i: self._update(mode=list(DitherMode)[i])
        )
        self.dot_scale_spin.valueChanged.connect(
            lambda v: self._update(dot_scale=v)
        )
        self.invert_check.toggled.connect(lambda checked: self._update(invert=checked))
        self.color_a_btn.color_changed.connect(lambda c: self._update(color_a=c))
        self.color_b_btn.color_changed.connect(lambda c: self._update(color_b=c))

    def _update(self, **changes):
        self._apply(replace(self.settings, **changes))

    def _apply(self, settings: FilterSettings):
        self.set_settings(settings)
        self.settings_changed.emit(replace(self.settings))

    # === Public Methods ===

    def set_settings(self, settings: FilterSettings):
        """Sync every control to the given settings without emitting."""
        self.settings = replace(settings)
        controls = [
            self.pixel_size_slider,
            self.contrast_slider,
            self.brightness_slider,
            self.threshold_slider,
            self.mode_combo,
            self.dot_scale_spin,
            self.invert_check,
        ]
        for control in controls:
            control.blockSignals(True)
        try:
            self.pixel_size_slider.setValue(settings.pixel_size)
            self.contrast_slider.setValue(int(round(settings.contrast)))
            self.brightness_slider.setValue(int(round(settings.brightness)))
            self.threshold_slider.setValue(int(round(settings.threshold)))
            self.mode_combo.setCurrentIndex(list(DitherMode).index(settings.mode))
            self.dot_scale_spin.setValue(settings.dot_scale)
            self.invert_check.setChecked(settings.invert)
        finally:
            for control in controls:
                control.blockSignals(False)

        # Value labels are driven by valueChanged, which was blocked above
        self.pixel_size_label.setText(f"{settings.pixel_size} px")
        self.contrast_label.setText(str(int(round(settings.contrast))))
        self.brightness_label.setText(str(int(round(settings.brightness))))
        self.threshold_label.setText(str(int(round(settings.threshold))))
        self.color_a_btn.set_color(settings.color_a)
        self.color_b_btn.set_color(settings.color_b)
