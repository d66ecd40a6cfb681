"""Preview surface displaying the styled output."""

from PIL import Image
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QImage, QPixmap
from PyQt6.QtWidgets import (
    QGroupBox,
    QLabel,
    QProgressBar,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from ui.styles import SIZES, panel_stylesheet


def pil_to_qpixmap(image: Image.Image) -> QPixmap:
    """Convert a PIL image to a QPixmap (copying the pixel data)."""
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(
        data, rgba.width, rgba.height, rgba.width * 4, QImage.Format.Format_RGBA8888
    )
    return QPixmap.fromImage(qimage.copy())


class PreviewPanel(QGroupBox):
    """Shows the latest presented frame and export progress."""

    def __init__(self, parent: QWidget | None = None):
        super().__init__("Preview", parent)
        self._pixmap: QPixmap | None = None
        self._setup_ui()

    def _setup_ui(self):
        """Initialize the UI components."""
        layout = QVBoxLayout()

        self.canvas = QLabel("Open an image or video to begin")
        self.canvas.setMinimumSize(*SIZES.PREVIEW_MIN_SIZE)
        self.canvas.setAlignment(Qt.AlignmentFlag.AlignCenter)
        # Ignored policy stops the pixmap from growing the label on rescale
        self.canvas.setSizePolicy(
            QSizePolicy.Policy.Ignored, QSizePolicy.Policy.Ignored
        )
        self.canvas.setStyleSheet(panel_stylesheet())
        layout.addWidget(self.canvas, stretch=1)

        self.info_label = QLabel("")
        layout.addWidget(self.info_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setFormat("Exporting video... %p%")
        self.progress_bar.setVisible(False)
        layout.addWidget(self.progress_bar)

        self.setLayout(layout)

    # === Public Methods ===

    def show_frame(self, image: Image.Image):
        """Display a frame, scaled to fit with hard pixel edges."""
        self._pixmap = pil_to_qpixmap(image)
        self.info_label.setText(f"{image.width} × {image.height}")
        self._rescale()

    def clear(self, message: str = "Open an image or video to begin"):
        self._pixmap = None
        self.canvas.clear()
        self.canvas.setText(message)
        self.info_label.setText("")

    def set_export_active(self, active: bool):
        self.progress_bar.setValue(0)
        self.progress_bar.setVisible(active)

    def set_export_progress(self, progress: int):
        self.progress_bar.setValue(progress)

    def resizeEvent(self, a0):
        super().resizeEvent(a0)
        self._rescale()

    def _rescale(self):
        if self._pixmap is None:
            return
        # AIDEV-NOTE: FastTransformation keeps block edges sharp on screen
        scaled = self._pixmap.scaled(
            self.canvas.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.FastTransformation,
        )
        self.canvas.setPixmap(scaled)
