"""Main application window for PixelArt Studio."""

from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt, QThread, pyqtSignal
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QDockWidget,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QToolBar,
)

from config_manager import ConfigManager
from models import AppConfig, FilterSettings, SourceType
from playback_driver import PlaybackDriver
from style_advisor import analyze_image_style
from ui.console_panel import ConsolePanel
from ui.filter_panel import FilterPanel
from ui.preview_panel import PreviewPanel
from ui.styles import FONTS, status_stylesheet
from video_source import VIDEO_SUFFIXES

IMAGE_FILTER = "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"


class AnalysisThread(QThread):
    """Background thread for the AI style request to avoid blocking UI."""

    finished = pyqtSignal(dict)  # Suggestion (possibly empty)

    def __init__(self, png_bytes: bytes, app_config: AppConfig):
        super().__init__()
        self.png_bytes = png_bytes
        self.app_config = app_config

    def run(self):
        """Execute the AI request in background."""
        suggestion = analyze_image_style(
            self.png_bytes,
            model=self.app_config.gemini_model,
            api_key=self.app_config.gemini_api_key,
        )
        self.finished.emit(suggestion)


class PixelArtWindow(QMainWindow):
    """Main application window: controls, preview and console."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("PixelArt Studio v0.1.0")
        self.setMinimumSize(1000, 700)

        # Application state
        self.config_manager = ConfigManager()
        self.app_config = self.config_manager.load()
        self.driver = PlaybackDriver(self.app_config, FilterSettings(), parent=self)
        self.analysis_thread: Optional[AnalysisThread] = None
        self.analysing = False

        # UI component references (created in _setup_ui)
        self.filter_panel: FilterPanel
        self.preview_panel: PreviewPanel
        self.console_panel: ConsolePanel
        self.console_dock: QDockWidget

        self._setup_ui()
        self._connect_signals()
        self._update_actions()

    def _setup_ui(self):
        """Initialize the user interface."""
        self._create_toolbar()

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.filter_panel = FilterPanel(self.driver.settings)
        self.preview_panel = PreviewPanel()
        splitter.addWidget(self.filter_panel)
        splitter.addWidget(self.preview_panel)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self.console_panel = ConsolePanel()
        self.console_dock = QDockWidget("Console", self)
        self.console_dock.setWidget(self.console_panel)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self.console_dock)

    def _create_toolbar(self):
        """Create the main toolbar with file, export and AI actions."""
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.open_action = QAction("📂 Open", self)
        self.open_action.setToolTip("Open an image or video")
        self.open_action.triggered.connect(self._open_file)
        toolbar.addAction(self.open_action)

        self.export_action = QAction("💾 Export", self)
        self.export_action.setToolTip("Export PNG (image) or video (video)")
        self.export_action.triggered.connect(self._export)
        toolbar.addAction(self.export_action)

        self.cancel_export_action = QAction("⏹ Cancel Export", self)
        self.cancel_export_action.triggered.connect(self.driver.cancel_export)
        toolbar.addAction(self.cancel_export_action)

        toolbar.addSeparator()

        self.ai_action = QAction("✨ AI Suggest", self)
        self.ai_action.setToolTip("Ask the AI advisor for filter settings")
        self.ai_action.triggered.connect(self._run_ai_analysis)
        toolbar.addAction(self.ai_action)

        toolbar.addSeparator()

        toolbar.addWidget(QLabel("Status:"))
        self.status_label = QLabel("●")
        self.status_label.setFont(FONTS.STATUS_INDICATOR)
        self.status_label.setStyleSheet(status_stylesheet("IDLE"))
        toolbar.addWidget(self.status_label)

    def _connect_signals(self):
        """Connect driver and panel signals to handlers."""
        self.filter_panel.settings_changed.connect(self.driver.update_settings)

        self.driver.frame_presented.connect(self.preview_panel.show_frame)
        self.driver.settings_changed.connect(self.filter_panel.set_settings)
        self.driver.processing_changed.connect(lambda _: self._update_actions())
        self.driver.video_ready_changed.connect(lambda _: self._update_actions())
        self.driver.export_state_changed.connect(self._on_export_state_changed)
        self.driver.export_progress.connect(self.preview_panel.set_export_progress)
        self.driver.export_finished.connect(
            lambda path: self.console_panel.log_status(f"💾 Saved {path}")
        )
        self.driver.status_message.connect(self.console_panel.log_status)
        self.driver.error_occurred.connect(self._handle_error)

    # === File Handling ===

    def _open_file(self):
        """Handle open action."""
        video_filter = " ".join(f"*{suffix}" for suffix in sorted(VIDEO_SUFFIXES))
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Image or Video",
            "",
            f"Media ({IMAGE_FILTER} {video_filter});;"
            f"Images ({IMAGE_FILTER});;Videos ({video_filter});;All Files (*)",
        )
        if not file_path:
            return

        self.preview_panel.clear("Loading...")
        if not self.driver.load_file(file_path):
            self.preview_panel.clear("Failed to load media")
        else:
            self.setWindowTitle(f"PixelArt Studio v0.1.0 - {Path(file_path).name}")
        self._update_actions()

    def _export(self):
        """Export the current media to the configured export directory."""
        source_type = self.driver.state.source_type
        if source_type == SourceType.IMAGE:
            self.driver.export_image()
        elif source_type == SourceType.VIDEO:
            self.driver.export_video()

    # === AI Advisor ===

    def _run_ai_analysis(self):
        """Send the current preview to the AI advisor in background."""
        png_bytes = self.driver.snapshot_png()
        if png_bytes is None:
            return

        self.analysing = True
        self.ai_action.setEnabled(False)
        self.console_panel.log_status("✨ Asking AI advisor for settings...")
        if self.analysis_thread is not None:
            self.analysis_thread.wait()
        self.analysis_thread = AnalysisThread(png_bytes, self.app_config)
        self.analysis_thread.finished.connect(self._on_analysis_finished)
        self.analysis_thread.start()

    def _on_analysis_finished(self, suggestion: dict):
        """Merge the suggestion; an empty one only produces a notice."""
        self.analysing = False
        self.driver.apply_suggestion(suggestion)
        self._update_actions()

    # === State Updates ===

    def _on_export_state_changed(self, exporting: bool):
        self.preview_panel.set_export_active(exporting)
        self._update_actions()

    def _update_actions(self):
        """Enable actions and set the status indicator for the current state."""
        state = self.driver.state
        has_media = state.source_type is not None
        video_pending = state.source_type == SourceType.VIDEO and not state.is_video_ready

        self.open_action.setEnabled(not state.is_exporting)
        self.export_action.setEnabled(has_media and not state.is_exporting and not video_pending)
        self.cancel_export_action.setEnabled(state.is_exporting)
        self.ai_action.setEnabled(has_media and not self.analysing)

        if state.is_exporting:
            status = "EXPORTING"
        elif state.is_loading or video_pending:
            status = "PROCESSING"
        elif has_media:
            status = "READY"
        else:
            status = "IDLE"
        self.status_label.setStyleSheet(status_stylesheet(status))

    def _handle_error(self, error: str):
        """Handle errors reported by the driver."""
        self.console_panel.log_error(error)
        if self.driver.session is None:
            QMessageBox.warning(self, "Media Error", error)

    # === Application Lifecycle ===

    def closeEvent(self, a0):
        """Clean up when window closes."""
        self.driver.shutdown()
        if self.analysis_thread is not None:
            self.analysis_thread.wait()
        if a0:
            a0.accept()
