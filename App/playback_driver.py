"""Playback and export driver scheduling the frame transform.

AIDEV-NOTE: Everything here runs on the Qt event loop. Four timers re-enter
the driver: the still-image debounce, the video FrameLoop tick, the export
capture tick and the export progress sampler. Each callback checks the
session's CancellationToken before writing, so results from a replaced
session are dropped.
"""

import math
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import numpy as np
from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from errors import (
    EncodingUnsupportedError,
    FilterError,
    SourceUnavailableError,
)
from frame_loop import FrameLoop
from image_processing import ImageProcessor, apply_filters
from media_session import MediaSession
from models import AppConfig, FilterSettings, MediaState, SourceType
from style_advisor import merge_suggestion
from video_recorder import VideoRecorder
from video_source import VideoSource, is_video_file


class PlaybackDriver(QObject):
    """Runs the frame transform for still images, live video and export."""

    frame_presented = pyqtSignal(object)  # RGBA PIL image
    settings_changed = pyqtSignal(object)  # FilterSettings
    processing_changed = pyqtSignal(bool)
    video_ready_changed = pyqtSignal(bool)
    export_state_changed = pyqtSignal(bool)
    export_progress = pyqtSignal(int)  # 0-100
    export_finished = pyqtSignal(str)  # Output path
    error_occurred = pyqtSignal(str)
    status_message = pyqtSignal(str)

    def __init__(
        self,
        app_config: AppConfig | None = None,
        settings: FilterSettings | None = None,
        rng: np.random.Generator | None = None,
        clock: Callable[[], float] = time.monotonic,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self.config = app_config or AppConfig()
        self.settings = settings or FilterSettings()
        self.state = MediaState()
        self.session: MediaSession | None = None
        self.processor = ImageProcessor(self.settings)
        self.rng = rng
        self._clock = clock

        # Still image: re-armed on every settings change
        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(self.config.debounce_ms)
        self._debounce_timer.timeout.connect(self._process_still)

        # Live video preview
        self.frame_loop = FrameLoop(
            self._render_video_frame, self.config.refresh_interval_ms, self
        )
        self._current_frame: np.ndarray | None = None
        self._play_origin: "tuple[float, int]" = (0.0, 0)
        self._last_tick_error: str | None = None

        # Video export
        self._capture_timer = QTimer(self)
        self._capture_timer.setInterval(max(1, int(1000 / self.config.capture_fps)))
        self._capture_timer.timeout.connect(self._capture_frame)
        self._progress_timer = QTimer(self)
        self._progress_timer.setInterval(self.config.progress_interval_ms)
        self._progress_timer.timeout.connect(self._sample_progress)
        self._recorder: VideoRecorder | None = None

    # === Session lifecycle ===

    def load_file(self, file_path: str | Path) -> bool:
        """Start a new media session for an image or video file.

        The previous session is closed first. Load failures are reported
        through error_occurred and leave the driver without a session.

        Returns:
            True if the file was loaded
        """
        path = Path(file_path)
        self.close_session()
        self._set_processing(True)

        try:
            if is_video_file(path):
                session = self._open_video(path)
            else:
                session = MediaSession(
                    SourceType.IMAGE, path, image=self.processor.load_image(path)
                )
        except SourceUnavailableError as e:
            self._set_processing(False)
            self._report_error(str(e))
            return False

        self.session = session
        self.state.source_type = session.source_type
        self.state.source_path = path
        width, height = session.size
        self._status(f"✓ Loaded {path.name} ({width}x{height})")

        if session.source_type == SourceType.IMAGE:
            self._process_still()
        else:
            self._set_processing(False)
            self._start_video()
        return True

    def _open_video(self, path: Path) -> MediaSession:
        video = VideoSource(path)
        if video.read() is None:
            video.release()
            raise SourceUnavailableError(f"Video has no decodable frames: {path.name}")
        video.seek(0)
        return MediaSession(SourceType.VIDEO, path, video=video)

    def close_session(self):
        """Stop all work for the current session and release its handles."""
        self._debounce_timer.stop()
        if self.state.is_exporting:
            self.cancel_export()
        self.frame_loop.stop()

        if self.session is not None:
            self.session.close()
            self.session = None

        was_ready = self.state.is_video_ready
        self.state = MediaState()
        self._current_frame = None
        self._last_tick_error = None
        if was_ready:
            self.video_ready_changed.emit(False)

    def shutdown(self):
        """Tear down the driver; no callbacks fire afterwards."""
        self.close_session()
        self._capture_timer.stop()
        self._progress_timer.stop()

    # === Settings ===

    def update_settings(self, settings: FilterSettings):
        """Install new filter settings.

        Still images are reprocessed once the debounce delay passes without
        another change; live video picks the settings up on the next tick.
        """
        self.settings = replace(settings)
        self.processor.settings = self.settings
        self.settings_changed.emit(self.settings)

        if self.session is not None and self.session.source_type == SourceType.IMAGE:
            self._debounce_timer.start()

    def apply_suggestion(self, suggestion: "dict[str, Any] | None") -> FilterSettings:
        """Merge an AI suggestion into the current settings.

        An empty suggestion leaves the settings untouched.
        """
        if not suggestion:
            self._status("No AI suggestion available, settings unchanged")
            return self.settings

        self.update_settings(merge_suggestion(self.settings, suggestion).clamped())
        self._status("✓ Applied AI suggestion")
        return self.settings

    def snapshot_png(self) -> bytes | None:
        """PNG bytes of the current source (image) or styled frame (video)."""
        if self.session is None:
            return None
        if self.session.image is not None:
            return ImageProcessor.to_png_bytes(self.session.image)
        if self.state.output is not None:
            return ImageProcessor.to_png_bytes(self.state.output)
        return None

    # === Still image path ===

    def _process_still(self):
        session = self.session
        if session is None or session.image is None:
            return

        token = session.token
        self._set_processing(True)
        try:
            result = self.processor.process(session.image, self.settings, rng=self.rng)
        except FilterError as e:
            # The previous output no longer matches the settings
            if not token.cancelled:
                self.state.output = None
            self._report_error(f"Filter error: {e}")
            return
        finally:
            self._set_processing(False)

        # AIDEV-NOTE: A result for a closed session is stale and never shown
        if token.cancelled:
            return
        self._present(result)

    # === Live video path ===

    def _start_video(self):
        video = self.session.video
        video.seek(0)
        self._current_frame = None
        self._restart_clock()
        self.frame_loop.start()

    def _restart_clock(self):
        position = self.session.video.position if self.session and self.session.video else 0
        self._play_origin = (self._clock(), position)

    def _render_video_frame(self):
        """Refresh tick: advance playback, transform and present one frame."""
        session = self.session
        if session is None or session.closed or session.video is None:
            self.frame_loop.stop()
            return

        self._advance_video(session.video)
        if self._current_frame is None or session.token.cancelled:
            return

        frame = self._current_frame
        height, width = frame.shape[:2]
        try:
            output = apply_filters(frame, width, height, self.settings, rng=self.rng)
        except FilterError as e:
            # Skip this tick only; log each distinct error once
            message = f"Filter error: {e}"
            if message != self._last_tick_error:
                self._last_tick_error = message
                self._report_error(message)
            return

        self._last_tick_error = None
        self._present(output)
        if not self.state.is_video_ready:
            self.state.is_video_ready = True
            self.video_ready_changed.emit(True)

    def _advance_video(self, video: VideoSource):
        """Move playback to the frame matching elapsed wall time."""
        started_at, start_index = self._play_origin
        target = start_index + int((self._clock() - started_at) * video.fps)

        if video.frame_count and target >= video.frame_count:
            self._on_video_ended(video)
            target = 0

        if self._current_frame is None or video.position <= target:
            behind = target - video.position
            if behind > 0:
                video.skip(behind)
            frame = video.read()
            if frame is not None:
                self._current_frame = frame

        if video.ended:
            self._on_video_ended(video)

    def _on_video_ended(self, video: VideoSource):
        if self.state.is_exporting:
            self._finish_export()
        # Preview loops back to the start
        video.seek(0)
        self._restart_clock()

    # === Export ===

    def export_image(self, output_dir: str | Path | None = None) -> Path | None:
        """Save the current still output as a PNG.

        Returns:
            Path of the written file, or None if nothing could be exported
        """
        session = self.session
        if session is None or session.source_type != SourceType.IMAGE:
            self._report_error("No image loaded to export")
            return None

        # Flush a pending settings change so the export matches the controls
        if self._debounce_timer.isActive():
            self._debounce_timer.stop()
            self._process_still()
        if self.state.output is None:
            self._report_error("No processed image to export")
            return None

        output_dir = Path(output_dir or self.config.export_dir)
        path = output_dir / f"pixelart-image-{int(time.time() * 1000)}.png"
        try:
            self.processor.save_png(self.state.output, path)
        except OSError as e:
            self._report_error(f"Failed to save image: {e}")
            return None

        self._status(f"✓ Exported image to {path}")
        self.export_finished.emit(str(path))
        return path

    def export_video(self, output_dir: str | Path | None = None) -> Path | None:
        """Record the styled video from the first frame to the end.

        Returns:
            Path the video will be written to, or None if export could not
            start
        """
        session = self.session
        if session is None or session.video is None:
            self._report_error("No video loaded to export")
            return None
        if self.state.is_exporting:
            return None

        output_dir = Path(output_dir or self.config.export_dir)
        stem = output_dir / f"pixelart-video-{int(time.time() * 1000)}"
        recorder = VideoRecorder(fps=self.config.capture_fps)
        try:
            path = recorder.start(stem, session.size)
        except EncodingUnsupportedError as e:
            self._report_error(str(e))
            return None

        self._recorder = recorder
        self.state.is_exporting = True
        self.state.export_progress = 0
        self.state.output = None
        self.export_state_changed.emit(True)
        self.export_progress.emit(0)

        # Play from position 0 so the whole clip is covered
        session.video.seek(0)
        self._current_frame = None
        self._restart_clock()
        self.frame_loop.start()
        self._capture_timer.start()
        self._progress_timer.start()

        self._status(f"Exporting video to {path.name}...")
        return path

    def cancel_export(self):
        """Abort a running export and discard the partial file."""
        if not self.state.is_exporting:
            return
        self._capture_timer.stop()
        self._progress_timer.stop()
        if self._recorder is not None:
            self._recorder.abort()
            self._recorder = None

        self.state.is_exporting = False
        self.state.export_progress = 0
        self.export_state_changed.emit(False)
        self._status("Export cancelled")

    def _capture_frame(self):
        session = self.session
        if session is None or session.token.cancelled or self._recorder is None:
            return
        if self.state.output is not None:
            self._recorder.write(self.state.output)

    def _sample_progress(self):
        session = self.session
        if session is None or session.video is None or not self.state.is_exporting:
            return

        duration = session.video.duration
        if not math.isfinite(duration) or duration <= 0:
            return

        progress = min(100, math.floor(session.video.current_time / duration * 100))
        if progress > self.state.export_progress:
            self.state.export_progress = progress
            self.export_progress.emit(progress)

    def _finish_export(self):
        self._capture_timer.stop()
        self._progress_timer.stop()

        recorder, self._recorder = self._recorder, None
        path = None
        if recorder is not None:
            try:
                path = recorder.stop()
            except OSError as e:
                self._report_error(f"Failed to finalize video: {e}")

        self.state.export_progress = 100
        self.export_progress.emit(100)
        if path is not None:
            self._status(f"✓ Exported video to {path}")
            self.export_finished.emit(str(path))

        self.state.is_exporting = False
        self.state.export_progress = 0
        self.export_state_changed.emit(False)

    # === Helpers ===

    def _present(self, image):
        self.state.output = image
        self.frame_presented.emit(image)

    def _set_processing(self, processing: bool):
        if self.state.is_loading != processing:
            self.state.is_loading = processing
            self.processing_changed.emit(processing)

    def _status(self, message: str):
        print(message)
        self.status_message.emit(message)

    def _report_error(self, message: str):
        print(f"Error: {message}")
        self.error_occurred.emit(message)
