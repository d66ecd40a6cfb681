"""OpenCV-backed video source for live preview and export playback."""

import math
from pathlib import Path

import cv2
import numpy as np

from errors import SourceUnavailableError

VIDEO_SUFFIXES = {".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v"}

# Used when the container does not report a frame rate
FALLBACK_FPS = 30.0


class VideoSource:
    """Sequential frame reader with a playback position.

    AIDEV-NOTE: Frames are returned as RGB uint8 arrays (OpenCV decodes
    BGR). Position is the index of the next frame to be read.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._capture = cv2.VideoCapture(str(self.path))
        if not self._capture.isOpened():
            self._capture.release()
            raise SourceUnavailableError(f"Failed to open video: {self.path.name}")

        self.width = int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if self.width <= 0 or self.height <= 0:
            self._capture.release()
            raise SourceUnavailableError(
                f"Video has no usable frame size: {self.path.name}"
            )

        fps = self._capture.get(cv2.CAP_PROP_FPS)
        self.fps = fps if fps and math.isfinite(fps) and fps > 0 else FALLBACK_FPS
        self.frame_count = max(0, int(self._capture.get(cv2.CAP_PROP_FRAME_COUNT)))

        self.position = 0
        self.ended = False
        self._released = False

    @property
    def duration(self) -> float:
        """Clip length in seconds, NaN when the frame count is unknown."""
        if self.frame_count <= 0:
            return math.nan
        return self.frame_count / self.fps

    @property
    def current_time(self) -> float:
        """Playback position in seconds."""
        return self.position / self.fps

    def read(self) -> np.ndarray | None:
        """Decode the next frame as RGB, or None at end of stream."""
        if self._released:
            return None
        ok, frame = self._capture.read()
        if not ok or frame is None:
            self.ended = True
            return None
        self.position += 1
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def skip(self, count: int) -> bool:
        """Advance past frames without decoding them fully."""
        for _ in range(count):
            if self._released or not self._capture.grab():
                self.ended = True
                return False
            self.position += 1
        return True

    def seek(self, frame_index: int = 0):
        """Jump to a frame index and clear the ended flag."""
        if self._released:
            return
        self._capture.set(cv2.CAP_PROP_POS_FRAMES, frame_index)
        self.position = frame_index
        self.ended = False

    def release(self):
        """Release the capture handle (idempotent)."""
        if not self._released:
            self._capture.release()
            self._released = True


def is_video_file(path: str | Path) -> bool:
    return Path(path).suffix.lower() in VIDEO_SUFFIXES
