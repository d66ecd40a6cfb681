"""Real-time video capture of the presentation surface.

AIDEV-NOTE: Codec support depends on the OpenCV/FFmpeg build, so the
recorder walks a candidate list and falls back until a writer opens.
Frames go to a hidden temporary file that is renamed into place on stop().
"""

from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from errors import EncodingUnsupportedError

# (fourcc, container suffix), in order of preference
CODEC_CANDIDATES = [
    ("VP90", ".webm"),
    ("VP80", ".webm"),
    ("mp4v", ".mp4"),
    ("MJPG", ".avi"),
]


class VideoRecorder:
    """Encodes RGB(A) frames at a fixed frame rate into one container."""

    def __init__(
        self,
        fps: float = 30.0,
        candidates: "list[tuple[str, str]] | None" = None,
    ):
        self.fps = fps
        self.candidates = candidates or CODEC_CANDIDATES
        self.codec: str | None = None
        self.frames_written = 0

        self._writer: cv2.VideoWriter | None = None
        self._temp_path: Path | None = None
        self._final_path: Path | None = None
        self._size: "tuple[int, int] | None" = None

    @property
    def recording(self) -> bool:
        return self._writer is not None

    def start(self, stem: str | Path, size: "tuple[int, int]") -> Path:
        """Open a writer, falling back through the codec candidates.

        Args:
            stem: Output path without suffix
            size: Frame size (width, height)

        Returns:
            Final output path (suffix chosen by the negotiated container)

        Raises:
            EncodingUnsupportedError: If no candidate codec can be opened
        """
        stem = Path(stem)
        stem.parent.mkdir(parents=True, exist_ok=True)

        for fourcc, suffix in self.candidates:
            try:
                writer, temp_path = self._open_writer(stem, fourcc, suffix, size)
            except EncodingUnsupportedError as e:
                print(f"Warning: {e}, trying next codec")
                continue

            self._writer = writer
            self._temp_path = temp_path
            self._final_path = stem.with_name(stem.name + suffix)
            self._size = size
            self.codec = fourcc
            self.frames_written = 0
            print(f"✓ Recording with {fourcc} into {self._final_path.name}")
            return self._final_path

        raise EncodingUnsupportedError(
            "No supported video codec among: "
            + ", ".join(fourcc for fourcc, _ in self.candidates)
        )

    def _open_writer(
        self, stem: Path, fourcc: str, suffix: str, size: "tuple[int, int]"
    ) -> "tuple[cv2.VideoWriter, Path]":
        temp_path = stem.with_name(f".{stem.name}.part{suffix}")
        try:
            writer = cv2.VideoWriter(
                str(temp_path), cv2.VideoWriter_fourcc(*fourcc), self.fps, size
            )
        except cv2.error as e:
            temp_path.unlink(missing_ok=True)
            raise EncodingUnsupportedError(f"Codec {fourcc} ({suffix}) failed: {e}") from e
        if not writer.isOpened():
            writer.release()
            temp_path.unlink(missing_ok=True)
            raise EncodingUnsupportedError(f"Codec {fourcc} ({suffix}) unsupported")
        return writer, temp_path

    def write(self, frame: Image.Image | np.ndarray):
        """Append one frame; frames of the wrong size are resized."""
        if self._writer is None:
            return
        if isinstance(frame, Image.Image):
            if frame.size != self._size:
                frame = frame.resize(self._size, resample=Image.Resampling.NEAREST)
            array = np.asarray(frame.convert("RGB"))
        else:
            array = np.ascontiguousarray(np.asarray(frame)[..., :3])
        self._writer.write(cv2.cvtColor(array, cv2.COLOR_RGB2BGR))
        self.frames_written += 1

    def stop(self) -> Path | None:
        """Finalize the container and move it to its final path."""
        if self._writer is None:
            return None
        self._writer.release()
        self._writer = None

        final_path = self._final_path
        self._temp_path.replace(final_path)
        self._temp_path = None
        print(f"✓ Saved {self.frames_written} frames to {final_path}")
        return final_path

    def abort(self):
        """Close the writer and discard the partial file."""
        if self._writer is None:
            return
        self._writer.release()
        self._writer = None
        if self._temp_path is not None:
            self._temp_path.unlink(missing_ok=True)
            self._temp_path = None
        print("Warning: Recording aborted, partial file discarded")
