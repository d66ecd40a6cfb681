"""Media session ownership and cancellation for the playback driver."""

from pathlib import Path

from PIL import Image

from models import SourceType
from video_source import VideoSource


class CancellationToken:
    """Flag checked by deferred callbacks before they write results."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        self._cancelled = True


class MediaSession:
    """Owns the source handles of one loaded file.

    AIDEV-NOTE: A session is replaced wholesale when a new file is loaded.
    close() releases the decoded image or video capture and cancels the
    token so timers from the old session drop their results. close() is
    safe to call more than once.
    """

    def __init__(
        self,
        source_type: SourceType,
        path: Path,
        image: Image.Image | None = None,
        video: VideoSource | None = None,
    ):
        self.source_type = source_type
        self.path = path
        self.image = image
        self.video = video
        self.token = CancellationToken()

    @property
    def size(self) -> "tuple[int, int]":
        """Intrinsic source dimensions (width, height)."""
        if self.image is not None:
            return self.image.size
        if self.video is not None:
            return self.video.width, self.video.height
        return 0, 0

    @property
    def closed(self) -> bool:
        return self.token.cancelled

    def close(self):
        """Release all source handles and cancel pending work."""
        if self.closed:
            return
        self.token.cancel()
        if self.video is not None:
            self.video.release()
            self.video = None
        if self.image is not None:
            self.image.close()
            self.image = None
