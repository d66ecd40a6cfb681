"""Tests for media sessions and the frame loop"""
from PIL import Image

from frame_loop import FrameLoop
from media_session import CancellationToken, MediaSession
from models import SourceType
from video_source import VideoSource


class TestCancellationToken:
    def test_cancel(self):
        token = CancellationToken()
        assert not token.cancelled
        token.cancel()
        token.cancel()
        assert token.cancelled


class TestMediaSession:
    """Test session ownership of source handles"""

    def test_image_session(self, tmp_path):
        image = Image.new("RGB", (12, 7))
        session = MediaSession(SourceType.IMAGE, tmp_path / "a.png", image=image)

        assert session.size == (12, 7)
        session.close()

        assert session.closed
        assert session.token.cancelled
        assert session.image is None

    def test_video_session_releases_capture(self, video_file):
        video = VideoSource(video_file)
        session = MediaSession(SourceType.VIDEO, video_file, video=video)
        assert session.size == (64, 48)

        session.close()
        session.close()

        assert session.video is None
        assert video.read() is None


class TestFrameLoop:
    """Test start/stop semantics of the refresh loop"""

    def test_ticks_until_stopped(self, qtbot):
        ticks = []
        loop = FrameLoop(lambda: ticks.append(1), interval_ms=5)

        loop.start()
        loop.start()
        assert loop.running
        qtbot.waitUntil(lambda: len(ticks) >= 3, timeout=2000)

        loop.stop()
        stopped_at = len(ticks)
        qtbot.wait(50)

        assert not loop.running
        assert len(ticks) == stopped_at
        assert loop.tick_count == stopped_at

    def test_stop_before_start_is_noop(self, qtbot):
        loop = FrameLoop(lambda: None)
        loop.stop()
        loop.stop()
        assert not loop.running
