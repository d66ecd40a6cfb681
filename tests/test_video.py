"""Tests for the OpenCV video source and recorder"""
import numpy as np
import pytest
from PIL import Image

from errors import EncodingUnsupportedError, SourceUnavailableError
from video_recorder import CODEC_CANDIDATES, VideoRecorder
from video_source import VideoSource, is_video_file


class TestVideoSource:
    """Test sequential reading and seeking"""

    def test_metadata(self, video_file):
        video = VideoSource(video_file)
        try:
            assert (video.width, video.height) == (64, 48)
            assert video.fps == pytest.approx(10.0)
            assert video.frame_count == 10
            assert video.duration == pytest.approx(1.0)
            assert video.position == 0
        finally:
            video.release()

    def test_read_returns_rgb_frames_until_end(self, video_file):
        video = VideoSource(video_file)
        frames = []
        while (frame := video.read()) is not None:
            frames.append(frame)
        video.release()

        assert len(frames) == 10
        assert frames[0].shape == (48, 64, 3)
        assert video.ended
        assert video.position == 10
        assert video.current_time == pytest.approx(1.0)

    def test_seek_rewinds(self, video_file):
        video = VideoSource(video_file)
        video.skip(4)
        assert video.position == 4

        video.seek(0)
        first = video.read()
        video.release()

        assert not video.ended
        assert video.position == 1
        # Frame 0 is dark on the right half
        assert first[:, 40:].mean() < 20

    def test_release_is_idempotent(self, video_file):
        video = VideoSource(video_file)
        video.release()
        video.release()
        assert video.read() is None

    def test_unreadable_file(self, tmp_path):
        bogus = tmp_path / "broken.mp4"
        bogus.write_bytes(b"\x00" * 128)
        with pytest.raises(SourceUnavailableError):
            VideoSource(bogus)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailableError):
            VideoSource(tmp_path / "nowhere.avi")

    @pytest.mark.parametrize(
        "name, expected",
        [("a.MP4", True), ("b.webm", True), ("c.mov", True), ("d.png", False), ("e", False)],
    )
    def test_is_video_file(self, name, expected):
        assert is_video_file(name) is expected


class FlakyRecorder(VideoRecorder):
    """Recorder whose first codec candidates are unavailable"""

    def __init__(self, unavailable, **kwargs):
        super().__init__(**kwargs)
        self.unavailable = set(unavailable)
        self.attempts = []

    def _open_writer(self, stem, fourcc, suffix, size):
        self.attempts.append(fourcc)
        if fourcc in self.unavailable:
            raise EncodingUnsupportedError(f"Codec {fourcc} ({suffix}) unsupported")
        return super()._open_writer(stem, fourcc, suffix, size)


class TestVideoRecorder:
    """Test codec fallback and finalization"""

    def test_candidate_order(self):
        assert [fourcc for fourcc, _ in CODEC_CANDIDATES] == ["VP90", "VP80", "mp4v", "MJPG"]

    def test_falls_back_to_next_codec(self, tmp_path):
        recorder = FlakyRecorder({"VP90", "VP80", "mp4v"}, fps=10.0)

        path = recorder.start(tmp_path / "out" / "clip", (64, 48))

        assert recorder.attempts == ["VP90", "VP80", "mp4v", "MJPG"]
        assert recorder.codec == "MJPG"
        assert path.name == "clip.avi"
        assert recorder.recording
        recorder.abort()

    def test_all_codecs_unavailable(self, tmp_path):
        recorder = FlakyRecorder({"VP90", "VP80", "mp4v", "MJPG"})
        with pytest.raises(EncodingUnsupportedError):
            recorder.start(tmp_path / "clip", (64, 48))
        assert not recorder.recording

    def test_write_and_stop(self, tmp_path):
        recorder = VideoRecorder(fps=10.0, candidates=[("MJPG", ".avi")])
        path = recorder.start(tmp_path / "clip", (64, 48))

        for value in (0, 128, 255):
            recorder.write(Image.new("RGBA", (64, 48), (value, value, value, 255)))
        # Wrong-size frames are resized to the negotiated size
        recorder.write(Image.new("RGB", (32, 24)))
        recorder.write(np.zeros((48, 64, 4), dtype=np.uint8))

        assert recorder.stop() == path
        assert path.exists()
        assert not list(tmp_path.glob(".clip.part*"))
        assert recorder.frames_written == 5

        video = VideoSource(path)
        assert video.frame_count == 5
        video.release()

    def test_abort_discards_partial_file(self, tmp_path):
        recorder = VideoRecorder(candidates=[("MJPG", ".avi")])
        path = recorder.start(tmp_path / "clip", (64, 48))
        recorder.write(Image.new("RGB", (64, 48)))

        recorder.abort()

        assert not path.exists()
        assert not list(tmp_path.iterdir())
        assert recorder.stop() is None

    def test_write_without_start_is_ignored(self):
        recorder = VideoRecorder()
        recorder.write(Image.new("RGB", (8, 8)))
        assert recorder.frames_written == 0

