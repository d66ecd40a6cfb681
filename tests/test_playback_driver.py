"""Tests for the PlaybackDriver scheduling, export and session lifecycle"""
import numpy as np
import pytest
from PIL import Image

from models import DitherMode, FilterSettings, SourceType
from playback_driver import PlaybackDriver


@pytest.fixture
def driver(qtbot, app_config):
    driver = PlaybackDriver(app_config, FilterSettings(), rng=np.random.default_rng(3))
    yield driver
    driver.shutdown()


def collect(signal):
    values = []
    signal.connect(values.append)
    return values


class TestStillImages:
    """Test image loading, debounce and PNG export"""

    def test_load_presents_first_frame(self, qtbot, driver, image_file):
        with qtbot.waitSignal(driver.frame_presented, timeout=1000) as blocker:
            assert driver.load_file(image_file)

        output = blocker.args[0]
        assert output.size == (37, 23)
        assert driver.state.source_type == SourceType.IMAGE
        assert driver.state.output is output
        assert not driver.state.is_loading

    def test_settings_changes_are_debounced(self, qtbot, driver, image_file):
        driver.load_file(image_file)
        frames = collect(driver.frame_presented)

        driver.update_settings(FilterSettings(pixel_size=2))
        driver.update_settings(FilterSettings(pixel_size=3))
        driver.update_settings(FilterSettings(pixel_size=5, mode=DitherMode.THRESHOLD))
        qtbot.waitUntil(lambda: len(frames) >= 1, timeout=1000)
        qtbot.wait(50)

        assert len(frames) == 1
        assert driver.settings.pixel_size == 5

    def test_load_failure_reports_error(self, qtbot, driver, tmp_path):
        bogus = tmp_path / "broken.png"
        bogus.write_bytes(b"not an image")

        with qtbot.waitSignal(driver.error_occurred, timeout=1000):
            assert not driver.load_file(bogus)

        assert driver.session is None
        assert driver.state.source_type is None
        assert not driver.state.is_loading

    def test_filter_error_keeps_session(self, qtbot, driver, image_file):
        driver.load_file(image_file)

        with qtbot.waitSignal(driver.error_occurred, timeout=1000):
            driver.update_settings(FilterSettings(pixel_size=24))

        assert driver.session is not None
        assert driver.state.output is None

    def test_export_refused_after_filter_error(self, qtbot, driver, image_file, app_config):
        driver.load_file(image_file)
        with qtbot.waitSignal(driver.error_occurred, timeout=1000):
            driver.update_settings(FilterSettings(pixel_size=24))

        with qtbot.waitSignal(driver.error_occurred, timeout=1000) as blocker:
            assert driver.export_image() is None

        assert "No processed image" in blocker.args[0]
        assert not app_config.export_dir.exists()

        # A valid change produces exportable output again
        with qtbot.waitSignal(driver.frame_presented, timeout=1000):
            driver.update_settings(FilterSettings(pixel_size=2))
        assert driver.export_image() is not None

    def test_export_image(self, qtbot, driver, image_file, app_config):
        driver.load_file(image_file)

        with qtbot.waitSignal(driver.export_finished, timeout=1000) as blocker:
            path = driver.export_image()

        assert blocker.args == [str(path)]
        assert path.parent == app_config.export_dir
        assert path.name.startswith("pixelart-image-")
        with Image.open(path) as saved:
            assert saved.size == (37, 23)

    def test_export_flushes_pending_settings(self, qtbot, driver, image_file, tmp_path):
        driver.load_file(image_file)
        driver.update_settings(FilterSettings(color_a="#0f380f", color_b="#8bac0f"))

        path = driver.export_image(tmp_path)

        with Image.open(path) as saved:
            colors = {c for _, c in saved.getcolors()}
        assert colors <= {(15, 56, 15, 255), (139, 172, 15, 255)}

    def test_export_image_without_media(self, qtbot, driver):
        with qtbot.waitSignal(driver.error_occurred, timeout=1000):
            assert driver.export_image() is None

    def test_closed_session_drops_pending_work(self, qtbot, driver, image_file):
        driver.load_file(image_file)
        frames = collect(driver.frame_presented)

        driver.update_settings(FilterSettings(pixel_size=2))
        driver.close_session()
        qtbot.wait(50)

        assert frames == []
        assert driver.session is None
        assert driver.state.output is None

    def test_replacing_session_closes_previous(self, qtbot, driver, image_file):
        driver.load_file(image_file)
        first = driver.session

        driver.load_file(image_file)

        assert first.closed
        assert driver.session is not first


class TestSuggestions:
    """Test merging AI suggestions through the driver"""

    def test_empty_suggestion_leaves_settings(self, qtbot, driver):
        before = driver.settings
        with qtbot.waitSignal(driver.status_message, timeout=1000):
            result = driver.apply_suggestion({})
        assert result is before

    def test_suggestion_is_clamped_and_broadcast(self, qtbot, driver):
        with qtbot.waitSignal(driver.settings_changed, timeout=1000) as blocker:
            driver.apply_suggestion({"pixel_size": 99, "mode": DitherMode.HALFTONE})

        settings = blocker.args[0]
        assert settings.pixel_size == 24
        assert settings.mode == DitherMode.HALFTONE
        assert driver.settings == settings

    def test_snapshot_png(self, qtbot, driver, image_file):
        assert driver.snapshot_png() is None
        driver.load_file(image_file)
        assert driver.snapshot_png().startswith(b"\x89PNG")


class TestVideo:
    """Test live video preview and real-time export"""

    def test_video_becomes_ready(self, qtbot, driver, video_file):
        with qtbot.waitSignal(driver.video_ready_changed, timeout=3000) as blocker:
            assert driver.load_file(video_file)

        assert blocker.args == [True]
        assert driver.frame_loop.running
        assert driver.state.output.size == (64, 48)

    def test_preview_loops_past_the_end(self, qtbot, driver, video_file):
        driver.load_file(video_file)
        qtbot.waitUntil(lambda: driver.state.is_video_ready, timeout=3000)

        # 10 frames at 10 fps; keep playing well past one second
        qtbot.wait(1500)

        assert driver.frame_loop.running
        assert driver.session.video.position < 10

    def test_export_video(self, qtbot, driver, video_file):
        driver.load_file(video_file)
        qtbot.waitUntil(lambda: driver.state.is_video_ready, timeout=3000)
        states = collect(driver.export_state_changed)
        progress = collect(driver.export_progress)

        with qtbot.waitSignal(driver.export_finished, timeout=10000) as blocker:
            path = driver.export_video()
            assert path is not None
            assert driver.state.is_exporting

        assert blocker.args == [str(path)]
        assert path.exists()
        assert states == [True, False]
        assert progress[0] == 0
        assert progress[-1] == 100
        assert progress == sorted(progress)
        assert not driver.state.is_exporting
        # Preview keeps running after export
        assert driver.frame_loop.running

    def test_cancel_export(self, qtbot, driver, video_file, app_config):
        driver.load_file(video_file)
        qtbot.waitUntil(lambda: driver.state.is_video_ready, timeout=3000)
        states = collect(driver.export_state_changed)

        path = driver.export_video()
        qtbot.wait(100)
        driver.cancel_export()
        driver.cancel_export()

        assert states == [True, False]
        assert not path.exists()
        assert not any(app_config.export_dir.iterdir())

    def test_second_export_while_running_is_ignored(self, qtbot, driver, video_file):
        driver.load_file(video_file)
        qtbot.waitUntil(lambda: driver.state.is_video_ready, timeout=3000)

        assert driver.export_video() is not None
        assert driver.export_video() is None
        driver.cancel_export()

    def test_export_video_without_video(self, qtbot, driver, image_file):
        driver.load_file(image_file)
        with qtbot.waitSignal(driver.error_occurred, timeout=1000):
            assert driver.export_video() is None

    def test_close_session_stops_playback(self, qtbot, driver, video_file):
        driver.load_file(video_file)
        qtbot.waitUntil(lambda: driver.state.is_video_ready, timeout=3000)
        video = driver.session.video

        with qtbot.waitSignal(driver.video_ready_changed, timeout=1000) as blocker:
            driver.close_session()

        assert blocker.args == [False]
        assert not driver.frame_loop.running
        assert video.read() is None

    def test_shutdown_is_idempotent(self, qtbot, driver, video_file):
        driver.load_file(video_file)
        driver.shutdown()
        driver.shutdown()

        frames = collect(driver.frame_presented)
        qtbot.wait(50)
        assert frames == []

    def test_filter_error_skips_ticks_and_recovers(self, qtbot, driver, video_file):
        driver.load_file(video_file)
        qtbot.waitUntil(lambda: driver.state.is_video_ready, timeout=3000)
        errors = collect(driver.error_occurred)

        # 80 px blocks leave no working buffer for a 64x48 clip
        driver.update_settings(FilterSettings(pixel_size=80))
        qtbot.waitUntil(lambda: len(errors) >= 1, timeout=1000)
        qtbot.wait(200)

        assert driver.frame_loop.running
        assert len(errors) == 1
        assert "Filter error" in errors[0]

        frames = collect(driver.frame_presented)
        driver.update_settings(FilterSettings())
        qtbot.waitUntil(lambda: len(frames) >= 2, timeout=2000)
        assert frames[-1].size == (64, 48)
        assert len(errors) == 1

    def test_export_without_known_duration(self, qtbot, driver, video_file):
        driver.load_file(video_file)
        qtbot.waitUntil(lambda: driver.state.is_video_ready, timeout=3000)
        # An unknown frame count makes the duration NaN
        driver.session.video.frame_count = 0
        progress = collect(driver.export_progress)
        errors = collect(driver.error_occurred)

        with qtbot.waitSignal(driver.export_finished, timeout=10000):
            assert driver.export_video() is not None

        assert progress == [0, 100]
        assert errors == []
        assert not driver.state.is_exporting
