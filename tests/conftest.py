"""Shared fixtures for PixelArt Studio tests."""

import os

# Must be set before any Qt module creates the QApplication
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import cv2
import numpy as np
import pytest
from PIL import Image

from models import AppConfig


def gradient_array(width: int, height: int) -> np.ndarray:
    """Horizontal gray ramp with a vertical tint, as an RGB uint8 array."""
    xs = np.linspace(0, 255, width)
    ys = np.linspace(0, 255, height)
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[..., 0] = xs[None, :]
    array[..., 1] = xs[None, :]
    array[..., 2] = ys[:, None]
    return array


@pytest.fixture
def gradient_image():
    """37x23 RGB gradient (odd sizes exercise floor division)."""
    return Image.fromarray(gradient_array(37, 23))


@pytest.fixture
def image_file(tmp_path, gradient_image):
    path = tmp_path / "source.png"
    gradient_image.save(path)
    return path


def write_clip(path, frames: int = 10, size=(64, 48), fps: float = 10.0):
    """Write a short MJPG/AVI clip whose brightness ramps frame by frame."""
    width, height = size
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), fps, size)
    assert writer.isOpened(), "OpenCV build cannot write MJPG/AVI"
    for i in range(frames):
        value = int(255 * i / max(1, frames - 1))
        frame = np.full((height, width, 3), value, dtype=np.uint8)
        frame[:, : width // 2] = 255 - value
        writer.write(frame)
    writer.release()
    return path


@pytest.fixture
def video_file(tmp_path):
    return write_clip(tmp_path / "clip.avi")


@pytest.fixture
def app_config(tmp_path):
    """Fast timers and a temporary export directory."""
    return AppConfig(
        debounce_ms=10,
        refresh_interval_ms=5,
        capture_fps=30,
        progress_interval_ms=20,
        export_dir=tmp_path / "exports",
    )
