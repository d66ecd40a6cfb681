"""Frame transform orchestrating the complete pixel pipeline.

AIDEV-NOTE: This module handles the per-frame pipeline from source pixels
to a two-color, blocky output: downsample, tone adjust, dither, invert,
palette map, nearest-neighbor upscale. Used once for still images and once
per tick for live video.
"""

import io
from dataclasses import replace
from pathlib import Path

import numpy as np
from PIL import Image

from errors import InvalidDimensionsError, SourceUnavailableError
from models import FilterSettings

from .dithering import dither
from .utils import adjust_tone, hex_to_rgb, luminance, to_rgb_image, working_size


def apply_filters(
    source,
    source_width: int,
    source_height: int,
    settings: FilterSettings,
    rng: np.random.Generator | None = None,
) -> Image.Image:
    """Run the frame transform on one source frame.

    Args:
        source: PIL Image or (H, W, 3|4) uint8 RGB(A) array
        source_width: Source width in pixels
        source_height: Source height in pixels
        settings: Filter configuration
        rng: Random generator for STOCHASTIC mode

    Returns:
        RGBA PIL image of size (source_width, source_height) containing only
        settings.color_a and settings.color_b

    Raises:
        InvalidDimensionsError: If the source or working buffer would be empty
        DegenerateContrastError: If contrast divides by zero
    """
    settings.validate()
    width, height = working_size(source_width, source_height, settings.pixel_size)

    # --- STEP 1: Downsample into the working buffer ---
    image = to_rgb_image(source)
    if image.size != (source_width, source_height):
        raise InvalidDimensionsError(
            f"Source is {image.size[0]}x{image.size[1]}, "
            f"expected {source_width}x{source_height}"
        )
    small = image.resize((width, height), resample=Image.Resampling.BILINEAR)
    rgb = np.asarray(small)

    # --- STEP 2: Tone adjustment and luminance ---
    gray = luminance(adjust_tone(rgb, settings.contrast, settings.brightness))

    # --- STEP 3: Per-pixel dither decision ---
    bits = dither(
        gray, settings.mode, settings.threshold, settings.dot_scale, rng=rng
    )
    if settings.invert:
        bits = 1 - bits

    # --- STEP 4: Palette map ---
    palette = np.array(
        [
            (*hex_to_rgb(settings.color_a), 255),
            (*hex_to_rgb(settings.color_b), 255),
        ],
        dtype=np.uint8,
    )
    working = Image.fromarray(palette[bits])

    # --- STEP 5: Upscale without smoothing for hard block edges ---
    return working.resize(
        (source_width, source_height), resample=Image.Resampling.NEAREST
    )


class ImageProcessor:
    """Processes still images through the frame transform."""

    def __init__(self, settings: FilterSettings | None = None):
        self.settings = settings or FilterSettings()

    def load_image(self, file_path: str | Path) -> Image.Image:
        """Load and validate an image file.

        Args:
            file_path: Path to image file (PNG, JPG, etc.)

        Returns:
            PIL Image in RGB mode, fully decoded

        Raises:
            SourceUnavailableError: If file cannot be loaded or is invalid
        """
        try:
            with Image.open(file_path) as image:
                # AIDEV-NOTE: Decode eagerly so the file handle can close now
                image.load()
                return image.convert("RGB")
        except (OSError, ValueError) as e:
            raise SourceUnavailableError(f"Failed to load image: {e}") from e

    def process(
        self,
        image: Image.Image,
        settings: FilterSettings | None = None,
        rng: np.random.Generator | None = None,
    ) -> Image.Image:
        """Stylize a full still image with the given or default settings."""
        snapshot = replace(settings or self.settings)
        width, height = image.size
        return apply_filters(image, width, height, snapshot, rng=rng)

    @staticmethod
    def to_png_bytes(image: Image.Image) -> bytes:
        """Encode an image as PNG."""
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def save_png(image: Image.Image, path: str | Path) -> Path:
        """Save an image as PNG, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(path, format="PNG")
        return path
