"""Data models and constants for PixelArt Studio."""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from PIL import Image

from errors import DegenerateContrastError, InvalidDimensionsError

# Configuration file path (read-only, see ConfigManager)
CONFIG_FILE = Path.home() / ".pixelart_config.json"

# AIDEV-NOTE: Recognized ranges exposed to the controls and the AI advisor
PIXEL_SIZE_RANGE = (1, 24)
CONTRAST_RANGE = (-100.0, 100.0)
BRIGHTNESS_RANGE = (-128.0, 128.0)
THRESHOLD_RANGE = (0.0, 255.0)

# Contrast value that makes 259 - contrast == 0
DEGENERATE_CONTRAST = 259.0


class DitherMode(Enum):
    """Dithering algorithms deciding the on/off color per pixel."""

    BAYER = "BAYER"  # 4x4 ordered matrix
    THRESHOLD = "THRESHOLD"  # Single luminance cut
    HALFTONE = "HALFTONE"  # Distance-from-center dot pattern
    STOCHASTIC = "STOCHASTIC"  # Random threshold per pixel


class SourceType(Enum):
    """Kind of media loaded in the current session."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass
class FilterSettings:
    """Filter configuration consumed by the frame transform.

    AIDEV-NOTE: The driver hands the engine a snapshot of these settings;
    the engine never mutates them.
    """

    pixel_size: int = 4  # Source pixels per output block
    contrast: float = 40.0  # -100 to 100
    brightness: float = 0.0  # Additive offset
    threshold: float = 128.0  # 0-255 luminance cut point
    mode: DitherMode = DitherMode.BAYER
    invert: bool = False
    dot_scale: float = 1.2  # Halftone dot radius scale
    color_a: str = "#000000"  # Off/background color
    color_b: str = "#FFFFFF"  # On/foreground color

    def validate(self):
        """Reject settings the transform cannot run with.

        Raises:
            InvalidDimensionsError: If pixel_size is below 1
            DegenerateContrastError: If contrast zeroes the factor denominator
        """
        if self.pixel_size < 1:
            raise InvalidDimensionsError(
                f"pixel_size must be >= 1, got {self.pixel_size}"
            )
        if self.contrast == DEGENERATE_CONTRAST:
            raise DegenerateContrastError(
                f"contrast {self.contrast} divides by zero"
            )

    def clamped(self) -> "FilterSettings":
        """Return a copy forced into the recognized control ranges."""
        return replace(
            self,
            pixel_size=int(_clamp(round(self.pixel_size), *PIXEL_SIZE_RANGE)),
            contrast=float(_clamp(self.contrast, *CONTRAST_RANGE)),
            brightness=float(_clamp(self.brightness, *BRIGHTNESS_RANGE)),
            threshold=float(_clamp(self.threshold, *THRESHOLD_RANGE)),
            dot_scale=self.dot_scale if self.dot_scale > 0 else 1.2,
        )

    def with_preset(self, preset: "ColorPreset") -> "FilterSettings":
        """Return a copy using the preset's two-color palette."""
        return replace(self, color_a=preset.color_a, color_b=preset.color_b)


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass(frozen=True)
class ColorPreset:
    """Named two-color palette."""

    name: str
    color_a: str
    color_b: str


COLOR_PRESETS = [
    ColorPreset("Mono", "#000000", "#FFFFFF"),
    ColorPreset("GameBoy", "#0f380f", "#8bac0f"),
    ColorPreset("Amber", "#1a1000", "#ffb000"),
    ColorPreset("Cyber", "#2b0035", "#00fff2"),
    ColorPreset("Slate", "#1e293b", "#f1f5f9"),
]

PRESETS_BY_NAME = {preset.name.lower(): preset for preset in COLOR_PRESETS}


@dataclass
class MediaState:
    """Transient state of the current media session, as seen by the UI."""

    source_type: SourceType | None = None
    source_path: Path | None = None

    # Last produced output (RGBA PIL image at source resolution)
    output: Image.Image | None = None

    is_loading: bool = False
    is_video_ready: bool = False
    is_exporting: bool = False
    export_progress: int = 0  # 0-100


@dataclass
class AppConfig:
    """Application-level settings (scheduling, export, AI advisor)."""

    debounce_ms: int = 50  # Settle delay for still-image reprocessing
    refresh_interval_ms: int = 16  # Live video preview tick
    capture_fps: int = 30  # Export capture frame rate
    progress_interval_ms: int = 500  # Export progress sampling
    export_dir: Path = field(
        default_factory=lambda: Path.home() / "Pictures" / "PixelArt"
    )
    gemini_model: str = "gemini-3-flash-preview"
    gemini_api_key: str | None = None
