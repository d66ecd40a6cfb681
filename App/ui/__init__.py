"""UI components for PixelArt Studio.

This package contains the main window and the panels it arranges. The
panels talk to the PlaybackDriver only through its methods and signals.
"""

from ui.console_panel import ConsolePanel
from ui.filter_panel import FilterPanel
from ui.main_window import PixelArtWindow
from ui.preview_panel import PreviewPanel

__all__ = [
    "PixelArtWindow",
    "FilterPanel",
    "PreviewPanel",
    "ConsolePanel",
]
