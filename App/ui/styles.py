"""Centralized styling constants for the PixelArt Studio UI.

This module consolidates colors, fonts, and sizes used throughout the application
to ensure consistency and easier maintenance.
"""

from PyQt6.QtGui import QColor, QFont


class StatusColors:
    """Session status indicator colors."""

    READY = "green"
    PROCESSING = "orange"
    EXPORTING = "#ff4040"
    IDLE = "gray"
    ERROR = "red"


class ThemeColors:
    """Application theme colors."""

    # Background colors
    BACKGROUND_PANEL = "#111111"

    # UI borders and frames
    BORDER_DEFAULT = "#333333"

    # Swatch text must stay readable on any palette color
    SWATCH_TEXT_DARK = "#000000"
    SWATCH_TEXT_LIGHT = "#FFFFFF"


class Fonts:
    """Standard application fonts."""

    CONSOLE = QFont("Courier", 9)
    STATUS_INDICATOR = QFont("Arial", 16)


class Sizes:
    """Standard widget sizes and constraints."""

    # Console panel
    CONSOLE_MIN_HEIGHT = 100

    # Preview surface
    PREVIEW_MIN_SIZE = (480, 360)

    # Controls panel
    CONTROLS_MIN_WIDTH = 300

    # Buttons and controls
    BUTTON_MIN_WIDTH = 100
    LABEL_MIN_WIDTH = 40


# Convenience aliases
FONTS = Fonts
SIZES = Sizes


def status_stylesheet(state: str) -> str:
    """Generate status indicator stylesheet for a session state.

    Args:
        state: Session state ('READY', 'PROCESSING', 'EXPORTING', 'IDLE')

    Returns:
        CSS stylesheet string with appropriate color
    """
    color = getattr(StatusColors, state.upper(), StatusColors.IDLE)
    return f"color: {color};"


def panel_stylesheet() -> str:
    """Generate standard panel stylesheet with border and background.

    Returns:
        CSS stylesheet string for panel styling
    """
    return (
        f"border: 1px solid {ThemeColors.BORDER_DEFAULT}; "
        f"background-color: {ThemeColors.BACKGROUND_PANEL};"
    )


def swatch_stylesheet(hex_color: str) -> str:
    """Generate a color swatch button stylesheet with contrasting text.

    Args:
        hex_color: Swatch background color ('#RRGGBB')

    Returns:
        CSS stylesheet string
    """
    color = QColor(hex_color)
    text = (
        ThemeColors.SWATCH_TEXT_DARK
        if color.lightness() > 127
        else ThemeColors.SWATCH_TEXT_LIGHT
    )
    return f"background-color: {hex_color}; color: {text};"
