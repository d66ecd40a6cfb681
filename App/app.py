"""PixelArt Studio - Main entry point."""

import sys

from PyQt6.QtWidgets import QApplication

from ui.main_window import PixelArtWindow


def main():
    """Launch the PixelArt Studio application."""
    app = QApplication(sys.argv)

    app.setApplicationDisplayName("PixelArt Studio")
    app.setApplicationName("PixelArtStudio")

    window = PixelArtWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
