"""Console panel showing driver status and error messages."""

from datetime import datetime

from PyQt6.QtWidgets import QGroupBox, QPushButton, QTextEdit, QVBoxLayout

from ui.styles import FONTS, SIZES, StatusColors


class ConsolePanel(QGroupBox):
    """Timestamped log of status messages, with errors highlighted."""

    def __init__(self, parent=None):
        super().__init__(None, parent)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout()

        self.log_view = QTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setMinimumHeight(SIZES.CONSOLE_MIN_HEIGHT)
        self.log_view.setFont(FONTS.CONSOLE)
        layout.addWidget(self.log_view)

        clear_btn = QPushButton("Clear Log")
        clear_btn.clicked.connect(self.clear)
        layout.addWidget(clear_btn)

        self.setLayout(layout)

    def log_status(self, message: str):
        self._append(message)

    def log_error(self, message: str):
        self._append(f"<span style='color: {StatusColors.ERROR};'>✗ {message}</span>")

    def _append(self, html: str):
        stamp = datetime.now().strftime("%H:%M:%S")
        self.log_view.append(f"[{stamp}] {html}")
        scrollbar = self.log_view.verticalScrollBar()
        if scrollbar:
            scrollbar.setValue(scrollbar.maximum())

    def clear(self):
        self.log_view.clear()
