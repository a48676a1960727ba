"""Bridge from the stdlib logging tree to the TUI log panel.

Records may be emitted from worker threads, so writes are marshalled onto
the app thread.
"""

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import LogPanel


class PanelLogHandler(logging.Handler):
    """Logging handler that writes records into a LogPanel."""

    def __init__(self, panel: "LogPanel", app: "App", level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._panel = panel
        self._app = app

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if self._app._thread_id != threading.get_ident():
                self._app.call_from_thread(self._panel.write_record, record)
            else:
                self._panel.write_record(record)
        except Exception:
            self.handleError(record)
