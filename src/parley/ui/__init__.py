"""Terminal UI module for parley.

Provides a Textual-based TUI over a conversation session.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (input bar, suggestions, chat rendering, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- config.py: Copy text and limits
- log_handler.py: Routing of stdlib logging into the log panel
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatApp, run_textual_tui
from .widgets import ChatHistoryWidget, ChatInputBar, LogPanel, SuggestionBar

__all__ = [
    "ChatApp",
    "ChatHistoryWidget",
    "ChatInputBar",
    "LogPanel",
    "SuggestionBar",
    "run_textual_tui",
]
