"""Main Textual TUI application.

Presents a conversation held by a ConversationStore and forwards
submissions to the CompletionPipeline. The app only reads the store and
reacts to its change notifications; all history writes go through the
pipeline.
"""

import asyncio
import logging

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static, TextArea

from ..conversation import ConversationStore
from ..pipeline import CompletionPipeline, TurnOutcome
from .config import GREETING_HINT, GREETING_SUBTITLE, GREETING_TITLE, THINKING_TEXT
from .log_handler import PanelLogHandler
from .styles import APP_CSS
from .themes import PARLEY_DUSK
from .widgets import ChatHistoryWidget, ChatInputBar, LogPanel, SuggestionBar

logger = logging.getLogger(__name__)


class ChatApp(App):
    """Textual TUI for a single chat session."""

    CSS = APP_CSS
    TITLE = "Parley"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+l", "toggle_log", "Log"),
    ]

    def __init__(self, pipeline: CompletionPipeline, log_level: str | None = None) -> None:
        super().__init__()
        self._pipeline = pipeline
        self._log_level = log_level
        self._log_handler: PanelLogHandler | None = None

    @property
    def store(self) -> ConversationStore:
        return self._pipeline.store

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="greeting"):
            yield Static(GREETING_TITLE, classes="greeting-title")
            yield Static(GREETING_SUBTITLE, classes="greeting-subtitle")
            yield Static(GREETING_HINT, classes="greeting-hint")
        yield SuggestionBar(id="suggestions")
        yield ChatHistoryWidget(id="chat-history")
        yield Static(THINKING_TEXT, id="thinking")
        yield LogPanel(id="log-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(PARLEY_DUSK)
        self.theme = "parley-dusk"

        if self._log_level is not None:
            log_panel = self.query_one("#log-panel", LogPanel)
            log_panel.log_level = _level_from_name(self._log_level)
            log_panel.show()
            self._attach_log_handler(log_panel)

        self.store.add_listener(self._on_store_changed)
        self._on_store_changed(self.store)

        settings = self._pipeline.settings
        if not settings.has_credential:
            self.notify(
                f"{settings.api_key_env} is not set; messages will not be sent",
                severity="warning",
                timeout=8,
            )
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        self.store.remove_listener(self._on_store_changed)
        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None

    def _attach_log_handler(self, panel: LogPanel) -> None:
        self._log_handler = PanelLogHandler(panel, self)
        root = logging.getLogger()
        root.addHandler(self._log_handler)
        if root.getEffectiveLevel() > panel.log_level:
            root.setLevel(panel.log_level)

    def _on_store_changed(self, store: ConversationStore) -> None:
        """Bring every view in line with the store."""
        messages = store.messages
        self.query_one("#chat-history", ChatHistoryWidget).sync(messages, store.generation)
        self.query_one("#suggestions", SuggestionBar).display = not messages
        self.query_one("#thinking", Static).display = store.awaiting_response

        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_text(store.draft)
        input_bar.set_busy(store.awaiting_response)

        status = "thinking..." if store.awaiting_response else f"{len(messages)} messages"
        self.sub_title = f"{self._pipeline.model} | {status}"

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == "chat-input":
            self.store.set_draft(event.text_area.text)

    def on_suggestion_bar_selected(self, event: SuggestionBar.Selected) -> None:
        self.store.set_draft(event.prompt)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        self._submit(event.value)

    @work(group="submissions")
    async def _submit(self, text: str) -> None:
        """Run one submission as a background async worker."""
        outcome = await self._pipeline.submit(text)
        if outcome is TurnOutcome.FAILED:
            self.notify("The request failed", severity="error", timeout=3)

    def action_new_chat(self) -> None:
        """Start a new conversation."""
        self._pipeline.reset()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()
        self.notify("New chat", timeout=2)

    def action_toggle_log(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#log-panel", LogPanel)
        is_visible = log_panel.toggle()
        if is_visible and self._log_handler is None:
            self._attach_log_handler(log_panel)
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(pipeline: CompletionPipeline, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        pipeline: Completion pipeline bound to the session's store
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ChatApp(pipeline=pipeline, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await pipeline.aclose()


def _level_from_name(name: str) -> int:
    """Convert a level name to its numeric value. Returns INFO if unknown."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
