"""Custom Textual widgets for the chat TUI.

Hides widget implementation details:
- Input history and draft mirroring
- Chat message rendering and auto-scroll
- Prompt suggestion buttons
- Log rendering and level filtering
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..conversation import Message, Role
from ..pipeline import ERROR_PREFIX
from .config import (
    INPUT_PLACEHOLDER,
    INPUT_SOFT_LIMIT,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    PROMPT_SUGGESTIONS,
)


class ClickableMessage(Vertical):
    """A chat message container that copies its content when clicked."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self._content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    The bar does not clear itself on submit; the owner clears it once the
    submission has been accepted.
    """

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False, placeholder=INPUT_PLACEHOLDER)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn").with_tooltip("Submit message (Ctrl+J)")

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        self._update_counter(text_area.text)

    @property
    def text(self) -> str:
        return self.query_one("#chat-input", TextArea).text

    def set_text(self, value: str) -> None:
        """Replace the input text if it differs from the current one."""
        text_area = self.query_one("#chat-input", TextArea)
        if text_area.text != value:
            text_area.text = value
            text_area.move_cursor(text_area.document.end)
        self._update_counter(value)

    def set_busy(self, busy: bool) -> None:
        """Lock the input while a request is in flight."""
        self.query_one("#chat-input", TextArea).read_only = busy
        self.query_one("#send-btn", Button).disabled = busy

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._update_counter(event.text_area.text)

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _update_counter(self, value: str) -> None:
        self.border_subtitle = f"{len(value)}/{INPUT_SOFT_LIMIT}"

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == text_area.document.end

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:  # Up
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:  # Down
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        value = self.query_one("#chat-input", TextArea).text
        if value.strip():
            if not self._history or self._history[-1] != value:
                self._history.append(value)
            self._history_index = -1
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class SuggestionBar(Horizontal):
    """Row of prompt suggestions shown while the conversation is empty."""

    class Selected(TextualMessage):
        """Posted when a suggestion is chosen; carries the full prompt text."""

        def __init__(self, prompt: str) -> None:
            super().__init__()
            self.prompt = prompt

    def compose(self):
        for index, (label, _prompt) in enumerate(PROMPT_SUGGESTIONS):
            yield Button(label, id=f"suggestion-{index}", classes="suggestion")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("suggestion-"):
            event.stop()
            _label, prompt = PROMPT_SUGGESTIONS[int(button_id.removeprefix("suggestion-"))]
            self.post_message(self.Selected(prompt))


class ChatHistoryWidget(VerticalScroll):
    """Scrollable view of the conversation, kept in step with the store."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "New conversation"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._messages: list[Message] = []
        self._generation: int | None = None

    @property
    def rendered_count(self) -> int:
        return len(self._messages)

    def sync(self, messages: Sequence[Message], generation: int) -> None:
        """Render messages not yet shown and scroll to the newest one.

        A new generation means the conversation was reset, so everything
        rendered so far is dropped first.
        """
        if generation != self._generation:
            self._generation = generation
            self._messages = []
            self.remove_children()

        new_messages = list(messages[len(self._messages):])
        for message in new_messages:
            self._messages.append(message)
            self._render_message(message)

        if self._messages:
            self.border_subtitle = f"{len(self._messages)} messages"
        else:
            self.border_subtitle = "New conversation"
        if new_messages:
            self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for msg in reversed(self._messages):
            if msg.role is Role.ASSISTANT:
                return msg.content
        return None

    def _render_message(self, msg: Message) -> None:
        """Render a single message to the display."""
        if msg.role is Role.USER:
            header_text = f"You [{msg.created_at:%H:%M:%S}] >"
            classes = "chat-message user-message"
        else:
            header_text = f"< AI [{msg.created_at:%H:%M:%S}]"
            classes = "chat-message assistant-message"
            if msg.content.startswith(ERROR_PREFIX):
                classes += " error-message"

        container = ClickableMessage(content=msg.content, classes=classes)
        container.compose_add_child(Static(header_text, classes="message-header"))
        if msg.role is Role.ASSISTANT:
            container.compose_add_child(Markdown(msg.content, classes="message-content"))
        else:
            # User text is shown verbatim, without markup
            container.compose_add_child(Static(msg.content, classes="message-content", markup=False))
        self.mount(container)


class LogPanel(RichLog):
    """Log panel showing records from the stdlib logging tree.

    Hidden by default, shown with --log-level flag or toggled with Ctrl+L.
    """

    BORDER_TITLE = "Log"

    _LEVEL_COLORS = {
        logging.DEBUG: "dim white",
        logging.INFO: "cyan",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "bold red",
    }

    def __init__(self, *args, log_level: int = logging.INFO, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def on_mount(self) -> None:
        self.display = False

    def write_record(self, record: logging.LogRecord) -> None:
        """Add a log record if it meets the current level threshold."""
        if record.levelno < self._log_level:
            return

        message = record.getMessage()
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."
        timestamp = datetime.fromtimestamp(record.created).strftime(LOG_TIMESTAMP_FORMAT)
        color = self._LEVEL_COLORS.get(record.levelno, "white")
        component = record.name.rsplit(".", 1)[-1]

        line = Text.assemble(
            (f"{timestamp} ", "dim"),
            (f"{record.levelname:<7}", color),
            (f"[{component}] ", "magenta"),
            message,
        )
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self._update_subtitle()

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {logging.getLevelName(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"
