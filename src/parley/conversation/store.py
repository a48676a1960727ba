"""In-memory conversation store.

This module hides how the session state is held:
- Ordered, append-only message history
- The single in-flight request flag
- The pending input buffer shown by the presentation layer
- Change notification for listeners (auto-scroll, status indicators)
"""

import logging
from collections.abc import Callable

from .errors import AlreadyInFlightError, InvalidInputError
from .models import Message, Role

logger = logging.getLogger(__name__)

StoreListener = Callable[["ConversationStore"], None]


class ConversationStore:
    """Owns the message history and the awaiting-response flag of one session.

    The store is single-threaded: one writer (the completion pipeline) and
    readers on the same event loop. Listeners are called synchronously after
    every mutation.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._awaiting_response = False
        self._draft = ""
        self._generation = 0
        self._listeners: list[StoreListener] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the history in turn order."""
        return tuple(self._messages)

    @property
    def awaiting_response(self) -> bool:
        return self._awaiting_response

    @property
    def draft(self) -> str:
        """Pending input that has not been submitted yet."""
        return self._draft

    @property
    def generation(self) -> int:
        """Incremented on every reset; identifies the current conversation."""
        return self._generation

    def __len__(self) -> int:
        return len(self._messages)

    def add_listener(self, listener: StoreListener) -> None:
        """Register a callback invoked after each change."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def append_user(self, text: str) -> Message:
        """Append a user turn.

        Args:
            text: Submitted text, stored verbatim

        Returns:
            The appended message

        Raises:
            InvalidInputError: If text is empty or whitespace-only
        """
        if not text or not text.strip():
            raise InvalidInputError("Message text is empty")
        return self._append(Message(role=Role.USER, content=text))

    def append_assistant(self, text: str) -> Message:
        """Append an assistant turn. Empty content is allowed."""
        return self._append(Message(role=Role.ASSISTANT, content=text))

    def begin_request(self) -> None:
        """Mark a request as in flight.

        Raises:
            AlreadyInFlightError: If a request is already awaiting settlement
        """
        if self._awaiting_response:
            raise AlreadyInFlightError("A request is already in flight")
        self._awaiting_response = True
        self._notify()

    def end_request(self) -> None:
        """Mark the in-flight request as settled. No-op when idle."""
        if not self._awaiting_response:
            return
        self._awaiting_response = False
        self._notify()

    def set_draft(self, text: str) -> None:
        if text == self._draft:
            return
        self._draft = text
        self._notify()

    def clear_draft(self) -> None:
        self.set_draft("")

    def reset(self) -> None:
        """Start a new conversation: empty history, idle, empty draft."""
        self._messages = []
        self._awaiting_response = False
        self._draft = ""
        self._generation += 1
        logger.debug("Conversation reset (generation %d)", self._generation)
        self._notify()

    def _append(self, message: Message) -> Message:
        self._messages.append(message)
        self._notify()
        return message

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
