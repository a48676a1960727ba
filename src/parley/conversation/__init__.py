"""Conversation state for a single chat session.

Holds the ordered message history and the in-flight flag; nothing is persisted.
"""

from .errors import (
    AlreadyInFlightError,
    ConversationError,
    InvalidInputError,
    MissingCredentialError,
)
from .models import Message, Role
from .store import ConversationStore, StoreListener

__all__ = [
    "AlreadyInFlightError",
    "ConversationError",
    "ConversationStore",
    "InvalidInputError",
    "Message",
    "MissingCredentialError",
    "Role",
    "StoreListener",
]
