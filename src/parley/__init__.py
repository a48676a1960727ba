"""
Parley: a conversational client for chat-completion services.

The package is split so that each module hides one design decision:
the conversation store owns history and the in-flight flag, the pipeline
owns the request/response cycle, and the providers own the wire format.
"""

__version__ = "0.1.0"

from .conversation import ConversationStore, Message, Role
from .pipeline import CompletionPipeline, TurnOutcome
from .settings import ClientSettings

__all__ = [
    "ClientSettings",
    "CompletionPipeline",
    "ConversationStore",
    "Message",
    "Role",
    "TurnOutcome",
]
