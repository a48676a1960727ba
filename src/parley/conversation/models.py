"""Data models for the conversation history.

Messages are immutable once created; the store only ever appends them.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single turn in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Who produced the turn")
    content: str = Field(description="Text of the turn (may be an error description for assistant turns)")
    created_at: datetime = Field(default_factory=datetime.now)
