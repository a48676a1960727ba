from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """Represents a chat message in the wire format of the completion service."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user' or 'assistant'")
    content: str = Field(description="Content of the message")


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


class _CompletionMessage(BaseModel):
    content: str


class _CompletionChoice(BaseModel):
    message: _CompletionMessage


class _CompletionUsage(BaseModel):
    # Nested *_tokens_details objects are ignored
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CompletionBody(BaseModel):
    """Expected shape of a successful chat-completion response body.

    Only the fields the client reads are declared; anything else is ignored.
    """

    model: str | None = None
    choices: list[_CompletionChoice] = Field(min_length=1)
    usage: _CompletionUsage | None = None

    @property
    def content(self) -> str:
        return self.choices[0].message.content
