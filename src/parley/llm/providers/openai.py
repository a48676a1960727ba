import logging
from typing import Any

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from ..base import LLMProvider
from ..errors import RemoteCallError
from ..models import ChatMessage, CompletionBody, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completion provider.

    Hidden design decisions:
    - OpenAI API client initialization (bearer auth, JSON body)
    - Message format conversion
    - Response body validation
    - Error normalization into RemoteCallError

    Requests are sent exactly once and wait until they settle: the client
    is created with ``max_retries=0`` and ``timeout=None`` unless the caller
    overrides them.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            **client_kwargs: Additional kwargs for AsyncOpenAI client
                (e.g. ``http_client``, ``timeout``)
        """
        client_kwargs.setdefault("max_retries", 0)
        client_kwargs.setdefault("timeout", None)
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion.

        Args:
            messages: Conversation history, oldest first
            model: Model to use (overrides default)
            temperature: Sampling temperature
            **kwargs: Additional request parameters

        Returns:
            LLMResponse with the first choice's message content

        Raises:
            RemoteCallError: On non-2xx status, transport failure or malformed body
        """
        model_to_use = model or self._model
        request_params: dict[str, Any] = {
            "model": model_to_use,
            "messages": [{"role": msg.role, "content": msg.content} for msg in messages],
            "temperature": temperature,
            **kwargs
        }

        try:
            raw = await self._client.chat.completions.with_raw_response.create(**request_params)
        except openai.APIStatusError as e:
            logger.warning("Completion API error %s: %s", e.status_code, e.response.text)
            raise RemoteCallError(f"HTTP {e.status_code}", status_code=e.status_code) from e
        except openai.APIConnectionError as e:
            logger.warning("Completion API unreachable: %s", e)
            raise RemoteCallError(str(e)) from e

        try:
            body = CompletionBody.model_validate_json(raw.http_response.content)
        except ValidationError as e:
            logger.warning("Malformed completion body: %s", e)
            raise RemoteCallError(f"Malformed response: {_describe(e)}") from e

        usage = None
        if body.usage is not None:
            usage = {
                "prompt_tokens": body.usage.prompt_tokens,
                "completion_tokens": body.usage.completion_tokens,
                "total_tokens": body.usage.total_tokens
            }

        return LLMResponse(
            content=body.content,
            model=body.model or model_to_use,
            usage=usage
        )

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()


def _describe(error: ValidationError) -> str:
    """First validation problem as 'loc: msg'."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]
