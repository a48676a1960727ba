"""Pytest configuration and shared fixtures."""
import asyncio
import json
import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from parley.conversation import ConversationStore
from parley.llm import ChatMessage, LLMProvider, LLMResponse, OpenAIProvider
from parley.pipeline import CompletionPipeline
from parley.settings import ClientSettings


class FakeProvider(LLMProvider):
    """In-process provider that records calls instead of using the network.

    Args:
        reply: Content returned on success
        error: Exception raised instead of replying
        gate: If set, each call waits on it before settling
    """

    def __init__(
        self,
        reply: str = "Hello",
        error: BaseException | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.reply = reply
        self.error = error
        self.gate = gate
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> LLMResponse:
        self.calls.append({"messages": list(messages), "model": model, "temperature": temperature})
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model=model or self.model)

    async def close(self) -> None:
        self.closed = True


def make_openai_provider(
    handler: Callable[[httpx.Request], httpx.Response],
    **kwargs: Any
) -> OpenAIProvider:
    """OpenAIProvider whose HTTP traffic is answered by ``handler``."""
    return OpenAIProvider(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs
    )


def completion_body(content: str = "Hello") -> dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
        "usage": {
            "prompt_tokens": 3,
            "completion_tokens": 1,
            "total_tokens": 4,
            "prompt_tokens_details": {"cached_tokens": 0, "audio_tokens": 0},
            "completion_tokens_details": {
                "reasoning_tokens": 0,
                "audio_tokens": 0,
                "accepted_prediction_tokens": 0,
                "rejected_prediction_tokens": 0,
            },
        },
        "system_fingerprint": "fp_test",
    }


def request_json(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content)


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "deepseek": os.getenv("DEEPSEEK_API_KEY")
    }


@pytest.fixture
def settings():
    """Settings with a credential present."""
    return ClientSettings(api_key="test-key")


@pytest.fixture
def store():
    return ConversationStore()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def pipeline(store, settings, provider):
    return CompletionPipeline(store, settings, provider=provider)
