from typing import Any

from .openai import OpenAIProvider

DEEPSEEK_BASE_URL = "https://api.deepseek.com"


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek provider using its OpenAI-compatible chat-completion API."""

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        base_url: str | None = DEEPSEEK_BASE_URL,
        **client_kwargs: Any
    ):
        super().__init__(
            api_key=api_key,
            model=model,
            base_url=base_url or DEEPSEEK_BASE_URL,
            **client_kwargs
        )
