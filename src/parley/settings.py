"""Client configuration.

Hides where the credential and model choice come from. Values are read from
the process environment; the CLI loads a ``.env`` file into it first.
"""

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .llm.providers.openai import DEFAULT_OPENAI_MODEL

ProviderName = Literal["openai", "deepseek"]

DEFAULT_PROVIDER: ProviderName = "openai"

_PROVIDER_ENV = {
    "openai": ("OPENAI_API_KEY", "OPENAI_CHAT_MODEL", DEFAULT_OPENAI_MODEL),
    "deepseek": ("DEEPSEEK_API_KEY", "DEEPSEEK_MODEL", "deepseek-chat"),
}


class ClientSettings(BaseModel):
    """Settings for one chat session."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderName = Field(default=DEFAULT_PROVIDER, description="Provider type: 'openai' or 'deepseek'")
    api_key: str | None = Field(default=None, description="Bearer credential for the completion service")
    model: str = Field(default=DEFAULT_OPENAI_MODEL, description="Fixed model identifier sent with every request")
    base_url: str | None = Field(default=None, description="Override for the service base URL")

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def api_key_env(self) -> str:
        """Name of the environment variable holding the credential."""
        return _PROVIDER_ENV[self.provider][0]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientSettings":
        """Build settings from environment variables.

        Environment variables:
            LLM_PROVIDER: Provider type (openai, deepseek; default: openai)
            OPENAI_API_KEY: OpenAI API key (for openai provider)
            OPENAI_CHAT_MODEL: OpenAI model (default: gpt-4o-mini)
            OPENAI_BASE_URL: Custom endpoint for OpenAI-compatible services
            DEEPSEEK_API_KEY: DeepSeek API key (for deepseek provider)
            DEEPSEEK_MODEL: DeepSeek model (default: deepseek-chat)

        Raises:
            ValueError: If LLM_PROVIDER names an unsupported provider
        """
        env = os.environ if environ is None else environ
        provider = env.get("LLM_PROVIDER", DEFAULT_PROVIDER).strip().lower() or DEFAULT_PROVIDER
        if provider not in _PROVIDER_ENV:
            raise ValueError(
                f"Unsupported provider: {provider}. "
                f"Supported providers: {', '.join(_PROVIDER_ENV)}"
            )
        key_var, model_var, default_model = _PROVIDER_ENV[provider]

        base_url = env.get("OPENAI_BASE_URL") if provider == "openai" else None
        return cls(
            provider=provider,
            api_key=env.get(key_var) or None,
            model=env.get(model_var) or default_model,
            base_url=base_url or None,
        )
