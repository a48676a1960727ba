from .base import LLMProvider
from .errors import RemoteCallError
from .factory import create_llm_provider
from .models import ChatMessage, LLMResponse
from .providers import DeepSeekProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "RemoteCallError",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "DeepSeekProvider",
    "OpenAIProvider",
]
