from .pipeline import (
    DEFAULT_TEMPERATURE,
    ERROR_PREFIX,
    CompletionPipeline,
    TurnOutcome,
    build_request_messages,
)

__all__ = [
    "DEFAULT_TEMPERATURE",
    "ERROR_PREFIX",
    "CompletionPipeline",
    "TurnOutcome",
    "build_request_messages",
]
