"""Completion request pipeline.

Turns one user submission into one request/response cycle against the
completion service and writes the outcome back into the conversation store.

Hidden design decisions:
- Submission precondition order
- Mapping of internal roles to the wire roles
- How every failure becomes an assistant "Error: ..." turn
- The guarantee that the in-flight flag is always cleared
"""

import logging
from collections.abc import Sequence
from enum import Enum

from ..conversation import (
    AlreadyInFlightError,
    ConversationError,
    ConversationStore,
    InvalidInputError,
    Message,
    MissingCredentialError,
    Role,
)
from ..llm import ChatMessage, LLMProvider, create_llm_provider
from ..settings import ClientSettings

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
ERROR_PREFIX = "Error: "

_WIRE_ROLES = {
    Role.USER: "user",
    Role.ASSISTANT: "assistant",
}


class TurnOutcome(str, Enum):
    """How a single submission ended."""

    REJECTED = "rejected"  # precondition failed, nothing changed
    FULFILLED = "fulfilled"
    FAILED = "failed"


def build_request_messages(history: Sequence[Message]) -> list[ChatMessage]:
    """Map the full conversation history to the wire message list.

    The whole history is resent on every turn, so request size grows with
    the conversation.
    """
    return [
        ChatMessage(role=_WIRE_ROLES[message.role], content=message.content)
        for message in history
    ]


class CompletionPipeline:
    """Runs one request/response cycle per submission.

    The pipeline is the only writer of the store's history. It suspends on
    exactly one network call per accepted submission and never retries.

    Example:
        store = ConversationStore()
        pipeline = CompletionPipeline(store, ClientSettings.from_env())
        outcome = await pipeline.submit("Hi")
    """

    def __init__(
        self,
        store: ConversationStore,
        settings: ClientSettings,
        provider: LLMProvider | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self._store = store
        self._settings = settings
        self._provider = provider
        self._owns_provider = provider is None
        self._temperature = temperature

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def model(self) -> str:
        return self._settings.model

    def check_submission(self, text: str) -> None:
        """Validate a submission without changing any state.

        Checks run in order and stop at the first failure.

        Raises:
            InvalidInputError: Text is empty after trimming
            MissingCredentialError: No API key is configured
            AlreadyInFlightError: A request is already awaiting settlement
        """
        if not text or not text.strip():
            raise InvalidInputError("Message text is empty")
        if not self._settings.has_credential:
            raise MissingCredentialError(f"{self._settings.api_key_env} is not set")
        if self._store.awaiting_response:
            raise AlreadyInFlightError("A request is already in flight")

    async def submit(self, text: str) -> TurnOutcome:
        """Submit user text and wait for the reply.

        Rejected submissions are silent no-ops. An accepted submission always
        appends exactly one assistant turn (the reply or an error description)
        and always leaves the store idle when it settles.

        Args:
            text: Raw user input

        Returns:
            The outcome of this turn
        """
        try:
            self.check_submission(text)
        except ConversationError as e:
            logger.debug("Submission ignored: %s", e)
            return TurnOutcome.REJECTED

        store = self._store
        generation = store.generation
        store.append_user(text)
        store.begin_request()
        store.clear_draft()

        try:
            reply, outcome = await self._complete(build_request_messages(store.messages))
            if store.generation == generation:
                store.append_assistant(reply)
            else:
                # A reset happened while suspended; the reply belongs to a discarded conversation.
                logger.info("Conversation was reset while awaiting a reply; reply dropped")
            return outcome
        finally:
            if store.generation == generation:
                store.end_request()

    def reset(self) -> None:
        """Start a new conversation."""
        self._store.reset()

    async def aclose(self) -> None:
        """Close the provider if this pipeline created it."""
        if self._provider is not None and self._owns_provider:
            await self._provider.close()
            self._provider = None

    async def _complete(self, request_messages: list[ChatMessage]) -> tuple[str, TurnOutcome]:
        """Issue the single network call and turn its settlement into a reply."""
        logger.info("Sending %d message(s) to %s", len(request_messages), self.model)
        try:
            provider = self._get_provider()
            response = await provider.chat_completion(
                request_messages,
                model=self.model,
                temperature=self._temperature,
            )
        except Exception as e:
            logger.error("Completion failed: %s", e)
            return f"{ERROR_PREFIX}{str(e) or type(e).__name__}", TurnOutcome.FAILED
        return response.content, TurnOutcome.FULFILLED

    def _get_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = create_llm_provider(
                self._settings.provider,
                api_key=self._settings.api_key,
                model=self._settings.model,
                base_url=self._settings.base_url,
            )
        return self._provider
