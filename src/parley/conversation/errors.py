"""Errors raised by the conversation store and submission checks."""


class ConversationError(Exception):
    """Base class for conversation errors that are recovered locally."""


class InvalidInputError(ConversationError):
    """Raised when a submission is empty or whitespace-only."""


class MissingCredentialError(ConversationError):
    """Raised when no API credential is configured."""


class AlreadyInFlightError(ConversationError):
    """Raised when a request is started while another one is awaiting settlement."""
