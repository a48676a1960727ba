"""Session factory functions for CLI.

Centralizes creation of settings, store and pipeline from environment variables.
Hides configuration details from command implementations.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from ..conversation import ConversationStore
from ..pipeline import CompletionPipeline
from ..settings import ClientSettings

# Default console for output
_console = Console()

LOG_LEVELS = ("debug", "info", "warning", "error")


def get_settings(console: Console | None = None) -> ClientSettings:
    """Read client settings from the environment.

    Prints a warning when no credential is configured; submissions are then
    ignored rather than failing.
    """
    con = console or _console
    settings = ClientSettings.from_env()
    if not settings.has_credential:
        con.print(f"[yellow]Warning: {settings.api_key_env} not set, messages will not be sent[/yellow]")
    return settings


def get_pipeline(console: Console | None = None) -> CompletionPipeline:
    """Create a fresh session: an empty store and a pipeline bound to it."""
    return CompletionPipeline(ConversationStore(), get_settings(console))


def configure_logging(level: str | None, console: Console | None = None) -> None:
    """Send library logs to the console through rich.

    Args:
        level: One of debug/info/warning/error, None to keep logging quiet
        console: Optional Rich console for output
    """
    if level is None:
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or _console, rich_tracebacks=True)],
    )
