"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from ..pipeline import CompletionPipeline, TurnOutcome
from .providers import LOG_LEVELS, configure_logging, get_pipeline

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="parley",
    help="Conversational client for chat-completion services",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    if value.lower() not in LOG_LEVELS:
        raise typer.BadParameter(f"Expected one of: {', '.join(LOG_LEVELS)}")
    return value.lower()


def _open_pipeline() -> CompletionPipeline:
    """Build the session pipeline, exiting on invalid configuration."""
    try:
        return get_pipeline(console)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def ask(
    text: str = typer.Argument(..., help="Message to send"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        callback=_validate_log_level,
        help="Log to the console with level: debug, info, warning, or error"
    ),
):
    """Send a single message and print the reply."""
    configure_logging(log_level, console)
    pipeline = _open_pipeline()

    async def _ask() -> tuple[TurnOutcome, str | None]:
        try:
            with console.status("[dim]Thinking...[/dim]"):
                outcome = await pipeline.submit(text)
            messages = pipeline.store.messages
            reply = messages[-1].content if outcome is not TurnOutcome.REJECTED else None
            return outcome, reply
        finally:
            await pipeline.aclose()

    outcome, reply = asyncio.run(_ask())

    if outcome is TurnOutcome.REJECTED:
        console.print("[red]Error: message was not sent (empty text or missing API key)[/red]")
        raise typer.Exit(code=1)

    if outcome is TurnOutcome.FAILED:
        console.print(f"[red]{escape(reply or '')}[/red]")
        raise typer.Exit(code=1)

    console.print(Markdown(reply or ""))


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        callback=_validate_log_level,
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    pipeline = _open_pipeline()

    async def _tui():
        from ..ui import run_textual_tui

        await run_textual_tui(pipeline=pipeline, log_level=log_level)
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
