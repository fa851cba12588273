"""CLI commands for intentbus."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from intentbus import __logo__, __version__

app = typer.Typer(
    name="intentbus",
    help=f"{__logo__} intentbus - intent queue, dispatcher and recognizer",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(level: str, enabled: bool = True) -> None:
    logger.remove()
    if enabled:
        logger.add(
            sys.stderr,
            level=level.upper(),
            format="<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> {message}",
        )
        logger.enable("intentbus")
    else:
        logger.disable("intentbus")


def _settings(intents: Path | None, responses: Path | None):
    from intentbus.settings import get_settings

    settings = get_settings()
    updates = {}
    if intents is not None:
        updates["intent_file"] = intents
    if responses is not None:
        updates["response_file"] = responses
    return settings.model_copy(update=updates) if updates else settings


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} intentbus v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
) -> None:
    """intentbus - route intents to handlers."""


# ============================================================================
# Server
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address"),
    port: int = typer.Option(None, "--port", "-p", help="HTTP port"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Start the HTTP ingress and the dispatch loop."""
    import uvicorn

    from intentbus.api.app import create_app

    settings = _settings(None, None)
    _configure_logging("DEBUG" if verbose or settings.debug else settings.log_level)
    if not settings.api_key:
        console.print("[yellow]INTENTBUS_API_KEY is not set; /intents will reject every request.[/yellow]")

    bind_host = host or settings.host
    bind_port = port or settings.port
    console.print(f"{__logo__} Starting intentbus on {bind_host}:{bind_port}...")
    uvicorn.run(create_app(settings), host=bind_host, port=bind_port, log_level="info")


# ============================================================================
# Local commands
# ============================================================================


@app.command()
def recognize(
    text: str = typer.Argument(..., help="Utterance to match"),
    intents: Path = typer.Option(None, "--intents", "-i", help="Intent definition file"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show runtime logs"),
) -> None:
    """Match TEXT against the loaded intents."""
    from intentbus.nl.aliases import AliasResolver
    from intentbus.nl.engine import RecognizerEngine
    from intentbus.nl.recognizer import TextRecognizer

    settings = _settings(intents, None)
    _configure_logging(settings.log_level, enabled=logs)

    engine = RecognizerEngine(
        recompute_tokens=settings.recompute_tokens, default_path=settings.intent_path
    )
    engine.load()
    rec = TextRecognizer(engine, AliasResolver(extra=settings.extra_aliases)).recognize(text)

    table = Table(title=f"{__logo__} Recognition")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("intent", rec.intent)
    table.add_row("score", f"{rec.score:.3f}")
    table.add_row("domain", rec.domain)
    table.add_row("slots", json.dumps(rec.slots) if rec.slots else "-")
    console.print(table)


@app.command()
def send(
    intent: str = typer.Argument(..., help="Intent name, e.g. nlp.route"),
    payload: str = typer.Option("{}", "--payload", "-d", help="JSON payload"),
    text: str = typer.Option(None, "--text", "-t", help="Shortcut for --payload '{\"text\": ...}'"),
    priority: int = typer.Option(None, "--priority", help="0 (highest) .. 9"),
    intents: Path = typer.Option(None, "--intents", "-i", help="Intent definition file"),
    responses: Path = typer.Option(None, "--responses", "-r", help="Response file"),
) -> None:
    """Enqueue one intent locally and run the dispatcher until the queue drains."""
    from intentbus.errors import IntentBusError
    from intentbus.runtime.assembly import build_runtime

    try:
        body = json.loads(payload)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid --payload JSON: {exc}[/red]")
        raise typer.Exit(2)
    if text is not None:
        if not isinstance(body, dict):
            console.print("[red]--text needs an object payload[/red]")
            raise typer.Exit(2)
        body["text"] = text

    settings = _settings(intents, responses)
    _configure_logging(settings.log_level)

    async def run() -> int:
        rt = build_runtime(settings)
        env = rt.ingress.submit(intent, payload=body, priority=priority)
        console.print(f"Accepted id={env.id} corr={env.correlation_id}")
        return await rt.dispatcher.drain()

    try:
        handled = asyncio.run(run())
    except IntentBusError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    console.print(f"Handled {handled} envelope(s)")


@app.command("intents")
def list_intents(
    intents: Path = typer.Option(None, "--intents", "-i", help="Intent definition file"),
) -> None:
    """List registered handler intents and loaded intent definitions."""
    from intentbus.runtime.assembly import build_runtime

    settings = _settings(intents, None)
    _configure_logging(settings.log_level, enabled=False)
    rt = build_runtime(settings)
    loaded = rt.recognizer.engine.intents

    table = Table(title=f"{__logo__} Handlers")
    table.add_column("Intent", style="cyan")
    table.add_column("Examples", justify="right")
    table.add_column("Tags")
    table.add_column("Deprecated")
    for name in sorted(rt.registry.names(), key=str.casefold):
        definition = loaded.get(name)
        table.add_row(
            name,
            str(len(definition.examples)) if definition else "-",
            ", ".join(definition.tags) if definition else "",
            "yes" if definition and definition.deprecated else "",
        )
    console.print(table)
    console.print(
        f"{len(loaded)} intent definitions from {loaded.source or '-'} "
        f"(loaded {loaded.loaded_at:%Y-%m-%d %H:%M:%S} UTC)"
    )


if __name__ == "__main__":
    app()
