"""Main CLI application using Typer."""
import asyncio

import typer
import uvicorn
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..client import ChatSession
from ..config import Settings
from ..errors import ConfigurationError
from ..logger import setup_logging

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="chatrelay",
    help="Minimal chat relay between a terminal client and an LLM completion API",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

DEFAULT_SERVER_URL = "http://127.0.0.1:3000"


@app.command()
def serve(
    host: str | None = typer.Option(
        None,
        "--host",
        help="Bind address (default: HOST or 127.0.0.1)"
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Bind port (default: PORT or 3000)"
    ),
    store_url: str | None = typer.Option(
        None,
        "--store",
        "-s",
        help="Conversation store: memory://, sqlite:///path or mongodb://..."
    ),
):
    """Run the HTTP relay server."""
    from ..api import create_app

    overrides = {
        key: value
        for key, value in (("host", host), ("port", port), ("store_url", store_url))
        if value is not None
    }
    try:
        settings = Settings(**overrides)
        setup_logging(json_logs=settings.json_logs, log_level=settings.log_level)
        server_app = create_app(settings)
    except (ConfigurationError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(
        f"[dim]Serving on http://{settings.host}:{settings.port} "
        f"(store: {settings.store_url})[/dim]"
    )
    uvicorn.run(server_app, host=settings.host, port=settings.port, log_config=None)


@app.command()
def chat(
    url: str = typer.Option(
        DEFAULT_SERVER_URL,
        "--url",
        "-u",
        envvar="CHATRELAY_URL",
        help="Root URL of the chatrelay server"
    ),
    conversation: str | None = typer.Option(
        None,
        "--conversation",
        "-c",
        help="Resume an existing conversation by id"
    ),
    osc52: bool = typer.Option(
        True,
        "--osc52/--no-osc52",
        help="Fall back to the terminal OSC 52 clipboard escape; disable if your terminal ignores it"
    ),
):
    """Launch the interactive chat TUI."""
    async def _chat():
        from ..ui import run_textual_tui

        await run_textual_tui(url, conversation_id=conversation, osc52=osc52)

    asyncio.run(_chat())


@app.command()
def history(
    conversation_id: str = typer.Argument(..., help="Conversation id"),
    url: str = typer.Option(
        DEFAULT_SERVER_URL,
        "--url",
        "-u",
        envvar="CHATRELAY_URL",
        help="Root URL of the chatrelay server"
    ),
    passphrase: str | None = typer.Option(
        None,
        "--passphrase",
        envvar="ACCESS_PASSPHRASE",
        help="Server passphrase, if the server is gated"
    ),
):
    """Print the stored messages of a conversation."""
    async def _history():
        async with ChatSession(url) as session:
            if passphrase and not await session.unlock(passphrase):
                console.print("[red]Error: wrong passphrase[/red]")
                raise typer.Exit(code=1)

            if not await session.start(conversation_id):
                if session.requires_passphrase:
                    console.print("[red]Error: server requires a passphrase (--passphrase)[/red]")
                else:
                    console.print(f"[red]Error: could not load conversation {conversation_id}[/red]")
                raise typer.Exit(code=1)

            messages = session.messages
            if not messages:
                console.print("[yellow]No messages yet[/yellow]")
                return

            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("#", style="dim", width=4)
            table.add_column("Role", style="yellow", width=10)
            table.add_column("Content")

            for i, message in enumerate(messages, 1):
                table.add_row(str(i), message.role_label, Text(message.content))

            console.print(table)

    asyncio.run(_history())


if __name__ == "__main__":
    app()
