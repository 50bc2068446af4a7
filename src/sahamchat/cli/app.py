"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..chat import ChatSession, HistoryPersistence, Role
from .providers import configure_logging, configure_tui_logging, get_history_store, require_llm

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="sahamchat",
    help="Saham Cerdas AI learning assistant",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

BackendOption = typer.Option(
    None,
    "--backend",
    "-b",
    help="History backend: memory, file or sqlite (default: $SAHAMCHAT_HISTORY_BACKEND or file)"
)
PathOption = typer.Option(
    None,
    "--path",
    "-p",
    help="History location (directory for file, database for sqlite)"
)
LogLevelOption = typer.Option(
    "warning",
    "--log-level",
    "-l",
    help="Log level: debug, info, warning, error"
)


@app.command(name="tui")
def tui_command(
    backend: str | None = BackendOption,
    path: Path | None = PathOption,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Send log records of this level to the Textual devtools console"
    ),
    closed: bool = typer.Option(
        False,
        "--closed",
        help="Start with the chat panel minimized"
    ),
):
    """Open the assistant widget in the terminal."""
    if log_level:
        configure_tui_logging(log_level)

    async def _tui():
        from ..ui import run_textual_tui

        store = get_history_store(backend, path)
        llm = require_llm(console)
        try:
            await store.connect()
            await run_textual_tui(llm, store, start_open=not closed)
        finally:
            await store.disconnect()
            await llm.close()

    try:
        asyncio.run(_tui())
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def ask(
    text: str = typer.Argument(..., help="Question for the assistant"),
    backend: str | None = BackendOption,
    path: Path | None = PathOption,
    log_level: str = LogLevelOption,
):
    """Ask one question, continuing the stored conversation."""
    configure_logging(log_level)

    async def _ask() -> bool:
        store = get_history_store(backend, path)
        llm = require_llm(console)
        try:
            await store.connect()
            async with await ChatSession.open(llm, store) as session:
                with console.status("[dim]Mengetik...[/dim]"):
                    reply = await session.ask(text)

                if reply is None:
                    if session.error:
                        console.print(f"[red]{session.error}[/red]")
                    else:
                        console.print("[yellow]Nothing to send.[/yellow]")
                    return False

                console.print(Panel(reply.content, title="Asisten Cerdas", border_style="green"))
                return True
        finally:
            await store.disconnect()
            await llm.close()

    try:
        ok = asyncio.run(_ask())
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def history(
    backend: str | None = BackendOption,
    path: Path | None = PathOption,
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        help="Show only the most recent messages"
    ),
    log_level: str = LogLevelOption,
):
    """Show the stored conversation."""
    configure_logging(log_level)

    async def _history():
        store = get_history_store(backend, path)
        try:
            await store.connect()
            return await HistoryPersistence(store).load()
        finally:
            await store.disconnect()

    try:
        messages = asyncio.run(_history())
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if not messages:
        console.print("[dim]No chat history stored.[/dim]")
        return

    table = Table(title=f"Chat history ({len(messages)} messages)", show_lines=True)
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Role", style="cyan", no_wrap=True)
    table.add_column("Message")

    for message in messages[-limit:]:
        role_style = "green" if message.role == Role.USER else "magenta"
        table.add_row(
            message.timestamp.astimezone().strftime("%Y-%m-%d %H:%M"),
            f"[{role_style}]{message.role.value}[/{role_style}]",
            message.content,
        )

    console.print(table)


@app.command()
def clear(
    backend: str | None = BackendOption,
    path: Path | None = PathOption,
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
    log_level: str = LogLevelOption,
):
    """Erase the stored conversation."""
    configure_logging(log_level)

    if not yes:
        confirm = typer.confirm("Hapus seluruh riwayat chat?")
        if not confirm:
            console.print("[dim]Aborted.[/dim]")
            return

    async def _clear():
        store = get_history_store(backend, path)
        try:
            await store.connect()
            persistence = HistoryPersistence(store)
            persistence.erase()
            await persistence.flush()
        finally:
            await store.disconnect()

    try:
        asyncio.run(_clear())
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print("[green]Chat history cleared.[/green]")


@app.command()
def check(log_level: str = LogLevelOption):
    """Validate the configured provider's API key."""
    configure_logging(log_level)

    async def _check() -> bool:
        llm = require_llm(console)
        try:
            return await llm.validate_api_key()
        finally:
            await llm.close()

    if asyncio.run(_check()):
        console.print("[green]API key is valid.[/green]")
    else:
        console.print("[red]API key is missing or invalid.[/red]")
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
