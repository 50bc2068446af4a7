"""Provider factory functions for CLI.

Centralizes creation of the completion provider, the history store and the
logging setup from environment variables. Hides configuration details from
command implementations.
"""

import logging
import os
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from textual.logging import TextualHandler

from ..llm import LLMProvider, create_llm_provider
from ..memory import ChatHistoryStore, create_history_store

# Default console for output
_console = Console()

DEFAULT_DATA_DIR = Path.home() / ".sahamchat"


def get_data_dir() -> Path:
    """Directory holding persisted history.

    Environment variables:
        SAHAMCHAT_DATA_DIR: Data directory (default: ~/.sahamchat)
    """
    return Path(os.getenv("SAHAMCHAT_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser()


def configure_logging(level: str = "warning", console: Console | None = None) -> None:
    """Route library log records through Rich on stderr.

    Args:
        level: Log level name (debug, info, warning, error)
        console: Optional Rich console to log to
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def configure_tui_logging(level: str) -> None:
    """Route log records to the Textual devtools console.

    The TUI owns the terminal, so records must not be written to stderr.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
        handlers=[TextualHandler()],
        force=True,
    )


def get_history_store(backend: str | None = None, path: str | Path | None = None) -> ChatHistoryStore:
    """Create the history store from options or environment variables.

    Args:
        backend: Backend type (memory, file, sqlite); None reads the environment
        path: Location override for file/sqlite backends

    Returns:
        History store instance (not yet connected)

    Environment variables:
        SAHAMCHAT_HISTORY_BACKEND: Backend type (default: file)
        SAHAMCHAT_DATA_DIR: Base directory for the default locations
    """
    backend = (backend or os.getenv("SAHAMCHAT_HISTORY_BACKEND", "file")).lower()
    config: dict[str, Any] = {}

    if backend == "file":
        config["path"] = Path(path) if path else get_data_dir() / "history"
    elif backend == "sqlite":
        config["path"] = Path(path) if path else get_data_dir() / "chat_history.db"

    return create_history_store(backend, **config)


def get_llm(console: Console | None = None) -> LLMProvider | None:
    """Create LLM provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        LLM provider instance, or None if the provider name is unknown

    Environment variables:
        LLM_PROVIDER: Provider type (openai, deepseek, anthropic; default: openai)
        OPENAI_API_KEY: OpenAI API key (for openai provider)
        OPENAI_CHAT_MODEL: OpenAI model (default: gpt-4o-mini)
        DEEPSEEK_API_KEY: DeepSeek API key (for deepseek provider)
        ANTHROPIC_API_KEY: Anthropic API key (for anthropic provider)
        ANTHROPIC_MODEL: Anthropic model (default: claude-sonnet-4-20250514)

    A missing key is only warned about: the assistant then answers every
    message with the "key not found" error, as the web widget does.
    """
    con = console or _console
    llm_provider = os.getenv("LLM_PROVIDER", "openai").lower()

    if llm_provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: OPENAI_API_KEY not set, the assistant cannot answer[/yellow]")
        model = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
        return create_llm_provider("openai", api_key=api_key, model=model)

    elif llm_provider == "deepseek":
        api_key = os.getenv("DEEPSEEK_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: DEEPSEEK_API_KEY not set, the assistant cannot answer[/yellow]")
        return create_llm_provider("deepseek", api_key=api_key)

    elif llm_provider in ("anthropic", "claude"):
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: ANTHROPIC_API_KEY not set, the assistant cannot answer[/yellow]")
        model = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
        return create_llm_provider("anthropic", api_key=api_key, model=model)

    else:
        con.print(f"[red]Error: Unknown LLM provider: {llm_provider}[/red]")
        return None


def require_llm(console: Console | None = None) -> LLMProvider:
    """Get LLM provider, raising error if not configured.

    Raises:
        SystemExit: If LLM provider is not configured
    """
    import typer

    con = console or _console
    llm = get_llm(con)
    if not llm:
        con.print("[red]Error: LLM provider not configured[/red]")
        raise typer.Exit(code=1)
    return llm
