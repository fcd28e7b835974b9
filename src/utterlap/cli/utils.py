"""Shared CLI helpers."""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import typer
from rich.console import Console
from rich.markup import escape

from utterlap.core.config import UtterlapConfig
from utterlap.core.constants import DEFAULT_LOG_FORMAT, VALID_LOG_LEVELS
from utterlap.core.exceptions import UtterlapError
from utterlap.session import AnalysisSession

console = Console()
err_console = Console(stderr=True)


class CLIState:
    """Options shared by every command, set by the root callback."""

    def __init__(self) -> None:
        self.base_path: Path | None = None


state = CLIState()


def get_base_path() -> Path:
    """Workspace directory holding the .utterlap folder."""
    return state.base_path or Path.cwd()


def configure_logging(level: str, fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """Configure root logging to stderr.

    Raises:
        typer.Exit: If the level is not valid.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        err_console.print(f"[red]Error: Invalid log level '{level}'[/red]")
        err_console.print(f"Valid levels: {', '.join(VALID_LOG_LEVELS)}")
        raise typer.Exit(1)

    logging.basicConfig(
        level=getattr(logging, level_upper),
        format=fmt,
        stream=sys.stderr,
        force=True,
    )


def fail(error: Exception | str) -> None:
    """Print an error and exit with status 1."""
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


@contextmanager
def open_session() -> Generator[AnalysisSession, None, None]:
    """Open an analysis session over the current workspace.

    Library errors are reported and turned into exit status 1.
    """
    session: AnalysisSession | None = None
    try:
        base_path = get_base_path()
        session = AnalysisSession.from_workspace(base_path, UtterlapConfig.load(base_path))
        yield session
    except UtterlapError as e:
        fail(e)
    finally:
        if session is not None:
            session.close()
