"""Main CLI entrypoint for utterlap."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.panel import Panel
from rich.table import Table

from utterlap import __version__
from utterlap.cli.keywords import app as keywords_app
from utterlap.cli.ledger import app as ledger_app
from utterlap.cli.utils import (
    configure_logging,
    console,
    err_console,
    fail,
    get_base_path,
    open_session,
    state,
)
from utterlap.cli.words import app as words_app
from utterlap.core.config import StorageConfig, UtterlapConfig
from utterlap.core.constants import (
    DisplayState,
    ResolutionState,
    StorageBackend,
    get_config_path,
)
from utterlap.core.exceptions import UtterlapError
from utterlap.storage.corpus import load_corpus, save_corpus

app = typer.Typer(
    name="utterlap",
    help="Keyword-overlap conflict analysis for intent-classification corpora",
    no_args_is_help=True,
)

app.add_typer(keywords_app, name="keywords")
app.add_typer(ledger_app, name="ledger")
app.add_typer(words_app, name="words")

_STATE_COLORS = {
    ResolutionState.CLEAR: "dim",
    ResolutionState.UNRESOLVED: "red",
    ResolutionState.PARTIAL: "yellow",
    ResolutionState.RESOLVED: "green",
}

_DISPLAY_COLORS = {
    DisplayState.PENDING: "white",
    DisplayState.EDITED: "cyan",
    DisplayState.MOVED: "blue",
    DisplayState.DELETED: "red",
    DisplayState.FLAGGED: "yellow",
}


@app.callback()
def main(
    path: Annotated[
        Optional[Path],
        typer.Option("--path", "-p", help="Workspace directory (default: current)"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (default: from config)"),
    ] = None,
) -> None:
    """utterlap command line interface."""
    state.base_path = path

    try:
        config = UtterlapConfig.load(get_base_path())
    except UtterlapError as e:
        fail(e)

    configure_logging(log_level or config.logging.level, config.logging.format)


@app.command("version")
def version_command() -> None:
    """Show the utterlap version."""
    typer.echo(f"utterlap {__version__}")


@app.command("init")
def init_command(
    backend: Annotated[
        StorageBackend, typer.Option("--backend", help="State storage backend")
    ] = StorageBackend.SQLITE,
    corpus: Annotated[
        Optional[Path],
        typer.Option("--corpus", help="Corpus document to import into the workspace"),
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite an existing configuration")
    ] = False,
) -> None:
    """Create a workspace configuration and import a corpus."""
    base_path = get_base_path()
    config_path = get_config_path(base_path)

    if config_path.exists() and not force:
        fail(f"Workspace already initialized: {config_path}")

    config = UtterlapConfig(storage=StorageConfig(backend=backend.value))

    try:
        if corpus is not None:
            loaded = load_corpus(corpus)
            save_corpus(loaded, config.corpus_path(base_path))
            console.print(
                f"Imported {len(loaded.utterances)} utterances across "
                f"{len(loaded.dialogs)} dialogs"
            )
        config.save(base_path)
    except UtterlapError as e:
        fail(e)

    console.print(f"[green]✓[/green] Initialized workspace at {config_path.parent}")


@app.command("config")
def config_command() -> None:
    """Show the effective configuration."""
    try:
        config = UtterlapConfig.load(get_base_path())
    except UtterlapError as e:
        fail(e)
    typer.echo(json.dumps(config.to_dict(), indent=2))


@app.command("status")
def status_command(
    dialog: Annotated[str, typer.Argument(help="Dialog key")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show how well a dialog's own utterances match its keywords."""
    with open_session() as session:
        profile = session.select_dialog(dialog)
        rows = session.status_view(dialog)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "dialog_key": dialog,
                    "keywords": list(profile.keywords),
                    "utterances": [r.to_dict() for r in rows],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    keywords = ", ".join(profile.keywords) or "[dim]none[/dim]"
    console.print(Panel(f"Keywords: {keywords}", title=dialog, expand=False))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Utterance")
    table.add_column("Match", justify="right")
    table.add_column("State")
    for row in rows:
        color = _DISPLAY_COLORS[row.state]
        label = row.detail or row.state.value
        table.add_row(row.utterance_text, row.percentage or "-", f"[{color}]{label}[/{color}]")
    console.print(table)


@app.command("scan")
def scan_command(
    dialog: Annotated[str, typer.Argument(help="Active dialog key")],
    show_all: Annotated[
        bool, typer.Option("--all", help="Include dialogs without conflicts")
    ] = False,
    details: Annotated[
        bool, typer.Option("--details", help="List scored utterances per dialog")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Find utterances of other dialogs that match a dialog's keywords."""
    with open_session() as session:
        summary = session.analyze(dialog)

    dialogs = summary.dialogs
    if not show_all:
        dialogs = [d for d in dialogs if d.state != ResolutionState.CLEAR]

    if json_output:
        data = summary.to_dict()
        data["dialogs"] = [d.to_dict() for d in dialogs]
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if not summary.keywords:
        err_console.print(f"[yellow]{dialog} has no keywords; nothing can conflict[/yellow]")

    console.print(f"[bold]Conflicts for {dialog}[/bold] ({', '.join(summary.keywords)})")

    if not dialogs:
        typer.echo("No conflicting dialogs.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Dialog")
    table.add_column("Open", justify="right")
    table.add_column("Changes", justify="right")
    table.add_column("State")
    for resolution in dialogs:
        color = _STATE_COLORS[resolution.state]
        table.add_row(
            resolution.dialog_key,
            str(resolution.positive_match_count),
            str(resolution.change_count),
            f"[{color}]{resolution.state.value}[/{color}]",
        )
    console.print(table)

    if details:
        for resolution in dialogs:
            console.print(f"\n[bold]{resolution.dialog_key}[/bold]")
            for row in resolution.utterances:
                color = _DISPLAY_COLORS[row.state]
                label = row.detail or row.state.value
                console.print(f"  {row.percentage:>5}  {row.utterance_text}  [{color}]{label}[/{color}]")

    if summary.is_resolved:
        console.print("[green]All conflicts resolved[/green]")
    else:
        console.print(f"{summary.conflicting_dialog_count} dialog(s) with open conflicts")


@app.command("alternatives")
def alternatives_command(
    dialog: Annotated[str, typer.Argument(help="Dialog key")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show informal spelling variants of a dialog's utterances."""
    with open_session() as session:
        pairs = session.alternatives(dialog)

    if json_output:
        typer.echo(
            json.dumps(
                [{"utterance": u.text, "alternatives": alts} for u, alts in pairs],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    for utterance, alternatives in pairs:
        console.print(f"[bold]{utterance.text}[/bold]")
        for alternative in alternatives:
            console.print(f"  {alternative}")


if __name__ == "__main__":
    app()
