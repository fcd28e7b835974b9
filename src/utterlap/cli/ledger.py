"""CLI commands for the resolution ledger."""

import json

import typer
from rich.markup import escape
from rich.table import Table

from utterlap.cli.utils import console, err_console, fail, open_session
from utterlap.models.resolution import Edit, LedgerResult, Move, Remove

app = typer.Typer(
    name="ledger",
    help="Record remediation decisions for conflicting utterances.",
    no_args_is_help=True,
)


def _report(result: LedgerResult, output_json: bool) -> None:
    """Print a ledger result and exit 1 if it failed."""
    if output_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.success:
        for change in result.changes:
            console.print(f"[green]✓[/green] {result.utterance_text}: {change}")
    else:
        err_console.print(f"[red]Error: {escape(result.error or '')}[/red]")

    if not result.success:
        raise typer.Exit(1)


@app.command("remove")
def mark_remove(
    dialog: str = typer.Argument(..., help="Dialog the utterance belongs to"),
    utterance: str = typer.Argument(..., help="Utterance text"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Mark an utterance for deletion, or clear the mark."""
    with open_session() as session:
        result = session.set_action(dialog, utterance, Remove())
    _report(result, output_json)


@app.command("edit")
def mark_edit(
    dialog: str = typer.Argument(..., help="Dialog the utterance belongs to"),
    utterance: str = typer.Argument(..., help="Utterance text"),
    text: str = typer.Option(..., "--text", "-t", help="Replacement text"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Mark an utterance for rewording, or clear the mark."""
    with open_session() as session:
        result = session.set_action(dialog, utterance, Edit(text=text))
    _report(result, output_json)


@app.command("move")
def mark_move(
    dialog: str = typer.Argument(..., help="Dialog the utterance belongs to"),
    utterance: str = typer.Argument(..., help="Utterance text"),
    target: str = typer.Option(..., "--to", help="Dialog to move the utterance to"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Mark an utterance for reassignment, or clear the mark."""
    with open_session() as session:
        if not session.corpus.has_dialog(target):
            fail(f"Target dialog not found: {target}")
        result = session.set_action(dialog, utterance, Move(target_dialog_key=target))
    _report(result, output_json)


@app.command("flag")
def toggle_flag(
    dialog: str = typer.Argument(..., help="Dialog the utterance belongs to"),
    utterance: str = typer.Argument(..., help="Utterance text"),
    source: str = typer.Option(..., "--from", help="Dialog raising or withdrawing the flag"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Toggle a flag on an utterance from another dialog."""
    with open_session() as session:
        result = session.toggle_flag(dialog, utterance, source)
    _report(result, output_json)


@app.command("list")
def list_entries(
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List recorded remediation entries."""
    with open_session() as session:
        entries = session.ledger.entries()
        snapshot = session.ledger.snapshot()

    if output_json:
        typer.echo(json.dumps(snapshot, indent=2, ensure_ascii=False))
        return

    if not entries:
        typer.echo("Ledger is empty.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Utterance")
    table.add_column("Action")
    table.add_column("Flagged from")
    for text, entry in entries.items():
        action = entry.action.describe() if entry.action is not None else "-"
        flags = ", ".join(entry.flagged_from) or "-"
        table.add_row(text, action, flags)
    console.print(table)
