"""CLI commands for keyword profiles."""

import json

import typer
from rich.table import Table

from utterlap.cli.utils import console, err_console, open_session
from utterlap.core.exceptions import KeywordValidationError
from utterlap.models.keyword import KeywordProfile

app = typer.Typer(
    name="keywords",
    help="Manage the keyword profile of a dialog.",
    no_args_is_help=True,
)


def _print_profile(profile: KeywordProfile) -> None:
    keywords = ", ".join(profile.keywords) if profile.keywords else "[dim]none[/dim]"
    console.print(f"[bold]{profile.dialog_key}[/bold] keywords: {keywords}")

    if not profile.statuses:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Utterance")
    table.add_column("Status", justify="right")
    for text, status in profile.statuses.items():
        table.add_row(text, status)
    console.print(table)


@app.command("add")
def add_keywords(
    dialog: str = typer.Argument(..., help="Dialog key"),
    keywords: list[str] = typer.Argument(..., help="Keywords to add"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add keywords to a dialog and rescore its utterances."""
    rejected = 0

    with open_session() as session:
        profile = session.profile(dialog)
        for keyword in keywords:
            try:
                profile = session.add_keyword(keyword, dialog)
            except KeywordValidationError as e:
                err_console.print(f"[yellow]Skipped {keyword!r}: {e.message}[/yellow]")
                rejected += 1

    if output_json:
        typer.echo(json.dumps(profile.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_profile(profile)

    if rejected:
        raise typer.Exit(1)


@app.command("remove")
def remove_keywords(
    dialog: str = typer.Argument(..., help="Dialog key"),
    keywords: list[str] = typer.Argument(..., help="Keywords to remove"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Remove keywords from a dialog and rescore its utterances."""
    with open_session() as session:
        profile = session.profile(dialog)
        for keyword in keywords:
            profile = session.remove_keyword(keyword, dialog)

    if output_json:
        typer.echo(json.dumps(profile.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_profile(profile)


@app.command("list")
def list_keywords(
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List the keyword profiles of all dialogs."""
    with open_session() as session:
        snapshot = session.repository.snapshot()

    if output_json:
        typer.echo(json.dumps(snapshot, indent=2, ensure_ascii=False))
        return

    if not snapshot:
        typer.echo("No keyword profiles defined.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Dialog")
    table.add_column("Keywords")
    table.add_column("Scored", justify="right")
    for dialog_key, entry in snapshot.items():
        table.add_row(dialog_key, ", ".join(entry["keywords"]), str(len(entry["statuses"])))
    console.print(table)
