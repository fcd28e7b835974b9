"""CLI commands for word-level corpus analysis."""

import json

import typer
from rich.table import Table

from utterlap.cli.utils import console, open_session

app = typer.Typer(
    name="words",
    help="Find words that are safe to use as keywords.",
    no_args_is_help=True,
)


@app.command("exclusive")
def exclusive_command(
    dialog: str = typer.Option(None, "--dialog", "-d", help="Only show this dialog"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the words each dialog uses and no other dialog does."""
    with open_session() as session:
        if dialog is not None:
            session.corpus.get_dialog(dialog)
        result = session.exclusive_words()

    if dialog is not None:
        result = {dialog: result.get(dialog, [])}

    if output_json:
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    table = Table(title="Exclusive Words", show_header=True, header_style="bold")
    table.add_column("Dialog")
    table.add_column("Count", justify="right")
    table.add_column("Words")
    for dialog_key, words in result.items():
        table.add_row(dialog_key, str(len(words)), ", ".join(words) or "[dim]none[/dim]")
    console.print(table)


@app.command("suggest")
def suggest_command(
    dialog: str = typer.Argument(..., help="Dialog key"),
    limit: int = typer.Option(None, "--limit", "-n", help="Maximum suggestions"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Suggest keywords for a dialog from its exclusive words."""
    with open_session() as session:
        suggestions = session.suggest_keywords(dialog, limit)

    if output_json:
        typer.echo(json.dumps([s.to_dict() for s in suggestions], indent=2, ensure_ascii=False))
        return

    if not suggestions:
        typer.echo(f"No keyword suggestions for {dialog}.")
        return

    table = Table(title=f"Suggested keywords for {dialog}", show_header=True, header_style="bold")
    table.add_column("Word")
    table.add_column("Utterances", justify="right")
    table.add_column("Occurrences", justify="right")
    for suggestion in suggestions:
        table.add_row(
            suggestion.word,
            str(suggestion.utterance_count),
            str(suggestion.occurrences),
        )
    console.print(table)
