"""
CLI entry point for flashtopic.
"""

# Standard library imports
from pathlib import Path
from typing import Callable, List, Optional

# Third-party imports
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Local application imports
from flashtopic.constants import SOURCE_DIR_ENVVAR
from flashtopic.exceptions import TopicFileError
from flashtopic.models import Topic
from flashtopic.parser import (
    TopicProcessor,
    TopicProcessorConfig,
    load_and_process_topic_files,
)
from flashtopic.cli._check_logic import check_logic
from flashtopic.cli._export_logic import (
    export_to_json,
    export_to_markdown,
    export_to_yaml,
)


console = Console()

app = typer.Typer(
    name="flashtopic",
    help="Flashtopic: plain-text flashcard topics.",
    add_completion=False,
    rich_markup_mode="markdown",
)


# Common typer options reused across commands
_source_dir_option = typer.Option(  # noqa: B008
    None,
    "--source-dir",
    help="Directory containing topic files. "
    f"Falls back to {SOURCE_DIR_ENVVAR} env var.",
    envvar=SOURCE_DIR_ENVVAR,
)

_output_dir_option = typer.Option(  # noqa: B008
    None,
    "--output-dir",
    help="Directory to save exported files.",
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
)


def _require_source_dir(source_dir: Optional[Path]) -> Path:
    """Return the source directory or exit with code 1 when it is missing."""
    if source_dir is not None:
        return source_dir
    console.print(
        "[bold red]Error: --source-dir is required "
        f"(or set the {SOURCE_DIR_ENVVAR} environment variable).[/bold red]"
    )
    raise typer.Exit(code=1)


def _load_topics(source_dir: Path) -> List[Topic]:
    """
    Parse every topic file under source_dir.

    Prints any processing errors. Exits with code 1 when nothing parsed and
    there were errors, and with code 0 when there was nothing to parse.
    """
    config = TopicProcessorConfig(source_directory=source_dir)
    topics, errors = load_and_process_topic_files(config)

    if errors:
        console.print(
            "[bold red]Errors encountered while parsing topics:[/bold red]"
        )
        for error in errors:
            console.print(f"- {error}")

    if not topics:
        if errors:
            raise typer.Exit(code=1)
        console.print("[yellow]No topics found. Exiting.[/yellow]")
        raise typer.Exit(code=0)

    return topics


# ---------------------------------------------------------------------------
# Check
# ---------------------------------------------------------------------------


@app.command()
def check(
    source_dir: Optional[Path] = _source_dir_option,
    files: Optional[List[Path]] = typer.Argument(  # noqa: B008
        None,
        help="Optional list of files to check. "
        "If not provided, checks all topic files in --source-dir.",
    ),
):
    """
    Parse topic files and report every one that is malformed.

    Exits with 1 if any file fails to parse.
    """
    failed = check_logic(files_to_process=files, source_dir=source_dir)
    if failed:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Show
# ---------------------------------------------------------------------------


def _display_topic(cons: Console, topic: Topic) -> None:
    cons.rule(f"[bold cyan]{topic.title}[/bold cyan]")
    if not topic.cards:
        cons.print("[yellow]This topic has no cards.[/yellow]")
        return
    for index, card in enumerate(topic.cards, start=1):
        cons.print(
            Panel(card.question, title=f"Question {index}", border_style="green")
        )
        cons.print(Panel(card.answer, title="Answer", border_style="blue"))


@app.command()
def show(
    file: Path = typer.Argument(..., help="The topic file to display."),  # noqa: B008
    plain: bool = typer.Option(
        False, "--plain", help="Print the plain-text rendering instead of panels."
    ),
):
    """Parse a single topic file and print its cards."""
    processor = TopicProcessor(TopicProcessorConfig(source_directory=file.parent))
    try:
        topic = processor.process_file(file)
    except TopicFileError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    if plain:
        console.print(str(topic), markup=False, highlight=False)
    else:
        _display_topic(console, topic)


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@app.command()
def stats(
    source_dir: Optional[Path] = _source_dir_option,
):
    """Display a table of topics and their card counts."""
    topics = _load_topics(_require_source_dir(source_dir))

    table = Table(title="Topics")
    table.add_column("Title", style="cyan")
    table.add_column("Cards", style="magenta")
    for topic in sorted(topics, key=lambda t: t.title.lower()):
        table.add_row(topic.title, str(len(topic.cards)))
    console.print(table)

    total_cards = sum(len(topic.cards) for topic in topics)
    console.print(
        f"Total: [bold]{len(topics)}[/bold] topics, "
        f"[bold]{total_cards}[/bold] cards."
    )


# ---------------------------------------------------------------------------
# Export subcommand group
# ---------------------------------------------------------------------------

export_app = typer.Typer(
    name="export",
    help="Export parsed topics to different formats.",
)
app.add_typer(export_app)


def _run_export(
    exporter: Callable[[List[Topic], Path], int],
    fmt_name: str,
    source_dir: Optional[Path],
    output_dir: Optional[Path],
) -> None:
    source = _require_source_dir(source_dir)
    if output_dir is None:
        console.print(
            "[bold red]Error: --output-dir is required "
            f"for {fmt_name} export.[/bold red]"
        )
        raise typer.Exit(code=1)

    topics = _load_topics(source)
    console.print(f"Exporting topics to [cyan]{output_dir}[/cyan]...")
    try:
        written = exporter(topics, output_dir)
    except IOError as e:
        console.print(f"[bold]An error occurred during export: {e}[/bold]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]Exported {written} file(s).[/green]")


@export_app.command("md")
def export_md(
    source_dir: Optional[Path] = _source_dir_option,
    output_dir: Optional[Path] = _output_dir_option,
):
    """Export each topic to its own Markdown file."""
    _run_export(export_to_markdown, "Markdown", source_dir, output_dir)


@export_app.command("yaml")
def export_yaml(
    source_dir: Optional[Path] = _source_dir_option,
    output_dir: Optional[Path] = _output_dir_option,
):
    """Export each topic as a YAML deck (`deck`, `cards` with `q`/`a`)."""
    _run_export(export_to_yaml, "YAML", source_dir, output_dir)


@export_app.command("json")
def export_json(
    source_dir: Optional[Path] = _source_dir_option,
    output_dir: Optional[Path] = _output_dir_option,
):
    """Export each topic as JSON."""
    _run_export(export_to_json, "JSON", source_dir, output_dir)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """
    Run the CLI application.

    If an unexpected exception occurs, print a bold red error message to the console and exit the process with status code 1.
    """
    try:
        app()
    except Exception as e:
        console.print(f"[bold red]UNEXPECTED ERROR: {e}[/bold red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
