"""
Logic for the 'check' subcommand, which parses topic files and reports every
malformed one.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console

from flashtopic.constants import TOPIC_FILE_SUFFIXES
from flashtopic.exceptions import TopicFileError
from flashtopic.parser import TopicProcessor, TopicProcessorConfig


console = Console()


def _collect_files(
    files_to_process: Optional[List[Path]], source_dir: Optional[Path]
) -> Optional[List[Path]]:
    """
    Resolve the files to check.

    Returns None when neither explicit files nor a source directory were given.
    Explicit files are filtered to topic suffixes, with a warning for each one
    skipped; a source directory is scanned recursively.
    """
    if files_to_process:
        files = []
        for p in files_to_process:
            if p.suffix in TOPIC_FILE_SUFFIXES:
                files.append(p)
            else:
                console.print(
                    f"[yellow]Skipping {p.name}: not a topic file "
                    f"(expected {', '.join(TOPIC_FILE_SUFFIXES)}).[/yellow]"
                )
        return files
    if source_dir is None:
        return None
    return TopicProcessor(TopicProcessorConfig(source_dir)).discover_files()


def _check_single_file(
    processor: TopicProcessor, file_path: Path
) -> Tuple[bool, Optional[int]]:
    """Parse one file. Returns (ok, card_count) and prints the failure, if any."""
    try:
        topic = processor.process_file(file_path)
    except TopicFileError as e:
        console.print(f"[bold red]✗ {file_path.name}:[/bold red] {e.message}")
        return False, None
    console.print(
        f"[green]✓ {file_path.name}:[/green] '{topic.title}' "
        f"({len(topic.cards)} cards)"
    )
    return True, len(topic.cards)


def check_logic(
    files_to_process: Optional[List[Path]] = None,
    source_dir: Optional[Path] = None,
) -> bool:
    """
    Parse every target file and print a per-file verdict and a summary.

    Parameters:
        files_to_process: Explicit files to check; when given, ``source_dir``
            is ignored.
        source_dir: Directory scanned recursively when no files are given.

    Returns:
        bool: True if any file failed to parse or the source was unusable,
            False otherwise.
    """
    files = _collect_files(files_to_process, source_dir)
    if files is None:
        console.print(
            "[bold red]Error: --source-dir is required when no files are specified.[/bold red]"
        )
        return True

    if not files_to_process and not source_dir.exists():
        console.print(
            f"[bold red]Error: Source directory does not exist: {source_dir}[/bold red]"
        )
        return True

    if not files:
        console.print("[bold yellow]No topic files found to check.[/bold yellow]")
        return False

    console.print(f"Checking {len(files)} topic file(s)...")

    processor = TopicProcessor(TopicProcessorConfig(source_dir or Path(".")))
    failed = 0
    total_cards = 0
    for file_path in files:
        ok, card_count = _check_single_file(processor, file_path)
        if ok:
            total_cards += card_count
        else:
            failed += 1

    if failed:
        console.print(
            f"[bold red]Check complete. {failed} of {len(files)} file(s) "
            "failed to parse.[/bold red]"
        )
    else:
        console.print(
            f"[bold green]All files parsed cleanly. {total_cards} cards "
            "in total.[/bold green]"
        )
    return failed > 0
