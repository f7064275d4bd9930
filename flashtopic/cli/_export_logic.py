"""
Contains the business logic for exporting parsed topics to various formats.
This logic is called by the CLI commands in main.py.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Set

from ruamel.yaml import YAML
from ruamel.yaml.scalarstring import LiteralScalarString

from flashtopic.models import Topic

logger = logging.getLogger(__name__)

yaml = YAML()
yaml.indent(mapping=2, sequence=4, offset=2)


def _safe_file_stem(title: str, emitted: Set[str]) -> str:
    """
    Turn a topic title into a file stem not yet in ``emitted``, and record it.

    Keeps alphanumerics, spaces and underscores. Falls back to
    ``unnamed_topic``. A taken stem gets the first free ``_2``, ``_3``...
    suffix.
    """
    stem = "".join(c for c in title if c.isalnum() or c in (" ", "_")).rstrip()
    if not stem:
        stem = "unnamed_topic"
    candidate = stem
    count = 1
    while candidate in emitted:
        count += 1
        candidate = f"{stem}_{count}"
    emitted.add(candidate)
    return candidate


def _yaml_text(text: str):
    return LiteralScalarString(text) if "\n" in text else text


def _write_markdown(topic: Topic, file_path: Path) -> None:
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(f"# Topic: {topic.title}\n\n")
        for card in topic.cards:
            f.write(f"**Question:** {card.question}\n\n")
            f.write(f"**Answer:** {card.answer}\n\n")
            f.write("---\n\n")


def _write_yaml(topic: Topic, file_path: Path) -> None:
    # Deck layout: {deck: <title>, cards: [{q, a}, ...]}
    data = {
        "deck": topic.title,
        "cards": [
            {"q": _yaml_text(card.question), "a": _yaml_text(card.answer)}
            for card in topic.cards
        ],
    }
    with open(file_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f)


def _write_json(topic: Topic, file_path: Path) -> None:
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(topic.model_dump_json(indent=2))
        f.write("\n")


_WRITERS: Dict[str, Callable[[Topic, Path], None]] = {
    "md": _write_markdown,
    "yaml": _write_yaml,
    "json": _write_json,
}


def export_topics(topics: List[Topic], output_dir: Path, fmt: str) -> int:
    """
    Write each topic to its own file in ``output_dir``.

    Creates the output directory if missing. A failed write is logged and the
    export carries on with the next topic.

    Parameters:
        topics (List[Topic]): Topics to export, in the order given.
        output_dir (Path): Destination directory.
        fmt (str): One of ``md``, ``yaml`` or ``json``; also the file suffix.

    Returns:
        int: Number of files written.

    Raises:
        ValueError: If ``fmt`` is not a known format.
        IOError: If the output directory cannot be created.
    """
    writer = _WRITERS.get(fmt)
    if writer is None:
        raise ValueError(f"Unknown export format: {fmt}")

    logger.info(f"Starting {fmt} export to directory: {output_dir}")

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create output directory {output_dir}: {e}")
        raise IOError(f"Failed to create output directory: {e}") from e

    if not topics:
        logger.warning("No topics to export.")
        return 0

    emitted_stems: Set[str] = set()
    exported_files = 0
    for topic in topics:
        stem = _safe_file_stem(topic.title, emitted_stems)
        file_path = output_dir / f"{stem}.{fmt}"
        try:
            writer(topic, file_path)
            logger.info(
                f"Successfully exported {len(topic.cards)} cards to {file_path}"
            )
            exported_files += 1
        except IOError as e:
            logger.error(f"Could not write to file {file_path}: {e}")

    logger.info(
        f"Export complete. Exported {len(topics)} topic(s) to {exported_files} file(s)."
    )
    return exported_files


def export_to_markdown(topics: List[Topic], output_dir: Path) -> int:
    return export_topics(topics, output_dir, "md")


def export_to_yaml(topics: List[Topic], output_dir: Path) -> int:
    return export_topics(topics, output_dir, "yaml")


def export_to_json(topics: List[Topic], output_dir: Path) -> int:
    return export_topics(topics, output_dir, "json")
