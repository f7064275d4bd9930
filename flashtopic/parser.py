import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from .constants import CARD_DIVIDER, CARD_SEPARATOR, TOPIC_FILE_SUFFIXES
from .exceptions import (
    CardAnswerIsEmpty,
    CardQuestionIsEmpty,
    ParseError,
    TopicFileError,
    TopicTitleIsEmpty,
    TopicTitleIsMultipleLinesLong,
)
from .models import Card, Topic

logger = logging.getLogger(__name__)


class _TextIsEmpty(Exception):
    """A field trimmed down to nothing. Translated by the caller."""


# --- Text primitives ---


def split_text(separator: str, text: str) -> Tuple[str, str]:
    """
    Split ``text`` at the first ``separator``, consuming it.

    Returns ``(remainder, text_before)``. When the separator is missing the
    whole text is ``text_before`` and the remainder is empty. Separators start
    with a newline; the start of ``text`` counts as a line start, so a text
    beginning with the bare marker splits at offset 0.
    """
    marker = separator.lstrip("\n")
    if marker != separator and text.startswith(marker):
        return text[len(marker):], ""
    index = text.find(separator)
    if index == -1:
        return "", text
    return text[index + len(separator):], text[:index]


def _text_until(separator: str, text: str) -> Tuple[str, str]:
    remainder, before = split_text(separator, text)
    before = before.strip()
    if not before:
        raise _TextIsEmpty()
    return remainder, before


def text_until_separator(text: str) -> Tuple[str, str]:
    return _text_until(CARD_SEPARATOR, text)


def text_until_divider(text: str) -> Tuple[str, str]:
    return _text_until(CARD_DIVIDER, text)


# --- Grammar ---


def parse_card(text: str) -> Tuple[str, Card]:
    """
    Parse one card from the front of ``text``.

    Returns:
        Tuple[str, Card]: The unconsumed input and the parsed card.

    Raises:
        CardQuestionIsEmpty: Nothing but whitespace before the divider.
        CardAnswerIsEmpty: Nothing but whitespace between the divider and the
            next separator (or the end of input).
    """
    try:
        text, question = text_until_divider(text)
    except _TextIsEmpty:
        raise CardQuestionIsEmpty() from None
    try:
        text, answer = text_until_separator(text)
    except _TextIsEmpty:
        raise CardAnswerIsEmpty() from None
    return text, Card(question=question, answer=answer)


def parse_cards(text: str) -> List[Card]:
    """Parse cards until the input is exhausted. The first error aborts."""
    cards: List[Card] = []
    while text:
        text, card = parse_card(text)
        cards.append(card)
    return cards


def parse_topic(text: str) -> Topic:
    """
    Parse a whole topic: a single-line title, a separator, then zero or more
    cards.

    Parameters:
        text (str): The complete topic source.

    Returns:
        Topic: The title and the cards in source order.

    Raises:
        TopicTitleIsEmpty: The title trims to an empty string.
        TopicTitleIsMultipleLinesLong: The trimmed title contains a newline.
        CardQuestionIsEmpty, CardAnswerIsEmpty: Propagated from the first
            malformed card.
    """
    text = text.strip()
    try:
        text, title = text_until_separator(text)
    except _TextIsEmpty:
        raise TopicTitleIsEmpty() from None
    if "\n" in title:
        raise TopicTitleIsMultipleLinesLong(title)
    cards = parse_cards(text)
    logger.debug("Parsed topic %r with %s cards", title, len(cards))
    return Topic(title=title, cards=tuple(cards))


# --- Files ---


@dataclass
class TopicProcessorConfig:
    """Configuration for discovering and parsing topic files."""

    source_directory: Path
    fail_fast: bool = False
    suffixes: Tuple[str, ...] = TOPIC_FILE_SUFFIXES


class TopicProcessor:
    def __init__(self, config: TopicProcessorConfig):
        self.config = config

    def process_file(self, file_path: Path) -> Topic:
        """
        Read a topic file and parse its contents.

        Parameters:
            file_path (Path): Path to a UTF-8 topic file.

        Returns:
            Topic: The parsed topic.

        Raises:
            TopicFileError: If the file is missing, unreadable, not valid
                UTF-8, or its contents fail to parse. The parse failure is
                kept on ``parse_error``.
        """
        try:
            content = file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise TopicFileError(file_path, "File not found.") from None
        except UnicodeDecodeError as e:
            raise TopicFileError(
                file_path,
                f"File is not valid UTF-8: {e}",
            ) from e
        except OSError as e:
            raise TopicFileError(
                file_path,
                f"Could not read file: {e}",
            ) from e

        try:
            return parse_topic(content)
        except ParseError as e:
            raise TopicFileError(file_path, str(e), parse_error=e) from e

    def discover_files(self) -> List[Path]:
        """Return every file under the source directory with a topic suffix, sorted."""
        files: List[Path] = []
        for suffix in self.config.suffixes:
            files.extend(self.config.source_directory.rglob(f"*{suffix}"))
        return sorted(files)


def _process_file_wrapper(
    processor: TopicProcessor,
    file_path: Path,
    config: TopicProcessorConfig,
    all_topics: List[Topic],
    all_errors: List[TopicFileError],
) -> None:
    """
    Process one file and append its topic or its error to the accumulators.

    Raises:
        TopicFileError: If ``config.fail_fast`` is set and the file fails.
    """
    try:
        all_topics.append(processor.process_file(file_path))
    except TopicFileError as e:
        if config.fail_fast:
            raise
        logger.warning("Skipping %s: %s", file_path, e.message)
        all_errors.append(e)


def load_and_process_topic_files(
    config: TopicProcessorConfig,
) -> Tuple[List[Topic], List[TopicFileError]]:
    """
    Discover and parse every topic file under the configured source directory.

    Parameters:
        config (TopicProcessorConfig): Source directory, suffixes and
            fail-fast behaviour.

    Returns:
        Tuple[List[Topic], List[TopicFileError]]: The topics parsed
        successfully, in file-path order, and the errors for files that
        failed.
    """
    if not config.source_directory.exists():
        return [], [
            TopicFileError(
                file_path=config.source_directory,
                message=(
                    "Source directory does not exist: "
                    f"{config.source_directory}"
                ),
            )
        ]

    processor = TopicProcessor(config)
    topic_files = processor.discover_files()

    logger.info(
        "Found %s topic files to process in %s",
        len(topic_files),
        config.source_directory,
    )

    all_topics: List[Topic] = []
    all_errors: List[TopicFileError] = []

    for file_path in topic_files:
        _process_file_wrapper(
            processor,
            file_path,
            config,
            all_topics,
            all_errors,
        )

    logger.info(
        "Successfully processed %s topics from %s files with %s errors.",
        len(all_topics),
        len(topic_files),
        len(all_errors),
    )

    return all_topics, all_errors
