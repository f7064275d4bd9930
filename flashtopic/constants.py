"""
Plain-text topic format constants.

Both markers start with a newline: they are only recognized at the start of a
line. The start of the text also counts as a line start.
"""
from typing import Tuple

# Ends a topic title or a card answer.
CARD_SEPARATOR: str = "\n/=="

# Ends a card question.
CARD_DIVIDER: str = "\n/-"

# File suffixes picked up when scanning a source directory.
TOPIC_FILE_SUFFIXES: Tuple[str, ...] = (".cards", ".topic")

# Environment variable consulted by the CLI when --source-dir is omitted.
SOURCE_DIR_ENVVAR: str = "FLASHTOPIC_SOURCE_DIR"
