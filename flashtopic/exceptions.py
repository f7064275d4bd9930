from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ParseError(ValueError):
    """Base exception for malformed topic text."""

    pass


class TopicTitleIsEmpty(ParseError):
    """Raised when the topic title trims to an empty string."""

    def __init__(self) -> None:
        super().__init__("Topic title is empty.")


class TopicTitleIsMultipleLinesLong(ParseError):
    """Raised when the trimmed topic title spans more than one line."""

    def __init__(self, title: str) -> None:
        super().__init__(f"Topic title is multiple lines long: {title!r}")
        self.title = title


class CardQuestionIsEmpty(ParseError):
    """Raised when a card question trims to an empty string."""

    def __init__(self) -> None:
        super().__init__("Card question is empty.")


class CardAnswerIsEmpty(ParseError):
    """Raised when a card answer trims to an empty string."""

    def __init__(self) -> None:
        super().__init__("Card answer is empty.")


@dataclass
class TopicFileError(Exception):
    file_path: Path
    message: str
    parse_error: Optional[ParseError] = None

    def __str__(self) -> str:
        """
        Format the error as a single line: the file name, the kind of parse
        failure when there is one, then the message.
        """
        context_parts = [f"File: {self.file_path.name}"]
        if self.parse_error is not None:
            context_parts.append(f"Kind: {type(self.parse_error).__name__}")
        return f"{' | '.join(context_parts)} | Error: {self.message}"
