"""Flashtopic - parse plain-text flashcard topics into structured records."""

from .models import Card, Topic, OwnedCard, OwnedTopic, format_topic
from .exceptions import (
    ParseError,
    TopicTitleIsEmpty,
    TopicTitleIsMultipleLinesLong,
    CardQuestionIsEmpty,
    CardAnswerIsEmpty,
    TopicFileError,
)
from .parser import (
    parse_topic,
    TopicProcessor,
    TopicProcessorConfig,
    load_and_process_topic_files,
)

__all__ = [
    "Card",
    "Topic",
    "OwnedCard",
    "OwnedTopic",
    "format_topic",
    "ParseError",
    "TopicTitleIsEmpty",
    "TopicTitleIsMultipleLinesLong",
    "CardQuestionIsEmpty",
    "CardAnswerIsEmpty",
    "TopicFileError",
    "parse_topic",
    "TopicProcessor",
    "TopicProcessorConfig",
    "load_and_process_topic_files",
]
