"""
Record types produced by the topic parser, their mutable owned copies, and
the human-readable rendering shared by both.
"""

from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

CARD_HEADER = "=== Card ==="


def _single_line(title: str) -> str:
    if "\n" in title:
        raise ValueError("Topic title must be a single line.")
    return title


def format_card(question: str, answer: str) -> str:
    return f"{CARD_HEADER}\nQuestion: {question}\nAnswer: {answer}"


def format_topic(topic: "Topic | OwnedTopic") -> str:
    """
    Render a topic for humans.

    The first line is ``Topic: <title>``; every card follows as a
    ``=== Card ===`` block with its question and answer lines.
    """
    lines = [f"Topic: {topic.title}"]
    lines.extend(format_card(card.question, card.answer) for card in topic.cards)
    return "\n".join(lines)


class Card(BaseModel):
    """
    A single question/answer pair as parsed from topic text.
    Both fields are trimmed and non-empty.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    question: str = Field(
        ...,
        min_length=1,
        description="Text before the card divider, trimmed.",
    )
    answer: str = Field(
        ...,
        min_length=1,
        description="Text after the card divider, trimmed.",
    )

    def to_owned(self) -> OwnedCard:
        return OwnedCard(question=self.question, answer=self.answer)

    def __str__(self) -> str:
        return format_card(self.question, self.answer)


class Topic(BaseModel):
    """
    A titled, ordered collection of cards.

    Produced once by ``parse_topic`` and immutable afterwards. Use
    ``to_owned`` for an editable copy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = Field(
        ...,
        min_length=1,
        description="Single-line topic title, trimmed.",
    )
    cards: Tuple[Card, ...] = Field(
        default_factory=tuple,
        description="Cards in the order they appear in the source text.",
    )

    @field_validator("title")
    @classmethod
    def validate_title_single_line(cls, title: str) -> str:
        """Reject titles that contain a newline."""
        return _single_line(title)

    def to_owned(self) -> OwnedTopic:
        """Deep-copy the topic into independently editable records."""
        return OwnedTopic(
            title=self.title,
            cards=[card.to_owned() for card in self.cards],
        )

    def __str__(self) -> str:
        return format_topic(self)


class OwnedCard(BaseModel):
    """Editable copy of a Card."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)

    def freeze(self) -> Card:
        return Card(question=self.question, answer=self.answer)

    def __str__(self) -> str:
        return format_card(self.question, self.answer)


class OwnedTopic(BaseModel):
    """
    Editable copy of a Topic.

    Assignments are validated, so the title stays non-empty and single-line.
    The ``cards`` list itself may be edited freely; ``freeze`` validates the
    result again.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    title: str = Field(..., min_length=1)
    cards: List[OwnedCard] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title_single_line(cls, title: str) -> str:
        return _single_line(title)

    def freeze(self) -> Topic:
        return Topic(
            title=self.title,
            cards=tuple(card.freeze() for card in self.cards),
        )

    def __str__(self) -> str:
        return format_topic(self)
