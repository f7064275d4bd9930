import pytest
from pathlib import Path


TWO_CARD_TOPIC = """Geography
/==
What is the capital of France?
/-
Paris
/==
What is the longest river in Africa?
/-
The Nile
"""

EMPTY_ANSWER_TOPIC = """Broken
/==
A question without an answer
/-

/==
"""


# each test runs on cwd to its temp dir
@pytest.fixture(autouse=True)
def go_to_tmpdir(tmp_path: Path, monkeypatch):
    """
    Run every test from inside its own temporary directory, with the source
    directory environment variable cleared.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FLASHTOPIC_SOURCE_DIR", raising=False)


def create_topic_file(base_path: Path, filename: str, content: str) -> Path:
    file_path = base_path / filename
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")
    return file_path


@pytest.fixture
def topics_dir(tmp_path: Path) -> Path:
    """
    A source directory with two valid topics (one nested in a subfolder) and
    one topic whose only card has an empty answer.
    """
    source = tmp_path / "topics"
    source.mkdir()
    create_topic_file(source, "geography.cards", TWO_CARD_TOPIC)
    create_topic_file(
        source,
        "nested/chemistry.topic",
        "Chemistry\n/==\nSymbol for gold?\n/-Au\n",
    )
    create_topic_file(source, "broken.cards", EMPTY_ANSWER_TOPIC)
    create_topic_file(source, "notes.txt", "not a topic file")
    return source


@pytest.fixture
def make_topic_file():
    """Expose create_topic_file to tests without importing conftest."""
    return create_topic_file
