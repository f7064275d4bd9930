# Standard library imports
import json
import re
from pathlib import Path
from unittest.mock import patch

# Third-party imports
import yaml
from typer.testing import CliRunner

# Local application imports
from flashtopic.cli.main import app


runner = CliRunner()


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences (color and control codes) from text."""
    ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi_escape.sub("", text)


def normalize_output(text: str) -> str:
    """
    Remove ANSI escape sequences and collapse every run of whitespace into a
    single space, so assertions do not depend on console width.
    """
    text = strip_ansi(text)
    return re.sub(r"\s+", " ", text).strip()


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


def test_check_command_reports_failures(topics_dir: Path):
    result = runner.invoke(app, ["check", "--source-dir", str(topics_dir)])
    output = normalize_output(result.stdout)

    assert result.exit_code == 1
    assert "Checking 3 topic file(s)..." in output
    assert "✗ broken.cards: Card answer is empty." in output
    assert "✓ geography.cards: 'Geography' (2 cards)" in output
    assert "✓ chemistry.topic: 'Chemistry' (1 cards)" in output
    assert "1 of 3 file(s) failed to parse." in output


def test_check_command_clean_files(topics_dir: Path):
    files = [
        str(topics_dir / "geography.cards"),
        str(topics_dir / "nested" / "chemistry.topic"),
        str(topics_dir / "notes.txt"),
    ]
    result = runner.invoke(app, ["check", *files])
    output = normalize_output(result.stdout)

    assert result.exit_code == 0, output
    assert "Checking 2 topic file(s)..." in output
    assert "All files parsed cleanly. 3 cards in total." in output


def test_check_command_no_files(tmp_path: Path):
    result = runner.invoke(app, ["check", "--source-dir", str(tmp_path)])
    assert result.exit_code == 0
    assert "No topic files found to check." in normalize_output(result.stdout)


def test_check_command_missing_source_dir(tmp_path: Path):
    result = runner.invoke(app, ["check", "--source-dir", str(tmp_path / "nope")])
    output = normalize_output(result.stdout)

    assert result.exit_code == 1
    assert "Error: Source directory does not exist:" in output
    assert "No topic files found to check." not in output


def test_check_command_warns_about_skipped_files(topics_dir: Path):
    result = runner.invoke(app, ["check", str(topics_dir / "notes.txt")])
    output = normalize_output(result.stdout)

    assert "Skipping notes.txt: not a topic file (expected .cards, .topic)." in output
    assert "No topic files found to check." in output


def test_check_command_requires_source(tmp_path: Path):
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 1
    assert "--source-dir is required" in normalize_output(result.stdout)


def test_check_command_delegates_to_logic(tmp_path: Path):
    with patch("flashtopic.cli.main.check_logic", return_value=False) as mock_logic:
        result = runner.invoke(app, ["check", "--source-dir", str(tmp_path)])

    assert result.exit_code == 0
    mock_logic.assert_called_once()
    assert mock_logic.call_args.kwargs["source_dir"] == tmp_path


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


def test_show_command_plain(topics_dir: Path):
    result = runner.invoke(
        app, ["show", str(topics_dir / "geography.cards"), "--plain"]
    )

    assert result.exit_code == 0
    assert result.stdout.strip() == (
        "Topic: Geography\n"
        "=== Card ===\n"
        "Question: What is the capital of France?\n"
        "Answer: Paris\n"
        "=== Card ===\n"
        "Question: What is the longest river in Africa?\n"
        "Answer: The Nile"
    )


def test_show_command_panels(topics_dir: Path):
    result = runner.invoke(app, ["show", str(topics_dir / "geography.cards")])
    output = normalize_output(result.stdout)

    assert result.exit_code == 0
    assert "Geography" in output
    assert "Question 1" in output
    assert "What is the capital of France?" in output
    assert "The Nile" in output


def test_show_command_topic_without_cards(tmp_path: Path, make_topic_file):
    file_path = make_topic_file(tmp_path, "lonely.cards", "Lonely\n/==\n")
    result = runner.invoke(app, ["show", str(file_path)])

    assert result.exit_code == 0
    assert "This topic has no cards." in normalize_output(result.stdout)


def test_show_command_parse_error(topics_dir: Path):
    result = runner.invoke(app, ["show", str(topics_dir / "broken.cards")])
    output = normalize_output(result.stdout)

    assert result.exit_code == 1
    assert "Kind: CardAnswerIsEmpty" in output
    assert "Card answer is empty." in output


# ---------------------------------------------------------------------------
# stats
# ---------------------------------------------------------------------------


def test_stats_command(topics_dir: Path):
    result = runner.invoke(app, ["stats", "--source-dir", str(topics_dir)])
    output = normalize_output(result.stdout)

    assert result.exit_code == 0
    assert "Errors encountered while parsing topics:" in output
    assert "File: broken.cards" in output
    assert "Geography" in output
    assert "Chemistry" in output
    assert "Total: 2 topics, 3 cards." in output


def test_stats_command_uses_envvar(topics_dir: Path, monkeypatch):
    monkeypatch.setenv("FLASHTOPIC_SOURCE_DIR", str(topics_dir))
    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "Total: 2 topics, 3 cards." in normalize_output(result.stdout)


def test_stats_command_requires_source_dir():
    result = runner.invoke(app, ["stats"])
    output = normalize_output(result.stdout)

    assert result.exit_code == 1
    assert "--source-dir is required" in output
    assert "FLASHTOPIC_SOURCE_DIR" in output


def test_stats_command_empty_directory(tmp_path: Path):
    result = runner.invoke(app, ["stats", "--source-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "No topics found. Exiting." in normalize_output(result.stdout)


def test_stats_command_only_errors(tmp_path: Path, make_topic_file):
    make_topic_file(tmp_path, "bad.cards", "\n/==\n")
    result = runner.invoke(app, ["stats", "--source-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Topic title is empty." in normalize_output(result.stdout)


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


def test_export_md_command(topics_dir: Path, tmp_path: Path):
    output_dir = tmp_path / "md"
    result = runner.invoke(
        app,
        [
            "export",
            "md",
            "--source-dir",
            str(topics_dir),
            "--output-dir",
            str(output_dir),
        ],
    )

    assert result.exit_code == 0, normalize_output(result.stdout)
    assert "Exported 2 file(s)." in normalize_output(result.stdout)
    assert (output_dir / "Geography.md").exists()
    assert (output_dir / "Chemistry.md").exists()


def test_export_yaml_command(topics_dir: Path, tmp_path: Path):
    output_dir = tmp_path / "yaml"
    result = runner.invoke(
        app,
        [
            "export",
            "yaml",
            "--source-dir",
            str(topics_dir),
            "--output-dir",
            str(output_dir),
        ],
    )

    assert result.exit_code == 0, normalize_output(result.stdout)
    data = yaml.safe_load((output_dir / "Chemistry.yaml").read_text())
    assert data == {"deck": "Chemistry", "cards": [{"q": "Symbol for gold?", "a": "Au"}]}


def test_export_json_command(topics_dir: Path, tmp_path: Path):
    output_dir = tmp_path / "json"
    result = runner.invoke(
        app,
        [
            "export",
            "json",
            "--source-dir",
            str(topics_dir),
            "--output-dir",
            str(output_dir),
        ],
    )

    assert result.exit_code == 0, normalize_output(result.stdout)
    data = json.loads((output_dir / "Geography.json").read_text())
    assert data["title"] == "Geography"
    assert len(data["cards"]) == 2


def test_export_requires_output_dir(topics_dir: Path):
    result = runner.invoke(
        app, ["export", "md", "--source-dir", str(topics_dir)]
    )

    assert result.exit_code == 1
    assert "--output-dir is required for Markdown export." in normalize_output(
        result.stdout
    )


def test_export_io_error(topics_dir: Path, tmp_path: Path):
    with patch(
        "flashtopic.cli.main.export_to_markdown",
        side_effect=IOError("Failed to create output directory: denied"),
    ):
        result = runner.invoke(
            app,
            [
                "export",
                "md",
                "--source-dir",
                str(topics_dir),
                "--output-dir",
                str(tmp_path / "out"),
            ],
        )

    assert result.exit_code == 1
    assert "An error occurred during export" in normalize_output(result.stdout)
