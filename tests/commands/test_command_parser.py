"""Tests for slash-command parsing and agent reference extraction."""

from pathlib import Path

from agent_pack.commands.models import Command, CommandMetadata
from agent_pack.commands.parser import parse_command, serialize_command


def _command(content: str, agent: str = "") -> Command:
    return Command(
        name="cmd",
        source_path=Path("cmd.md"),
        metadata=CommandMetadata(description="d", agent=agent),
        content=content,
    )


def test_parse_command_frontmatter(tmp_path: Path) -> None:
    (tmp_path / "audit.md").write_text(
        "---\n"
        "description: Run an audit\n"
        "agent: orchestrator\n"
        "model: anthropic/claude-sonnet-4\n"
        "subtask: true\n"
        "---\n"
        "Steps.\n",
        encoding="utf-8",
    )
    command = parse_command(tmp_path / "audit.md")

    assert command.name == "audit"
    assert command.metadata.description == "Run an audit"
    assert command.metadata.agent == "orchestrator"
    assert command.metadata.model == "anthropic/claude-sonnet-4"
    assert command.metadata.subtask is True
    assert command.content == "Steps.\n"


def test_serialize_roundtrip(tmp_path: Path) -> None:
    command = Command(
        name="ship",
        source_path=tmp_path / "ship.md",
        metadata=CommandMetadata(description="Ship it", agent="build", subtask=True),
        content="1. Build.\n",
    )
    (tmp_path / "ship.md").write_text(serialize_command(command), encoding="utf-8")

    parsed = parse_command(tmp_path / "ship.md")
    assert parsed.metadata.description == "Ship it"
    assert parsed.metadata.agent == "build"
    assert parsed.metadata.subtask is True
    assert parsed.content == "1. Build.\n"
    assert serialize_command(parsed) == serialize_command(command)


def test_references_from_bold_mentions() -> None:
    command = _command(
        "1. Launch **dependency-analyzer** agent.\n"
        "2. Run the **test-analyst** subagent.\n"
        "3. Hand off to **security-reviewer** sub-agent.\n"
        "4. **Important** note, not an agent.\n"
    )

    assert command.agent_references() == [
        "dependency-analyzer",
        "test-analyst",
        "security-reviewer",
    ]


def test_references_from_at_mentions() -> None:
    command = _command(
        "Ask @reviewer. Then @planner, but not dev@example.com or @src/main.py.\n"
    )

    assert command.agent_references() == ["reviewer", "planner"]


def test_references_ignore_code_samples() -> None:
    command = _command(
        "Use `@inline` sparingly.\n"
        "```python\n"
        "@dataclass\n"
        "class Thing: ...\n"
        "```\n"
        "Then call @doc-writer.\n"
    )

    assert command.agent_references() == ["doc-writer"]


def test_references_from_subagent_type_in_code() -> None:
    command = _command(
        "```\nTask(subagent_type: \"test-analyst\", prompt=...)\n```\n"
    )

    assert command.agent_references() == ["test-analyst"]


def test_references_frontmatter_agent_first_and_deduplicated() -> None:
    command = _command(
        "Launch **reviewer** agent, then @reviewer again.\n", agent="orchestrator"
    )

    assert command.agent_references() == ["orchestrator", "reviewer"]
