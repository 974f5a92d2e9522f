"""Parse and serialize slash commands with YAML frontmatter."""

from __future__ import annotations

from pathlib import Path

from agent_pack.commands.models import Command, CommandMetadata
from agent_pack.frontmatter import dump_frontmatter, load_frontmatter

_KNOWN_KEYS = ("description", "agent", "model", "subtask")


def parse_command(path: Path) -> Command:
    raw, content = load_frontmatter(path)
    fm = raw or {}

    description = fm.get("description")
    agent = fm.get("agent")
    metadata = CommandMetadata(
        description=description.strip() if isinstance(description, str) else "",
        agent=agent.strip() if isinstance(agent, str) else "",
        model=str(fm.get("model") or ""),
        subtask=fm.get("subtask") is True,
        extra={key: value for key, value in fm.items() if key not in _KNOWN_KEYS},
    )
    return Command(
        name=path.stem,
        source_path=path,
        metadata=metadata,
        content=content,
        frontmatter=raw,
    )


def serialize_command(command: Command) -> str:
    fm: dict = {}
    if command.metadata.description:
        fm["description"] = command.metadata.description
    if command.metadata.agent:
        fm["agent"] = command.metadata.agent
    if command.metadata.model:
        fm["model"] = command.metadata.model
    if command.metadata.subtask:
        fm["subtask"] = True
    fm.update(command.metadata.extra)

    return dump_frontmatter(fm, command.content)
