"""Parse and serialize agents with YAML frontmatter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from agent_pack.agents.models import Agent, AgentMetadata
from agent_pack.frontmatter import dump_frontmatter, load_frontmatter

logger = logging.getLogger(__name__)

_KNOWN_KEYS = (
    "description",
    "mode",
    "model",
    "temperature",
    "disable",
    "tools",
    "permission",
)


def _as_temperature(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def parse_agent(path: Path) -> Agent:
    raw, content = load_frontmatter(path)
    name = path.stem
    fm = raw or {}

    tools_raw = fm.get("tools", {})
    if not isinstance(tools_raw, dict):
        tools_raw = {}
    tools = {
        str(key): value for key, value in tools_raw.items() if isinstance(value, bool)
    }

    permission = fm.get("permission", {})
    if not isinstance(permission, dict):
        permission = {}

    mode = fm.get("mode")
    description = fm.get("description")

    metadata = AgentMetadata(
        description=description.strip() if isinstance(description, str) else "",
        mode=str(mode) if mode is not None else None,
        model=str(fm.get("model") or ""),
        temperature=_as_temperature(fm.get("temperature")),
        disable=fm.get("disable") is True,
        tools=tools,
        permission=permission,
        extra={key: value for key, value in fm.items() if key not in _KNOWN_KEYS},
    )
    logger.debug("parsed agent %s from %s", name, path)
    return Agent(
        name=name,
        source_path=path,
        metadata=metadata,
        content=content,
        frontmatter=raw,
    )


def serialize_agent(agent: Agent) -> str:
    fm: dict = {}
    if agent.metadata.description:
        fm["description"] = agent.metadata.description
    if agent.metadata.mode:
        fm["mode"] = agent.metadata.mode
    if agent.metadata.model:
        fm["model"] = agent.metadata.model
    if agent.metadata.temperature is not None:
        fm["temperature"] = agent.metadata.temperature
    if agent.metadata.disable:
        fm["disable"] = True
    if agent.metadata.tools:
        fm["tools"] = dict(agent.metadata.tools)
    if agent.metadata.permission:
        fm["permission"] = agent.metadata.permission
    fm.update(agent.metadata.extra)

    return dump_frontmatter(fm, agent.content)
