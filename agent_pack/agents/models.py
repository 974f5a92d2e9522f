"""Agent data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class AgentMode(str, Enum):
    PRIMARY = "primary"
    SUBAGENT = "subagent"
    ALL = "all"


class ToolName(str, Enum):
    BASH = "bash"
    READ = "read"
    WRITE = "write"
    EDIT = "edit"
    GLOB = "glob"
    GREP = "grep"
    TODOWRITE = "todowrite"
    WEBFETCH = "webfetch"


AGENT_MODES: frozenset[str] = frozenset(mode.value for mode in AgentMode)
KNOWN_TOOLS: frozenset[str] = frozenset(tool.value for tool in ToolName)


@dataclass(frozen=True)
class AgentMetadata:
    description: str = ""
    mode: str | None = None
    model: str = ""
    temperature: float | None = None
    disable: bool = False
    tools: dict[str, bool] = field(default_factory=dict)
    permission: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def agent_mode(self) -> AgentMode | None:
        if self.mode is None:
            return None
        try:
            return AgentMode(self.mode)
        except ValueError:
            return None

    def allows(self, tool: str) -> bool:
        """Tools are enabled unless the agent turns them off explicitly."""
        return self.tools.get(tool, True)


@dataclass(frozen=True)
class Agent:
    name: str
    source_path: Path
    metadata: AgentMetadata
    content: str
    frontmatter: dict[str, Any] | None = None

    @property
    def has_frontmatter(self) -> bool:
        return self.frontmatter is not None
