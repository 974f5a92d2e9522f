"""opencode.json data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

_ENV_REF_RE = re.compile(r"\{env:([A-Za-z_][A-Za-z0-9_]*)\}")


class MCPServerType(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


def env_references(value: Any) -> list[str]:
    """Collect `{env:NAME}` placeholders from any nested JSON value."""
    found: list[str] = []
    if isinstance(value, str):
        found.extend(_ENV_REF_RE.findall(value))
    elif isinstance(value, dict):
        for item in value.values():
            found.extend(env_references(item))
    elif isinstance(value, list):
        for item in value:
            found.extend(env_references(item))
    return found


@dataclass(frozen=True)
class MCPServer:
    name: str
    type: str = MCPServerType.LOCAL.value
    enabled: bool = True
    timeout: int | None = None
    command: list[str] = field(default_factory=list)
    url: str = ""
    environment: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    required_env: list[str] = field(default_factory=list)

    def missing_env(self, environ: Mapping[str, str]) -> list[str]:
        return [name for name in self.required_env if not environ.get(name)]

    @property
    def endpoint(self) -> str:
        if self.url:
            return self.url
        return " ".join(self.command)


@dataclass(frozen=True)
class PackConfig:
    path: Path
    schema_url: str = ""
    mcp: dict[str, MCPServer] = field(default_factory=dict)
    tools: dict[str, bool] = field(default_factory=dict)
    permission: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)
