"""Slash-command data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_CODE_FENCE_RE = re.compile(r"^(```|~~~).*?^\1[ \t]*$", re.DOTALL | re.MULTILINE)
_INLINE_CODE_RE = re.compile(r"`[^`\n]*`")

_BOLD_AGENT_RE = re.compile(
    r"\*\*([A-Za-z0-9][A-Za-z0-9_-]*)\*\*\s+(?:sub-?)?agents?\b", re.IGNORECASE
)
_MENTION_RE = re.compile(r"(?<![\w.@/])@([A-Za-z][A-Za-z0-9_-]*)(?![\w/-]|\.\w)")
_SUBAGENT_TYPE_RE = re.compile(
    r"subagent_type[\"']?\s*[:=]\s*[\"']?([A-Za-z0-9][A-Za-z0-9_-]*)"
)


@dataclass(frozen=True)
class CommandMetadata:
    description: str = ""
    agent: str = ""
    model: str = ""
    subtask: bool = False
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Command:
    name: str
    source_path: Path
    metadata: CommandMetadata
    content: str
    frontmatter: dict[str, Any] | None = None

    @property
    def has_frontmatter(self) -> bool:
        return self.frontmatter is not None

    def agent_references(self) -> list[str]:
        """Agent names this command launches, in first-mention order."""
        found: list[str] = []
        if self.metadata.agent:
            found.append(self.metadata.agent)

        prose = _INLINE_CODE_RE.sub("", _CODE_FENCE_RE.sub("", self.content))
        for pattern, text in (
            (_BOLD_AGENT_RE, prose),
            (_MENTION_RE, prose),
            # subagent_type usually sits inside a code sample
            (_SUBAGENT_TYPE_RE, self.content),
        ):
            for match in pattern.finditer(text):
                found.append(match.group(1))

        seen: set[str] = set()
        ordered: list[str] = []
        for name in found:
            if name in seen:
                continue
            seen.add(name)
            ordered.append(name)
        return ordered
