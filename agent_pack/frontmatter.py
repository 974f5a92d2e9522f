"""Split Markdown definitions into YAML frontmatter and prose body."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from agent_pack.errors import InvalidFrontmatterError

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Return the raw frontmatter block (or None) and the remaining body."""
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, text
    return match.group(1) or "", text[match.end() :]


def load_frontmatter(path: Path) -> tuple[dict[str, Any] | None, str]:
    text = path.read_text(encoding="utf-8")
    block, body = split_frontmatter(text)
    if block is None:
        return None, body

    try:
        raw = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        detail = str(exc).splitlines()[0] if str(exc) else exc.__class__.__name__
        raise InvalidFrontmatterError(path, detail) from exc

    if raw is None:
        return {}, body
    if not isinstance(raw, dict):
        raise InvalidFrontmatterError(path, "must be a key-value mapping")
    return raw, body


def dump_frontmatter(fields: dict[str, Any], body: str) -> str:
    parts: list[str] = []
    if fields:
        parts.append("---")
        parts.append(
            yaml.dump(
                fields, default_flow_style=False, sort_keys=False, allow_unicode=True
            ).rstrip()
        )
        parts.append("---")

    parts.append(body)
    return "\n".join(parts)
