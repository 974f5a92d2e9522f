"""Static content checks over a loaded pack."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Union

from agent_pack.agents.models import AGENT_MODES, KNOWN_TOOLS, Agent
from agent_pack.commands.models import Command
from agent_pack.config.loader import build_pack_config, schema_errors
from agent_pack.constants import (
    BUILTIN_AGENTS,
    HOST_TOOLS,
    PERMISSION_VALUES,
    TEMPERATURE_RANGE,
)
from agent_pack.errors import PackFileError
from agent_pack.lint.models import LintIssue, Severity
from agent_pack.models import PackLoadResult
from agent_pack.repositories.pack import PackRepository
from agent_pack.utils import read_json

Definition = Union[Agent, Command]


def _is_permission(value: Any) -> bool:
    return isinstance(value, str) and value in PERMISSION_VALUES


@dataclass
class LintContext:
    repo: PackRepository
    result: PackLoadResult
    environ: Mapping[str, str] = field(default_factory=dict)

    def definitions(self) -> Iterator[Definition]:
        yield from self.result.pack.agents
        yield from self.result.pack.commands


class ILintRule(ABC):
    rule_id: str = ""

    @abstractmethod
    def check(self, context: LintContext) -> Iterable[LintIssue]:
        """Yield every issue this rule finds in the pack."""

    def error(self, path: Path | None, message: str) -> LintIssue:
        return LintIssue(self.rule_id, Severity.ERROR, path, message)

    def warning(self, path: Path | None, message: str) -> LintIssue:
        return LintIssue(self.rule_id, Severity.WARNING, path, message)


class FrontmatterRule(ILintRule):
    rule_id = "frontmatter"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        config_path = context.repo.config_path
        for exc in context.result.errors:
            if isinstance(exc, PackFileError):
                if exc.path == config_path:
                    continue
                yield self.error(exc.path, exc.message)
            else:
                yield self.error(None, str(exc))

        for definition in context.definitions():
            if not definition.has_frontmatter:
                yield self.error(
                    definition.source_path, "missing frontmatter block (--- ... ---)"
                )


class DescriptionRule(ILintRule):
    rule_id = "description"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        for definition in context.definitions():
            raw = (definition.frontmatter or {}).get("description")
            if raw is None:
                yield self.error(definition.source_path, "missing description")
            elif not isinstance(raw, str):
                yield self.error(definition.source_path, "description must be a string")
            elif not raw.strip():
                yield self.error(definition.source_path, "description is empty")


class ModeRule(ILintRule):
    rule_id = "mode"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        allowed = ", ".join(sorted(AGENT_MODES))
        for agent in context.result.pack.agents:
            fm = agent.frontmatter or {}
            if "mode" not in fm:
                continue
            mode = fm["mode"]
            if not isinstance(mode, str) or mode not in AGENT_MODES:
                yield self.error(
                    agent.source_path,
                    f"invalid mode {mode!r} (expected one of: {allowed})",
                )


class ToolsRule(ILintRule):
    rule_id = "tools"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        config = context.result.pack.config
        servers = set(config.mcp) if config is not None else set()

        for agent in context.result.pack.agents:
            fm = agent.frontmatter or {}
            if "tools" not in fm:
                continue
            tools = fm["tools"]
            if not isinstance(tools, dict):
                yield self.error(agent.source_path, "tools must be a map of name: bool")
                continue
            for name, value in tools.items():
                if not isinstance(value, bool):
                    yield self.error(
                        agent.source_path,
                        f"tool flag {name!r} must be true or false, got {value!r}",
                    )
                if not self._is_known(str(name), servers):
                    yield self.warning(agent.source_path, f"unknown tool {name!r}")

    @staticmethod
    def _is_known(name: str, servers: set[str]) -> bool:
        if name in KNOWN_TOOLS or name in HOST_TOOLS:
            return True
        if "*" in name:
            return True
        return any(name.startswith(f"{server}_") for server in servers)


class TemperatureRule(ILintRule):
    rule_id = "temperature"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        low, high = TEMPERATURE_RANGE
        for agent in context.result.pack.agents:
            fm = agent.frontmatter or {}
            if "temperature" not in fm:
                continue
            value = fm["temperature"]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                yield self.error(
                    agent.source_path, f"temperature must be a number, got {value!r}"
                )
            elif not low <= value <= high:
                yield self.warning(
                    agent.source_path,
                    f"temperature {value} outside expected range [{low}, {high}]",
                )


class DisableRule(ILintRule):
    rule_id = "disable"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        for agent in context.result.pack.agents:
            fm = agent.frontmatter or {}
            if "disable" in fm and not isinstance(fm["disable"], bool):
                yield self.error(
                    agent.source_path,
                    f"disable must be true or false, got {fm['disable']!r}",
                )


class PermissionRule(ILintRule):
    rule_id = "permission"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        for agent in context.result.pack.agents:
            fm = agent.frontmatter or {}
            if "permission" not in fm:
                continue
            permission = fm["permission"]
            if not isinstance(permission, dict):
                yield self.error(agent.source_path, "permission must be a map")
                continue
            for key, value in permission.items():
                for problem in self._problems(str(key), value):
                    yield self.error(agent.source_path, problem)

    @staticmethod
    def _problems(key: str, value: Any) -> list[str]:
        allowed = "/".join(sorted(PERMISSION_VALUES))
        if isinstance(value, dict):
            return [
                f"permission {key}.{pattern} must be {allowed}, got {item!r}"
                for pattern, item in value.items()
                if not _is_permission(item)
            ]
        if not _is_permission(value):
            return [f"permission {key} must be {allowed}, got {value!r}"]
        return []


class ConfigRule(ILintRule):
    rule_id = "config"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        path = context.repo.config_path
        if not path.exists():
            yield self.warning(path, "no opencode.json in pack")
            return

        try:
            payload = read_json(path)
        except ValueError as exc:
            yield self.error(path, f"invalid JSON ({exc})")
            return

        for problem in schema_errors(payload):
            yield self.error(path, problem)

        mcp = payload.get("mcp") if isinstance(payload, dict) else None
        if isinstance(mcp, dict):
            for name, entry in mcp.items():
                if isinstance(entry, dict) and "enabled" not in entry:
                    yield self.warning(
                        path, f"mcp.{name}.enabled not set (host default applies)"
                    )


class ReferencesRule(ILintRule):
    rule_id = "references"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        known = context.result.pack.agent_names() | BUILTIN_AGENTS
        for command in context.result.pack.commands:
            for name in command.agent_references():
                if name not in known:
                    yield self.error(
                        command.source_path, f"references unknown agent {name!r}"
                    )


class DuplicatesRule(ILintRule):
    rule_id = "duplicates"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        for label, sources in (
            ("agent", context.repo.list_agent_sources()),
            ("command", context.repo.list_command_sources()),
        ):
            groups: dict[str, list[Path]] = defaultdict(list)
            for path in sources:
                groups[path.stem.casefold()].append(path)
            for paths in groups.values():
                if len(paths) < 2:
                    continue
                names = ", ".join(str(item) for item in paths)
                for path in paths:
                    yield self.error(
                        path, f"duplicate {label} name {path.stem!r} ({names})"
                    )


class EnvRule(ILintRule):
    rule_id = "env"

    def check(self, context: LintContext) -> Iterable[LintIssue]:
        config = context.result.pack.config
        if config is None:
            config = self._fallback_config(context)
        if config is None:
            return
        for server in config.mcp.values():
            if not server.enabled:
                continue
            missing = server.missing_env(context.environ)
            if missing:
                yield self.warning(
                    config.path,
                    f"mcp server {server.name!r} needs unset env: {', '.join(missing)}",
                )

    @staticmethod
    def _fallback_config(context: LintContext):
        # schema-invalid configs are not loaded but still name their servers
        path = context.repo.config_path
        try:
            payload = read_json(path)
        except (OSError, ValueError):
            return None
        if not isinstance(payload, dict):
            return None
        return build_pack_config(path, payload)


DEFAULT_RULES: tuple[type[ILintRule], ...] = (
    FrontmatterRule,
    DescriptionRule,
    ModeRule,
    ToolsRule,
    TemperatureRule,
    DisableRule,
    PermissionRule,
    ConfigRule,
    ReferencesRule,
    DuplicatesRule,
    EnvRule,
)
