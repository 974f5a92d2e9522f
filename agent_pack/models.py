from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from agent_pack.agents.models import Agent
from agent_pack.commands.models import Command
from agent_pack.config.models import PackConfig


class DefinitionKind(str, Enum):
    AGENT = "agent"
    COMMAND = "command"
    CONFIG = "config"


class InstallMode(str, Enum):
    SYMLINK = "symlink"
    COPY = "copy"


class ActionKind(str, Enum):
    WRITE_TEXT = "write_text"
    SYMLINK = "symlink"
    REMOVE_SYMLINK = "remove_symlink"


class ActionStatus(str, Enum):
    NOOP = "noop"
    CREATE = "create"
    UPDATE = "update"
    FIX = "fix"
    CONFLICT = "conflict"
    REMOVE = "remove"


class InstallStatus(str, Enum):
    INSTALLED = "installed"
    MISSING = "missing"
    DRIFT = "drift"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class Pack:
    root: Path
    agents: list[Agent] = field(default_factory=list)
    commands: list[Command] = field(default_factory=list)
    config: Optional[PackConfig] = None

    def agent(self, name: str) -> Optional[Agent]:
        for item in self.agents:
            if item.name == name:
                return item
        return None

    def command(self, name: str) -> Optional[Command]:
        for item in self.commands:
            if item.name == name:
                return item
        return None

    def agent_names(self) -> set[str]:
        return {item.name for item in self.agents}


@dataclass
class PackLoadResult:
    pack: Pack
    errors: list[Exception]

    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class Action:
    kind: ActionKind
    path: Path
    status: ActionStatus
    detail: str
    source: Optional[Path] = None
    payload: Optional[Any] = None
    scope: Optional[DefinitionKind] = None


@dataclass
class InstallPlan:
    actions: list[Action]
    errors: list[Exception]
    skipped: list[str]
    mode: InstallMode = InstallMode.SYMLINK

    def is_valid(self) -> bool:
        return not self.errors

    def pending(self) -> list[Action]:
        return [action for action in self.actions if action.status != ActionStatus.NOOP]

    def summary(self) -> dict[str, int]:
        counts = {status.value: 0 for status in ActionStatus}
        for action in self.actions:
            counts[action.status.value] += 1
        counts["actions"] = len(self.actions)
        counts["errors"] = len(self.errors)
        counts["skipped"] = len(self.skipped)
        return counts


@dataclass(frozen=True)
class StatusRow:
    kind: DefinitionKind
    name: str
    target: Path
    status: InstallStatus
    detail: str
