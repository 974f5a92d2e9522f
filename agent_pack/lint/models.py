from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class LintIssue:
    rule: str
    severity: Severity
    path: Optional[Path]
    message: str


@dataclass
class LintReport:
    issues: list[LintIssue] = field(default_factory=list)
    checked_agents: int = 0
    checked_commands: int = 0

    @property
    def errors(self) -> list[LintIssue]:
        return [item for item in self.issues if item.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[LintIssue]:
        return [item for item in self.issues if item.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def failed(self, strict: bool = False) -> bool:
        if strict:
            return bool(self.issues)
        return not self.ok

    def by_rule(self, rule: str) -> list[LintIssue]:
        return [item for item in self.issues if item.rule == rule]

    def summary(self) -> dict[str, int]:
        return {
            "agents": self.checked_agents,
            "commands": self.checked_commands,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }
