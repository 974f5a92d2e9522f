import logging
import os
from typing import Mapping, Optional, Sequence

from agent_pack.lint.models import LintReport
from agent_pack.lint.rules import DEFAULT_RULES, ILintRule, LintContext
from agent_pack.models import PackLoadResult
from agent_pack.repositories.pack import PackRepository

logger = logging.getLogger(__name__)


class PackLinter:
    def __init__(
        self,
        rules: Optional[Sequence[ILintRule]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        if rules is None:
            rules = [rule() for rule in DEFAULT_RULES]
        self.rules = list(rules)
        self.environ = environ if environ is not None else os.environ

    def lint(
        self, repo: PackRepository, result: Optional[PackLoadResult] = None
    ) -> LintReport:
        result = result or repo.load_pack()
        context = LintContext(repo=repo, result=result, environ=self.environ)

        report = LintReport(
            checked_agents=len(repo.list_agent_sources()),
            checked_commands=len(repo.list_command_sources()),
        )
        for rule in self.rules:
            found = list(rule.check(context))
            logger.debug("rule %s: %d issue(s)", rule.rule_id, len(found))
            report.issues.extend(found)

        report.issues.sort(
            key=lambda item: (str(item.path or ""), item.severity.value, item.rule)
        )
        return report
