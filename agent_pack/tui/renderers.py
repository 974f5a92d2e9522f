from typing import Mapping

from rich.console import Console
from rich.markdown import Markdown

from agent_pack.agents.models import Agent
from agent_pack.commands.models import Command
from agent_pack.config.models import MCPServer
from agent_pack.lint.models import LintReport
from agent_pack.models import InstallPlan, InstallStatus, StatusRow
from agent_pack.status import StatusService
from agent_pack.tui.enums import UIStyle
from agent_pack.tui.sections import UISection
from agent_pack.tui.tables import (
    ApplyTable,
    DefinitionTable,
    LintTable,
    MCPTable,
    PlanTable,
    StatusTable,
)
from agent_pack.utils import compact_home_path

_GROUP_TITLES = {
    "agent": ("agents", UIStyle.CYAN.value),
    "command": ("commands", UIStyle.MAGENTA.value),
    "config": ("config", UIStyle.GREEN.value),
    "stale": ("stale links", UIStyle.YELLOW.value),
}


class PackConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_plan(self, plan: InstallPlan, mode: str) -> None:
        self.console.print(
            UISection.wrap(
                "plan overview",
                PlanTable.summary_block(plan, mode=mode),
                style=UIStyle.BLUE.value,
            )
        )

        groups = PlanTable.split_actions(plan)
        for key, actions in groups.items():
            if not actions:
                continue
            title, style = _GROUP_TITLES[key]
            self.console.print(
                UISection.wrap(title, PlanTable.actions_table(actions), style=style)
            )
        if not plan.actions:
            self.console.print(
                UISection.note("actions", "No actions required.", style=UIStyle.DIM.value)
            )

        if plan.errors:
            self.console.print(
                UISection.bullets("errors", plan.errors, style=UIStyle.RED.value)
            )
        if plan.skipped:
            self.console.print(
                UISection.bullets("skipped", plan.skipped, style=UIStyle.YELLOW.value)
            )

    def render_apply_result(
        self, applied: int, failed: int, failures: list[str], title: str = "install"
    ) -> None:
        self.console.print(
            ApplyTable.stats_panel(applied=applied, failed=failed, title=title)
        )
        if failures:
            self.console.print(
                UISection.bullets("failures", failures, style=UIStyle.RED.value)
            )

    def render_lint(self, report: LintReport, strict: bool = False) -> None:
        failed = report.failed(strict=strict)
        self.console.print(
            UISection.wrap(
                "lint",
                LintTable.summary_block(report),
                style=UIStyle.RED.value if failed else UIStyle.GREEN.value,
            )
        )
        if report.issues:
            self.console.print(
                UISection.wrap(
                    "issues",
                    LintTable.issues_table(report.issues),
                    style=UIStyle.RED.value if report.errors else UIStyle.YELLOW.value,
                )
            )
        else:
            self.console.print(
                UISection.note("issues", "No issues found.", style=UIStyle.GREEN.value)
            )

    def render_status(self, rows: list[StatusRow]) -> None:
        if not rows:
            self.console.print(
                UISection.note(
                    "status", "Pack has no definitions.", style=UIStyle.YELLOW.value
                )
            )
            return

        style = UIStyle.GREEN.value
        if not StatusService.is_synced(rows):
            style = UIStyle.YELLOW.value
        if any(row.status == InstallStatus.CONFLICT for row in rows):
            style = UIStyle.RED.value
        self.console.print(
            UISection.wrap("install status", StatusTable.rows_table(rows), style=style)
        )

    def render_agents(self, agents: list[Agent]) -> None:
        if not agents:
            self.console.print(
                UISection.note("agents", "No agents found.", style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap(
                "agents", DefinitionTable.agents_table(agents), style=UIStyle.CYAN.value
            )
        )

    def render_agent(self, agent: Agent) -> None:
        self.console.print(
            UISection.wrap(
                f"agent: {agent.name}",
                DefinitionTable.agent_detail(agent),
                style=UIStyle.CYAN.value,
            )
        )
        self.console.print(Markdown(agent.content.strip() or "_(empty body)_"))

    def render_commands(self, commands: list[Command]) -> None:
        if not commands:
            self.console.print(
                UISection.note(
                    "commands", "No commands found.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "commands",
                DefinitionTable.commands_table(commands),
                style=UIStyle.MAGENTA.value,
            )
        )

    def render_command(self, command: Command) -> None:
        self.console.print(
            UISection.wrap(
                f"command: /{command.name}",
                DefinitionTable.command_detail(command),
                style=UIStyle.MAGENTA.value,
            )
        )
        self.console.print(Markdown(command.content.strip() or "_(empty body)_"))

    def render_mcp(self, servers: list[MCPServer], environ: Mapping[str, str]) -> None:
        if not servers:
            self.console.print(
                UISection.note(
                    "mcp", "No MCP servers configured.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "mcp servers",
                MCPTable.servers_table(servers, environ),
                style=UIStyle.BLUE.value,
            )
        )

    def render_mcp_toggled(self, name: str, enabled: bool, changed: bool) -> None:
        state = "enabled" if enabled else "disabled"
        body = f"MCP server [bold]{name}[/bold] {state}."
        if not changed:
            body = f"MCP server [bold]{name}[/bold] already {state}."
        self.console.print(
            UISection.note(
                "mcp",
                body,
                style=UIStyle.GREEN.value if enabled else UIStyle.YELLOW.value,
            )
        )

    def render_created(self, kind: str, name: str, path: str) -> None:
        self.console.print(
            UISection.note(
                kind,
                f"Created {kind}: [bold]{name}[/bold]\n{compact_home_path(path)}",
                style=UIStyle.GREEN.value,
            )
        )
