from typing import Iterable

from rich.markup import escape
from rich.panel import Panel
from rich.table import Column, Table

from agent_pack.agents.models import Agent
from agent_pack.commands.models import Command
from agent_pack.config.models import MCPServer
from agent_pack.lint.models import LintIssue, LintReport
from agent_pack.models import (
    Action,
    ActionStatus,
    DefinitionKind,
    InstallPlan,
    StatusRow,
)
from agent_pack.tui.enums import (
    ACTION_STATUS_STYLE,
    INSTALL_STATUS_STYLE,
    SEVERITY_STYLE,
    UIStyle,
)
from agent_pack.utils import compact_home_path


def _styled(value: str, style: str) -> str:
    return f"[{style}]{escape(value)}[/{style}]"


def _flag(value: bool) -> str:
    return _styled("yes", UIStyle.GREEN.value) if value else _styled("no", UIStyle.DIM.value)


class PlanTable:
    @staticmethod
    def summary_block(plan: InstallPlan, mode: str):
        counts = plan.summary()
        chips = [
            f"{status.value}={counts[status.value]}"
            for status in ActionStatus
            if counts[status.value] > 0
        ]
        if not chips:
            chips = ["none"]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Mode", mode)
        table.add_row("Install", plan.mode.value)
        table.add_row("Actions", str(counts["actions"]))
        table.add_row("Statuses", "  ".join(chips))
        return table

    @staticmethod
    def split_actions(plan: InstallPlan) -> dict[str, list[Action]]:
        groups: dict[str, list[Action]] = {kind.value: [] for kind in DefinitionKind}
        groups["stale"] = []
        for action in plan.actions:
            key = action.scope.value if action.scope is not None else "stale"
            groups[key].append(action)
        return groups

    @staticmethod
    def actions_table(actions: list[Action]) -> Table:
        table = Table(
            Column(header="Type", width=14),
            Column(header="Status", width=10),
            Column(header="Target", overflow="ellipsis", max_width=58),
            Column(header="Source", overflow="ellipsis", max_width=42),
            Column(header="Reason", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )

        for action in actions:
            source = compact_home_path(action.source) if action.source is not None else ""
            style = ACTION_STATUS_STYLE.get(action.status, UIStyle.WHITE.value)
            table.add_row(
                action.kind.value,
                _styled(action.status.value, style),
                escape(compact_home_path(action.path)),
                escape(source),
                action.detail,
            )
        return table


class ApplyTable:
    @staticmethod
    def stats_panel(applied: int, failed: int, title: str = "install") -> Panel:
        stats: dict[str, str] = {
            "applied": str(applied),
            "failed": str(failed),
        }
        table = Table(show_header=False, box=None)
        for key, value in stats.items():
            table.add_row(f"[bold]{key}[/bold]", value)
        return Panel(
            table,
            title=title,
            border_style=UIStyle.GREEN.value if failed == 0 else UIStyle.RED.value,
        )


class LintTable:
    @staticmethod
    def summary_block(report: LintReport) -> Table:
        summary = report.summary()
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Agents", str(summary["agents"]))
        table.add_row("Commands", str(summary["commands"]))
        error_style = UIStyle.RED.value if summary["errors"] else UIStyle.GREEN.value
        warning_style = (
            UIStyle.YELLOW.value if summary["warnings"] else UIStyle.GREEN.value
        )
        table.add_row("Errors", _styled(str(summary["errors"]), error_style))
        table.add_row("Warnings", _styled(str(summary["warnings"]), warning_style))
        return table

    @staticmethod
    def issues_table(issues: Iterable[LintIssue]) -> Table:
        table = Table(
            Column(header="Severity", width=9),
            Column(header="Rule", width=12),
            Column(header="File", overflow="fold", max_width=48),
            Column(header="Message", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for issue in issues:
            style = SEVERITY_STYLE.get(issue.severity, UIStyle.WHITE.value)
            path = compact_home_path(issue.path) if issue.path is not None else ""
            table.add_row(
                _styled(issue.severity.value, style),
                issue.rule,
                escape(path),
                escape(issue.message),
            )
        return table


class StatusTable:
    @staticmethod
    def rows_table(rows: list[StatusRow]) -> Table:
        table = Table(
            Column(header="Kind", width=8),
            Column(header="Name", width=28, overflow="ellipsis"),
            Column(header="Status", width=10),
            Column(header="Target", overflow="ellipsis"),
            Column(header="Detail", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for row in rows:
            style = INSTALL_STATUS_STYLE.get(row.status, UIStyle.WHITE.value)
            table.add_row(
                row.kind.value,
                escape(row.name),
                _styled(row.status.value, style),
                escape(compact_home_path(row.target)),
                row.detail,
            )
        return table


class DefinitionTable:
    @staticmethod
    def agents_table(agents: list[Agent]) -> Table:
        table = Table(
            Column(header="Agent", width=28, overflow="ellipsis"),
            Column(header="Mode", width=9),
            Column(header="Disabled tools", overflow="ellipsis", max_width=30),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for agent in agents:
            off = sorted(
                name for name in agent.metadata.tools if not agent.metadata.allows(name)
            )
            name = escape(agent.name)
            if agent.metadata.disable:
                name = _styled(f"{agent.name} (disabled)", UIStyle.DIM.value)
            table.add_row(
                name,
                escape(agent.metadata.mode or "all"),
                escape(", ".join(off)),
                escape(agent.metadata.description),
            )
        return table

    @staticmethod
    def commands_table(commands: list[Command]) -> Table:
        table = Table(
            Column(header="Command", width=28, overflow="ellipsis"),
            Column(header="Agents", overflow="ellipsis", max_width=40),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for command in commands:
            table.add_row(
                escape(f"/{command.name}"),
                escape(", ".join(command.agent_references())),
                escape(command.metadata.description),
            )
        return table

    @staticmethod
    def agent_detail(agent: Agent) -> Table:
        meta = agent.metadata
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Name", escape(agent.name))
        table.add_row("Source", escape(compact_home_path(agent.source_path)))
        table.add_row("Description", escape(meta.description))
        table.add_row("Mode", escape(meta.mode or "all"))
        if meta.model:
            table.add_row("Model", escape(meta.model))
        if meta.temperature is not None:
            table.add_row("Temperature", str(meta.temperature))
        table.add_row("Disabled", _flag(meta.disable))
        for name, value in sorted(meta.tools.items()):
            table.add_row(f"tools.{escape(name)}", _flag(value))
        for name, value in sorted(meta.permission.items()):
            table.add_row(f"permission.{escape(name)}", escape(str(value)))
        return table

    @staticmethod
    def command_detail(command: Command) -> Table:
        meta = command.metadata
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Name", escape(f"/{command.name}"))
        table.add_row("Source", escape(compact_home_path(command.source_path)))
        table.add_row("Description", escape(meta.description))
        if meta.agent:
            table.add_row("Agent", escape(meta.agent))
        if meta.model:
            table.add_row("Model", escape(meta.model))
        table.add_row("Subtask", _flag(meta.subtask))
        table.add_row("References", escape(", ".join(command.agent_references()) or "-"))
        return table


class MCPTable:
    @staticmethod
    def servers_table(servers: list[MCPServer], environ) -> Table:
        table = Table(
            Column(header="Server", width=20),
            Column(header="Type", width=7),
            Column(header="Enabled", width=8),
            Column(header="Timeout", width=8, justify="right"),
            Column(header="Env", overflow="fold", max_width=36),
            Column(header="Endpoint", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for server in servers:
            missing = set(server.missing_env(environ))
            env_cells = [
                _styled(name, UIStyle.RED.value if name in missing else UIStyle.GREEN.value)
                for name in server.required_env
            ]
            table.add_row(
                escape(server.name),
                server.type,
                _flag(server.enabled),
                f"{server.timeout}ms" if server.timeout is not None else "",
                ", ".join(env_cells),
                escape(server.endpoint),
            )
        return table
