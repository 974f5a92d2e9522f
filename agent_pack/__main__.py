import logging
import os
import re
from pathlib import Path
from typing import Any, Dict

import click
from rich.console import Console

from agent_pack.agents.models import AGENT_MODES, Agent, AgentMetadata, AgentMode
from agent_pack.agents.parser import serialize_agent
from agent_pack.commands.models import Command, CommandMetadata
from agent_pack.commands.parser import serialize_command
from agent_pack.config.loader import load_pack_config, set_server_enabled
from agent_pack.constants import (
    AGENT_PACK_ROOT_ENV,
    DEFINITION_SUFFIX,
    OPENCODE_CONFIG_DIR_ENV,
)
from agent_pack.errors import PackError
from agent_pack.executor import InstallExecutor
from agent_pack.lint.linter import PackLinter
from agent_pack.logs import configure_logging
from agent_pack.models import InstallMode, Pack
from agent_pack.planner import InstallPlanner, UninstallPlanner
from agent_pack.repositories import HostRepository, PackRepository
from agent_pack.status import StatusService
from agent_pack.tui import PackConsoleUI

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def _repos_from_obj(obj: Dict[str, Any]) -> tuple[PackRepository, HostRepository]:
    pack = PackRepository(obj.get("pack_root"))
    host = HostRepository(obj.get("host_root"))
    return pack, host


def _load_pack(pack_repo: PackRepository) -> Pack:
    result = pack_repo.load_pack()
    for error in result.errors:
        logger.warning("%s", error)
    return result.pack


def _validate_name(name: str) -> str:
    if not _NAME_RE.match(name):
        raise click.ClickException(
            f"Invalid name {name!r}: use lowercase letters, digits, '-' or '_'"
        )
    return name


def _install_options(func):
    func = click.option(
        "--no-config",
        is_flag=True,
        help="Do not install the pack's opencode.json.",
    )(func)
    func = click.option(
        "--copy",
        is_flag=True,
        help="Copy files instead of symlinking them.",
    )(func)
    return func


def _build_plan(
    pack_repo: PackRepository, host: HostRepository, copy: bool, no_config: bool
):
    mode = InstallMode.COPY if copy else InstallMode.SYMLINK
    try:
        return InstallPlanner(
            pack=pack_repo, host=host, mode=mode, include_config=not no_config
        ).build()
    except (PackError, OSError, ValueError) as exc:
        raise click.ClickException(f"Fatal: {exc}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--pack",
    "pack_root",
    type=click.Path(path_type=Path, file_okay=False),
    envvar=AGENT_PACK_ROOT_ENV,
    help="Pack root containing agent/, command/ and opencode.json.",
)
@click.option(
    "--host",
    "host_root",
    type=click.Path(path_type=Path, file_okay=False),
    envvar=OPENCODE_CONFIG_DIR_ENV,
    help="Host config directory (default: ~/.config/opencode).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context, pack_root: Path | None, host_root: Path | None, verbose: bool
) -> None:
    """Lint and install OpenCode agent/command packs."""
    configure_logging(verbose)
    ctx.obj = {
        "pack_root": pack_root.expanduser().resolve() if pack_root else None,
        "host_root": host_root.expanduser().resolve() if host_root else None,
    }


@cli.command(help="Check agent, command and config files for problems.")
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
@click.pass_obj
def lint(obj: Dict[str, Any], strict: bool) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)

    report = PackLinter().lint(pack_repo)
    ui.render_lint(report, strict=strict)

    if report.failed(strict=strict):
        raise click.exceptions.Exit(1)


@cli.command(help="Build and print a dry-run install plan.")
@_install_options
@click.pass_obj
def plan(obj: Dict[str, Any], copy: bool, no_config: bool) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, host = _repos_from_obj(obj)

    plan_result = _build_plan(pack_repo, host, copy, no_config)
    ui.render_plan(plan_result, mode="plan")

    if not plan_result.is_valid():
        raise click.exceptions.Exit(1)


@cli.command(help="Install the pack into the host config directory.")
@_install_options
@click.option("--skip-lint", is_flag=True, help="Install even if lint finds errors.")
@click.pass_obj
def install(obj: Dict[str, Any], copy: bool, no_config: bool, skip_lint: bool) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, host = _repos_from_obj(obj)

    if not skip_lint:
        report = PackLinter().lint(pack_repo)
        if not report.ok:
            ui.render_lint(report)
            raise click.ClickException(
                "Install aborted: pack has lint errors (use --skip-lint to override)."
            )

    plan_result = _build_plan(pack_repo, host, copy, no_config)
    ui.render_plan(plan_result, mode="install")

    if not plan_result.is_valid():
        raise click.ClickException("Install aborted due to planning errors above.")

    if not plan_result.pending():
        ui.render_apply_result(applied=0, failed=0, failures=[])
        return

    applied, failed, failures = InstallExecutor(pack=pack_repo, host=host).execute(
        plan_result
    )
    ui.render_apply_result(applied, failed, failures)

    if failed:
        raise click.exceptions.Exit(1)


@cli.command(help="Remove every host symlink that points into the pack.")
@click.pass_obj
def uninstall(obj: Dict[str, Any]) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, host = _repos_from_obj(obj)

    plan_result = UninstallPlanner(pack=pack_repo, host=host).build()
    ui.render_plan(plan_result, mode="uninstall")

    applied, failed, failures = InstallExecutor(pack=pack_repo, host=host).execute(
        plan_result
    )
    ui.render_apply_result(applied, failed, failures, title="uninstall")

    if failed:
        raise click.exceptions.Exit(1)


@cli.command(help="Show install status for every pack definition.")
@click.pass_obj
def status(obj: Dict[str, Any]) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, host = _repos_from_obj(obj)
    ui.render_status(StatusService().build(pack_repo, host))


@cli.group(help="Inspect and scaffold agent definitions.")
def agents() -> None:
    pass


@agents.command("list", help="List agents in the pack.")
@click.option(
    "--mode",
    type=click.Choice(sorted(AGENT_MODES), case_sensitive=False),
    help="Only show agents with this mode.",
)
@click.pass_obj
def agents_list(obj: Dict[str, Any], mode: str | None) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    items = _load_pack(pack_repo).agents
    if mode is not None:
        wanted = AgentMode(mode.lower())
        items = [
            item for item in items if (item.metadata.agent_mode or AgentMode.ALL) == wanted
        ]
    ui.render_agents(items)


@agents.command("show", help="Show one agent's metadata and prompt.")
@click.argument("name")
@click.pass_obj
def agents_show(obj: Dict[str, Any], name: str) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    agent = _load_pack(pack_repo).agent(name)
    if agent is None:
        raise click.ClickException(f"Agent not found: {name}")
    ui.render_agent(agent)


@agents.command("new", help="Create a new agent definition file.")
@click.argument("name")
@click.option("--description", required=True, help="One-line agent description.")
@click.option(
    "--mode",
    type=click.Choice(sorted(AGENT_MODES), case_sensitive=False),
    default="subagent",
    show_default=True,
)
@click.pass_obj
def agents_new(obj: Dict[str, Any], name: str, description: str, mode: str) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    _validate_name(name)

    path = pack_repo.agents_dir / f"{name}{DEFINITION_SUFFIX}"
    if path.exists():
        raise click.ClickException(f"Agent already exists: {path}")

    agent = Agent(
        name=name,
        source_path=path,
        metadata=AgentMetadata(description=description, mode=mode.lower()),
        content=f"# {name}\n\nDescribe how this agent should work.\n",
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_agent(agent), encoding="utf-8")
    ui.render_created("agent", name, str(path))


@cli.group(help="Inspect and scaffold slash-command definitions.")
def commands() -> None:
    pass


@commands.command("list", help="List slash commands in the pack.")
@click.pass_obj
def commands_list(obj: Dict[str, Any]) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    ui.render_commands(_load_pack(pack_repo).commands)


@commands.command("show", help="Show one command's metadata and workflow.")
@click.argument("name")
@click.pass_obj
def commands_show(obj: Dict[str, Any], name: str) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    command = _load_pack(pack_repo).command(name.lstrip("/"))
    if command is None:
        raise click.ClickException(f"Command not found: {name}")
    ui.render_command(command)


@commands.command("new", help="Create a new slash-command definition file.")
@click.argument("name")
@click.option("--description", required=True, help="One-line command description.")
@click.option("--agent", "agent_name", default="", help="Agent the command runs as.")
@click.pass_obj
def commands_new(
    obj: Dict[str, Any], name: str, description: str, agent_name: str
) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    _validate_name(name)

    path = pack_repo.commands_dir / f"{name}{DEFINITION_SUFFIX}"
    if path.exists():
        raise click.ClickException(f"Command already exists: {path}")

    command = Command(
        name=name,
        source_path=path,
        metadata=CommandMetadata(description=description, agent=agent_name),
        content="## Execution flow\n\n1. Describe the first step.\n",
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_command(command), encoding="utf-8")
    ui.render_created("command", name, str(path))


@cli.group(help="Inspect and toggle MCP servers in opencode.json.")
def mcp() -> None:
    pass


@mcp.command("list", help="List MCP servers and their required env vars.")
@click.pass_obj
def mcp_list(obj: Dict[str, Any]) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    try:
        config = load_pack_config(pack_repo.config_path)
    except PackError as exc:
        raise click.ClickException(str(exc))
    ui.render_mcp(list(config.mcp.values()), os.environ)


def _toggle_server(obj: Dict[str, Any], name: str, enabled: bool) -> None:
    ui = PackConsoleUI(Console())
    pack_repo, _ = _repos_from_obj(obj)
    try:
        changed = set_server_enabled(pack_repo.config_path, name, enabled)
    except PackError as exc:
        raise click.ClickException(str(exc))
    ui.render_mcp_toggled(name, enabled, changed)


@mcp.command("enable", help="Enable an MCP server.")
@click.argument("name")
@click.pass_obj
def mcp_enable(obj: Dict[str, Any], name: str) -> None:
    _toggle_server(obj, name, True)


@mcp.command("disable", help="Disable an MCP server.")
@click.argument("name")
@click.pass_obj
def mcp_disable(obj: Dict[str, Any], name: str) -> None:
    _toggle_server(obj, name, False)


def main() -> int:
    try:
        result = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
