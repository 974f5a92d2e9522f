import logging
from pathlib import Path
from typing import Optional

from agent_pack.agents.models import Agent
from agent_pack.agents.parser import parse_agent
from agent_pack.commands.models import Command
from agent_pack.commands.parser import parse_command
from agent_pack.config.loader import load_pack_config
from agent_pack.config.models import PackConfig
from agent_pack.constants import (
    AGENT_DIRNAMES,
    COMMAND_DIRNAMES,
    CONFIG_FILENAME,
    DEFINITION_SUFFIX,
    README_FILENAME,
)
from agent_pack.errors import PackError, PackFileError
from agent_pack.models import Pack, PackLoadResult
from agent_pack.repositories.base import ISourceRepository

logger = logging.getLogger(__name__)


def _first_existing(root: Path, names: tuple[str, ...]) -> Path:
    for name in names:
        candidate = root / name
        if candidate.is_dir():
            return candidate
    return root / names[0]


def _list_definitions(root: Path) -> list[Path]:
    if not root.is_dir():
        return []
    result: list[Path] = []
    for path in sorted(root.rglob(f"*{DEFINITION_SUFFIX}")):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.name == README_FILENAME:
            continue
        if not path.is_file():
            continue
        result.append(path)
    return result


class PackRepository(ISourceRepository):
    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or Path.cwd()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def agents_dir(self) -> Path:
        return _first_existing(self.root, AGENT_DIRNAMES)

    @property
    def commands_dir(self) -> Path:
        return _first_existing(self.root, COMMAND_DIRNAMES)

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def readme_path(self) -> Path:
        return self.root / README_FILENAME

    def list_agent_sources(self) -> list[Path]:
        return _list_definitions(self.agents_dir)

    def list_command_sources(self) -> list[Path]:
        return _list_definitions(self.commands_dir)

    def load_agents(self, errors: list[Exception]) -> list[Agent]:
        agents: list[Agent] = []
        for path in self.list_agent_sources():
            try:
                agents.append(parse_agent(path))
            except PackError as exc:
                errors.append(exc)
            except (OSError, UnicodeDecodeError) as exc:
                errors.append(PackFileError(path, f"Unreadable agent file ({exc})"))
        return agents

    def load_commands(self, errors: list[Exception]) -> list[Command]:
        commands: list[Command] = []
        for path in self.list_command_sources():
            try:
                commands.append(parse_command(path))
            except PackError as exc:
                errors.append(exc)
            except (OSError, UnicodeDecodeError) as exc:
                errors.append(PackFileError(path, f"Unreadable command file ({exc})"))
        return commands

    def load_config(self, errors: list[Exception]) -> Optional[PackConfig]:
        if not self.config_path.exists():
            return None
        try:
            return load_pack_config(self.config_path)
        except PackError as exc:
            errors.append(exc)
            return None

    def load_pack(self) -> PackLoadResult:
        errors: list[Exception] = []
        pack = Pack(
            root=self.root,
            agents=self.load_agents(errors),
            commands=self.load_commands(errors),
            config=self.load_config(errors),
        )
        logger.debug(
            "loaded pack %s: %d agents, %d commands, %d errors",
            self.root,
            len(pack.agents),
            len(pack.commands),
            len(errors),
        )
        return PackLoadResult(pack=pack, errors=errors)
