import os
from pathlib import Path

from agent_pack.models import DefinitionKind, InstallStatus, StatusRow
from agent_pack.repositories.base import ISourceRepository, ITargetRepository
from agent_pack.utils import same_bytes


class StatusService:
    def build(
        self, pack: ISourceRepository, host: ITargetRepository
    ) -> list[StatusRow]:
        rows: list[StatusRow] = []
        for source in pack.list_agent_sources():
            rows.append(
                self._row(DefinitionKind.AGENT, source, host.agents_dir / source.name)
            )
        for source in pack.list_command_sources():
            rows.append(
                self._row(
                    DefinitionKind.COMMAND, source, host.commands_dir / source.name
                )
            )
        if pack.config_path.exists():
            rows.append(
                self._row(DefinitionKind.CONFIG, pack.config_path, host.config_path)
            )
        return rows

    @staticmethod
    def _row(kind: DefinitionKind, source: Path, target: Path) -> StatusRow:
        name = source.stem if kind != DefinitionKind.CONFIG else source.name

        if target.is_symlink():
            if os.path.realpath(target) == str(source.resolve()):
                return StatusRow(kind, name, target, InstallStatus.INSTALLED, "linked")
            return StatusRow(
                kind, name, target, InstallStatus.DRIFT, "symlink points elsewhere"
            )

        if not target.exists():
            return StatusRow(kind, name, target, InstallStatus.MISSING, "not installed")

        if same_bytes(target, source):
            return StatusRow(kind, name, target, InstallStatus.INSTALLED, "copied")
        return StatusRow(
            kind, name, target, InstallStatus.CONFLICT, "different file in place"
        )

    @staticmethod
    def is_synced(rows: list[StatusRow]) -> bool:
        return all(row.status == InstallStatus.INSTALLED for row in rows)
