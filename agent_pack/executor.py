import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from agent_pack.models import Action, ActionKind, ActionStatus, InstallPlan
from agent_pack.repositories.base import ISourceRepository, ITargetRepository
from agent_pack.utils import backup_file

logger = logging.getLogger(__name__)


@dataclass
class ExecutionContext:
    pack: ISourceRepository
    host: ITargetRepository


class ActionHandler(Protocol):
    def handle(
        self, action: Action, context: ExecutionContext
    ) -> tuple[bool, Optional[str]]: ...


class SymlinkHandler:
    def handle(
        self, action: Action, context: ExecutionContext
    ) -> tuple[bool, Optional[str]]:
        if action.status == ActionStatus.NOOP:
            return False, None
        if action.status == ActionStatus.CONFLICT:
            return False, f"Conflict (not overwritten): {action.path}"
        if action.source is None:
            return False, f"Missing source for symlink action: {action.path}"

        action.path.parent.mkdir(parents=True, exist_ok=True)
        if action.path.exists() or action.path.is_symlink():
            action.path.unlink()
        action.path.symlink_to(action.source.resolve())
        return True, None


class WriteTextHandler:
    def handle(
        self, action: Action, context: ExecutionContext
    ) -> tuple[bool, Optional[str]]:
        if action.status == ActionStatus.NOOP:
            return False, None
        if not isinstance(action.payload, str):
            return False, f"Missing text payload for write action: {action.path}"

        if action.path.is_symlink():
            action.path.unlink()
        elif action.path.exists():
            backup_file(action.path)
        action.path.parent.mkdir(parents=True, exist_ok=True)
        action.path.write_text(action.payload, encoding="utf-8")
        return True, None


class RemoveSymlinkHandler:
    def handle(
        self, action: Action, context: ExecutionContext
    ) -> tuple[bool, Optional[str]]:
        if action.status == ActionStatus.NOOP:
            return False, None
        if action.status == ActionStatus.CONFLICT:
            return False, f"Stale cleanup conflict (not symlink): {action.path}"
        if action.path.is_symlink():
            action.path.unlink()
            return True, None
        return False, None


class InstallExecutor:
    def __init__(self, pack: ISourceRepository, host: ITargetRepository) -> None:
        self.context = ExecutionContext(pack=pack, host=host)
        self.handlers: dict[ActionKind, ActionHandler] = {
            ActionKind.WRITE_TEXT: WriteTextHandler(),
            ActionKind.SYMLINK: SymlinkHandler(),
            ActionKind.REMOVE_SYMLINK: RemoveSymlinkHandler(),
        }

    def execute(
        self, plan: InstallPlan, persist_state: bool = True
    ) -> tuple[int, int, list[str]]:
        applied = 0
        failed = 0
        failures: list[str] = []

        for action in plan.actions:
            try:
                handler = self.handlers.get(action.kind)
                if handler is None:
                    failed += 1
                    failures.append(f"Unknown action kind: {action.kind.value}")
                    continue

                changed, failure = handler.handle(action, self.context)
                if failure is not None:
                    failed += 1
                    failures.append(failure)
                    continue
                if changed:
                    applied += 1
                    logger.debug(
                        "%s %s: %s", action.kind.value, action.status.value, action.path
                    )
            except OSError as exc:
                failed += 1
                failures.append(f"{action.kind.value} failed for {action.path}: {exc}")

        if persist_state:
            self._persist_state(plan=plan)
        return applied, failed, failures

    def _persist_state(self, plan: InstallPlan) -> None:
        pack = self.context.pack
        host = self.context.host

        config_links = []
        if host.config_path.is_symlink() and os.path.realpath(
            host.config_path
        ) == str(pack.config_path.resolve()):
            config_links.append(str(host.config_path))

        state = {
            "updated_at": datetime.now().isoformat(timespec="seconds"),
            "pack_root": str(pack.root.resolve()),
            "managed_agent_links": sorted(
                set(self._collect_managed_links(host.agents_dir, pack.agents_dir))
            ),
            "managed_command_links": sorted(
                set(self._collect_managed_links(host.commands_dir, pack.commands_dir))
            ),
            "managed_config_links": config_links,
            "skipped": plan.skipped,
        }
        host.save_state(state)

    @staticmethod
    def _collect_managed_links(target_root: Path, source_root: Path) -> list[str]:
        if not target_root.exists():
            return []

        managed: list[str] = []
        source_prefix = str(source_root.resolve()) + os.sep
        for child in target_root.iterdir():
            if not child.is_symlink():
                continue
            target = os.path.realpath(child)
            if target.startswith(source_prefix):
                managed.append(str(child))
        return managed
