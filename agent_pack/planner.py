import logging
import os
from pathlib import Path

from agent_pack.errors import PackFileError
from agent_pack.models import (
    Action,
    ActionKind,
    ActionStatus,
    DefinitionKind,
    InstallMode,
    InstallPlan,
)
from agent_pack.repositories.base import ISourceRepository, ITargetRepository
from agent_pack.utils import is_under, same_text

logger = logging.getLogger(__name__)


def _canonical_target(path: Path) -> str:
    return str(path.resolve())


def _points_into(link: Path, root: Path) -> bool:
    if not link.is_symlink():
        return False
    return is_under(Path(os.path.realpath(link)), root)


class InstallPlanner:
    def __init__(
        self,
        pack: ISourceRepository,
        host: ITargetRepository,
        mode: InstallMode = InstallMode.SYMLINK,
        include_config: bool = True,
    ) -> None:
        self.pack = pack
        self.host = host
        self.mode = mode
        self.include_config = include_config

        self.actions: list[Action] = []
        self.errors: list[Exception] = []
        self.skipped: list[str] = []

        self._desired_links: list[Path] = []

    def build(self) -> InstallPlan:
        self._plan_definitions(
            self.pack.list_agent_sources(), self.host.agents_dir, DefinitionKind.AGENT
        )
        self._plan_definitions(
            self.pack.list_command_sources(),
            self.host.commands_dir,
            DefinitionKind.COMMAND,
        )
        if self.include_config:
            self._plan_config()
        self._plan_stale_cleanup()
        logger.debug(
            "install plan (%s): %d actions, %d errors",
            self.mode.value,
            len(self.actions),
            len(self.errors),
        )
        return InstallPlan(
            actions=self.actions,
            errors=self.errors,
            skipped=self.skipped,
            mode=self.mode,
        )

    def _plan_definitions(
        self, sources: list[Path], target_root: Path, scope: DefinitionKind
    ) -> None:
        claimed: dict[str, Path] = {}
        for source in sources:
            target = target_root / source.name
            key = source.name.casefold()
            if key in claimed:
                self.errors.append(
                    PackFileError(
                        source,
                        f"Duplicate {scope.value} name (also {claimed[key]})",
                    )
                )
                continue
            claimed[key] = source
            self._plan_one(target, source, scope)

    def _plan_config(self) -> None:
        source = self.pack.config_path
        if not source.exists():
            self.skipped.append(f"Pack has no config, skipped: {source}")
            return
        self._plan_one(self.host.config_path, source, DefinitionKind.CONFIG)

    def _plan_one(self, target: Path, source: Path, scope: DefinitionKind) -> None:
        if self.mode == InstallMode.COPY:
            try:
                action = self._plan_copy(target, source)
            except (OSError, UnicodeDecodeError) as exc:
                self.errors.append(
                    PackFileError(source, f"Unreadable {scope.value} file ({exc})")
                )
                return
        else:
            action = self._plan_symlink(target, source)
            self._desired_links.append(target)
        action.scope = scope
        self.actions.append(action)
        if action.status == ActionStatus.CONFLICT:
            self.skipped.append(
                f"{scope.value.capitalize()} link skipped (conflict): {target}"
            )

    def _plan_stale_cleanup(self) -> None:
        desired = {str(path) for path in self._desired_links}
        roots = [self.host.agents_dir, self.host.commands_dir]
        for old in self.host.managed_links():
            if str(old) in desired:
                continue
            if old == self.host.config_path and not self.include_config:
                continue
            if old != self.host.config_path and not any(
                is_under(old.parent, root) for root in roots
            ):
                continue
            if old.is_symlink():
                self.actions.append(
                    Action(
                        ActionKind.REMOVE_SYMLINK,
                        old,
                        ActionStatus.REMOVE,
                        "remove stale managed symlink",
                    )
                )
            elif old.exists():
                self.actions.append(
                    Action(
                        ActionKind.REMOVE_SYMLINK,
                        old,
                        ActionStatus.CONFLICT,
                        "stale managed path is not a symlink",
                    )
                )
                self.skipped.append(f"Stale link cleanup skipped (not symlink): {old}")

    @staticmethod
    def _plan_symlink(target: Path, source: Path) -> Action:
        desired = _canonical_target(source)
        if target.exists() or target.is_symlink():
            if target.is_symlink():
                current = os.path.realpath(target)
                if current == desired:
                    return Action(
                        ActionKind.SYMLINK,
                        target,
                        ActionStatus.NOOP,
                        "already linked",
                        source=source,
                    )
                return Action(
                    ActionKind.SYMLINK,
                    target,
                    ActionStatus.FIX,
                    "symlink points elsewhere",
                    source=source,
                )
            return Action(
                ActionKind.SYMLINK,
                target,
                ActionStatus.CONFLICT,
                "non-symlink path exists",
                source=source,
            )
        return Action(
            ActionKind.SYMLINK,
            target,
            ActionStatus.CREATE,
            "create symlink",
            source=source,
        )

    @staticmethod
    def _plan_copy(target: Path, source: Path) -> Action:
        content = source.read_text(encoding="utf-8")
        if target.is_symlink():
            return Action(
                ActionKind.WRITE_TEXT,
                target,
                ActionStatus.UPDATE,
                "replace symlink with copy",
                source=source,
                payload=content,
            )
        if same_text(target, content):
            return Action(
                ActionKind.WRITE_TEXT,
                target,
                ActionStatus.NOOP,
                "already up to date",
                source=source,
                payload=content,
            )
        if target.exists():
            return Action(
                ActionKind.WRITE_TEXT,
                target,
                ActionStatus.UPDATE,
                "content differs",
                source=source,
                payload=content,
            )
        return Action(
            ActionKind.WRITE_TEXT,
            target,
            ActionStatus.CREATE,
            "copy file",
            source=source,
            payload=content,
        )


class UninstallPlanner:
    """Plan removal of every host symlink that resolves into the pack."""

    def __init__(self, pack: ISourceRepository, host: ITargetRepository) -> None:
        self.pack = pack
        self.host = host

    def build(self) -> InstallPlan:
        pack_root = self.pack.root
        candidates: dict[str, Path] = {
            str(path): path for path in self.host.managed_links()
        }
        for root in (self.host.agents_dir, self.host.commands_dir):
            if root.is_dir():
                for child in root.iterdir():
                    candidates.setdefault(str(child), child)
        candidates.setdefault(str(self.host.config_path), self.host.config_path)

        actions: list[Action] = []
        for key in sorted(candidates):
            path = candidates[key]
            if _points_into(path, pack_root):
                actions.append(
                    Action(
                        ActionKind.REMOVE_SYMLINK,
                        path,
                        ActionStatus.REMOVE,
                        "remove pack symlink",
                    )
                )
        return InstallPlan(actions=actions, errors=[], skipped=[])
