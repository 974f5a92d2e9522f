from pathlib import Path
from typing import Any, Optional

from agent_pack.constants import (
    AGENT_DIRNAMES,
    COMMAND_DIRNAMES,
    CONFIG_FILENAME,
    STATE_FILENAME,
)
from agent_pack.repositories.base import ITargetRepository
from agent_pack.utils import read_json_safe, write_json

_STATE_KEYS = ("managed_agent_links", "managed_command_links", "managed_config_links")


def _existing_or_default(root: Path, names: tuple[str, ...]) -> Path:
    for name in names:
        candidate = root / name
        if candidate.exists():
            return candidate
    return root / names[0]


class HostRepository(ITargetRepository):
    """The host's config directory that the pack is installed into."""

    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or (Path.home() / ".config" / "opencode")

    @property
    def root(self) -> Path:
        return self._root

    @property
    def agents_dir(self) -> Path:
        return _existing_or_default(self.root, AGENT_DIRNAMES)

    @property
    def commands_dir(self) -> Path:
        return _existing_or_default(self.root, COMMAND_DIRNAMES)

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def state_path(self) -> Path:
        return self.root / STATE_FILENAME

    def load_state(self) -> dict[str, Any]:
        payload, error = read_json_safe(self.state_path)
        if error is not None or not isinstance(payload, dict):
            return {key: [] for key in _STATE_KEYS}
        for key in _STATE_KEYS:
            payload.setdefault(key, [])
            if not isinstance(payload[key], list):
                payload[key] = []
        return payload

    def save_state(self, data: dict[str, Any]) -> None:
        write_json(self.state_path, data)

    def managed_links(self) -> list[Path]:
        state = self.load_state()
        links: list[Path] = []
        for key in _STATE_KEYS:
            links.extend(Path(item) for item in state[key] if isinstance(item, str))
        return links
