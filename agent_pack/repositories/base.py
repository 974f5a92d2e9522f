from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class ISourceRepository(ABC):
    @property
    @abstractmethod
    def root(self) -> Path:
        raise NotImplementedError

    @property
    @abstractmethod
    def agents_dir(self) -> Path:
        raise NotImplementedError

    @property
    @abstractmethod
    def commands_dir(self) -> Path:
        raise NotImplementedError

    @property
    @abstractmethod
    def config_path(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def list_agent_sources(self) -> list[Path]:
        raise NotImplementedError

    @abstractmethod
    def list_command_sources(self) -> list[Path]:
        raise NotImplementedError


class ITargetRepository(ABC):
    @property
    @abstractmethod
    def root(self) -> Path:
        raise NotImplementedError

    @property
    @abstractmethod
    def agents_dir(self) -> Path:
        raise NotImplementedError

    @property
    @abstractmethod
    def commands_dir(self) -> Path:
        raise NotImplementedError

    @property
    @abstractmethod
    def config_path(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def load_state(self) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def save_state(self, data: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def managed_links(self) -> list[Path]:
        raise NotImplementedError
