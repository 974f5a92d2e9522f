from agent_pack.repositories.base import ISourceRepository, ITargetRepository
from agent_pack.repositories.host import HostRepository
from agent_pack.repositories.pack import PackRepository

__all__ = [
    "ISourceRepository",
    "ITargetRepository",
    "HostRepository",
    "PackRepository",
]
