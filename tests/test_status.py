from pathlib import Path

from agent_pack.executor import InstallExecutor
from agent_pack.models import DefinitionKind, InstallStatus
from agent_pack.planner import InstallPlanner
from agent_pack.repositories import HostRepository, PackRepository
from agent_pack.status import StatusService


def _rows(pack_root: Path, host_root: Path):
    return StatusService().build(PackRepository(pack_root), HostRepository(host_root))


def test_everything_missing_before_install(sample_pack: Path, host_root: Path) -> None:
    rows = _rows(sample_pack, host_root)

    assert len(rows) == 6
    assert {row.status for row in rows} == {InstallStatus.MISSING}
    assert rows[-1].kind == DefinitionKind.CONFIG
    assert not StatusService.is_synced(rows)


def test_installed_after_install(sample_pack: Path, host_root: Path) -> None:
    pack, host = PackRepository(sample_pack), HostRepository(host_root)
    plan = InstallPlanner(pack=pack, host=host).build()
    InstallExecutor(pack=pack, host=host).execute(plan)

    rows = _rows(sample_pack, host_root)

    assert StatusService.is_synced(rows)
    assert {row.detail for row in rows} == {"linked"}


def test_drift_conflict_and_copy(sample_pack: Path, host_root: Path, tmp_path: Path) -> None:
    agents = host_root / "agent"
    agents.mkdir(parents=True)
    other = tmp_path / "other.md"
    other.write_text("x", encoding="utf-8")
    (agents / "orchestrator.md").symlink_to(other)
    (agents / "security-reviewer.md").write_text("different", encoding="utf-8")
    (agents / "dependency-analyzer.md").write_text(
        (sample_pack / "agent" / "dependency-analyzer.md").read_text(encoding="utf-8"),
        encoding="utf-8",
    )

    rows = {row.name: row for row in _rows(sample_pack, host_root)}

    assert rows["orchestrator"].status == InstallStatus.DRIFT
    assert rows["security-reviewer"].status == InstallStatus.CONFLICT
    assert rows["dependency-analyzer"].status == InstallStatus.INSTALLED
    assert rows["dependency-analyzer"].detail == "copied"
    assert rows["opencode.json"].status == InstallStatus.MISSING
    assert rows["audit"].status == InstallStatus.MISSING


def test_undecodable_copy_is_compared_by_bytes(sample_pack: Path, host_root: Path) -> None:
    raw = b"---\ndescription: caf\xe9\n---\n"
    (sample_pack / "agent" / "latin1.md").write_bytes(raw)
    target = host_root / "agent" / "latin1.md"
    target.parent.mkdir(parents=True)
    target.write_bytes(raw)

    rows = {row.name: row for row in _rows(sample_pack, host_root)}

    assert rows["latin1"].status == InstallStatus.INSTALLED
    assert rows["latin1"].detail == "copied"
