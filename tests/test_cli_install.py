import json
from pathlib import Path


def test_plan_is_dry_run(sample_pack: Path, host_root: Path, run_cli) -> None:
    result = run_cli("plan")

    assert result.exit_code == 0
    assert "create" in result.output
    assert not host_root.exists()


def test_plan_exits_on_duplicate_names(sample_pack: Path, write_text, run_cli) -> None:
    write_text(sample_pack / "command" / "extra" / "audit.md", "---\ndescription: d\n---\n")

    result = run_cli("plan")

    assert result.exit_code == 1
    assert "Duplicate" in result.output


def test_install_then_noop(sample_pack: Path, host_root: Path, run_cli) -> None:
    result = run_cli("install")

    assert result.exit_code == 0
    assert "applied" in result.output
    assert (host_root / "agent" / "orchestrator.md").is_symlink()
    assert (host_root / "command" / "review.md").is_symlink()
    assert (host_root / "opencode.json").is_symlink()

    again = run_cli("install")
    assert again.exit_code == 0
    assert "noop" in again.output


def test_install_copy_without_config(sample_pack: Path, host_root: Path, run_cli) -> None:
    result = run_cli("install", "--copy", "--no-config")

    assert result.exit_code == 0
    copied = host_root / "agent" / "security-reviewer.md"
    assert copied.is_file()
    assert not copied.is_symlink()
    assert not (host_root / "opencode.json").exists()


def test_install_aborts_on_lint_errors(
    sample_pack: Path, host_root: Path, write_text, run_cli
) -> None:
    write_text(sample_pack / "agent" / "empty.md", "no frontmatter here\n")

    result = run_cli("install")

    assert result.exit_code != 0
    assert "Install aborted" in result.output
    assert not (host_root / "agent").exists()

    forced = run_cli("install", "--skip-lint")
    assert forced.exit_code == 0
    assert (host_root / "agent" / "empty.md").is_symlink()


def test_install_conflict_exits_nonzero(
    sample_pack: Path, host_root: Path, run_cli
) -> None:
    host_root.mkdir(parents=True)
    (host_root / "opencode.json").write_text(json.dumps({"theme": "x"}), encoding="utf-8")

    result = run_cli("install")

    assert result.exit_code == 1
    assert "conflict" in result.output
    assert json.loads((host_root / "opencode.json").read_text(encoding="utf-8")) == {
        "theme": "x"
    }


def test_status_and_uninstall(sample_pack: Path, host_root: Path, run_cli) -> None:
    before = run_cli("status")
    assert before.exit_code == 0
    assert "missing" in before.output

    run_cli("install")
    after = run_cli("status")
    assert "installed" in after.output
    assert "missing" not in after.output

    removed = run_cli("uninstall")
    assert removed.exit_code == 0
    assert not (host_root / "agent" / "orchestrator.md").exists()
    assert not (host_root / "opencode.json").exists()


def test_host_from_env_var(sample_pack: Path, tmp_path: Path, cli_runner) -> None:
    from agent_pack.__main__ import cli

    host = tmp_path / "custom-host"
    result = cli_runner.invoke(
        cli,
        ["--pack", str(sample_pack), "install"],
        env={"OPENCODE_CONFIG_DIR": str(host)},
    )

    assert result.exit_code == 0
    assert (host / "agent" / "security-reviewer.md").is_symlink()


def test_main_returns_exit_codes(sample_pack: Path, host_root: Path, monkeypatch) -> None:
    from agent_pack.__main__ import main

    base = ["agent-pack", "--pack", str(sample_pack), "--host", str(host_root)]

    monkeypatch.setattr("sys.argv", [*base, "status"])
    assert main() == 0

    monkeypatch.setattr("sys.argv", [*base, "lint", "--strict"])
    assert main() == 1

    monkeypatch.setattr("sys.argv", [*base, "agents", "show", "nobody"])
    assert main() == 2


def test_plan_copy_reports_undecodable_file(sample_pack: Path, run_cli) -> None:
    (sample_pack / "agent" / "latin1.md").write_bytes(b"caf\xe9\n")

    result = run_cli("plan", "--copy")

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Unreadable agent file" in result.output


def test_relative_host_is_stored_absolute(
    sample_pack: Path, tmp_path: Path, cli_runner, monkeypatch
) -> None:
    from agent_pack.__main__ import cli

    monkeypatch.chdir(tmp_path)
    result = cli_runner.invoke(
        cli, ["--pack", str(sample_pack), "--host", "rel-host", "install"]
    )

    assert result.exit_code == 0
    state = json.loads(
        (tmp_path / "rel-host" / ".agent-pack-state.json").read_text(encoding="utf-8")
    )
    assert state["managed_config_links"] == [str(tmp_path / "rel-host" / "opencode.json")]
    assert all(Path(item).is_absolute() for item in state["managed_agent_links"])
