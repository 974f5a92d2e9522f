import sys
import json
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


SECURITY_REVIEWER = """\
---
description: Reviews code changes for security issues
mode: subagent
temperature: 0.1
tools:
  write: false
  edit: false
  bash: false
---
You are a security reviewer. Report findings by severity.
"""

DEPENDENCY_ANALYZER = """\
---
description: Maps dependency graphs and flags cycles
mode: subagent
tools:
  bash: true
  context7*: true
---
Walk the import graph and report cycles.
"""

ORCHESTRATOR = """\
---
description: Coordinates review workflows
mode: primary
permission:
  edit: ask
  bash:
    "git push": deny
    "*": allow
---
Delegate work to the specialist agents.
"""

AUDIT_COMMAND = """\
---
description: Run a full dependency and security audit
---
## Execution flow

1. Launch **dependency-analyzer** agent to map the project.
2. Launch **security-reviewer** agent on the results.
3. Produce a combined report.
"""

REVIEW_COMMAND = """\
---
description: Review the current change set
agent: orchestrator
---
Ask @security-reviewer for a pass before merging.
"""

PACK_CONFIG = {
    "$schema": "https://opencode.ai/config.json",
    "mcp": {
        "context7": {
            "type": "remote",
            "url": "https://mcp.context7.com/mcp",
            "enabled": True,
            "timeout": 10000,
            "headers": {"CONTEXT7_API_KEY": "{env:CONTEXT7_API_KEY}"},
        },
        "playwright": {
            "type": "local",
            "command": ["npx", "@playwright/mcp@latest"],
            "enabled": False,
        },
    },
    "tools": {"webfetch": True},
}


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.delenv("OPENCODE_CONFIG_DIR", raising=False)
    monkeypatch.delenv("AGENT_PACK_ROOT", raising=False)
    monkeypatch.delenv("CONTEXT7_API_KEY", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def write_text():
    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def pack_root(tmp_path: Path) -> Path:
    root = tmp_path / "pack"
    root.mkdir()
    return root


@pytest.fixture
def host_root(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "opencode"


@pytest.fixture
def sample_pack(pack_root: Path, write_text, write_json) -> Path:
    write_text(pack_root / "agent" / "security-reviewer.md", SECURITY_REVIEWER)
    write_text(pack_root / "agent" / "dependency-analyzer.md", DEPENDENCY_ANALYZER)
    write_text(pack_root / "agent" / "orchestrator.md", ORCHESTRATOR)
    write_text(pack_root / "command" / "audit.md", AUDIT_COMMAND)
    write_text(pack_root / "command" / "review.md", REVIEW_COMMAND)
    write_json(pack_root / "opencode.json", PACK_CONFIG)
    return pack_root


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()


@pytest.fixture
def run_cli(cli_runner, pack_root: Path, host_root: Path):
    from agent_pack.__main__ import cli

    def _run(*args: str):
        return cli_runner.invoke(
            cli, ["--pack", str(pack_root), "--host", str(host_root), *args]
        )

    return _run


@pytest.fixture
def pack_config() -> dict[str, Any]:
    return json.loads(json.dumps(PACK_CONFIG))
