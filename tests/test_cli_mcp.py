"""Tests for mcp CLI commands."""

import json
from pathlib import Path


def _servers(pack_root: Path) -> dict:
    payload = json.loads((pack_root / "opencode.json").read_text(encoding="utf-8"))
    return payload["mcp"]


def test_mcp_list(sample_pack: Path, run_cli) -> None:
    result = run_cli("mcp", "list")

    assert result.exit_code == 0
    assert "context7" in result.output
    assert "playwright" in result.output


def test_mcp_list_without_config(pack_root: Path, run_cli) -> None:
    result = run_cli("mcp", "list")

    assert result.exit_code != 0
    assert "Missing required config file" in result.output


def test_mcp_disable_and_enable(sample_pack: Path, run_cli) -> None:
    result = run_cli("mcp", "disable", "context7")

    assert result.exit_code == 0
    assert "disabled" in result.output
    assert _servers(sample_pack)["context7"]["enabled"] is False
    assert list(sample_pack.glob("opencode.json.bak-*"))

    again = run_cli("mcp", "disable", "context7")
    assert again.exit_code == 0
    assert "already disabled" in again.output

    enabled = run_cli("mcp", "enable", "playwright")
    assert enabled.exit_code == 0
    assert _servers(sample_pack)["playwright"]["enabled"] is True


def test_mcp_enable_unknown(sample_pack: Path, run_cli) -> None:
    result = run_cli("mcp", "enable", "github")

    assert result.exit_code != 0
    assert "MCP server not found: github" in result.output
