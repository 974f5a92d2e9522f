import json
from pathlib import Path

import pytest

from agent_pack.config.loader import (
    load_pack_config,
    schema_errors,
    set_server_enabled,
)
from agent_pack.config.models import MCPServerType
from agent_pack.errors import (
    InvalidConfigSchemaError,
    InvalidJsonFormatError,
    MissingConfigFileError,
    UnknownServerError,
)


def test_load_pack_config_builds_servers(tmp_path: Path, write_json, pack_config) -> None:
    path = tmp_path / "opencode.json"
    write_json(path, pack_config)

    config = load_pack_config(path)

    assert config.schema_url == "https://opencode.ai/config.json"
    assert sorted(config.mcp) == ["context7", "playwright"]
    context7 = config.mcp["context7"]
    assert context7.type == MCPServerType.REMOTE.value
    assert context7.enabled is True
    assert context7.timeout == 10000
    assert context7.required_env == ["CONTEXT7_API_KEY"]
    assert context7.endpoint == "https://mcp.context7.com/mcp"
    playwright = config.mcp["playwright"]
    assert playwright.enabled is False
    assert playwright.command == ["npx", "@playwright/mcp@latest"]
    assert config.tools == {"webfetch": True}


def test_missing_env_reports_unset_variables(tmp_path: Path, write_json, pack_config) -> None:
    path = tmp_path / "opencode.json"
    write_json(path, pack_config)
    context7 = load_pack_config(path).mcp["context7"]

    assert context7.missing_env({}) == ["CONTEXT7_API_KEY"]
    assert context7.missing_env({"CONTEXT7_API_KEY": ""}) == ["CONTEXT7_API_KEY"]
    assert context7.missing_env({"CONTEXT7_API_KEY": "secret"}) == []


def test_env_references_collected_from_nested_values(
    tmp_path: Path, write_json
) -> None:
    path = tmp_path / "opencode.json"
    write_json(
        path,
        {
            "mcp": {
                "gemini": {
                    "type": "local",
                    "command": ["gemini-mcp", "--key={env:GEMINI_API_KEY}"],
                    "environment": {
                        "OPENAI_API_KEY": "{env:OPENAI_API_KEY}",
                        "AGAIN": "{env:GEMINI_API_KEY}",
                    },
                }
            }
        },
    )

    server = load_pack_config(path).mcp["gemini"]

    assert server.required_env == ["GEMINI_API_KEY", "OPENAI_API_KEY"]


def test_server_type_and_enabled_defaults(tmp_path: Path, write_json) -> None:
    path = tmp_path / "opencode.json"
    write_json(
        path,
        {"mcp": {"docs": {"url": "https://example.com/mcp"}, "fs": {"command": ["fs"]}}},
    )

    config = load_pack_config(path)

    assert config.mcp["docs"].type == MCPServerType.REMOTE.value
    assert config.mcp["docs"].enabled is True
    assert config.mcp["fs"].type == MCPServerType.LOCAL.value


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigFileError):
        load_pack_config(tmp_path / "opencode.json")


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "opencode.json"
    path.write_text("{bad", encoding="utf-8")

    with pytest.raises(InvalidJsonFormatError):
        load_pack_config(path)


def test_non_object_root(tmp_path: Path, write_json) -> None:
    path = tmp_path / "opencode.json"
    write_json(path, ["not", "an", "object"])

    with pytest.raises(InvalidConfigSchemaError, match="must be a JSON object"):
        load_pack_config(path)


def test_enabled_must_be_boolean(tmp_path: Path, write_json) -> None:
    path = tmp_path / "opencode.json"
    write_json(
        path,
        {"mcp": {"context7": {"url": "https://mcp.context7.com/mcp", "enabled": "yes"}}},
    )

    with pytest.raises(InvalidConfigSchemaError) as exc_info:
        load_pack_config(path)

    assert "mcp.context7.enabled" in exc_info.value.detail


def test_schema_errors_lists_every_violation() -> None:
    problems = schema_errors(
        {
            "mcp": {
                "a": {"type": "remote", "enabled": 1},
                "b": {"type": "local", "command": ["x"], "timeout": "slow"},
            },
            "tools": {"bash": "yes"},
        }
    )

    assert any("mcp.a.enabled" in item for item in problems)
    assert any("'url' is a required property" in item for item in problems)
    assert any("mcp.b.timeout" in item for item in problems)
    assert any("tools.bash" in item for item in problems)


def test_schema_accepts_permission_rules() -> None:
    assert (
        schema_errors({"permission": {"edit": "ask", "bash": {"git push": "deny"}}})
        == []
    )
    assert schema_errors({"permission": {"edit": "maybe"}}) != []


def test_set_server_enabled_toggles_and_backs_up(tmp_path: Path, write_json, pack_config) -> None:
    path = tmp_path / "opencode.json"
    write_json(path, pack_config)

    changed = set_server_enabled(path, "playwright", True)

    assert changed is True
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["mcp"]["playwright"]["enabled"] is True
    assert payload["mcp"]["context7"] == pack_config["mcp"]["context7"]
    assert list(tmp_path.glob("opencode.json.bak-*"))


def test_set_server_enabled_noop_when_unchanged(tmp_path: Path, write_json, pack_config) -> None:
    path = tmp_path / "opencode.json"
    write_json(path, pack_config)

    assert set_server_enabled(path, "context7", True) is False
    assert not list(tmp_path.glob("opencode.json.bak-*"))


def test_set_server_enabled_unknown_server(tmp_path: Path, write_json, pack_config) -> None:
    path = tmp_path / "opencode.json"
    write_json(path, pack_config)

    with pytest.raises(UnknownServerError):
        set_server_enabled(path, "nope", False)
