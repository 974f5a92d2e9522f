"""Load, validate and edit the pack's opencode.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from agent_pack.config.models import MCPServer, MCPServerType, PackConfig, env_references
from agent_pack.config.schema_repository import PackConfigSchemaRepository
from agent_pack.errors import (
    InvalidConfigSchemaError,
    InvalidJsonFormatError,
    MissingConfigFileError,
    UnknownServerError,
)
from agent_pack.utils import backup_file, read_json, write_json

logger = logging.getLogger(__name__)


def _schema_error_message(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def default_validator() -> Draft202012Validator:
    return Draft202012Validator(PackConfigSchemaRepository().load_schema())


def schema_errors(
    payload: Any, validator: Draft202012Validator | None = None
) -> list[str]:
    """Every schema violation in document order, formatted with its JSON path."""
    if not isinstance(payload, dict):
        return ["must be a JSON object"]
    validator = validator or default_validator()
    errors = sorted(
        validator.iter_errors(payload),
        key=lambda item: [str(part) for part in item.path],
    )
    return [_schema_error_message(error) for error in errors]


def read_config_payload(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise MissingConfigFileError(path)
    try:
        payload = read_json(path)
    except json.JSONDecodeError as exc:
        raise InvalidJsonFormatError(path, str(exc)) from exc
    if not isinstance(payload, dict):
        raise InvalidConfigSchemaError(path, "must be a JSON object")
    return payload


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items()}


def build_server(name: str, entry: dict[str, Any]) -> MCPServer:
    command = entry.get("command", [])
    if isinstance(command, str):
        command = [command]
    if not isinstance(command, list):
        command = []

    url = entry.get("url") if isinstance(entry.get("url"), str) else ""
    server_type = entry.get("type")
    if server_type not in (MCPServerType.LOCAL.value, MCPServerType.REMOTE.value):
        server_type = MCPServerType.REMOTE.value if url else MCPServerType.LOCAL.value

    timeout = entry.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, int):
        timeout = None

    required: list[str] = []
    for ref in env_references(entry):
        if ref not in required:
            required.append(ref)

    return MCPServer(
        name=name,
        type=server_type,
        enabled=entry.get("enabled", True) is not False,
        timeout=timeout,
        command=[str(item) for item in command],
        url=url,
        environment=_string_map(entry.get("environment")),
        headers=_string_map(entry.get("headers")),
        required_env=required,
    )


def build_pack_config(path: Path, payload: dict[str, Any]) -> PackConfig:
    mcp_raw = payload.get("mcp", {})
    if not isinstance(mcp_raw, dict):
        mcp_raw = {}
    servers = {
        name: build_server(name, entry)
        for name, entry in mcp_raw.items()
        if isinstance(entry, dict)
    }

    tools_raw = payload.get("tools", {})
    tools = (
        {str(k): v for k, v in tools_raw.items() if isinstance(v, bool)}
        if isinstance(tools_raw, dict)
        else {}
    )
    permission = payload.get("permission", {})

    schema_url = payload.get("$schema")
    return PackConfig(
        path=path,
        schema_url=schema_url if isinstance(schema_url, str) else "",
        mcp=servers,
        tools=tools,
        permission=permission if isinstance(permission, dict) else {},
        raw=payload,
    )


def load_pack_config(
    path: Path, validator: Draft202012Validator | None = None
) -> PackConfig:
    payload = read_config_payload(path)
    problems = schema_errors(payload, validator)
    if problems:
        raise InvalidConfigSchemaError(path, problems[0])
    config = build_pack_config(path, payload)
    logger.debug("loaded %d mcp servers from %s", len(config.mcp), path)
    return config


def set_server_enabled(path: Path, name: str, enabled: bool) -> bool:
    """Flip `mcp.<name>.enabled`. Returns False when nothing changed."""
    payload = read_config_payload(path)
    servers = payload.get("mcp")
    if not isinstance(servers, dict) or not isinstance(servers.get(name), dict):
        raise UnknownServerError(name)

    entry = servers[name]
    if entry.get("enabled", True) is enabled:
        return False

    entry["enabled"] = enabled
    backup_file(path)
    write_json(path, payload)
    logger.debug("set mcp.%s.enabled=%s in %s", name, enabled, path)
    return True
