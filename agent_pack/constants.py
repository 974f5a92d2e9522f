from typing import Final


CONFIG_FILENAME: Final[str] = "opencode.json"
README_FILENAME: Final[str] = "README.md"
STATE_FILENAME: Final[str] = ".agent-pack-state.json"
DEFINITION_SUFFIX: Final[str] = ".md"

AGENT_DIRNAMES: Final[tuple[str, ...]] = ("agent", "agents")
COMMAND_DIRNAMES: Final[tuple[str, ...]] = ("command", "commands")

AGENT_PACK_ROOT_ENV: Final[str] = "AGENT_PACK_ROOT"
OPENCODE_CONFIG_DIR_ENV: Final[str] = "OPENCODE_CONFIG_DIR"

# Agents the host ships itself; commands may target them without a pack file.
BUILTIN_AGENTS: Final[frozenset[str]] = frozenset({"build", "plan", "general"})

PERMISSION_VALUES: Final[frozenset[str]] = frozenset({"allow", "ask", "deny"})

TEMPERATURE_RANGE: Final[tuple[float, float]] = (0.0, 2.0)

# Host tools outside the per-agent flag set; still valid keys in a tools map.
HOST_TOOLS: Final[frozenset[str]] = frozenset(
    {"list", "patch", "task", "todoread", "websearch", "codesearch", "skill", "lsp"}
)
