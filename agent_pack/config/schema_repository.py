import json
from pathlib import Path
from typing import Any

_SCHEMA_CACHE: dict[str, dict[str, Any]] = {}

_SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"


class PackConfigSchemaRepository:
    def __init__(self, local_schema_path: Path | None = None) -> None:
        self.local_schema_path = local_schema_path or (
            _SCHEMAS_DIR / "opencode.pack.schema.json"
        )

    def load_schema(self) -> dict[str, Any]:
        key = str(self.local_schema_path.resolve())
        cached = _SCHEMA_CACHE.get(key)
        if cached is not None:
            return cached
        schema = json.loads(self.local_schema_path.read_text(encoding="utf-8"))
        _SCHEMA_CACHE[key] = schema
        return schema
