import json
import uuid
from pathlib import Path
from typing import Any
from datetime import datetime


class ArtifactManager:
    """
    Moves oversized record fields (issue bodies, oracle transcripts) out
    of the TinyDB document into plain files, and loads them back on access.
    """

    def __init__(self, base_path: str, max_inline_bytes: int = 10000):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.max_inline_bytes = max_inline_bytes

    def _should_offload(self, value: Any) -> bool:
        if isinstance(value, str):
            return len(value.encode("utf-8")) > self.max_inline_bytes
        if isinstance(value, (dict, list)):
            return len(json.dumps(value, ensure_ascii=False)) > self.max_inline_bytes
        return False

    def _artifact_path(self, table_name: str, record_id: str,
                       field_name: str, timestamp: str, fmt: str) -> Path:
        dt = datetime.fromisoformat(timestamp)
        artifact_dir = self.base_path / table_name / f"{dt.year:04}" / \
            f"{dt.month:02}" / record_id
        artifact_dir.mkdir(parents=True, exist_ok=True)
        suffix = "txt" if fmt == "text" else "json"
        return artifact_dir / f"{field_name}.{suffix}"

    def save_large_fields(self, record: dict, table_name: str, timestamp: str) -> dict:
        updated = dict(record)
        record_id = str(record.get("id") or uuid.uuid4().hex)

        for key, value in record.items():
            if not self._should_offload(value):
                continue
            fmt = "text" if isinstance(value, str) else "json"
            path = self._artifact_path(table_name, record_id, key, timestamp, fmt)
            with open(path, "w", encoding="utf-8") as f:
                if fmt == "text":
                    f.write(value)
                else:
                    json.dump(value, f, ensure_ascii=False, indent=2)

            updated.pop(key)
            updated[f"{key}_artifact"] = {
                "path": str(path),
                "format": fmt,
                "encoding": "utf-8",
            }

        return updated

    def load_fields(self, record: dict) -> dict:
        """Return a copy of the record with every offloaded field read back."""
        loaded = {}
        for key, value in record.items():
            if not key.endswith("_artifact") or not isinstance(value, dict):
                loaded[key] = value
                continue
            path = Path(value.get("path", ""))
            if not path.exists():
                loaded[key] = value
                continue
            with open(path, encoding=value.get("encoding", "utf-8")) as f:
                field = f.read() if value.get("format") == "text" else json.load(f)
            loaded[key[:-len("_artifact")]] = field
        return loaded
