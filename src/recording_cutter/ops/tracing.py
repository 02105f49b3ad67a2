"""Per-run JSONL traces of CLI commands."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class TraceLogger:
    """Appends one JSON line per command step under <trace_dir>/<run_id>/trace.jsonl."""

    def __init__(self, trace_dir: str | Path, run_id: str) -> None:
        self.trace_dir = Path(trace_dir)
        self.run_id = run_id
        self.trace_path = self.trace_dir / run_id / "trace.jsonl"
        self.trace_path.parent.mkdir(parents=True, exist_ok=True)

    def log_step(self, command: str, step: str, **fields: Any) -> None:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "command": command,
            "step": step,
            **{key: _jsonable(value) for key, value in fields.items()},
        }
        with self.trace_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False) + "\n")


class NullTracer:
    def log_step(self, command: str, step: str, **fields: Any) -> None:
        return None


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def new_run_id(command: str = "run") -> str:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{command}_{timestamp}"
