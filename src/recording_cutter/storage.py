"""Read and write recording files."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from recording_cutter.contracts import Event, validate_log
from recording_cutter.errors import InvalidLog


def unwrap_events(payload: Any) -> list[Any]:
    # Recordings show up as a bare array, {"events": [...]}, {"data": [...]} or one event.
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("events", "data"):
            nested = payload.get(key)
            if isinstance(nested, list):
                return nested
        return [payload]
    raise InvalidLog("recording file must contain a JSON array or object", operation="load")


def load_recording(path: str | Path) -> list[Event]:
    recording_path = Path(path)
    try:
        payload = json.loads(recording_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidLog(
            f"recording is not valid JSON: {exc.msg}", operation="load", path=str(recording_path)
        ) from exc
    except UnicodeDecodeError as exc:
        raise InvalidLog(
            f"recording is not UTF-8 text: {exc.reason}", operation="load", path=str(recording_path)
        ) from exc
    return validate_log(unwrap_events(payload), operation="load")


def save_recording(path: str | Path, events: Sequence[Event]) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [event.to_dict() for event in events]
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return output_path


def save_event(path: str | Path, event: Event) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(event.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return output_path
