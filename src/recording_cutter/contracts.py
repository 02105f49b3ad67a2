# ABOUTME: Defines the recording event model, numeric type tags, and derived stats contracts.
# ABOUTME: Keeps the serialized event shape stable so logs round-trip with existing players.
"""Shared contracts for recording_cutter components."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from recording_cutter.errors import EmptyLog, InvalidLog


class EventType(IntEnum):
    DOM_CONTENT_LOADED = 0
    LOAD = 1
    FULL_SNAPSHOT = 2
    INCREMENTAL_SNAPSHOT = 3
    META = 4
    CUSTOM = 5
    PLUGIN = 6


class IncrementalSource(IntEnum):
    MUTATION = 0
    MOUSE_MOVE = 1
    MOUSE_INTERACTION = 2
    SCROLL = 3
    VIEWPORT_RESIZE = 4
    INPUT = 5
    TOUCH_MOVE = 6
    MEDIA_INTERACTION = 7
    STYLE_SHEET_RULE = 8
    CANVAS_MUTATION = 9
    FONT = 10
    LOG = 11
    DRAG = 12
    STYLE_DECLARATION = 13


EVENT_TYPE_NAMES: dict[int, str] = {
    0: "DomContentLoaded",
    1: "Load",
    2: "FullSnapshot",
    3: "IncrementalSnapshot",
    4: "Meta",
    5: "Custom",
    6: "Plugin",
}

INCREMENTAL_SOURCE_NAMES: dict[int, str] = {
    0: "Mutation",
    1: "MouseMove",
    2: "MouseInteraction",
    3: "Scroll",
    4: "ViewportResize",
    5: "Input",
    6: "TouchMove",
    7: "MediaInteraction",
    8: "StyleSheetRule",
    9: "CanvasMutation",
    10: "Font",
    11: "Log",
    12: "Drag",
    13: "StyleDeclaration",
}


def empty_mutation_data() -> dict[str, Any]:
    return {
        "source": int(IncrementalSource.MUTATION),
        "texts": [],
        "attributes": [],
        "removes": [],
        "adds": [],
    }


class Event(BaseModel):
    """One recorded event. Unknown fields are kept so they survive a round-trip."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: int
    data: Any = Field(default_factory=dict)
    timestamp: int
    tab_id: str | int | None = Field(default=None, alias="tabId")

    @property
    def is_keyframe(self) -> bool:
        return self.type == EventType.FULL_SNAPSHOT

    @property
    def is_meta(self) -> bool:
        return self.type == EventType.META

    @property
    def source(self) -> int | None:
        if self.type != EventType.INCREMENTAL_SNAPSHOT or not isinstance(self.data, dict):
            return None
        source = self.data.get("source")
        return source if isinstance(source, int) else None

    @property
    def is_mutation(self) -> bool:
        return self.source == IncrementalSource.MUTATION

    def shifted(self, timestamp: int) -> Event:
        return self.model_copy(update={"timestamp": int(timestamp)})

    def to_dict(self) -> dict[str, Any]:
        exclude = {"tab_id"} if self.tab_id is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class SyntheticKeyframe(Event):
    """A full snapshot rebuilt by replaying a log and capturing the rendered state."""

    type: int = int(EventType.FULL_SNAPSHOT)

    @classmethod
    def from_capture(
        cls, node: dict[str, Any], *, timestamp: int, tab_id: str | int | None = None
    ) -> SyntheticKeyframe:
        return cls(
            type=int(EventType.FULL_SNAPSHOT),
            data={"node": node, "initialOffset": {"left": 0, "top": 0}},
            timestamp=int(timestamp),
            tabId=tab_id,
        )


class RecordingStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_events: int
    duration: float  # seconds
    start_time: int
    end_time: int
    event_type_counts: dict[int, int]
    event_types: dict[int, str] = Field(default_factory=lambda: dict(EVENT_TYPE_NAMES))

    def as_lines(self) -> str:
        lines = [
            f"total_events={self.total_events}",
            f"duration={self.duration}",
            f"start_time={self.start_time}",
            f"end_time={self.end_time}",
        ]
        for type_tag, count in sorted(self.event_type_counts.items()):
            name = self.event_types.get(type_tag, "Unknown")
            lines.append(f"count.{name}={count}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Reconstructed:
    keyframe: Event


@dataclass(frozen=True)
class Degraded:
    reason: str
    error: Exception | None = None


KeyframeOutcome = Reconstructed | Degraded


def validate_log(log: Any, *, operation: str = "validate") -> list[Event]:
    """Return the log as a list of Event models or raise InvalidLog."""
    if log is None:
        raise InvalidLog("recording is missing", operation=operation)
    if isinstance(log, (str, bytes, dict)) or not isinstance(log, Sequence):
        raise InvalidLog("recording must be a sequence of events", operation=operation)
    if len(log) == 0:
        raise EmptyLog("recording has no events", operation=operation)
    events: list[Event] = []
    for index, item in enumerate(log):
        if isinstance(item, Event):
            events.append(item)
            continue
        try:
            events.append(Event.model_validate(item))
        except ValidationError as exc:
            raise InvalidLog(
                f"event {index} is malformed: {exc.errors()[0].get('msg', 'invalid')}",
                operation=operation,
            ) from exc
    return events


def check_playable(events: Sequence[Event]) -> list[str]:
    """List the standalone-playback invariants a log breaks; empty means playable."""
    problems: list[str] = []
    if len(events) < 2:
        problems.append(f"needs at least 2 events, has {len(events)}")
    for previous, current in zip(events, events[1:]):
        if current.timestamp < previous.timestamp:
            problems.append(
                f"timestamps decrease ({previous.timestamp} -> {current.timestamp})"
            )
            break
    leading = next((event for event in events if not event.is_meta), None)
    if leading is None or not leading.is_keyframe:
        problems.append("first non-meta event is not a full snapshot")
    return problems


def first_meta(events: Sequence[Event]) -> Event | None:
    return next((event for event in events if event.is_meta), None)


def find_tab_id(events: Sequence[Event]) -> str | int | None:
    return next((event.tab_id for event in events if event.tab_id is not None), None)
