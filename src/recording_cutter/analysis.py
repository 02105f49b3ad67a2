# ABOUTME: Read-only analysis over recordings: stats, content search, and timeline markers.
# ABOUTME: Never mutates its input; callers treat a missing stats result as nothing to show.
"""Recording analysis helpers."""

from __future__ import annotations

import json
import math
from collections import Counter
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from recording_cutter.contracts import (
    EVENT_TYPE_NAMES,
    INCREMENTAL_SOURCE_NAMES,
    Event,
    EventType,
    IncrementalSource,
    RecordingStats,
    validate_log,
)
from recording_cutter.errors import InvalidLog

_MARKER_SOURCES = {
    IncrementalSource.MOUSE_INTERACTION,
    IncrementalSource.SCROLL,
    IncrementalSource.VIEWPORT_RESIZE,
}


class EventTypeInfo(BaseModel):
    name: str
    sub_type: str | None = None


class EventMarker(BaseModel):
    timestamp: int
    type: int
    relative_time: int  # ms from recording start
    percentage: float
    type_info: EventTypeInfo
    count: int = 1
    grouped: bool = False


def analyze(log: Any) -> RecordingStats | None:
    try:
        events = validate_log(log, operation="analyze")
    except InvalidLog:
        return None

    first_timestamp = events[0].timestamp
    last_timestamp = events[-1].timestamp
    counts = Counter(event.type for event in events)
    return RecordingStats(
        total_events=len(events),
        duration=(last_timestamp - first_timestamp) / 1000,
        start_time=first_timestamp,
        end_time=last_timestamp,
        event_type_counts=dict(counts),
    )


def serialize_event(event: Event) -> str:
    return json.dumps(event.to_dict(), separators=(",", ":"), ensure_ascii=False)


def search(log: Any, term: str) -> list[Event]:
    """Case-insensitive substring search over each event's full JSON form."""
    if not term:
        return []
    events = validate_log(log, operation="search")
    needle = term.lower()
    return [event for event in events if needle in serialize_event(event).lower()]


def relative_seconds(log: Sequence[Any], absolute_timestamp: float) -> float:
    if not log:
        return 0
    start = validate_log(log[:1], operation="relative_seconds")[0].timestamp
    return (absolute_timestamp - start) / 1000


def describe_event(event: Event) -> EventTypeInfo:
    name = EVENT_TYPE_NAMES.get(event.type, "Unknown")
    source = event.source
    if source is not None and source in INCREMENTAL_SOURCE_NAMES:
        sub_type = INCREMENTAL_SOURCE_NAMES[source]
        return EventTypeInfo(name=f"{name} ({sub_type})", sub_type=sub_type)
    return EventTypeInfo(name=name)


def _is_significant(event: Event) -> bool:
    if event.type in (EventType.FULL_SNAPSHOT, EventType.META):
        return True
    return event.source in _MARKER_SOURCES


def timeline_markers(log: Any, stats: RecordingStats | None = None) -> list[EventMarker]:
    """One marker per whole percent of the timeline, grouping significant events."""
    try:
        events = validate_log(log, operation="markers")
    except InvalidLog:
        return []
    stats = stats or analyze(events)
    if stats is None:
        return []

    duration_ms = stats.duration * 1000
    buckets: dict[int, list[EventMarker]] = {}
    for event in events:
        if not _is_significant(event):
            continue
        relative_time = event.timestamp - stats.start_time
        percentage = (relative_time / duration_ms) * 100 if duration_ms > 0 else 0.0
        buckets.setdefault(math.floor(percentage), []).append(
            EventMarker(
                timestamp=event.timestamp,
                type=event.type,
                relative_time=relative_time,
                percentage=percentage,
                type_info=describe_event(event),
            )
        )

    markers: list[EventMarker] = []
    for grouped in buckets.values():
        if len(grouped) == 1:
            markers.append(grouped[0])
        else:
            markers.append(grouped[0].model_copy(update={"count": len(grouped), "grouped": True}))
    return sorted(markers, key=lambda marker: marker.timestamp)
