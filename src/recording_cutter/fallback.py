# ABOUTME: Best-effort trim without replay: anchors on an earlier full snapshot and keeps mutations.
# ABOUTME: Pre-range mutations are squeezed into the first 100ms; no exact-state guarantee is made.
"""Non-replaying fallback trim."""

from __future__ import annotations

import logging
from typing import Any

from recording_cutter.config import Config, load_config
from recording_cutter.contracts import (
    Event,
    EventType,
    empty_mutation_data,
    first_meta,
    validate_log,
)
from recording_cutter.errors import InsufficientEvents, MissingKeyframe

logger = logging.getLogger(__name__)

OPERATION = "trim_fallback"
PRE_RANGE_WINDOW_MS = 100
FILLER_GAP_MS = 10

_ANCHOR = "anchor"
_PRE_RANGE = "pre"
_IN_RANGE = "in"


def select_base_keyframe(
    events: list[Event], start_ms: int, *, lookback_ms: int
) -> tuple[int, Event] | None:
    keyframes = [(index, event) for index, event in enumerate(events) if event.is_keyframe]
    if not keyframes:
        return None

    within_lookback = [
        (index, event)
        for index, event in keyframes
        if start_ms - lookback_ms <= event.timestamp <= start_ms
    ]
    if within_lookback:
        return within_lookback[-1]
    before_start = [(index, event) for index, event in keyframes if event.timestamp <= start_ms]
    if before_start:
        return before_start[-1]
    return keyframes[0]


def trim_fallback(
    log: Any, start_ms: int, end_ms: int, *, config: Config | None = None
) -> list[Event]:
    events = validate_log(log, operation=OPERATION)
    config = config or load_config()

    selected = select_base_keyframe(events, start_ms, lookback_ms=config.fallback_lookback_ms)
    if selected is None:
        raise MissingKeyframe(
            "no full snapshot found in recording",
            operation=OPERATION,
            start=start_ms,
            end=end_ms,
        )
    base_index, base = selected
    logger.info(
        "Fallback trim anchored on snapshot #%d at %s (%.3fs before start)",
        base_index,
        base.timestamp,
        (start_ms - base.timestamp) / 1000,
    )

    kept: list[tuple[Event, str]] = [(base, _ANCHOR)]
    meta = first_meta(events)
    if meta is not None:
        kept.append((meta.shifted(base.timestamp + 1), _ANCHOR))

    pre_count = in_count = 0
    for event in events[base_index + 1 :]:
        if event.timestamp > end_ms:
            break
        if event.is_keyframe:
            continue
        if event.timestamp < start_ms:
            if event.is_mutation:
                kept.append((event, _PRE_RANGE))
                pre_count += 1
        else:
            kept.append((event, _IN_RANGE))
            in_count += 1
    logger.debug("Kept %d pre-range mutations, %d in range", pre_count, in_count)

    if len(kept) == 1:
        filler_timestamp = base.timestamp + FILLER_GAP_MS
        filler = Event(
            type=int(EventType.INCREMENTAL_SNAPSHOT),
            data=empty_mutation_data(),
            timestamp=filler_timestamp,
        )
        kept.append((filler, _PRE_RANGE if filler_timestamp < start_ms else _IN_RANGE))

    shift = start_ms - base.timestamp
    shifted: list[Event] = []
    for event, role in kept:
        if role == _ANCHOR:
            new_timestamp = 0
        elif role == _PRE_RANGE:
            if shift > 0:
                elapsed = min(event.timestamp - base.timestamp, shift)
                new_timestamp = elapsed * PRE_RANGE_WINDOW_MS // shift
            else:
                new_timestamp = PRE_RANGE_WINDOW_MS
        else:
            new_timestamp = event.timestamp - start_ms + PRE_RANGE_WINDOW_MS
        shifted.append(event.shifted(new_timestamp))
    shifted.sort(key=lambda event: event.timestamp)

    if len(shifted) < 2:
        raise InsufficientEvents(
            f"trimmed recording has only {len(shifted)} events, need at least 2",
            operation=OPERATION,
            start=start_ms,
            end=end_ms,
        )
    logger.info("Fallback trim produced %d of %d events", len(shifted), len(events))
    return shifted
