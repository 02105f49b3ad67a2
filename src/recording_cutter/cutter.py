# ABOUTME: Extracts a padded clip around a point of interest, anchored on the nearest full snapshot.
# ABOUTME: Keeps a wider prefix instead of reconstructing state, so clips stay cheap and playable.
"""Conservative clip extraction."""

from __future__ import annotations

import logging
from typing import Any

from recording_cutter.config import Config, load_config
from recording_cutter.contracts import Event, EventType, validate_log
from recording_cutter.errors import MissingKeyframe
from recording_cutter.timefmt import format_time

logger = logging.getLogger(__name__)

FILLER_GAP_MS = 100


def nearest_keyframe(events: list[Event], timestamp: float) -> Event | None:
    """Closest full snapshot to `timestamp`, before or after; first wins ties."""
    best: Event | None = None
    best_distance = float("inf")
    for event in events:
        if not event.is_keyframe:
            continue
        distance = abs(event.timestamp - timestamp)
        if distance < best_distance:
            best = event
            best_distance = distance
    return best


def cut(
    log: Any,
    center_seconds: float,
    before_seconds: float = 5,
    after_seconds: float = 5,
    *,
    config: Config | None = None,
) -> list[Event]:
    events = validate_log(log, operation="cut")
    config = config or load_config()

    center_timestamp = events[0].timestamp + center_seconds * 1000
    cut_start = center_timestamp - before_seconds * 1000
    cut_end = center_timestamp + after_seconds * 1000
    logger.info(
        "Cutting around %s (%ss), window %s to %s",
        format_time(center_seconds),
        center_seconds,
        format_time(center_seconds - before_seconds),
        format_time(center_seconds + after_seconds),
    )

    keyframe = nearest_keyframe(events, cut_start)
    if keyframe is None:
        raise MissingKeyframe(
            "no full snapshot found in recording", operation="cut", cut_start=cut_start
        )
    logger.debug(
        "Anchoring on full snapshot at %s (%sms from cut start)",
        keyframe.timestamp,
        abs(keyframe.timestamp - cut_start),
    )

    range_start = min(keyframe.timestamp, cut_start)
    range_end = cut_end
    clip: list[Event] = [keyframe]
    for event in events:
        if not range_start <= event.timestamp <= range_end:
            continue
        if event.timestamp == keyframe.timestamp and event.type == keyframe.type:
            continue
        # Deltas recorded before the anchor have no base state in the clip.
        if event.timestamp < keyframe.timestamp and not event.is_meta:
            continue
        clip.append(event)

    if len(clip) < 2:
        clip.append(
            Event(
                type=int(EventType.META),
                data={"href": config.default_href},
                timestamp=clip[-1].timestamp + FILLER_GAP_MS,
            )
        )

    clip.sort(key=lambda event: event.timestamp)
    logger.info("Clipped %d events down to %d", len(events), len(clip))
    return clip
