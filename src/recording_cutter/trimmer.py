# ABOUTME: Exact time-range trim that starts playback on a full snapshot of the range start.
# ABOUTME: Falls back to the non-replaying trim when the snapshot cannot be reconstructed.
"""Exact recording trim."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from recording_cutter.config import Config, load_config
from recording_cutter.contracts import (
    Degraded,
    Event,
    EventType,
    KeyframeOutcome,
    Reconstructed,
    first_meta,
    validate_log,
)
from recording_cutter.errors import InvalidRange
from recording_cutter.fallback import trim_fallback
from recording_cutter.replay.builder import SyntheticKeyframeBuilder

logger = logging.getLogger(__name__)

OPERATION = "trim"
META_SLOT_MS = 0
KEYFRAME_SLOT_MS = 1
RANGE_OFFSET_MS = 2


def clamp_range(events: list[Event], start_ms: int, end_ms: int) -> tuple[int, int]:
    recording_start = events[0].timestamp
    recording_end = events[-1].timestamp
    if start_ms < recording_start:
        logger.warning(
            "Start %sms is before recording start %sms, adjusting", start_ms, recording_start
        )
        start_ms = recording_start
    if end_ms > recording_end:
        logger.warning("End %sms is after recording end %sms, adjusting", end_ms, recording_end)
        end_ms = recording_end
    if start_ms >= end_ms:
        raise InvalidRange(
            "start time must be before end time", operation=OPERATION, start=start_ms, end=end_ms
        )
    return start_ms, end_ms


class Trimmer:
    def __init__(
        self,
        *,
        builder: SyntheticKeyframeBuilder | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or load_config()
        self.builder = builder or SyntheticKeyframeBuilder(config=self.config)

    async def trim(self, log: Any, start_ms: int, end_ms: int) -> list[Event]:
        events = validate_log(log, operation=OPERATION)
        start_ms, end_ms = clamp_range(events, int(start_ms), int(end_ms))
        logger.info("Trimming %sms to %sms (%.3fs)", start_ms, end_ms, (end_ms - start_ms) / 1000)

        outcome = await self.boundary_keyframe(events, start_ms)
        if isinstance(outcome, Degraded):
            logger.warning("Falling back to non-replaying trim: %s", outcome.reason)
            return trim_fallback(events, start_ms, end_ms, config=self.config)

        keyframe = outcome.keyframe
        trimmed = [self._meta_event(events, keyframe), keyframe.shifted(KEYFRAME_SLOT_MS)]
        for event in events:
            if start_ms < event.timestamp <= end_ms:
                trimmed.append(event.shifted(event.timestamp - start_ms + RANGE_OFFSET_MS))
        trimmed.sort(key=lambda event: event.timestamp)
        logger.info("Trimmed %d events down to %d", len(events), len(trimmed))
        return trimmed

    async def boundary_keyframe(self, events: list[Event], start_ms: int) -> KeyframeOutcome:
        for event in events:
            if event.is_keyframe and event.timestamp == start_ms:
                logger.debug("Found an existing full snapshot at %s", start_ms)
                return Reconstructed(keyframe=event)
        return await self.builder.attempt(events, start_ms)

    def _meta_event(self, events: list[Event], keyframe: Event) -> Event:
        original = first_meta(events)
        data = original.data if original is not None and isinstance(original.data, dict) else {}
        return Event(
            type=int(EventType.META),
            data={
                "href": data.get("href") or self.config.default_href,
                "width": data.get("width") or self.config.viewport_width,
                "height": data.get("height") or self.config.viewport_height,
            },
            timestamp=META_SLOT_MS,
            tabId=keyframe.tab_id,
        )


async def trim(log: Any, start_ms: int, end_ms: int, *, config: Config | None = None) -> list[Event]:
    return await Trimmer(config=config).trim(log, start_ms, end_ms)


def trim_sync(log: Any, start_ms: int, end_ms: int, *, config: Config | None = None) -> list[Event]:
    return asyncio.run(trim(log, start_ms, end_ms, config=config))
