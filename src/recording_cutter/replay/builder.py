# ABOUTME: Rebuilds exact page state at an arbitrary timestamp by replaying the log and capturing it.
# ABOUTME: Every failure is typed; surface and engine are released on every path.
"""Synthetic keyframe reconstruction."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from recording_cutter.config import Config, load_config
from recording_cutter.contracts import (
    Degraded,
    Event,
    KeyframeOutcome,
    Reconstructed,
    SyntheticKeyframe,
    find_tab_id,
    validate_log,
)
from recording_cutter.errors import (
    CaptureUnavailable,
    ReconstructionError,
    ReconstructionTimeout,
    RecordingError,
)
from recording_cutter.replay.engine import (
    CaptureOptions,
    PlaybackEngine,
    RenderSurface,
    ReplayOptions,
    StateCapture,
    isolated_surface,
)
from recording_cutter.replay.virtual import MirrorStateCapture, VirtualPlaybackEngine

logger = logging.getLogger(__name__)

OPERATION = "reconstruct"


class SyntheticKeyframeBuilder:
    def __init__(
        self,
        *,
        engine_factory: Callable[[], PlaybackEngine] | None = None,
        capture: StateCapture | None = None,
        config: Config | None = None,
        options: ReplayOptions | None = None,
    ) -> None:
        self.engine_factory = engine_factory or VirtualPlaybackEngine
        self.capture = capture or MirrorStateCapture()
        self.config = config or load_config()
        self.options = options or ReplayOptions()

    async def build(self, log: Any, target_timestamp: int) -> SyntheticKeyframe:
        events = validate_log(log, operation=OPERATION)

        relative_target = target_timestamp - events[0].timestamp
        logger.info(
            "Reconstructing state at %s (relative %sms)", target_timestamp, relative_target
        )
        try:
            node = await self._replay_and_capture(events, relative_target, target_timestamp)
        except RecordingError:
            raise
        except Exception as exc:
            raise ReconstructionError(
                f"replay failed: {exc}", operation=OPERATION, target=target_timestamp
            ) from exc

        keyframe = SyntheticKeyframe.from_capture(
            node, timestamp=target_timestamp, tab_id=find_tab_id(events)
        )
        logger.info("Synthetic keyframe created at %s", target_timestamp)
        return keyframe

    async def attempt(self, log: Any, target_timestamp: int) -> KeyframeOutcome:
        """Like build(), but reports failure as Degraded instead of raising."""
        try:
            keyframe = await self.build(log, target_timestamp)
        except Exception as exc:  # any reconstruction failure degrades to the fallback path
            logger.warning("Reconstruction at %s failed: %s", target_timestamp, exc)
            return Degraded(reason=str(exc), error=exc)
        return Reconstructed(keyframe=keyframe)

    async def _replay_and_capture(
        self, events: list[Event], relative_target: int, target_timestamp: int
    ) -> dict[str, Any]:
        with isolated_surface(
            width=self.config.viewport_width, height=self.config.viewport_height
        ) as surface:
            async with self._playback(events, surface) as engine:
                engine.advance_to(relative_target)
                await self._wait_for(engine, relative_target, target_timestamp)
                engine.pause()
                # Deferred rendering may still land right after a pause.
                await asyncio.sleep(self.config.settle_delay_ms / 1000)

                node = self.capture.capture(surface, self._capture_options(engine))
                if not node:
                    raise CaptureUnavailable(
                        "replay surface produced no capturable state",
                        operation=OPERATION,
                        target=target_timestamp,
                        surface=surface.id,
                    )
                return node

    @asynccontextmanager
    async def _playback(
        self, events: list[Event], surface: RenderSurface
    ) -> AsyncIterator[PlaybackEngine]:
        engine = self.engine_factory()
        try:
            engine.start(events, surface, self.options)
            yield engine
        finally:
            engine.destroy()

    async def _wait_for(
        self, engine: PlaybackEngine, relative_target: int, target_timestamp: int
    ) -> None:
        threshold = relative_target - self.config.tolerance_ms
        interval = self.config.poll_interval_ms / 1000
        current = engine.get_current_time()
        for attempt in range(1, self.config.max_poll_attempts + 1):
            if current >= threshold:
                logger.debug("Reached %sms after %d polls", current, attempt)
                return
            await asyncio.sleep(interval)
            current = engine.get_current_time()
        if current >= threshold:
            return
        raise ReconstructionTimeout(
            "playback did not reach the target time",
            operation=OPERATION,
            target=target_timestamp,
            relative_target=relative_target,
            current=current,
            attempts=self.config.max_poll_attempts,
        )

    def _capture_options(self, engine: PlaybackEngine) -> CaptureOptions:
        return CaptureOptions(
            mirror=engine.mirror,
            block_class=self.options.block_class,
            mask_text_class=self.options.mask_text_class,
        )


async def build_keyframe(log: Any, target_timestamp: int, **kwargs: Any) -> SyntheticKeyframe:
    return await SyntheticKeyframeBuilder(**kwargs).build(log, target_timestamp)
