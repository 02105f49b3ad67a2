# ABOUTME: Capability contracts for the playback engine and state capture used during reconstruction.
# ABOUTME: The render surface is an explicit handle owned by one reconstruction, never process-wide state.
"""Playback and capture capability interfaces."""

from __future__ import annotations

import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

from recording_cutter.contracts import Event


@dataclass
class RenderSurface:
    """Invisible rendering target for one replay; nothing else may draw into it."""

    width: int = 1920
    height: int = 1080
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    document: dict[str, Any] | None = None
    mirror: dict[int, dict[str, Any]] = field(default_factory=dict)
    released: bool = False

    @property
    def has_content(self) -> bool:
        return self.document is not None and not self.released

    def release(self) -> None:
        self.document = None
        self.mirror.clear()
        self.released = True


@dataclass(frozen=True)
class ReplayOptions:
    speed: float = 1
    skip_inactive: bool = False
    mouse_tail: bool = False
    trigger_focus: bool = False
    replay_canvas: bool = False
    show_warning: bool = False
    block_class: str = "rr-block"
    mask_text_class: str = "rr-mask"


@dataclass(frozen=True)
class CaptureOptions:
    mirror: dict[int, dict[str, Any]]
    block_class: str = "rr-block"
    mask_text_class: str = "rr-mask"
    ignore_class: str = "rr-ignore"
    inline_stylesheet: bool = True
    mask_all_inputs: bool = False
    preserve_white_space: bool = True


class PlaybackEngine(Protocol):
    @property
    def mirror(self) -> dict[int, dict[str, Any]]: ...

    def start(self, events: Sequence[Event], surface: RenderSurface, options: ReplayOptions) -> None: ...

    def advance_to(self, relative_ms: int) -> None: ...

    def pause(self) -> None: ...

    def get_current_time(self) -> float: ...

    def destroy(self) -> None: ...


class StateCapture(Protocol):
    def capture(self, surface: RenderSurface, options: CaptureOptions) -> dict[str, Any] | None: ...


@contextmanager
def isolated_surface(*, width: int = 1920, height: int = 1080) -> Iterator[RenderSurface]:
    surface = RenderSurface(width=width, height=height)
    try:
        yield surface
    finally:
        surface.release()
