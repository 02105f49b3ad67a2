"""Replay-and-capture reconstruction of full snapshots."""

from .builder import SyntheticKeyframeBuilder, build_keyframe
from .engine import (
    CaptureOptions,
    PlaybackEngine,
    RenderSurface,
    ReplayOptions,
    StateCapture,
    isolated_surface,
)
from .virtual import MirrorStateCapture, VirtualPlaybackEngine

__all__ = [
    "CaptureOptions",
    "MirrorStateCapture",
    "PlaybackEngine",
    "RenderSurface",
    "ReplayOptions",
    "StateCapture",
    "SyntheticKeyframeBuilder",
    "VirtualPlaybackEngine",
    "build_keyframe",
    "isolated_surface",
]
