"""Cut and trim browser session recordings into independently replayable clips."""

from .analysis import analyze, relative_seconds, search
from .contracts import Event, EventType, RecordingStats, SyntheticKeyframe, validate_log
from .cutter import cut
from .fallback import trim_fallback
from .replay.builder import SyntheticKeyframeBuilder, build_keyframe
from .timefmt import format_time, parse_time_string
from .trimmer import Trimmer, trim, trim_sync

__all__ = [
    "Event",
    "EventType",
    "RecordingStats",
    "SyntheticKeyframe",
    "SyntheticKeyframeBuilder",
    "Trimmer",
    "analyze",
    "build_keyframe",
    "cut",
    "format_time",
    "parse_time_string",
    "relative_seconds",
    "search",
    "trim",
    "trim_fallback",
    "trim_sync",
    "validate_log",
]
