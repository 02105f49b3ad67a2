"""Clock-style formatting and parsing of recording offsets."""

from __future__ import annotations

import math
import re

_DIGITS_RE = re.compile(r"^\d+$")


def format_time(seconds: float) -> str:
    """Render seconds as M:SS, or H:MM:SS once an hour is reached."""
    total = max(0, int(math.floor(seconds)))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_time_string(text: str | None) -> int:
    """Parse "90", "1:30" or "1:01:05" into whole seconds; anything else is 0."""
    value = (text or "").strip()
    if not value:
        return 0
    if _DIGITS_RE.match(value):
        return int(value)

    parts = value.split(":")
    if not all(_DIGITS_RE.match(part) for part in parts):
        return 0
    numbers = [int(part) for part in parts]
    if len(numbers) == 2:
        return numbers[0] * 60 + numbers[1]
    if len(numbers) == 3:
        return numbers[0] * 3600 + numbers[1] * 60 + numbers[2]
    return 0
