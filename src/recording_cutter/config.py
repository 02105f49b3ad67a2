"""Configuration defaults and environment overrides for recording_cutter."""

from __future__ import annotations

import os

from pydantic import BaseModel

ENV_PREFIX = "RECCUT_"


class Config(BaseModel):
    poll_interval_ms: int = 10
    max_poll_attempts: int = 1000
    tolerance_ms: int = 10
    settle_delay_ms: int = 300
    fallback_lookback_ms: int = 30_000
    default_href: str = "about:blank"
    viewport_width: int = 1920
    viewport_height: int = 1080
    trace_dir: str | None = None
    log_level: str = "WARNING"

    def as_lines(self) -> str:
        lines = [
            f"poll_interval_ms={self.poll_interval_ms}",
            f"max_poll_attempts={self.max_poll_attempts}",
            f"tolerance_ms={self.tolerance_ms}",
            f"settle_delay_ms={self.settle_delay_ms}",
            f"fallback_lookback_ms={self.fallback_lookback_ms}",
            f"default_href={self.default_href}",
            f"viewport_width={self.viewport_width}",
            f"viewport_height={self.viewport_height}",
            f"trace_dir={self.trace_dir or '(unset)'}",
            f"log_level={self.log_level}",
        ]
        return "\n".join(lines)


def _env_override(key: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{key}", default)


def _env_override_int(key: str, default: int) -> int:
    return int(_env_override(key, str(default)))


def _env_override_optional(key: str) -> str | None:
    value = os.getenv(f"{ENV_PREFIX}{key}")
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def load_config() -> Config:
    defaults = Config()
    overrides: dict[str, object] = {
        "poll_interval_ms": _env_override_int("POLL_INTERVAL_MS", defaults.poll_interval_ms),
        "max_poll_attempts": _env_override_int("MAX_POLL_ATTEMPTS", defaults.max_poll_attempts),
        "tolerance_ms": _env_override_int("TOLERANCE_MS", defaults.tolerance_ms),
        "settle_delay_ms": _env_override_int("SETTLE_DELAY_MS", defaults.settle_delay_ms),
        "fallback_lookback_ms": _env_override_int(
            "FALLBACK_LOOKBACK_MS", defaults.fallback_lookback_ms
        ),
        "default_href": _env_override("DEFAULT_HREF", defaults.default_href),
        "viewport_width": _env_override_int("VIEWPORT_WIDTH", defaults.viewport_width),
        "viewport_height": _env_override_int("VIEWPORT_HEIGHT", defaults.viewport_height),
        "trace_dir": _env_override_optional("TRACE_DIR"),
        "log_level": _env_override("LOG_LEVEL", defaults.log_level).upper(),
    }
    return Config(**overrides)
