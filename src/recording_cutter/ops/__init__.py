"""Operational utilities (tracing)."""

from .tracing import NullTracer, TraceLogger, new_run_id

__all__ = ["NullTracer", "TraceLogger", "new_run_id"]
