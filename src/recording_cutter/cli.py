# ABOUTME: Command-line entrypoints for inspecting, cutting, and trimming session recordings.
# ABOUTME: Also exposes a diagnostic command that writes one reconstructed full snapshot.
"""Command-line interface for recording_cutter."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

from .analysis import analyze, describe_event, relative_seconds, search
from .config import Config, load_config
from .contracts import check_playable
from .cutter import cut
from .errors import RecordingError
from .ops.tracing import NullTracer, TraceLogger, new_run_id
from .replay.builder import SyntheticKeyframeBuilder
from .storage import load_recording, save_event, save_recording
from .timefmt import format_time, parse_time_string
from .trimmer import Trimmer


def _setup_logging(config: Config) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _tracer(config: Config, command: str) -> Any:
    if not config.trace_dir:
        return NullTracer()
    return TraceLogger(config.trace_dir, new_run_id(command))


def cmd_config(config: Config) -> int:
    print(config.as_lines())
    return 0


def cmd_analyze(*, input_path: str) -> int:
    events = load_recording(input_path)
    stats = analyze(events)
    if stats is None:
        print("error=unable to analyze recording", file=sys.stderr)
        return 2
    print(stats.as_lines())
    print(f"formatted_duration={format_time(stats.duration)}")
    problems = check_playable(events)
    print(f"playable={not problems}")
    for problem in problems:
        print(f"problem={problem}")
    return 0


def cmd_search(*, input_path: str, term: str) -> int:
    events = load_recording(input_path)
    matches = search(events, term)
    print(f"matches={len(matches)}")
    for event in matches:
        offset = relative_seconds(events, event.timestamp)
        print(f"relative={format_time(offset)} type={describe_event(event).name}")
    return 0


def cmd_cut(
    *, input_path: str, output_path: str, at: str, before: float, after: float, config: Config
) -> int:
    events = load_recording(input_path)
    clip = cut(events, parse_time_string(at), before, after, config=config)
    save_recording(output_path, clip)
    print(f"events={len(clip)}")
    print(f"output={output_path}")
    return 0


def cmd_trim(
    *, input_path: str, output_path: str, start: str, end: str, config: Config
) -> int:
    events = load_recording(input_path)
    origin = events[0].timestamp
    start_ms = origin + parse_time_string(start) * 1000
    end_ms = origin + parse_time_string(end) * 1000
    trimmed = asyncio.run(Trimmer(config=config).trim(events, start_ms, end_ms))
    save_recording(output_path, trimmed)
    print(f"events={len(trimmed)}")
    print(f"output={output_path}")
    return 0


def cmd_snapshot(
    *, input_path: str, output_path: str, timestamp: int | None, config: Config
) -> int:
    events = load_recording(input_path)
    target = timestamp if timestamp is not None else events[-1].timestamp
    print(f"target={target}")
    builder = SyntheticKeyframeBuilder(config=config)
    keyframe = asyncio.run(builder.build(events, target))
    save_event(output_path, keyframe)
    print(f"output={output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recording-cutter")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("config", help="Print configuration")

    analyze_parser = subparsers.add_parser("analyze", help="Print recording statistics")
    analyze_parser.add_argument("input", help="Path to a recording JSON file")

    search_parser = subparsers.add_parser("search", help="Find events containing a term")
    search_parser.add_argument("input", help="Path to a recording JSON file")
    search_parser.add_argument("term", help="Case-insensitive text to look for")

    cut_parser = subparsers.add_parser("cut", help="Cut a padded clip around a point in time")
    cut_parser.add_argument("input", help="Path to a recording JSON file")
    cut_parser.add_argument("output", help="Where to write the clip")
    cut_parser.add_argument(
        "--at", required=True, help="Center time from recording start (90, 1:30, 1:01:05)"
    )
    cut_parser.add_argument("--before", default=5, type=float, help="Seconds kept before --at")
    cut_parser.add_argument("--after", default=5, type=float, help="Seconds kept after --at")

    trim_parser = subparsers.add_parser("trim", help="Trim an exact range of a recording")
    trim_parser.add_argument("input", help="Path to a recording JSON file")
    trim_parser.add_argument("output", help="Where to write the trimmed recording")
    trim_parser.add_argument("--start", required=True, help="Range start from recording start")
    trim_parser.add_argument("--end", required=True, help="Range end from recording start")

    snapshot_parser = subparsers.add_parser(
        "snapshot", help="Reconstruct one full snapshot at an absolute timestamp"
    )
    snapshot_parser.add_argument("input", help="Path to a recording JSON file")
    snapshot_parser.add_argument("output", help="Where to write the snapshot event")
    snapshot_parser.add_argument(
        "timestamp",
        nargs="?",
        default=None,
        type=int,
        help="Absolute timestamp in ms (defaults to the last event)",
    )

    return parser


def _dispatch(args: argparse.Namespace, config: Config) -> int:
    if args.command == "config":
        return cmd_config(config)
    if args.command == "analyze":
        return cmd_analyze(input_path=args.input)
    if args.command == "search":
        return cmd_search(input_path=args.input, term=args.term)
    if args.command == "cut":
        return cmd_cut(
            input_path=args.input,
            output_path=args.output,
            at=args.at,
            before=args.before,
            after=args.after,
            config=config,
        )
    if args.command == "trim":
        return cmd_trim(
            input_path=args.input,
            output_path=args.output,
            start=args.start,
            end=args.end,
            config=config,
        )
    if args.command == "snapshot":
        return cmd_snapshot(
            input_path=args.input,
            output_path=args.output,
            timestamp=args.timestamp,
            config=config,
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    config = load_config()
    _setup_logging(config)
    tracer = _tracer(config, args.command)
    tracer.log_step(args.command, "start", args=vars(args))
    try:
        exit_code = _dispatch(args, config)
    except (RecordingError, OSError) as exc:
        tracer.log_step(args.command, "error", error=str(exc))
        print(f"error={exc}", file=sys.stderr)
        return 2
    tracer.log_step(args.command, "done", exit_code=exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
