# ABOUTME: In-memory playback engine and state capture over serialized DOM node trees.
# ABOUTME: Applies full snapshots and mutation deltas to a per-surface id mirror; no browser needed.
"""Virtual (headless) implementations of the replay capabilities."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Sequence
from typing import Any

from recording_cutter.contracts import Event
from recording_cutter.replay.engine import CaptureOptions, RenderSurface, ReplayOptions

logger = logging.getLogger(__name__)

ELEMENT_NODE = 2


def _walk(node: dict[str, Any]) -> Iterator[dict[str, Any]]:
    yield node
    for child in node.get("childNodes") or []:
        yield from _walk(child)


def _class_names(node: dict[str, Any]) -> list[str]:
    attributes = node.get("attributes") or {}
    return str(attributes.get("class") or "").split()


class VirtualPlaybackEngine:
    """Replays events onto a RenderSurface by editing its node tree in place."""

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._surface: RenderSurface | None = None
        self._options = ReplayOptions()
        self._origin = 0
        self._cursor = 0
        self._current_time = 0.0
        self._paused = True
        self._destroyed = False

    @property
    def mirror(self) -> dict[int, dict[str, Any]]:
        if self._surface is None:
            return {}
        return self._surface.mirror

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def start(self, events: Sequence[Event], surface: RenderSurface, options: ReplayOptions) -> None:
        if not events:
            raise ValueError("Cannot start playback without events.")
        self._events = sorted(events, key=lambda event: event.timestamp)
        self._surface = surface
        self._options = options
        self._origin = self._events[0].timestamp
        self._reset()

    def advance_to(self, relative_ms: int) -> None:
        if self._surface is None or self._destroyed:
            raise RuntimeError("Playback engine is not running.")
        if relative_ms < self._current_time:
            self._reset()
        self._paused = False
        while self._cursor < len(self._events):
            event = self._events[self._cursor]
            if event.timestamp - self._origin > relative_ms:
                break
            self._apply(event)
            self._cursor += 1
        self._current_time = float(relative_ms)

    def pause(self) -> None:
        self._paused = True

    def get_current_time(self) -> float:
        return self._current_time

    def destroy(self) -> None:
        self._events = []
        self._surface = None
        self._destroyed = True
        self._paused = True

    def _reset(self) -> None:
        assert self._surface is not None
        self._surface.document = None
        self._surface.mirror.clear()
        self._cursor = 0
        self._current_time = 0.0

    def _apply(self, event: Event) -> None:
        if event.is_keyframe:
            self._load_snapshot(event)
        elif event.is_mutation:
            self._apply_mutation(event.data)

    def _load_snapshot(self, event: Event) -> None:
        assert self._surface is not None
        node = event.data.get("node") if isinstance(event.data, dict) else None
        if not isinstance(node, dict):
            logger.debug("Full snapshot at %s has no node tree", event.timestamp)
            return
        document = copy.deepcopy(node)
        self._surface.document = document
        self._surface.mirror.clear()
        self._register(document)

    def _register(self, node: dict[str, Any]) -> None:
        assert self._surface is not None
        for child in _walk(node):
            if "id" in child:
                self._surface.mirror[child["id"]] = child

    def _unregister(self, node: dict[str, Any]) -> None:
        assert self._surface is not None
        for child in _walk(node):
            self._surface.mirror.pop(child.get("id"), None)

    def _apply_mutation(self, data: dict[str, Any]) -> None:
        assert self._surface is not None
        mirror = self._surface.mirror
        if self._surface.document is None:
            logger.debug("Dropping mutation before any full snapshot")
            return

        for removal in data.get("removes") or []:
            parent = mirror.get(removal.get("parentId"))
            target = mirror.get(removal.get("id"))
            if parent is None or target is None:
                continue
            children = parent.get("childNodes") or []
            parent["childNodes"] = [child for child in children if child is not target]
            self._unregister(target)

        for addition in data.get("adds") or []:
            parent = mirror.get(addition.get("parentId"))
            node = addition.get("node")
            if parent is None or not isinstance(node, dict):
                logger.debug("Skipping add with unknown parent %s", addition.get("parentId"))
                continue
            node = copy.deepcopy(node)
            children = parent.setdefault("childNodes", [])
            next_id = addition.get("nextId")
            position = next(
                (index for index, child in enumerate(children) if child.get("id") == next_id),
                len(children),
            )
            children.insert(position, node)
            self._register(node)

        for text in data.get("texts") or []:
            target = mirror.get(text.get("id"))
            if target is not None:
                target["textContent"] = text.get("value")

        for change in data.get("attributes") or []:
            target = mirror.get(change.get("id"))
            if target is None:
                continue
            attributes = target.setdefault("attributes", {})
            for name, value in (change.get("attributes") or {}).items():
                if value is None:
                    attributes.pop(name, None)
                else:
                    attributes[name] = value


class MirrorStateCapture:
    """Serializes the surface's current document into a full snapshot node tree."""

    def capture(self, surface: RenderSurface, options: CaptureOptions) -> dict[str, Any] | None:
        if not surface.has_content:
            return None
        assert surface.document is not None
        known_ids = [key for key in options.mirror if isinstance(key, int)]
        known_ids.extend(
            node["id"] for node in _walk(surface.document) if isinstance(node.get("id"), int)
        )
        next_id = max(known_ids, default=0) + 1
        serialized, _ = self._serialize(surface.document, options, next_id)
        return serialized

    def _serialize(
        self, node: dict[str, Any], options: CaptureOptions, next_id: int
    ) -> tuple[dict[str, Any], int]:
        result = {key: copy.deepcopy(value) for key, value in node.items() if key != "childNodes"}
        node_id = node.get("id")
        if node_id is None or options.mirror.get(node_id) is not node:
            if node_id is None or node_id in options.mirror:
                node_id = next_id
                next_id += 1
            options.mirror[node_id] = node
        result["id"] = node_id

        classes = _class_names(node) if node.get("type") == ELEMENT_NODE else []
        if options.mask_all_inputs and node.get("tagName") == "input":
            attributes = result.setdefault("attributes", {})
            if "value" in attributes:
                attributes["value"] = "*" * len(str(attributes["value"]))

        if "childNodes" in node:
            children: list[dict[str, Any]] = []
            if options.block_class not in classes:
                for child in node["childNodes"]:
                    if options.ignore_class in _class_names(child):
                        continue
                    serialized, next_id = self._serialize(child, options, next_id)
                    children.append(serialized)
            result["childNodes"] = children
        return result, next_id
