# ABOUTME: Tests reading and writing recording files in the container shapes seen in practice.
# ABOUTME: Malformed files must surface as InvalidLog rather than raw JSON errors.

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from sample_recordings import build_recording, keyframe, meta


class TestUnwrapEvents(unittest.TestCase):
    def test_supported_containers(self) -> None:
        from recording_cutter.storage import unwrap_events

        events = [meta(1000), keyframe(1000, "x")]
        self.assertEqual(unwrap_events(events), events)
        self.assertEqual(unwrap_events({"events": events}), events)
        self.assertEqual(unwrap_events({"data": events}), events)
        self.assertEqual(unwrap_events(events[0]), [events[0]])

    def test_rejects_scalars(self) -> None:
        from recording_cutter.errors import InvalidLog
        from recording_cutter.storage import unwrap_events

        with self.assertRaises(InvalidLog):
            unwrap_events("not a recording")


class TestRecordingFiles(unittest.TestCase):
    def test_save_then_load_keeps_unknown_fields_and_tab_id(self) -> None:
        from recording_cutter.storage import load_recording, save_recording

        log = build_recording()
        log[0]["tabId"] = "tab-1"
        log[0]["delay"] = 12
        with tempfile.TemporaryDirectory() as tmpdir:
            path = save_recording(Path(tmpdir) / "nested" / "out.json", _as_events(log))
            raw = json.loads(path.read_text(encoding="utf-8"))
            loaded = load_recording(path)

        self.assertEqual(len(loaded), 100)
        self.assertEqual(raw[0]["tabId"], "tab-1")
        self.assertEqual(raw[0]["delay"], 12)
        self.assertNotIn("tabId", raw[1])

    def test_loads_wrapped_recording(self) -> None:
        from recording_cutter.storage import load_recording

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "wrapped.json"
            path.write_text(json.dumps({"events": build_recording()}), encoding="utf-8")
            self.assertEqual(len(load_recording(path)), 100)

    def test_invalid_json(self) -> None:
        from recording_cutter.errors import InvalidLog
        from recording_cutter.storage import load_recording

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "broken.json"
            path.write_text("[{\"type\": 2,", encoding="utf-8")
            with self.assertRaises(InvalidLog) as ctx:
                load_recording(path)
        self.assertIn("not valid JSON", str(ctx.exception))

    def test_non_utf8_bytes(self) -> None:
        from recording_cutter.errors import InvalidLog
        from recording_cutter.storage import load_recording

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "latin1.json"
            path.write_bytes(b"\xff\xfe[1")
            with self.assertRaises(InvalidLog) as ctx:
                load_recording(path)
        self.assertIn("not UTF-8", str(ctx.exception))
        self.assertIn("load:", str(ctx.exception))

    def test_empty_array(self) -> None:
        from recording_cutter.errors import EmptyLog
        from recording_cutter.storage import load_recording

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "empty.json"
            path.write_text("[]", encoding="utf-8")
            with self.assertRaises(EmptyLog):
                load_recording(path)

    def test_save_event(self) -> None:
        from recording_cutter.contracts import Event
        from recording_cutter.storage import save_event

        with tempfile.TemporaryDirectory() as tmpdir:
            path = save_event(Path(tmpdir) / "kf.json", Event.model_validate(keyframe(5000, "x")))
            raw = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(raw["type"], 2)
        self.assertEqual(raw["timestamp"], 5000)


def _as_events(log: list) -> list:
    from recording_cutter.contracts import validate_log

    return validate_log(log, operation="test")


if __name__ == "__main__":
    unittest.main()
