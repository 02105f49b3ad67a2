# ABOUTME: Tests the non-replaying trim that anchors on an earlier full snapshot.
# ABOUTME: Verifies pre-range compression into the first 100ms and the filler/insufficient cases.

from __future__ import annotations

import unittest

from sample_recordings import build_recording, fast_config, keyframe, meta, text_mutation


class TestSelectBaseKeyframe(unittest.TestCase):
    def test_prefers_latest_snapshot_within_lookback(self) -> None:
        from recording_cutter.contracts import validate_log
        from recording_cutter.fallback import select_base_keyframe

        events = validate_log(build_recording(), operation="test")
        index, event = select_base_keyframe(events, 15000, lookback_ms=30000)
        self.assertEqual(event.timestamp, 11000)
        self.assertEqual(index, 51)

    def test_falls_back_to_earlier_snapshot_outside_lookback(self) -> None:
        from recording_cutter.contracts import validate_log
        from recording_cutter.fallback import select_base_keyframe

        events = validate_log(build_recording(), operation="test")
        _, event = select_base_keyframe(events, 9000, lookback_ms=1000)
        self.assertEqual(event.timestamp, 1000)

    def test_uses_first_snapshot_when_none_precede_start(self) -> None:
        from recording_cutter.contracts import validate_log
        from recording_cutter.fallback import select_base_keyframe

        events = validate_log([meta(1000), keyframe(3000, "late")], operation="test")
        _, event = select_base_keyframe(events, 2000, lookback_ms=30000)
        self.assertEqual(event.timestamp, 3000)

    def test_none_without_snapshots(self) -> None:
        from recording_cutter.contracts import validate_log
        from recording_cutter.fallback import select_base_keyframe

        events = validate_log([meta(1000), text_mutation(2000, "x")], operation="test")
        self.assertIsNone(select_base_keyframe(events, 1500, lookback_ms=30000))


class TestTrimFallback(unittest.TestCase):
    def test_compresses_pre_range_mutations(self) -> None:
        from recording_cutter.contracts import check_playable
        from recording_cutter.fallback import trim_fallback

        trimmed = trim_fallback(build_recording(), 5000, 9000, config=fast_config())

        # 2 anchors + 16 pre-range text mutations (mouse moves dropped) + 21 in range.
        self.assertEqual(len(trimmed), 39)
        self.assertTrue(trimmed[0].is_keyframe)
        self.assertEqual(trimmed[0].timestamp, 0)
        self.assertTrue(trimmed[1].is_meta)
        self.assertEqual(trimmed[1].timestamp, 0)

        pre_range = [event for event in trimmed[2:] if event.timestamp < 100]
        self.assertEqual(len(pre_range), 16)
        self.assertTrue(all(event.is_mutation for event in pre_range))
        self.assertEqual(pre_range[0].timestamp, 5)
        self.assertEqual(pre_range[-1].timestamp, 95)

        self.assertEqual(trimmed[-1].timestamp, 4100)
        self.assertEqual(check_playable(trimmed), [])

    def test_later_snapshots_are_not_copied(self) -> None:
        from recording_cutter.fallback import trim_fallback

        trimmed = trim_fallback(build_recording(), 9000, 13000, config=fast_config())
        self.assertEqual(sum(1 for event in trimmed if event.is_keyframe), 1)

    def test_start_before_first_snapshot(self) -> None:
        from recording_cutter.fallback import trim_fallback

        log = [
            meta(1000),
            text_mutation(1500, "a"),
            keyframe(3000, "b"),
            text_mutation(4000, "c"),
            text_mutation(5000, "d"),
        ]
        trimmed = trim_fallback(log, 1000, 4500, config=fast_config())

        self.assertEqual([event.timestamp for event in trimmed], [0, 0, 3100])
        self.assertEqual([event.type for event in trimmed], [2, 4, 3])

    def test_adds_filler_when_nothing_else_survives(self) -> None:
        from recording_cutter.fallback import trim_fallback

        log = [keyframe(1000, "only"), {"type": 5, "data": {"tag": "x"}, "timestamp": 2000}]
        trimmed = trim_fallback(log, 1500, 1800, config=fast_config())

        self.assertEqual([event.timestamp for event in trimmed], [0, 2])
        self.assertTrue(trimmed[1].is_mutation)
        self.assertEqual(trimmed[1].data["adds"], [])

    def test_missing_snapshot(self) -> None:
        from recording_cutter.errors import MissingKeyframe
        from recording_cutter.fallback import trim_fallback

        with self.assertRaises(MissingKeyframe):
            trim_fallback([meta(1000), text_mutation(2000, "x")], 1000, 2000, config=fast_config())


if __name__ == "__main__":
    unittest.main()
