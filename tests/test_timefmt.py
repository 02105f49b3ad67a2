# ABOUTME: Tests clock-style formatting and parsing of recording offsets.
# ABOUTME: Covers minute and hour boundaries plus malformed input.

from __future__ import annotations

import unittest


class TestFormatTime(unittest.TestCase):
    def test_formats_minutes_and_hours(self) -> None:
        from recording_cutter.timefmt import format_time

        self.assertEqual(format_time(5), "0:05")
        self.assertEqual(format_time(65), "1:05")
        self.assertEqual(format_time(3665), "1:01:05")

    def test_floors_fractional_seconds(self) -> None:
        from recording_cutter.timefmt import format_time

        self.assertEqual(format_time(59.9), "0:59")
        self.assertEqual(format_time(3600), "1:00:00")


class TestParseTimeString(unittest.TestCase):
    def test_parses_plain_seconds_and_clock_forms(self) -> None:
        from recording_cutter.timefmt import parse_time_string

        self.assertEqual(parse_time_string("90"), 90)
        self.assertEqual(parse_time_string("1:30"), 90)
        self.assertEqual(parse_time_string("1:01:05"), 3665)

    def test_empty_or_malformed_input_is_zero(self) -> None:
        from recording_cutter.timefmt import parse_time_string

        self.assertEqual(parse_time_string(""), 0)
        self.assertEqual(parse_time_string(None), 0)
        self.assertEqual(parse_time_string("1:2:3:4"), 0)
        self.assertEqual(parse_time_string("abc"), 0)


if __name__ == "__main__":
    unittest.main()
