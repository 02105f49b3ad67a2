# ABOUTME: Tests configuration defaults and RECCUT_ environment overrides.

from __future__ import annotations

import os
import unittest

_KEYS = ("RECCUT_SETTLE_DELAY_MS", "RECCUT_TRACE_DIR", "RECCUT_LOG_LEVEL", "RECCUT_DEFAULT_HREF")


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        self._saved = {key: os.environ.get(key) for key in _KEYS}
        for key in _KEYS:
            os.environ.pop(key, None)

    def tearDown(self) -> None:
        for key, value in self._saved.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value

    def test_defaults(self) -> None:
        from recording_cutter.config import load_config

        config = load_config()
        self.assertEqual(config.poll_interval_ms, 10)
        self.assertEqual(config.max_poll_attempts, 1000)
        self.assertEqual(config.tolerance_ms, 10)
        self.assertEqual(config.settle_delay_ms, 300)
        self.assertIsNone(config.trace_dir)
        self.assertIn("trace_dir=(unset)", config.as_lines())

    def test_environment_overrides(self) -> None:
        from recording_cutter.config import load_config

        os.environ["RECCUT_SETTLE_DELAY_MS"] = "0"
        os.environ["RECCUT_TRACE_DIR"] = "  "
        os.environ["RECCUT_LOG_LEVEL"] = "debug"
        os.environ["RECCUT_DEFAULT_HREF"] = "https://example.test/"

        config = load_config()
        self.assertEqual(config.settle_delay_ms, 0)
        self.assertIsNone(config.trace_dir)
        self.assertEqual(config.log_level, "DEBUG")
        self.assertEqual(config.default_href, "https://example.test/")


if __name__ == "__main__":
    unittest.main()
