# ABOUTME: Makes the `recording_cutter` package importable during pytest runs.
# ABOUTME: Ensures tests can run without requiring an editable install step.

from __future__ import annotations

import sys
from pathlib import Path


def _add_recording_cutter_src_to_sys_path() -> None:
    tests_dir = Path(__file__).resolve().parent
    sys.path.insert(0, str(tests_dir.parent / "src"))
    sys.path.insert(0, str(tests_dir))


_add_recording_cutter_src_to_sys_path()
