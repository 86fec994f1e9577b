from __future__ import annotations

import io
import logging
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sloppy_parser.models import DebugLevel
from sloppy_parser.utils import DebugLog


@pytest.fixture
def capture_logs():
    """Capture everything written under the sloppy_parser logger."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))

    logger = logging.getLogger("sloppy_parser")
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    logger.setLevel(previous_level)


def test_silent_emits_nothing(capture_logs) -> None:
    log = DebugLog(DebugLevel.SILENT, "segmenter")
    log.basic("hello %s", "there")
    log.verbose("detail")
    assert capture_logs.getvalue() == ""


def test_basic_emits_info_only(capture_logs) -> None:
    log = DebugLog(DebugLevel.BASIC, "segmenter")
    log.basic("found %d blocks", 3)
    log.verbose("detail")
    assert capture_logs.getvalue() == "INFO:sloppy_parser.segmenter:[SEGMENTER] found 3 blocks\n"


def test_verbose_emits_both(capture_logs) -> None:
    log = DebugLog(DebugLevel.VERBOSE, "json")
    log.basic("one")
    log.verbose("two")
    lines = capture_logs.getvalue().splitlines()
    assert lines == [
        "INFO:sloppy_parser.json:[JSON] one",
        "DEBUG:sloppy_parser.json:[JSON] two",
    ]


def test_child_keeps_level() -> None:
    child = DebugLog(DebugLevel.VERBOSE, "parser").child("yaml")
    assert child.level is DebugLevel.VERBOSE
    assert child.component == "yaml"
    assert child.logger.name == "sloppy_parser.yaml"
