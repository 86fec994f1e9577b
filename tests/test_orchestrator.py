from __future__ import annotations

import json
import math
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sloppy_parser.models import RepairMode
from sloppy_parser.repair import repair
from sloppy_parser.repair.orchestrator import ALL_FAILED


def test_well_formed_json_round_trips_at_zero_cost() -> None:
    source = '{"tool": "search", "query": "hello", "limit": 5}'
    result = repair(source)
    assert result.success
    assert result.mode is RepairMode.JSON_ISH
    assert result.score == 0
    assert result.object == json.loads(source)
    assert json.loads(result.repaired_text) == json.loads(source)


def test_json_repairs_are_reported() -> None:
    result = repair("{a:1 b:2}")
    assert result.object == {"a": 1, "b": 2}
    assert result.repairs
    assert result.score > 0


def test_yaml_is_tried_second() -> None:
    result = repair("a: 1\nb: 2")
    assert result.success
    assert result.mode is RepairMode.YAML_ISH
    assert result.object == {"a": 1, "b": 2}
    assert result.score >= 5


def test_total_failure() -> None:
    result = repair("hello world")
    assert not result.success
    assert math.isinf(result.score)
    assert result.object is None
    assert result.warnings[-1] == ALL_FAILED
    assert len(result.warnings) == 3
