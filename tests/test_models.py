from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sloppy_parser.models import (
    DebugLevel,
    ObjectBlock,
    ObjectCandidate,
    ParsePath,
    RawBlock,
    RepairMode,
    RepairResult,
    SegmentedBlock,
    TextBlock,
    TokenCandidate,
    TokenKind,
)


def test_enum_values() -> None:
    assert RepairMode.JSON_ISH.value == "json-ish"
    assert set(DebugLevel.all_values()) == {"silent", "basic", "verbose"}
    assert len(TokenKind.all_values()) == 18


def test_token_candidate_is_frozen() -> None:
    token = TokenCandidate(TokenKind.BARE_WORD, "foo", 2, 5, 2, "needs quoting")
    assert token.repair_note == "needs quoting"
    with pytest.raises(AttributeError):
        token.cost = 0


def test_failed_repair_result_has_infinite_score() -> None:
    result = RepairResult.failed(["nope"])
    assert not result.success
    assert math.isinf(result.score)
    assert result.warnings == ["nope"]


def test_negative_score_is_rejected() -> None:
    with pytest.raises(ValidationError):
        RepairResult(success=True, object={}, score=-1)


def test_object_block_from_repair() -> None:
    result = RepairResult(
        success=True,
        object={"a": 1},
        repaired_text='{"a": 1}',
        repairs=["quoted bare key"],
        score=2,
        mode=RepairMode.JSON_ISH,
    )
    block = ObjectBlock.from_repair("{a: 1}", result)
    assert block.object == {"a": 1}
    assert block.raw == "{a: 1}"
    assert block.winning_mode is RepairMode.JSON_ISH
    assert block.repairs == ["quoted bare key"]


def test_object_block_refuses_failed_repair() -> None:
    with pytest.raises(ValueError):
        ObjectBlock.from_repair("x", RepairResult.failed([]))


def test_blocks_are_frozen() -> None:
    block = TextBlock(text="hi")
    with pytest.raises(ValidationError):
        block.text = "bye"


def test_discriminated_unions() -> None:
    raw = TypeAdapter(RawBlock).validate_python({"type": "text", "text": "hi"})
    assert raw == TextBlock(text="hi")
    segmented = TypeAdapter(SegmentedBlock).validate_python({"type": "object-candidate", "raw_span": "{}"})
    assert segmented == ObjectCandidate(raw_span="{}")


def test_object_block_serialises_for_output() -> None:
    block = ObjectBlock(object=[1, "a"], raw="[1, a]", repaired_text='[1, "a"]', winning_mode=RepairMode.YAML_ISH)
    dumped = block.model_dump(mode="json")
    assert dumped["type"] == "object"
    assert dumped["winning_mode"] == "yaml-ish"


def test_parse_path_keeps_text_runs_maximal() -> None:
    path = ParsePath().with_text("Hello ", 6).with_text("there ", 12)
    assert path.blocks == ()
    path = path.with_candidate("{}", 14, cost=1, repairs=["x"])
    assert path.blocks == (TextBlock(text="Hello there"), ObjectCandidate(raw_span="{}"))
    assert path.score == 1
    assert path.repairs == ("x",)
    assert path.cursor == 14


def test_parse_path_drops_blank_text_and_empty_spans() -> None:
    path = ParsePath().with_text("  \n", 3).with_candidate("", 5, cost=2).flushed()
    assert path.blocks == ()
    assert path.score == 2
