from __future__ import annotations

import json
import math
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sloppy_parser.repair import YamlReconstructor
from sloppy_parser.repair.yaml_reconstructor import type_scalar


def reconstruct(span: str):
    return YamlReconstructor(span).reconstruct()


def test_simple_mapping_is_typed() -> None:
    result = reconstruct("name: Keith\nage: 42\nactive: true\nratio: 0.5\nnothing: ~")
    assert result.success
    assert result.value == {"name": "Keith", "age": 42, "active": True, "ratio": 0.5, "nothing": None}


def test_score_starts_at_yaml_base() -> None:
    result = reconstruct("a: 1")
    assert result.score == 5 + 1
    assert result.repairs == ("converted YAML key-value",)


def test_list_under_key() -> None:
    result = reconstruct("items:\n- apple\n- banana\n- cherry")
    assert result.value == {"items": ["apple", "banana", "cherry"]}
    assert result.repairs.count("added list item") == 3
    assert "converted YAML key" in result.repairs


def test_ragged_list_indentation_stays_flat() -> None:
    result = reconstruct("items:\n - one\n  - two\n    - three")
    assert result.value == {"items": ["one", "two", "three"]}


def test_nested_mapping_with_inline_json() -> None:
    result = reconstruct("person:\n  name: Keith\n  details: {likes: coffee}")
    assert result.value == {"person": {"name": "Keith", "details": {"likes": "coffee"}}}
    assert "parsed inline JSON in YAML" in result.repairs


def test_inline_flow_sequence() -> None:
    assert reconstruct("tags: [a, b, 3]").value == {"tags": ["a", "b", 3]}


def test_braces_inside_a_sentence_stay_text() -> None:
    source = 'metadata:\n  author: "Keith"\n  notes: btw here\'s the json you asked for {foo: bar}'
    assert reconstruct(source).value == {
        "metadata": {
            "author": "Keith",
            "notes": "btw here's the json you asked for {foo: bar}",
        }
    }


def test_siblings_after_nested_block() -> None:
    source = "server:\n  host: localhost\n  port: 8080\ndebug: false"
    assert reconstruct(source).value == {"server": {"host": "localhost", "port": 8080}, "debug": False}


def test_inline_comment_is_removed() -> None:
    result = reconstruct("name: Keith  # obviously\nage: 3")
    assert result.value == {"name": "Keith", "age": 3}
    assert "removed inline comment" in result.repairs


def test_hash_inside_value_is_kept() -> None:
    assert reconstruct("lang: C#").value == {"lang": "C#"}


def test_quoted_value_with_hash() -> None:
    assert reconstruct('motto: "we are # one"').value == {"motto": "we are # one"}


def test_comments_and_document_markers_cost_nothing() -> None:
    result = reconstruct("---\n# config\nname: x\n...")
    assert result.value == {"name": "x"}
    assert result.score == 6


def test_unrecognized_lines_are_skipped() -> None:
    result = reconstruct("name: x\njust some words\nrole: y")
    assert result.value == {"name": "x", "role": "y"}
    assert "skipped unrecognized line" in result.repairs


def test_multiword_keys() -> None:
    assert reconstruct("and then this: x").value == {"and then this": "x"}


def test_top_level_list() -> None:
    assert reconstruct("- a\n- b").value == ["a", "b"]


def test_list_of_mappings() -> None:
    result = reconstruct("- name: a\n  role: x\n- name: b")
    assert result.value == [{"name": "a", "role": "x"}, {"name": "b"}]


def test_list_of_mappings_under_key() -> None:
    source = "people:\n  - name: a\n    age: 1\n  - name: b\nteam: core"
    assert reconstruct(source).value == {
        "people": [{"name": "a", "age": 1}, {"name": "b"}],
        "team": "core",
    }


def test_list_after_comment_line() -> None:
    assert reconstruct("config:\n  # values\n  - a").value == {"config": ["a"]}


def test_output_is_indented_json() -> None:
    result = reconstruct("a: 1")
    assert result.text == json.dumps({"a": 1}, indent=2)


def test_no_structure_fails() -> None:
    result = reconstruct("just some words")
    assert not result.success
    assert math.isinf(result.score)
    assert "no YAML structure recognized" in result.warnings


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("null", None),
        ("~", None),
        ("True", True),
        ("false", False),
        ("-3", -3),
        ("2.5", 2.5),
        ("1e3", 1000.0),
        ("1.2.3", "1.2.3"),
        ("hello world", "hello world"),
    ],
)
def test_type_scalar(text: str, expected: object) -> None:
    assert type_scalar(text) == expected
