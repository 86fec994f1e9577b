from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sloppy_parser.lexing import best_at, candidates_at, consume_best
from sloppy_parser.models import TokenKind


def kinds(buffer: str, position: int = 0) -> list[TokenKind]:
    return [candidate.kind for candidate in candidates_at(buffer, position)]


def test_end_of_input_has_no_candidates() -> None:
    assert candidates_at("abc", 3) == []
    assert best_at("", 0) is None
    assert consume_best("ab", 2) is None


def test_consume_best_returns_new_cursor() -> None:
    token, position = consume_best("{x", 0)
    assert token.kind is TokenKind.BRACE_OPEN
    assert position == 1


def test_double_quoted_string_decodes_escapes() -> None:
    token = best_at('"a\\nb\\t\\"c\\"\\\\"', 0)
    assert token.kind is TokenKind.STRING
    assert token.value == 'a\nb\t"c"\\'
    assert token.cost == 0


def test_unicode_escapes_match_json_decoding() -> None:
    assert best_at('"caf\\u00e9"', 0).value == "café"
    assert best_at('"\\ud83d\\ude00"', 0).value == "\U0001F600"


def test_unknown_escape_keeps_character() -> None:
    assert best_at('"\\q"', 0).value == "q"


def test_unterminated_string_falls_back_to_text() -> None:
    token = best_at('"abc', 0)
    assert token.kind is TokenKind.TEXT
    assert token.value == '"'


def test_single_quotes_open_strings_after_json_punctuation() -> None:
    buffer = "{'a': 'b'}"
    token = best_at(buffer, 1)
    assert token.kind is TokenKind.STRING
    assert token.value == "a"
    assert token.cost == 1
    assert token.repair_note == "normalized single quotes"
    assert best_at(buffer, 6).value == "b"


def test_single_quote_at_buffer_start_is_a_string() -> None:
    assert best_at("'x'", 0).kind is TokenKind.STRING


def test_apostrophe_is_not_a_string() -> None:
    token = best_at("don't stop", 3)
    assert token.kind is TokenKind.TEXT
    assert token.value == "'"


def test_smart_quotes() -> None:
    token = best_at("“hello”", 0)
    assert token.kind is TokenKind.STRING
    assert token.value == "hello"
    assert token.cost == 2
    assert token.repair_note == "normalized unicode quotes"


def test_numbers() -> None:
    assert best_at("-12.5e3,", 0).value == "-12.5e3"
    assert best_at("42}", 0).kind is TokenKind.NUMBER
    assert best_at("-5", 0).kind is TokenKind.NUMBER


def test_keywords_need_a_word_boundary() -> None:
    assert best_at("null", 0).kind is TokenKind.NULL
    assert best_at("true,", 0).kind is TokenKind.BOOLEAN
    nullable = best_at("nullable", 0)
    assert nullable.kind is TokenKind.BARE_WORD
    assert nullable.value == "nullable"


def test_bare_word_cost_and_note() -> None:
    token = best_at("foo-bar: 1", 0)
    assert token.kind is TokenKind.BARE_WORD
    assert token.value == "foo-bar"
    assert token.cost == 2
    assert token.repair_note == "needs quoting"


def test_keywords_never_read_as_bare_words() -> None:
    assert TokenKind.BARE_WORD not in kinds("false")


def test_punctuation_and_dash() -> None:
    assert [best_at("{}[]:,", i).kind for i in range(6)] == [
        TokenKind.BRACE_OPEN,
        TokenKind.BRACE_CLOSE,
        TokenKind.BRACKET_OPEN,
        TokenKind.BRACKET_CLOSE,
        TokenKind.COLON,
        TokenKind.COMMA,
    ]
    assert best_at("- item", 0).kind is TokenKind.DASH


def test_whitespace_and_newline_runs() -> None:
    space = best_at("  x", 0)
    assert space.kind is TokenKind.WHITESPACE
    assert space.end_position == 2
    newline = best_at(" \n  x", 0)
    assert newline.kind is TokenKind.NEWLINE
    assert newline.end_position == 4


def test_fences() -> None:
    fence = best_at("```json\n{}", 0)
    assert fence.kind is TokenKind.FENCE_JSON
    assert fence.end_position == 7
    assert best_at("```YML\na: 1", 0).kind is TokenKind.FENCE_YAML
    other = best_at("```python\nprint()", 0)
    assert other.kind is TokenKind.FENCE_END
    assert other.end_position == 3


def test_text_fallback_only_when_nothing_matches() -> None:
    assert kinds("\U0001F44D") == [TokenKind.TEXT]
    assert TokenKind.TEXT not in kinds("{")


def test_every_candidate_makes_progress() -> None:
    buffer = "Sure! {a: 'b', c: [1, 2]} “q” ```json"
    for position in range(len(buffer)):
        for candidate in candidates_at(buffer, position):
            assert candidate.end_position > position
            assert candidate.start == position


def test_candidates_sorted_by_cost() -> None:
    for buffer in ("{'a': 1}", "abc", "“x”"):
        for position in range(len(buffer)):
            costs = [candidate.cost for candidate in candidates_at(buffer, position)]
            assert costs == sorted(costs)
