"""Enumerations shared by the lexer, the segmenter and the reconstructors.

Values are plain upper-case strings so they serialise cleanly into the
diagnostic output of the CLI.
"""

from __future__ import annotations

from enum import Enum


class TokenKind(str, Enum):
    """Every interpretation the lattice lexer can assign to a cursor."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    BARE_WORD = "BARE_WORD"
    BRACE_OPEN = "BRACE_OPEN"
    BRACE_CLOSE = "BRACE_CLOSE"
    BRACKET_OPEN = "BRACKET_OPEN"
    BRACKET_CLOSE = "BRACKET_CLOSE"
    COLON = "COLON"
    COMMA = "COMMA"
    DASH = "DASH"
    WHITESPACE = "WHITESPACE"
    NEWLINE = "NEWLINE"
    TEXT = "TEXT"
    FENCE_JSON = "FENCE_JSON"
    FENCE_YAML = "FENCE_YAML"
    FENCE_END = "FENCE_END"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class RepairMode(str, Enum):
    """Which reconstructor produced an accepted object.

    Values:
        JSON_ISH: brace/bracket grammar reconstruction
        YAML_ISH: indentation/dash/key-colon reconstruction
    """

    JSON_ISH = "json-ish"
    YAML_ISH = "yaml-ish"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class DebugLevel(str, Enum):
    """Verbosity of the diagnostic channel.

    Values:
        SILENT: no diagnostic output (default)
        BASIC: high-level operations (segmentation, repairs)
        VERBOSE: internal detail (tokens, parse steps)
    """

    SILENT = "silent"
    BASIC = "basic"
    VERBOSE = "verbose"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]
