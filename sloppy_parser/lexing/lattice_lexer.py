"""Fuzzy lexer producing every plausible token reading at a cursor.

Each reading is a :class:`~sloppy_parser.models.TokenCandidate` tagged with
a repair cost. Rules are tried in a fixed priority order:

    1. fence markers (```json, ```yaml, bare ```)
    2. double-quoted strings
    3. single-quoted strings (only in a JSON-like context)
    4. smart-quoted strings
    5. numbers
    6. keywords (true, false, null)
    7. bare words
    8. single-character punctuation
    9. whitespace / newline runs

A raw one-character TEXT reading is produced only when nothing else
matched, so every query at a non-final cursor makes progress.

Functions:
    - candidates_at: all readings at a cursor, cheapest first
    - best_at: the cheapest reading at a cursor
    - consume_best: the cheapest reading and the cursor after it
"""

from __future__ import annotations

import re
from typing import Callable

from ..models import TokenCandidate, TokenKind

FENCE = "```"
LEFT_SMART_QUOTE = "“"
RIGHT_SMART_QUOTE = "”"
SMART_QUOTES = (LEFT_SMART_QUOTE, RIGHT_SMART_QUOTE)

# Characters after which a single quote opens a string rather than an apostrophe
SINGLE_QUOTE_CONTEXT = frozenset(":,[{")

KEYWORDS: dict[str, TokenKind] = {
    "true": TokenKind.BOOLEAN,
    "false": TokenKind.BOOLEAN,
    "null": TokenKind.NULL,
}

PUNCTUATION: dict[str, TokenKind] = {
    "{": TokenKind.BRACE_OPEN,
    "}": TokenKind.BRACE_CLOSE,
    "[": TokenKind.BRACKET_OPEN,
    "]": TokenKind.BRACKET_CLOSE,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    "-": TokenKind.DASH,
}

FENCE_LANGUAGES: dict[str, TokenKind] = {
    "json": TokenKind.FENCE_JSON,
    "yaml": TokenKind.FENCE_YAML,
    "yml": TokenKind.FENCE_YAML,
}

SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "/": "/",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

BARE_WORD_PATTERN = re.compile(r"[A-Za-z_$][A-Za-z0-9_$-]*")
NUMBER_PATTERN = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
FENCE_TAG_PATTERN = re.compile(r"[A-Za-z]*")
HEX_PATTERN = re.compile(r"[0-9a-fA-F]{4}")

SINGLE_QUOTE_COST = 1
SMART_QUOTE_COST = 2
BARE_WORD_COST = 2


def _read_quoted(buffer: str, position: int, closers: tuple[str, ...]) -> tuple[str, int] | None:
    """Read a quoted run starting after the opening quote at ``position``.

    Returns the decoded contents and the cursor after the closing quote, or
    ``None`` when the string never terminates.
    """
    chars: list[str] = []
    pos = position + 1
    length = len(buffer)
    while pos < length:
        ch = buffer[pos]
        if ch == "\\" and pos + 1 < length:
            escaped = buffer[pos + 1]
            if escaped == "u" and HEX_PATTERN.fullmatch(buffer, pos + 2, pos + 6):
                code = int(buffer[pos + 2 : pos + 6], 16)
                pos += 6
                if 0xD800 <= code <= 0xDBFF and buffer.startswith("\\u", pos):
                    # Join a UTF-16 surrogate pair the way json.loads does
                    low = buffer[pos + 2 : pos + 6]
                    if HEX_PATTERN.fullmatch(low) and 0xDC00 <= int(low, 16) <= 0xDFFF:
                        code = 0x10000 + ((code - 0xD800) << 10) + (int(low, 16) - 0xDC00)
                        pos += 6
                chars.append(chr(code))
                continue
            # Unknown escapes keep the escaped character
            chars.append(SIMPLE_ESCAPES.get(escaped, escaped))
            pos += 2
            continue
        if ch in closers:
            return "".join(chars), pos + 1
        chars.append(ch)
        pos += 1
    return None


def _previous_significant_char(buffer: str, position: int) -> str:
    """Return the nearest non-whitespace character before ``position``."""
    idx = position - 1
    while idx >= 0 and buffer[idx].isspace():
        idx -= 1
    return buffer[idx] if idx >= 0 else ""


def _try_fence(buffer: str, position: int) -> list[TokenCandidate]:
    if not buffer.startswith(FENCE, position):
        return []
    tag_start = position + len(FENCE)
    tag_end = FENCE_TAG_PATTERN.match(buffer, tag_start).end()
    kind = FENCE_LANGUAGES.get(buffer[tag_start:tag_end].lower())
    if kind is None:
        # Unknown or missing tag: only the backticks form the marker
        return [TokenCandidate(TokenKind.FENCE_END, FENCE, position, tag_start)]
    return [TokenCandidate(kind, buffer[position:tag_end], position, tag_end)]


def _try_string(buffer: str, position: int) -> list[TokenCandidate]:
    ch = buffer[position]
    candidates: list[TokenCandidate] = []

    if ch == '"':
        read = _read_quoted(buffer, position, ('"',))
        if read is not None:
            candidates.append(TokenCandidate(TokenKind.STRING, read[0], position, read[1]))

    elif ch == "'":
        previous = _previous_significant_char(buffer, position)
        if previous == "" or previous in SINGLE_QUOTE_CONTEXT:
            read = _read_quoted(buffer, position, ("'",))
            if read is not None:
                candidates.append(
                    TokenCandidate(
                        TokenKind.STRING,
                        read[0],
                        position,
                        read[1],
                        SINGLE_QUOTE_COST,
                        "normalized single quotes",
                    )
                )

    elif ch in SMART_QUOTES:
        read = _read_quoted(buffer, position, SMART_QUOTES)
        if read is not None:
            candidates.append(
                TokenCandidate(
                    TokenKind.STRING,
                    read[0],
                    position,
                    read[1],
                    SMART_QUOTE_COST,
                    "normalized unicode quotes",
                )
            )

    return candidates


def _try_number(buffer: str, position: int) -> list[TokenCandidate]:
    match = NUMBER_PATTERN.match(buffer, position)
    if not match:
        return []
    return [TokenCandidate(TokenKind.NUMBER, match.group(0), position, match.end())]


def _try_keyword(buffer: str, position: int) -> list[TokenCandidate]:
    match = BARE_WORD_PATTERN.match(buffer, position)
    if not match:
        return []
    kind = KEYWORDS.get(match.group(0))
    if kind is None:
        return []
    return [TokenCandidate(kind, match.group(0), position, match.end())]


def _try_bare_word(buffer: str, position: int) -> list[TokenCandidate]:
    match = BARE_WORD_PATTERN.match(buffer, position)
    if not match or match.group(0) in KEYWORDS:
        return []
    return [
        TokenCandidate(
            TokenKind.BARE_WORD,
            match.group(0),
            position,
            match.end(),
            BARE_WORD_COST,
            "needs quoting",
        )
    ]


def _try_punctuation(buffer: str, position: int) -> list[TokenCandidate]:
    ch = buffer[position]
    kind = PUNCTUATION.get(ch)
    if kind is None:
        return []
    if kind is TokenKind.DASH and position + 1 < len(buffer) and buffer[position + 1].isdigit():
        # "-5" is a negative number, not a list dash
        return []
    return [TokenCandidate(kind, ch, position, position + 1)]


def _try_whitespace(buffer: str, position: int) -> list[TokenCandidate]:
    end = position
    length = len(buffer)
    while end < length and buffer[end].isspace():
        end += 1
    if end == position:
        return []
    run = buffer[position:end]
    kind = TokenKind.NEWLINE if "\n" in run else TokenKind.WHITESPACE
    return [TokenCandidate(kind, run, position, end)]


_RULES: tuple[Callable[[str, int], list[TokenCandidate]], ...] = (
    _try_fence,
    _try_string,
    _try_number,
    _try_keyword,
    _try_bare_word,
    _try_punctuation,
    _try_whitespace,
)


def candidates_at(buffer: str, position: int) -> list[TokenCandidate]:
    """Return every plausible token reading at ``position``, cheapest first.

    The list is empty only at (or past) the end of the buffer. Ties in cost
    keep rule priority order because the sort is stable.

    Example:
        >>> [c.kind.value for c in candidates_at('{a: 1}', 1)]
        ['BARE_WORD']
    """
    if position >= len(buffer):
        return []
    candidates: list[TokenCandidate] = []
    for rule in _RULES:
        candidates.extend(rule(buffer, position))
    if not candidates:
        candidates.append(TokenCandidate(TokenKind.TEXT, buffer[position], position, position + 1))
    candidates.sort(key=lambda candidate: candidate.cost)
    return candidates


def best_at(buffer: str, position: int) -> TokenCandidate | None:
    """Return the cheapest reading at ``position`` (``None`` at end of input)."""
    candidates = candidates_at(buffer, position)
    return candidates[0] if candidates else None


def consume_best(buffer: str, position: int) -> tuple[TokenCandidate, int] | None:
    """Pick the cheapest reading at ``position`` and return it with the new cursor."""
    best = best_at(buffer, position)
    if best is None:
        return None
    return best, best.end_position
