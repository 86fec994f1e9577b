"""Line-oriented rewrite of YAML-like spans into strict JSON.

Only the shapes language models actually emit are understood: ``key: value``
lines, ``key:`` lines opening a nested block, ``- item`` lines (including
``- key: value`` items) and inline ``{...}``/``[...]`` values, which are
handed to a fresh :class:`JsonReconstructor`.

Nesting is tracked with a stack of frames keyed by indentation. A key line
closes every frame indented at least as deep as itself; a dash line closes
deeper frames and the list-item frames at its own depth, so list items with
ragged indentation stay attached to the same key.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from ..lexing.lattice_lexer import NUMBER_PATTERN
from ..models import TokenKind
from .base import BaseReconstructor, Reconstruction
from .json_reconstructor import JsonReconstructor

YAML_BASE_SCORE = 5
INLINE_JSON_COST = 2
DOCUMENT_MARKERS = ("---", "...")
NULL_WORDS = ("null", "~")

KEY_PART_KINDS = (
    TokenKind.BARE_WORD,
    TokenKind.STRING,
    TokenKind.NUMBER,
    TokenKind.BOOLEAN,
    TokenKind.NULL,
    TokenKind.WHITESPACE,
    TokenKind.TEXT,
    TokenKind.DASH,
)

INLINE_COMMENT = re.compile(r"(?:^|\s)#")


@dataclass
class _Frame:
    """One open mapping on the indentation stack."""

    indent: int
    mapping: dict[str, Any]
    current_key: str | None = None
    item: bool = False
    owner: tuple[dict[str, Any], str] | None = None


def type_scalar(text: str) -> Any:
    """Type a plain YAML scalar the way a YAML loader would, roughly."""
    lowered = text.lower()
    if lowered in NULL_WORDS:
        return None
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if NUMBER_PATTERN.fullmatch(text):
        if any(ch in text for ch in ".eE"):
            return float(text)
        return int(text)
    return text


class YamlReconstructor(BaseReconstructor):
    """Rewrite one YAML-like span into strict JSON."""

    component = "yaml"
    base_score = YAML_BASE_SCORE

    def reconstruct(self) -> Reconstruction:
        stream = self.stream
        root = _Frame(indent=-1, mapping={})
        frames = [root]
        top_items: list[Any] = []
        recognized = False

        while True:
            stream.skip_whitespace()
            if stream.at_end:
                break
            indent = stream.column()

            if self._comment_at() or self._current_line().strip() in DOCUMENT_MARKERS:
                stream.skip_to_line_end()
                continue

            if self._at_list_dash():
                if self._list_item(frames, indent, top_items):
                    recognized = True
                    continue
            else:
                key = self._read_key()
                if key is not None:
                    while len(frames) > 1 and frames[-1].indent >= indent:
                        frames.pop()
                    self._bind_key(frames, key, indent)
                    recognized = True
                    continue

            self.debug.verbose("Skipping line %r", self._current_line())
            stream.skip_to_line_end()
            self._repair("skipped unrecognized line", 1)

        if not recognized:
            return self._failure("no YAML structure recognized")

        document: Any = root.mapping
        if top_items:
            if root.mapping:
                self.warnings.append("top-level list items were dropped in favour of the mapping")
            else:
                document = top_items
        return self._finish(json.dumps(document, indent=2, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Line handlers

    def _bind_key(self, frames: list[_Frame], key: str, indent: int) -> None:
        """Bind ``key`` (already read, cursor after its colon) into the top frame."""
        frame = frames[-1]
        self._skip_horizontal()

        if self._at_line_end():
            if not self.stream.at_end and self._comment_at():
                self.stream.skip_to_line_end()
                self._repair("removed inline comment", 1)
            placeholder: Any = [] if self._next_line_is_dash() else {}
            frame.mapping[key] = placeholder
            frame.current_key = key
            if isinstance(placeholder, dict):
                frames.append(_Frame(indent=indent, mapping=placeholder, owner=(frame.mapping, key)))
            self._repair("converted YAML key", 1)
            return

        frame.mapping[key] = self._line_value()
        frame.current_key = None
        self._repair("converted YAML key-value", 1)

    def _list_item(self, frames: list[_Frame], indent: int, top_items: list[Any]) -> bool:
        stream = self.stream
        while len(frames) > 1 and (
            frames[-1].indent > indent or (frames[-1].item and frames[-1].indent >= indent)
        ):
            frames.pop()

        target = self._list_for(frames, frames[-1], top_items)
        if target is None:
            return False

        stream.advance()
        self._skip_horizontal()
        self._repair("added list item", 1)

        if self._at_line_end():
            target.append(None)
            return True

        checkpoint = stream.position
        key_indent = stream.column()
        key = self._read_key()
        if key is not None:
            item: dict[str, Any] = {}
            target.append(item)
            frames.append(_Frame(indent=indent, mapping=item, item=True))
            self._bind_key(frames, key, key_indent)
            return True

        stream.seek(checkpoint)
        target.append(self._line_value())
        return True

    def _list_for(self, frames: list[_Frame], frame: _Frame, top_items: list[Any]) -> list[Any] | None:
        """Find (or create) the list a dash line appends to."""
        # A key whose block turned out to be a list: swap the placeholder
        if not frame.mapping and frame.owner is not None and not frame.item:
            parent, key = frame.owner
            parent[key] = []
            frames.pop()
            return parent[key]

        key = frame.current_key
        if key is None:
            key = next((k for k in reversed(frame.mapping) if isinstance(frame.mapping[k], list)), None)
        if key is None:
            if len(frames) == 1 and not frame.mapping:
                return top_items
            return None

        value = frame.mapping[key]
        if not isinstance(value, list):
            value = [] if value == {} else [value]
            frame.mapping[key] = value
        return value

    # ------------------------------------------------------------------
    # Values

    def _line_value(self) -> Any:
        """Read and type the rest of the current line, leaving the cursor at its end."""
        stream = self.stream
        start = stream.position

        if stream.check(TokenKind.BRACE_OPEN, TokenKind.BRACKET_OPEN):
            inline = self._inline_json(start)
            if inline is not None:
                return inline[0]
            stream.seek(start)

        token = stream.peek()
        if token.kind is TokenKind.STRING:
            rest = self._line_rest(token.end_position)
            if not rest.strip() or rest.lstrip().startswith("#"):
                stream.seek(token.end_position)
                self._charge(token)
                self._drop_line_rest()
                return token.value

        stream.skip_to_line_end()
        text = self.raw_span[start : stream.position]
        comment = INLINE_COMMENT.search(text)
        if comment is not None:
            text = text[: comment.start()]
            self._repair("removed inline comment", 1)
        return type_scalar(text.strip())

    def _inline_json(self, start: int) -> tuple[Any] | None:
        """Delegate an inline ``{...}``/``[...]`` value to a JSON reconstructor."""
        end = self._group_end(start)
        fragment = self.raw_span[start:end]
        result = JsonReconstructor(fragment, self.debug.child("json")).reconstruct()
        if not result.success:
            self.debug.verbose("Inline JSON %r did not reconstruct; keeping it as text", fragment)
            return None
        self._repair("parsed inline JSON in YAML", INLINE_JSON_COST)
        self.stream.seek(end)
        self._drop_line_rest()
        return (result.value,)

    def _group_end(self, start: int) -> int:
        """End of the balanced group at ``start``, or the end of its line."""
        stream = self.stream
        stream.seek(start)
        depth = 0
        while not stream.at_end:
            token = stream.advance()
            if token.kind in (TokenKind.BRACE_OPEN, TokenKind.BRACKET_OPEN):
                depth += 1
            elif token.kind in (TokenKind.BRACE_CLOSE, TokenKind.BRACKET_CLOSE):
                depth -= 1
                if depth == 0:
                    return stream.position
        line_end = self.raw_span.find("\n", start)
        return len(self.raw_span) if line_end == -1 else line_end

    def _drop_line_rest(self) -> None:
        """Discard whatever follows a complete value on its line."""
        rest = self._line_rest(self.stream.position)
        self.stream.skip_to_line_end()
        if not rest.strip():
            return
        if rest.lstrip().startswith("#"):
            self._repair("removed inline comment", 1)
        else:
            self._repair("ignored trailing content", 1)

    # ------------------------------------------------------------------
    # Line inspection

    def _read_key(self) -> str | None:
        """Read ``KEY:`` at the cursor; the colon must end the line or precede whitespace.

        Keys may run over several words. On failure the cursor is restored.
        """
        stream = self.stream
        start = stream.position
        parts: list = []
        while not stream.at_end:
            token = stream.peek()
            if token.kind is TokenKind.COLON:
                after = token.end_position
                if after >= len(self.raw_span) or self.raw_span[after].isspace():
                    break
            elif token.kind not in KEY_PART_KINDS or self._comment_at(token.start):
                stream.seek(start)
                return None
            parts.append(token)
            stream.advance()
        else:
            stream.seek(start)
            return None

        significant = [t for t in parts if t.kind is not TokenKind.WHITESPACE]
        if not significant:
            stream.seek(start)
            return None
        stream.advance()

        if len(significant) == 1 and significant[0].kind is TokenKind.STRING:
            self._charge(significant[0])
            return significant[0].value
        return self.raw_span[start : parts[-1].end_position].strip()

    def _at_list_dash(self) -> bool:
        if not self.stream.check(TokenKind.DASH):
            return False
        following = self.stream.char(1)
        return following == "" or following.isspace()

    def _at_line_end(self) -> bool:
        return self.stream.at_end or self.stream.check(TokenKind.NEWLINE) or self._comment_at()

    def _current_line(self) -> str:
        return self._line_rest(self.stream.position)

    def _line_rest(self, position: int) -> str:
        line_end = self.raw_span.find("\n", position)
        return self.raw_span[position : len(self.raw_span) if line_end == -1 else line_end]

    def _next_line_is_dash(self) -> bool:
        """Look past blank and comment lines for a ``- item`` line."""
        line_end = self.raw_span.find("\n", self.stream.position)
        if line_end == -1:
            return False
        for line in self.raw_span[line_end + 1 :].split("\n"):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            return stripped == "-" or stripped.startswith("- ")
        return False

    def _comment_at(self, position: int | None = None) -> bool:
        pos = self.stream.position if position is None else position
        return self.raw_span.startswith("#", pos) and self.stream.preceded_by_break(pos)
