"""Grammar-directed rewrite of near-JSON into strict JSON.

Recursive descent over objects, arrays, key/value pairs and values. The
reconstructor never rejects a span that opens with ``{`` or ``[``: every
deviation from the JSON grammar is patched and logged with a cost.

Repairs (cost):
    - missing comma between members (1)
    - trailing or repeated comma dropped (1)
    - missing closing brace/bracket synthesised at end of input (3)
    - bare key quoted (2), number/boolean/null key quoted (2)
    - missing colon: key bound to null (3)
    - missing value after a colon: null (1)
    - bare-word value quoted (2), text/emoji value quoted (1)
    - comments removed (1)
    - malformed number normalised (1)
    - "- item" lines after a colon read as an array (1)
    - unexpected token skipped (1)
    - content after the top-level value ignored (1)
"""

from __future__ import annotations

import json

from ..models import TokenCandidate, TokenKind
from .base import BaseReconstructor, Reconstruction, encode_string

OPENERS = (TokenKind.BRACE_OPEN, TokenKind.BRACKET_OPEN)
CLOSERS = (TokenKind.BRACE_CLOSE, TokenKind.BRACKET_CLOSE)
LITERAL_KEY_KINDS = (TokenKind.NUMBER, TokenKind.BOOLEAN, TokenKind.NULL)

# Tokens a bare key may extend over ("btw I love YAML")
KEY_WORD_KINDS = (
    TokenKind.BARE_WORD,
    TokenKind.NUMBER,
    TokenKind.BOOLEAN,
    TokenKind.NULL,
    TokenKind.TEXT,
    TokenKind.DASH,
)

# Characters that glue onto a number and turn it into text ("10px", "1.2.3", "50%")
NUMBER_GLUE = "._%$"


class JsonReconstructor(BaseReconstructor):
    """Rewrite one brace/bracket span into strict JSON."""

    component = "json"

    def reconstruct(self) -> Reconstruction:
        stream = self.stream
        stream.skip_whitespace()
        if not stream.check(*OPENERS):
            return self._failure("span does not start with '{' or '['")

        try:
            text = self._object() if stream.check(TokenKind.BRACE_OPEN) else self._array()
        except RecursionError:
            return self._failure("structure is nested too deeply to reconstruct")

        self._skip_insignificant()
        if not stream.at_end:
            self._repair("ignored trailing content", 1)
        return self._finish(text)

    # ------------------------------------------------------------------
    # Containers

    def _object(self) -> str:
        stream = self.stream
        stream.advance()
        members: list[str] = []
        saw_separator = True
        comma_pending = False

        while True:
            self._skip_insignificant()
            token = stream.peek()
            if token is None:
                self._repair("added missing closing brace", 3)
                break
            kind = token.kind

            if kind is TokenKind.BRACE_CLOSE:
                stream.advance()
                if comma_pending:
                    self._repair("removed trailing comma", 1)
                break
            if kind is TokenKind.BRACKET_CLOSE:
                # Mismatched closer: end the object here and let the caller see it
                self._repair("added missing closing brace", 3)
                break
            if kind is TokenKind.COMMA:
                stream.advance()
                if saw_separator:
                    self._repair("removed extra comma", 1)
                saw_separator = True
                comma_pending = True
                continue

            if self._starts_key(token):
                if not saw_separator:
                    self._repair("added missing comma", 1)
                members.append(self._pair())
                saw_separator = False
                comma_pending = False
                continue

            self._skip_unexpected()

        return "{" + ", ".join(members) + "}"

    def _array(self) -> str:
        stream = self.stream
        stream.advance()
        items: list[str] = []
        saw_separator = True
        comma_pending = False

        while True:
            self._skip_insignificant()
            token = stream.peek()
            if token is None:
                self._repair("added missing closing bracket", 3)
                break
            kind = token.kind

            if kind is TokenKind.BRACKET_CLOSE:
                stream.advance()
                if comma_pending:
                    self._repair("removed trailing comma", 1)
                break
            if kind is TokenKind.BRACE_CLOSE:
                self._repair("added missing closing bracket", 3)
                break
            if kind is TokenKind.COMMA:
                stream.advance()
                if saw_separator:
                    self._repair("removed extra comma", 1)
                saw_separator = True
                comma_pending = True
                continue
            if kind is TokenKind.COLON:
                self._skip_unexpected()
                continue

            if not saw_separator:
                self._repair("added missing comma", 1)
            items.append(self._value())
            saw_separator = False
            comma_pending = False

        return "[" + ", ".join(items) + "]"

    # ------------------------------------------------------------------
    # Members

    def _starts_key(self, token: TokenCandidate) -> bool:
        if token.kind in (TokenKind.STRING, TokenKind.BARE_WORD):
            return True
        return token.kind in LITERAL_KEY_KINDS and self._followed_by_colon(token)

    def _pair(self) -> str:
        stream = self.stream
        quoted = stream.check(TokenKind.STRING)
        key = self._key()
        # A bare word alone on its line is a null-valued key, so only a
        # quoted key may find its colon on a later line
        if quoted:
            self._skip_insignificant()
        else:
            self._skip_horizontal()
        if stream.consume(TokenKind.COLON) is None:
            self._repair("added missing colon and null value", 3)
            return f"{encode_string(key)}: null"
        return f"{encode_string(key)}: {self._value_after_colon()}"

    def _key(self) -> str:
        stream = self.stream
        token = stream.advance()

        if token.kind is TokenKind.STRING:
            self._charge(token)
            return token.value

        if token.kind in LITERAL_KEY_KINDS:
            self._repair("quoted non-string key", 2)
            return token.value

        # Bare word: a key that is not followed by a colon runs on over
        # further words up to the end of the line, a colon, '}' or ','
        end = token.end_position
        if not self._followed_by_colon(token):
            following = self._next_significant(end)
            while following is not None and following.kind in KEY_WORD_KINDS:
                if self._comment_at(following.start):
                    break
                end = following.end_position
                following = self._next_significant(end)
        stream.seek(end)
        self._repair("quoted bare key", 2)
        return self.raw_span[token.start : end].strip()

    def _value_after_colon(self) -> str:
        self._skip_insignificant()
        token = self.stream.peek()
        if (
            token is None
            or token.kind in CLOSERS
            or token.kind is TokenKind.COMMA
            or (token.kind in (TokenKind.BARE_WORD, TokenKind.STRING) and self._followed_by_key_colon(token))
        ):
            self._repair("inserted null for missing value", 1)
            return "null"
        if token.kind is TokenKind.DASH and self._starts_dash_item(token):
            return self._dash_list()
        return self._value()

    def _value(self) -> str:
        stream = self.stream
        token = stream.peek()
        kind = token.kind

        if kind is TokenKind.BRACE_OPEN:
            return self._object()
        if kind is TokenKind.BRACKET_OPEN:
            return self._array()

        if kind is TokenKind.STRING:
            stream.advance()
            self._charge(token)
            return encode_string(token.value)

        if kind is TokenKind.NUMBER:
            if self._number_is_glued(token):
                return self._unquoted_scalar(1, "quoted text value")
            stream.advance()
            return self._number(token.value)

        if kind in (TokenKind.BOOLEAN, TokenKind.NULL):
            stream.advance()
            return token.value

        if kind is TokenKind.BARE_WORD:
            return self._unquoted_scalar(2, "quoted bare value")
        return self._unquoted_scalar(1, "quoted unicode/text value")

    def _number(self, literal: str) -> str:
        try:
            json.loads(literal)
        except json.JSONDecodeError:
            self._repair("normalized number", 1)
            if any(ch in literal for ch in ".eE"):
                return json.dumps(float(literal))
            return str(int(literal))
        return literal

    def _unquoted_scalar(self, cost: float, note: str) -> str:
        """Read a run of unquoted text as one string value.

        The run stops at ``,``, ``}``, ``]``, a comment, the next key (a word
        followed by a colon) or a line break that is not followed by more
        text. Quoted strings inside the run are kept as written.
        """
        stream = self.stream
        start = stream.position
        stream.advance()
        comment = False

        while not stream.at_end:
            token = stream.peek()
            kind = token.kind
            if kind is TokenKind.COMMA or kind in CLOSERS:
                break
            if self._comment_at(token.start):
                comment = True
                break
            if kind is TokenKind.NEWLINE:
                if not self._continues_on_next_line(token):
                    break
                stream.advance()
                continue
            if kind in (TokenKind.BARE_WORD, TokenKind.STRING) and self._followed_by_key_colon(token):
                break
            if kind is TokenKind.COLON and not self._colon_is_glued(token):
                break
            if kind in OPENERS:
                end = self._balanced_end(token.start)
                if end is None:
                    break
                stream.seek(end)
                continue
            stream.advance()

        text = self.raw_span[start : stream.position].strip()
        self._repair(note, cost)
        if comment:
            stream.skip_to_line_end()
            self._repair("removed inline comment", 1)
        return encode_string(text)

    def _dash_list(self) -> str:
        """Read consecutive ``- item`` lines as an array."""
        stream = self.stream
        items: list[str] = []
        while True:
            stream.advance()
            self._skip_horizontal()
            token = stream.peek()
            if token is None or token.kind is TokenKind.NEWLINE:
                self._repair("inserted null for missing value", 1)
                items.append("null")
            else:
                items.append(self._value())

            checkpoint = stream.position
            stream.skip_whitespace()
            following = stream.peek()
            if following is None or not self._starts_dash_item(following):
                stream.seek(checkpoint)
                break

        self._repair("converted dash list to array", 1)
        return "[" + ", ".join(items) + "]"

    # ------------------------------------------------------------------
    # Lookahead

    def _starts_dash_item(self, token: TokenCandidate) -> bool:
        """True for a ``-`` that opens its line and is followed by a space."""
        if token.kind is not TokenKind.DASH or not self.stream.at_line_start(token.start):
            return False
        after = token.end_position
        return after >= len(self.raw_span) or self.raw_span[after] in " \t"

    def _followed_by_colon(self, token: TokenCandidate) -> bool:
        following = self._next_significant(token.end_position)
        return following is not None and following.kind is TokenKind.COLON

    def _followed_by_key_colon(self, token: TokenCandidate) -> bool:
        """True when ``token`` reads as the next key rather than part of a value.

        ``http://`` is not a key: its colon is followed by slashes.
        """
        following = self._next_significant(token.end_position)
        if following is None or following.kind is not TokenKind.COLON:
            return False
        return not self.raw_span.startswith("//", following.end_position)

    def _colon_is_glued(self, token: TokenCandidate) -> bool:
        after = token.end_position
        if after >= len(self.raw_span):
            return False
        following = self.raw_span[after]
        return not following.isspace() and following not in ",}]"

    def _number_is_glued(self, token: TokenCandidate) -> bool:
        after = token.end_position
        if after >= len(self.raw_span):
            return False
        following = self.raw_span[after]
        if following.isalpha() or following in NUMBER_GLUE:
            return True
        return following == ":" and self._colon_is_glued(self.stream.peek(after))

    def _continues_on_next_line(self, newline: TokenCandidate) -> bool:
        following = self.stream.peek(newline.end_position)
        if following is None:
            return False
        if following.kind is TokenKind.NUMBER:
            return True
        return following.kind is TokenKind.TEXT and not self._comment_at(following.start)

    def _balanced_end(self, start: int) -> int | None:
        """Return the position after the group opened at ``start`` (None if unbalanced)."""
        stream = self.stream
        checkpoint = stream.position
        stream.seek(start)
        depth = 0
        end = None
        while not stream.at_end:
            token = stream.advance()
            if token.kind in OPENERS:
                depth += 1
            elif token.kind in CLOSERS:
                depth -= 1
                if depth == 0:
                    end = stream.position
                    break
        stream.seek(checkpoint)
        return end

    # ------------------------------------------------------------------
    # Skipping

    def _skip_insignificant(self) -> None:
        """Skip whitespace, newlines and full comments."""
        stream = self.stream
        while True:
            stream.skip_whitespace()
            if stream.at_end or not self._comment_at():
                return
            stream.skip_to_line_end()
            self._repair("removed comment", 1)

    def _skip_unexpected(self) -> None:
        token = self.stream.advance()
        self._repair("skipped unexpected token", 1)
        self.debug.verbose("Skipped %s %r", token.kind.value, token.value)
