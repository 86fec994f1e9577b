"""Cursor over one buffer, reading tokens through the lattice lexer.

The stream is the only mutable state a parser holds: backtracking is a
``checkpoint = stream.position`` followed by ``stream.seek(checkpoint)``.
"""

from __future__ import annotations

from ..models import TokenCandidate, TokenKind
from .lattice_lexer import candidates_at

HORIZONTAL_SPACE = " \t"


class TokenStream:
    """Sequential token reader with cheap checkpoint/restore."""

    def __init__(self, buffer: str, position: int = 0):
        self.buffer = buffer
        self.position = position
        # Candidates are immutable, so readings can be shared across seeks
        self._cache: dict[int, list[TokenCandidate]] = {}

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.buffer)

    def seek(self, position: int) -> None:
        self.position = position

    def char(self, offset: int = 0) -> str:
        """Return the raw character at ``position + offset`` ("" when out of range)."""
        idx = self.position + offset
        if 0 <= idx < len(self.buffer):
            return self.buffer[idx]
        return ""

    def candidates(self, position: int | None = None) -> list[TokenCandidate]:
        pos = self.position if position is None else position
        cached = self._cache.get(pos)
        if cached is None:
            cached = candidates_at(self.buffer, pos)
            self._cache[pos] = cached
        return cached

    def peek(self, position: int | None = None) -> TokenCandidate | None:
        """Return the cheapest reading without moving the cursor."""
        candidates = self.candidates(position)
        return candidates[0] if candidates else None

    def peek_kind(self, position: int | None = None) -> TokenKind | None:
        token = self.peek(position)
        return token.kind if token else None

    def check(self, *kinds: TokenKind) -> bool:
        return self.peek_kind() in kinds

    def advance(self) -> TokenCandidate | None:
        """Consume the cheapest reading and move past it."""
        token = self.peek()
        if token is not None:
            self.position = token.end_position
        return token

    def consume(self, kind: TokenKind) -> TokenCandidate | None:
        """Consume the next token only if its best reading is ``kind``."""
        if self.check(kind):
            return self.advance()
        return None

    def skip_whitespace(self, *, newlines: bool = True) -> None:
        kinds = (TokenKind.WHITESPACE, TokenKind.NEWLINE) if newlines else (TokenKind.WHITESPACE,)
        while self.check(*kinds):
            self.advance()

    def skip_to_line_end(self) -> None:
        """Move the cursor onto the next newline (or the end of input)."""
        newline = self.buffer.find("\n", self.position)
        self.position = len(self.buffer) if newline == -1 else newline

    def column(self, position: int | None = None) -> int:
        """Return the offset of ``position`` from the start of its line."""
        pos = self.position if position is None else position
        return pos - (self.buffer.rfind("\n", 0, pos) + 1)

    def at_line_start(self, position: int | None = None) -> bool:
        """True when only spaces/tabs separate ``position`` from the previous newline."""
        pos = self.position if position is None else position
        idx = pos - 1
        while idx >= 0 and self.buffer[idx] in HORIZONTAL_SPACE:
            idx -= 1
        return idx < 0 or self.buffer[idx] == "\n"

    def preceded_by_break(self, position: int | None = None, extra: str = "") -> bool:
        """True at buffer start or after whitespace (or any character in ``extra``)."""
        pos = self.position if position is None else position
        if pos == 0:
            return True
        previous = self.buffer[pos - 1]
        return previous.isspace() or previous in extra
