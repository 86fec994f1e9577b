"""Token candidate produced by the lattice lexer."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import TokenKind


@dataclass(frozen=True)
class TokenCandidate:
    """One interpretation of the characters at a cursor.

    Attributes:
        kind: What the characters were read as
        value: Literal text, or the decoded contents for strings
        start: Cursor the candidate was read at
        end_position: Cursor after consuming this candidate
        cost: Repair cost of accepting this reading (0 = no repair)
        repair_note: Human-readable description of the repair, if any
    """

    kind: TokenKind
    value: str
    start: int
    end_position: int
    cost: int = 0
    repair_note: str | None = None
