"""Shared plumbing for the reconstructors.

A reconstructor reads one candidate span through its own
:class:`~sloppy_parser.lexing.TokenStream`, rewrites it into strict JSON and
keeps an ordered repair log with a running cost.
"""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..lexing import TokenStream
from ..models import JsonValue, RepairMode, RepairResult, TokenCandidate, TokenKind
from ..utils.debug_log import SILENT, DebugLog

COMMENT_BREAKS = ",{["


def encode_string(value: str) -> str:
    """Encode ``value`` as a JSON string literal."""
    return json.dumps(value, ensure_ascii=False)


@dataclass(frozen=True)
class Reconstruction:
    """Outcome of one reconstructor run.

    Attributes:
        success: Whether ``text`` decoded as JSON
        text: The reconstructed JSON text (``None`` on failure)
        value: The decoded value
        repairs: Ordered repair notes
        warnings: Human-readable notes about failures
        score: Total repair cost (``inf`` on failure)
    """

    success: bool
    text: str | None = None
    value: JsonValue = None
    repairs: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    score: float = math.inf

    def to_repair_result(self, mode: RepairMode) -> RepairResult:
        if not self.success:
            return RepairResult.failed(list(self.warnings), mode)
        return RepairResult(
            success=True,
            object=self.value,
            repaired_text=self.text,
            warnings=list(self.warnings),
            repairs=list(self.repairs),
            score=self.score,
            mode=mode,
        )


class BaseReconstructor(ABC):
    """Common state for the JSON and YAML reconstructors.

    Subclasses implement :meth:`reconstruct`; each instance handles exactly
    one span and is discarded afterwards.
    """

    component = "repair"
    base_score: float = 0

    def __init__(self, raw_span: str, debug: DebugLog = SILENT):
        self.raw_span = raw_span
        self.stream = TokenStream(raw_span)
        self.debug = debug
        self.score: float = self.base_score
        self.repairs: list[str] = []
        self.warnings: list[str] = []

    @abstractmethod
    def reconstruct(self) -> Reconstruction:
        """Rewrite the span into strict JSON."""

    # ------------------------------------------------------------------
    # Repair log

    def _repair(self, note: str, cost: float = 1) -> None:
        self.repairs.append(note)
        self.score += cost
        self.debug.verbose("%s (cost %s) at %d", note, cost, self.stream.position)

    def _charge(self, token: TokenCandidate) -> None:
        """Log the lexer-level repair carried by ``token``, if any."""
        if token.cost:
            self._repair(token.repair_note or f"repaired {token.kind.value}", token.cost)

    def _failure(self, warning: str) -> Reconstruction:
        self.warnings.append(warning)
        self.debug.basic("Reconstruction failed: %s", warning)
        return Reconstruction(
            success=False,
            repairs=tuple(self.repairs),
            warnings=tuple(self.warnings),
        )

    def _finish(self, text: str) -> Reconstruction:
        """Decode ``text`` and package the result."""
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            return self._failure(f"reconstructed text is not valid JSON: {exc}")
        self.debug.basic("Reconstructed span with score %s (%d repairs)", self.score, len(self.repairs))
        return Reconstruction(
            success=True,
            text=text,
            value=value,
            repairs=tuple(self.repairs),
            warnings=tuple(self.warnings),
            score=self.score,
        )

    # ------------------------------------------------------------------
    # Stream helpers

    def _comment_at(self, position: int | None = None) -> bool:
        """True when a ``#`` or ``//`` comment starts at ``position``.

        The marker only counts at the start of the span or after whitespace
        or an opening/separating punctuation mark, so ``C#`` is a value.
        """
        pos = self.stream.position if position is None else position
        if not (self.raw_span.startswith("#", pos) or self.raw_span.startswith("//", pos)):
            return False
        return self.stream.preceded_by_break(pos, COMMENT_BREAKS)

    def _skip_horizontal(self) -> None:
        self.stream.skip_whitespace(newlines=False)

    def _next_significant(self, position: int) -> TokenCandidate | None:
        """Return the first non-whitespace token at or after ``position`` on the same line."""
        token = self.stream.peek(position)
        while token is not None and token.kind is TokenKind.WHITESPACE:
            token = self.stream.peek(token.end_position)
        return token
