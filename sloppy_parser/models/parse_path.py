"""Immutable decomposition state used by the segmentation parser."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from .blocks import ObjectCandidate, SegmentedBlock, TextBlock


@dataclass(frozen=True)
class ParsePath:
    """A candidate decomposition of the buffer up to ``cursor``.

    Alternatives are explored by deriving new paths; a failed alternative is
    simply discarded, so there is never any state to undo.

    Attributes:
        blocks: Blocks emitted so far, in source order
        score: Cumulative repair cost of the blocks
        repairs: Ordered repair notes collected along the way
        cursor: Position in the buffer this path has reached
        pending_text: Narration read since the last structured block; it is
            flushed as a single TextBlock so text runs stay maximal
    """

    blocks: tuple[SegmentedBlock, ...] = ()
    score: float = 0
    repairs: tuple[str, ...] = ()
    cursor: int = 0
    pending_text: str = field(default="", repr=False)

    def with_text(self, chunk: str, cursor: int) -> "ParsePath":
        """Return a path with ``chunk`` appended to the pending text run."""
        return replace(self, pending_text=self.pending_text + chunk, cursor=cursor)

    def with_candidate(
        self,
        raw_span: str,
        cursor: int,
        cost: float = 0,
        repairs: Iterable[str] = (),
    ) -> "ParsePath":
        """Return a path that ends with a new structured candidate."""
        flushed = self.flushed()
        blocks = flushed.blocks
        if raw_span:
            blocks = blocks + (ObjectCandidate(raw_span=raw_span),)
        return replace(
            flushed,
            blocks=blocks,
            score=flushed.score + cost,
            repairs=flushed.repairs + tuple(repairs),
            cursor=cursor,
        )

    def flushed(self) -> "ParsePath":
        """Move the pending text run into ``blocks`` (dropped if blank)."""
        if not self.pending_text:
            return self
        text = self.pending_text.strip()
        blocks = self.blocks + (TextBlock(text=text),) if text else self.blocks
        return replace(self, blocks=blocks, pending_text="")
