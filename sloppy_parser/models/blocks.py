"""Block and repair-result models exchanged between pipeline stages.

The segmenter produces :class:`TextBlock` and :class:`ObjectCandidate`
values; the repair orchestrator turns each candidate into a
:class:`RepairResult`; the driver emits :class:`TextBlock` and
:class:`ObjectBlock` values to callers.
"""

from __future__ import annotations

import math
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator

from .enums import RepairMode


class TextBlock(BaseModel):
    """A run of narration, trimmed of surrounding whitespace."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["text"] = "text"
    text: str


class ObjectCandidate(BaseModel):
    """A span suspected of holding JSON- or YAML-like data, not yet repaired.

    ``raw_span`` is an exact substring of the segmented buffer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["object-candidate"] = "object-candidate"
    raw_span: str


class RepairResult(BaseModel):
    """Outcome of reconstructing one candidate span.

    A failed result always carries ``score = inf`` so it can never win a
    comparison against a successful one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    object: JsonValue = None
    repaired_text: str | None = None
    warnings: List[str] = Field(default_factory=list)
    repairs: List[str] = Field(default_factory=list)
    score: float = math.inf
    mode: RepairMode = RepairMode.JSON_ISH

    @field_validator("score")
    def _non_negative_score(cls, value: float) -> float:
        if value < 0:
            raise ValueError("score must not be negative")
        return value

    @classmethod
    def failed(cls, warnings: list[str], mode: RepairMode = RepairMode.JSON_ISH) -> "RepairResult":
        return cls(success=False, warnings=warnings, score=math.inf, mode=mode)


class ObjectBlock(BaseModel):
    """A repaired structured span, with the diagnostics of its repair."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["object"] = "object"
    object: JsonValue
    raw: str
    repaired_text: str
    warnings: List[str] = Field(default_factory=list)
    repairs: List[str] = Field(default_factory=list)
    score: float = 0
    winning_mode: RepairMode

    @classmethod
    def from_repair(cls, raw: str, result: RepairResult) -> "ObjectBlock":
        """Build an output block from a successful repair of ``raw``."""
        if not result.success:
            raise ValueError("cannot build an ObjectBlock from a failed repair")
        return cls(
            object=result.object,
            raw=raw,
            repaired_text=result.repaired_text or "",
            warnings=list(result.warnings),
            repairs=list(result.repairs),
            score=result.score,
            winning_mode=result.mode,
        )


SegmentedBlock = Annotated[Union[TextBlock, ObjectCandidate], Field(discriminator="type")]
RawBlock = Annotated[Union[TextBlock, ObjectBlock], Field(discriminator="type")]
