"""Public model exports for the project.

Keep the :mod:`sloppy_parser` namespace clean: tests and other modules
should import ``from sloppy_parser.models import TokenKind, ObjectBlock``.
"""

from __future__ import annotations

from pydantic import JsonValue

from .blocks import (
    ObjectBlock,
    ObjectCandidate,
    RawBlock,
    RepairResult,
    SegmentedBlock,
    TextBlock,
)
from .enums import DebugLevel, RepairMode, TokenKind
from .parse_path import ParsePath
from .tokens import TokenCandidate

__all__ = [
    "DebugLevel",
    "JsonValue",
    "ObjectBlock",
    "ObjectCandidate",
    "ParsePath",
    "RawBlock",
    "RepairMode",
    "RepairResult",
    "SegmentedBlock",
    "TextBlock",
    "TokenCandidate",
    "TokenKind",
]
