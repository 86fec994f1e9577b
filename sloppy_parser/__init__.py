"""Recover structured data from sloppy JSON/YAML written by language models.

Example:
    >>> from sloppy_parser import parse_json
    >>> parse_json("Here you go: {name: Keith, age: 42}")
    {'name': 'Keith', 'age': 42}
"""

from __future__ import annotations

from .config import ParserConfig
from .models import (
    DebugLevel,
    ObjectBlock,
    ObjectCandidate,
    RawBlock,
    RepairMode,
    RepairResult,
    TextBlock,
)
from .parser import parse, parse_json, parse_raw_output
from .preprocessing import normalize_line_endings
from .repair import repair
from .segmentation import segment

__version__ = "0.1.0"

__all__ = [
    "DebugLevel",
    "ObjectBlock",
    "ObjectCandidate",
    "ParserConfig",
    "RawBlock",
    "RepairMode",
    "RepairResult",
    "TextBlock",
    "normalize_line_endings",
    "parse",
    "parse_json",
    "parse_raw_output",
    "repair",
    "segment",
]
