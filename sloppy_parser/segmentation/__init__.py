"""Backtracking segmentation of mixed narration and structured data."""

from __future__ import annotations

from .segmenter import Segmenter, segment

__all__ = ["Segmenter", "segment"]
