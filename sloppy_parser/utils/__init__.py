"""Small helpers shared across the pipeline."""

from __future__ import annotations

from .debug_log import SILENT, DebugLog

__all__ = ["DebugLog", "SILENT"]
