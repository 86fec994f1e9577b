"""Input normalisation applied before segmentation."""

from __future__ import annotations


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")
