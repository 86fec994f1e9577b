"""Runtime configuration for the parsing pipeline.

Settings are read from the environment (optionally seeded from a ``.env``
file) and passed explicitly into :func:`sloppy_parser.parser.parse`.

Environment Variables:
    SLOPPY_DEBUG   Diagnostic verbosity: silent, basic or verbose (default: silent)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .models import DebugLevel
from .utils.debug_log import DebugLog

logger = logging.getLogger(__name__)

DEBUG_ENV_VAR = "SLOPPY_DEBUG"


def parse_debug_level(value: str | DebugLevel | None) -> DebugLevel:
    """Convert a user-supplied level name into a :class:`DebugLevel`.

    Unknown names fall back to SILENT with a warning.
    """
    if isinstance(value, DebugLevel):
        return value
    if value is None or not str(value).strip():
        return DebugLevel.SILENT
    try:
        return DebugLevel(str(value).strip().lower())
    except ValueError:
        logger.warning(
            "Unknown debug level %r; expected one of %s",
            value,
            ", ".join(DebugLevel.all_values()),
        )
        return DebugLevel.SILENT


@dataclass(frozen=True)
class ParserConfig:
    """Settings for one parse call."""

    debug_level: DebugLevel = DebugLevel.SILENT

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "ParserConfig":
        """Build a configuration from ``SLOPPY_DEBUG``.

        If ``dotenv_path`` is given the file is loaded first; values already
        present in the environment win.
        """
        if dotenv_path is not None:
            load_dotenv(dotenv_path=str(dotenv_path), override=False)
        return cls(debug_level=parse_debug_level(os.environ.get(DEBUG_ENV_VAR)))

    def debug_log(self, component: str) -> DebugLog:
        return DebugLog(self.debug_level, component)
