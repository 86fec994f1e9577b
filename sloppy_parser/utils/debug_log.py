"""Level-gated diagnostic logging for the parsing pipeline.

The verbosity is an explicit value handed to each pipeline stage rather
than a process-wide switch, so two parses with different settings can run
side by side. Output goes through the standard :mod:`logging` machinery;
handlers are left to the application.
"""

from __future__ import annotations

import logging

from ..models import DebugLevel

LOGGER_ROOT = "sloppy_parser"


class DebugLog:
    """Diagnostic channel for one pipeline component.

    ``basic`` messages are emitted at INFO when the level is BASIC or
    VERBOSE; ``verbose`` messages are emitted at DEBUG only when VERBOSE.
    """

    def __init__(
        self,
        level: DebugLevel = DebugLevel.SILENT,
        component: str = "parser",
        logger: logging.Logger | None = None,
    ):
        self.level = level
        self.component = component
        self.logger = logger or logging.getLogger(f"{LOGGER_ROOT}.{component}")

    def child(self, component: str) -> "DebugLog":
        """Return a channel for another component at the same level."""
        return DebugLog(self.level, component)

    @property
    def basic_enabled(self) -> bool:
        return self.level in (DebugLevel.BASIC, DebugLevel.VERBOSE)

    @property
    def verbose_enabled(self) -> bool:
        return self.level is DebugLevel.VERBOSE

    def basic(self, message: str, *args: object) -> None:
        if self.basic_enabled:
            self.logger.info("[%s] " + message, self.component.upper(), *args)

    def verbose(self, message: str, *args: object) -> None:
        if self.verbose_enabled:
            self.logger.debug("[%s] " + message, self.component.upper(), *args)


SILENT = DebugLog()
