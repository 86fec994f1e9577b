"""Command-line entrypoint: repair model output read from a file or stdin."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence, TextIO

from .config import ParserConfig, parse_debug_level
from .models import DebugLevel, ObjectBlock
from .parser import parse

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVELS = {
    DebugLevel.SILENT: logging.WARNING,
    DebugLevel.BASIC: logging.INFO,
    DebugLevel.VERBOSE: logging.DEBUG,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sloppy-parser",
        description="Extract and repair JSON/YAML objects from language-model output.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="File to read (defaults to stdin; '-' also reads stdin).",
    )
    parser.add_argument(
        "--format",
        default="json",
        choices=["raw", "json"],
        help="'json' prints only the repaired objects; 'raw' prints every block with its diagnostics (default: json).",
    )
    parser.add_argument(
        "--debug",
        default=None,
        choices=DebugLevel.all_values(),
        help="Diagnostic verbosity (overrides SLOPPY_DEBUG).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics (defaults to match --debug).",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indentation of the printed JSON (default: 2).",
    )
    parser.add_argument(
        "--dotenv",
        type=Path,
        default=None,
        help="Path to a .env file to read SLOPPY_DEBUG from (values already in the environment win).",
    )
    parser.add_argument(
        "--require-object",
        action="store_true",
        help="Exit with status 1 when no structured object was found.",
    )
    return parser


def read_input(source: str, stdin: TextIO) -> str:
    if source == "-":
        return stdin.read()
    return Path(source).read_text(encoding="utf-8")


def render(blocks: list, output_format: str, indent: int) -> str:
    if output_format == "raw":
        payload = [block.model_dump(mode="json") for block in blocks]
    else:
        objects = [block.object for block in blocks if isinstance(block, ObjectBlock)]
        payload = None if not objects else objects[0] if len(objects) == 1 else objects
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def run_cli(args: argparse.Namespace, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    if args.indent < 0:
        print("--indent must not be negative", file=sys.stderr)
        return 2

    config = ParserConfig.from_env(args.dotenv)
    if args.debug is not None:
        config = replace(config, debug_level=parse_debug_level(args.debug))

    logging.basicConfig(
        level=args.log_level or DEFAULT_LOG_LEVELS[config.debug_level],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        text = read_input(args.file, stdin)
    except (OSError, UnicodeDecodeError):
        logger.exception("Could not read input from %s", args.file)
        return 2

    blocks = parse(text, config)
    print(render(blocks, args.format, args.indent), file=stdout)

    if args.require_object and not any(isinstance(block, ObjectBlock) for block in blocks):
        logger.warning("No structured object found in %s", "stdin" if args.file == "-" else args.file)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return run_cli(args)


if __name__ == "__main__":
    raise SystemExit(main())
