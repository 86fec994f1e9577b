"""Pipeline driver: normalise, segment, repair.

Functions:
    - parse: full pipeline returning text and object blocks in source order
    - parse_raw_output: alias of :func:`parse` for callers that want the blocks
    - parse_json: just the repaired objects (``None``, one value, or a list)
"""

from __future__ import annotations

import logging

from .config import ParserConfig
from .models import JsonValue, ObjectBlock, RawBlock, TextBlock
from .preprocessing import normalize_line_endings
from .repair import repair
from .segmentation import Segmenter

logger = logging.getLogger(__name__)


def _check_text(text: object) -> str:
    if not isinstance(text, str):
        raise TypeError(f"Expected string input, got {type(text)}")
    return text


def parse(buffer: str, config: ParserConfig | None = None) -> list[RawBlock]:
    """Split ``buffer`` into narration and repaired objects.

    Candidate spans that no reconstructor can repair are omitted from the
    result and reported on the debug channel. The narration on either side
    of an omitted span is joined into one text block.

    Args:
        buffer: Raw model output
        config: Parser settings (defaults to a silent configuration)

    Returns:
        TextBlock and ObjectBlock values in source order

    Raises:
        TypeError: If ``buffer`` is not a string
    """
    buffer = _check_text(buffer)
    config = config or ParserConfig()
    debug = config.debug_log("parser")

    text = normalize_line_endings(buffer)
    segments = Segmenter(text, config.debug_log("segmenter")).parse()

    blocks: list[RawBlock] = []
    for segment in segments:
        if isinstance(segment, TextBlock):
            # Only a dropped span can leave two text runs side by side
            if blocks and isinstance(blocks[-1], TextBlock):
                blocks[-1] = TextBlock(text=f"{blocks[-1].text}\n{segment.text}")
            else:
                blocks.append(segment)
            continue
        result = repair(segment.raw_span, debug)
        if not result.success:
            debug.basic("Dropped unrepairable span %r: %s", segment.raw_span, "; ".join(result.warnings))
            continue
        blocks.append(ObjectBlock.from_repair(segment.raw_span, result))

    debug.basic(
        "Parsed %d block(s): %d object(s)",
        len(blocks),
        sum(1 for block in blocks if isinstance(block, ObjectBlock)),
    )
    return blocks


def parse_raw_output(text: str, config: ParserConfig | None = None) -> list[RawBlock]:
    """Return the full block list for ``text``."""
    return parse(text, config)


def parse_json(text: str, config: ParserConfig | None = None) -> JsonValue:
    """Return only the repaired objects.

    ``None`` when there are none, the value itself when there is exactly
    one, and a list of values (in source order) otherwise.

    Example:
        >>> parse_json('Sure! {"tool": "search", query: hello}')
        {'tool': 'search', 'query': 'hello'}
    """
    objects = [block.object for block in parse(text, config) if isinstance(block, ObjectBlock)]
    if not objects:
        return None
    if len(objects) == 1:
        return objects[0]
    return objects
