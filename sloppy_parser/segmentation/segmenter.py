"""Split a buffer into narration and structured-candidate spans.

The segmenter walks the buffer with a :class:`TokenStream`. At each cursor
it tries every structured reading (fenced JSON, fenced YAML, brace/bracket
group, YAML key run) from the same checkpoint, keeps the cheapest one that
holds together, and otherwise reads narration up to the next place where
structure might begin.

Each alternative derives a new :class:`ParsePath`; rejected alternatives
are simply dropped, so backtracking is nothing more than re-seeking the
stream to the checkpoint.
"""

from __future__ import annotations

from typing import Callable

from ..lexing import TokenStream
from ..lexing.lattice_lexer import FENCE
from ..models import ParsePath, SegmentedBlock, TokenCandidate, TokenKind
from ..utils.debug_log import SILENT, DebugLog

YAML_MODE_PENALTY = 5

OBJECT_START_KINDS = (
    TokenKind.FENCE_JSON,
    TokenKind.FENCE_YAML,
    TokenKind.BRACE_OPEN,
    TokenKind.BRACKET_OPEN,
)

OPENERS = (TokenKind.BRACE_OPEN, TokenKind.BRACKET_OPEN)
CLOSERS = (TokenKind.BRACE_CLOSE, TokenKind.BRACKET_CLOSE)

# Tokens that keep a YAML run going anywhere on a line
YAML_TOKENS = (
    TokenKind.DASH,
    TokenKind.BARE_WORD,
    TokenKind.STRING,
    TokenKind.NUMBER,
    TokenKind.BOOLEAN,
    TokenKind.NULL,
    TokenKind.COLON,
    TokenKind.WHITESPACE,
)

# Extra tokens accepted once a key's colon or a list dash has been read
YAML_VALUE_TOKENS = (TokenKind.TEXT, TokenKind.COMMA)

YAML_KEY_KINDS = (TokenKind.BARE_WORD, TokenKind.STRING)


def trim_span(span: str) -> str:
    """Drop leading blank lines and trailing whitespace, keeping indentation."""
    span = span.rstrip()
    first_content = len(span) - len(span.lstrip())
    line_start = span.rfind("\n", 0, first_content) + 1
    return span[line_start:]


class Segmenter:
    """Backtracking segmentation of one buffer."""

    def __init__(self, buffer: str, debug: DebugLog = SILENT):
        self.buffer = buffer
        self.stream = TokenStream(buffer)
        self.debug = debug
        self._attempts: tuple[tuple[str, Callable[[ParsePath], ParsePath | None]], ...] = (
            ("fenced-json", self._try_fenced_json),
            ("fenced-yaml", self._try_fenced_yaml),
            ("brace", self._try_brace_group),
            ("yaml", self._try_yaml_run),
        )

    def parse_path(self) -> ParsePath:
        """Return the winning decomposition of the whole buffer."""
        path = ParsePath()
        while path.cursor < len(self.buffer):
            structured = self._best_structured(path)
            if structured is not None:
                path = structured
                continue
            path = self._read_text(path)
        path = path.flushed()
        self.debug.basic(
            "Segmented %d characters into %d block(s), score %s",
            len(self.buffer),
            len(path.blocks),
            path.score,
        )
        return path

    def parse(self) -> list[SegmentedBlock]:
        return list(self.parse_path().blocks)

    # ------------------------------------------------------------------
    # Alternatives

    def _best_structured(self, path: ParsePath) -> ParsePath | None:
        """Try every structured reading at ``path.cursor``; keep the cheapest."""
        checkpoint = path.cursor
        results: list[tuple[str, ParsePath]] = []
        for name, attempt in self._attempts:
            self.stream.seek(checkpoint)
            result = attempt(path)
            if result is not None:
                self.debug.verbose(
                    "%s candidate at %d-%d, score %s", name, checkpoint, result.cursor, result.score
                )
                results.append((name, result))
        self.stream.seek(checkpoint)
        if not results:
            return None
        # min() keeps the first of equal scores, i.e. attempt priority
        name, best = min(results, key=lambda item: item[1].score)
        if len(results) > 1:
            self.debug.verbose("Chose %s reading out of %d at %d", name, len(results), checkpoint)
        return best

    def _read_text(self, path: ParsePath) -> ParsePath:
        """Read narration up to the next possible object start.

        At least one character is always taken, so an opener whose
        structured reading failed is absorbed as text.
        """
        start = path.cursor
        pos = start + 1
        while pos < len(self.buffer) and not self.looks_like_object_start(pos):
            pos += 1
        return path.with_text(self.buffer[start:pos], pos)

    def _try_fenced_json(self, path: ParsePath) -> ParsePath | None:
        return self._try_fence(path, TokenKind.FENCE_JSON, 0, ())

    def _try_fenced_yaml(self, path: ParsePath) -> ParsePath | None:
        return self._try_fence(path, TokenKind.FENCE_YAML, YAML_MODE_PENALTY, ("YAML mode",))

    def _try_fence(
        self,
        path: ParsePath,
        kind: TokenKind,
        penalty: int,
        notes: tuple[str, ...],
    ) -> ParsePath | None:
        fence = next((c for c in self.stream.candidates() if c.kind is kind), None)
        if fence is None:
            return None

        content_start = fence.end_position
        close = self.buffer.find(FENCE, content_start)
        content_end = len(self.buffer) if close == -1 else close
        cursor = content_end if close == -1 else close + len(FENCE)

        cost, repairs = self._span_cost(content_start, content_end)
        return path.with_candidate(
            trim_span(self.buffer[content_start:content_end]),
            cursor,
            fence.cost + penalty + cost,
            notes + tuple(repairs),
        )

    def _try_brace_group(self, path: ParsePath) -> ParsePath | None:
        opener = next((c for c in self.stream.candidates() if c.kind in OPENERS), None)
        if opener is None:
            return None
        start = opener.start
        end = self._balanced_end(start)
        if end is None:
            self.debug.verbose("Unbalanced %s at %d; reading it as text", opener.value, start)
            return None
        cost, repairs = self._span_cost(start, end)
        return path.with_candidate(trim_span(self.buffer[start:end]), end, cost, repairs)

    def _try_yaml_run(self, path: ParsePath) -> ParsePath | None:
        start = path.cursor
        if not self.looks_like_yaml_key(start):
            return None
        end = self._yaml_run_end(start)
        if end is None:
            return None
        cost, repairs = self._span_cost(start, end)
        return path.with_candidate(
            trim_span(self.buffer[start:end]),
            end,
            YAML_MODE_PENALTY + cost,
            ("YAML mode", *repairs),
        )

    # ------------------------------------------------------------------
    # Lookahead predicates

    def looks_like_object_start(self, position: int) -> bool:
        """True when structured data could begin at ``position``."""
        best = self.stream.peek(position)
        if best is None:
            return False
        return best.kind in OBJECT_START_KINDS or self.looks_like_yaml_key(position)

    def looks_like_yaml_key(self, position: int) -> bool:
        """True for ``KEY:`` at the start of a line.

        The key is a bare word or quoted string; horizontal whitespace may
        surround it, and the colon must be followed by whitespace or the end
        of input (so ``https://`` is not a key).
        """
        if not self.stream.at_line_start(position):
            return False
        pos = self._skip_horizontal(position)
        key = self.stream.peek(pos)
        if key is None or key.kind not in YAML_KEY_KINDS:
            return False
        colon = self.stream.peek(self._skip_horizontal(key.end_position))
        if colon is None or colon.kind is not TokenKind.COLON:
            return False
        after = colon.end_position
        return after >= len(self.buffer) or self.buffer[after].isspace()

    def _skip_horizontal(self, position: int) -> int:
        token = self.stream.peek(position)
        while token is not None and token.kind is TokenKind.WHITESPACE:
            position = token.end_position
            token = self.stream.peek(position)
        return position

    # ------------------------------------------------------------------
    # Span scanners

    def _balanced_end(self, start: int) -> int | None:
        """Return the cursor after the group opened at ``start`` (None if unbalanced)."""
        self.stream.seek(start)
        depth = 0
        while not self.stream.at_end:
            token = self.stream.advance()
            if token.kind in OPENERS:
                depth += 1
            elif token.kind in CLOSERS:
                depth -= 1
                if depth == 0:
                    return self.stream.position
        return None

    def _yaml_run_end(self, start: int) -> int | None:
        """Return where the YAML run starting at ``start`` stops.

        Returns ``None`` when nothing follows the first colon, since a lone
        ``Heading:`` line is narration rather than data.
        """
        pos = start
        in_value = False
        seen_colon = False
        seen_value = False
        while pos < len(self.buffer):
            token = self.stream.peek(pos)
            kind = token.kind

            if kind is TokenKind.NEWLINE:
                after = token.end_position
                if after >= len(self.buffer) or not self._yaml_line_follows(after):
                    break
                pos = after
                in_value = False
                continue

            if kind is TokenKind.BRACE_OPEN:
                end = self._balanced_end(pos)
                if end is None:
                    break
                pos = end
                seen_value = seen_value or seen_colon
                continue

            if kind in YAML_TOKENS or (in_value and kind in YAML_VALUE_TOKENS):
                if kind in (TokenKind.COLON, TokenKind.DASH):
                    in_value = True
                elif seen_colon and kind is not TokenKind.WHITESPACE:
                    seen_value = True
                if kind is TokenKind.COLON:
                    seen_colon = True
                pos = token.end_position
                continue

            # BRACKET_OPEN, closers, fences and stray text end the run
            break

        if not seen_value:
            return None
        return pos

    def _yaml_line_follows(self, position: int) -> bool:
        """True when the line at ``position`` continues a YAML run."""
        first = self.stream.peek(position)
        return first is not None and (
            first.kind is TokenKind.DASH or self.looks_like_yaml_key(position)
        )

    def _span_cost(self, start: int, end: int) -> tuple[int, list[str]]:
        """Sum the costs of the best readings across ``[start, end)``."""
        cost = 0
        repairs: list[str] = []
        pos = start
        while pos < end:
            token: TokenCandidate | None = self.stream.peek(pos)
            if token is None:
                break
            cost += token.cost
            if token.repair_note:
                repairs.append(token.repair_note)
            pos = token.end_position
        return cost, repairs


def segment(buffer: str, debug: DebugLog = SILENT) -> list[SegmentedBlock]:
    """Split ``buffer`` into text blocks and structured candidates.

    Example:
        >>> [b.type for b in segment('Here it is: {"a": 1} done')]
        ['text', 'object-candidate', 'text']
    """
    return Segmenter(buffer, debug).parse()
