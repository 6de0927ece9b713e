# src/textmetrics/engines/metrics_engine.py
"""
Answers geometric questions about text rendered with one metrics table.
Responsible for:
1. Widths of strings and codepoint lists (widest line for paragraphs).
2. Shortening text to a pixel budget with a terminator.
3. Mapping pixel coordinates to gaps and character indices to positions.
4. Greedy wrapping at word or character granularity.
5. Scaled font-wide accessors (ascent, descent, bounding box).
"""

import logging
from typing import (
    Any,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pydantic import BaseModel

from ..errors import InvalidArgumentError
from ..models import (
    FontMetrics,
    GapOptions,
    QueryOptions,
    ShortenOptions,
    WrapMode,
    WrapOptions,
)
from .walker import (
    NEWLINE,
    AdvanceWalker,
    TextSource,
    resolve_scale,
    split_lines,
    to_codepoints,
)

logger = logging.getLogger(__name__)

SPACE = 32

OptionsT = TypeVar("OptionsT", bound=QueryOptions)
OptionsInput = Union[QueryOptions, Mapping[str, Any], None]


def coerce_options(opts: OptionsInput, model: Type[OptionsT]) -> OptionsT:
    """
    Validates per-call options once at the call boundary.
    Accepts None (defaults), a mapping, or any options model.
    """
    if opts is None:
        return model()
    if type(opts) is model:
        return opts
    if isinstance(opts, BaseModel):
        opts = opts.model_dump(exclude_unset=True)
    return model.model_validate(dict(opts))


def from_codepoints(codepoints: Sequence[int]) -> str:
    return "".join(chr(cp) for cp in codepoints)


class TextMetricsEngine:
    """
    Text measurement bound to a single, read-only metrics table.

    The engine holds no state besides the table, so one instance can be
    shared between threads.
    """

    def __init__(self, metrics: FontMetrics):
        self.metrics = metrics

    def scale(self, pixels: Optional[float]) -> float:
        return resolve_scale(pixels, self.metrics.units_per_em)

    # --- Font-wide accessors ---

    def ascent(self, pixels: Optional[float] = None) -> float:
        """Ascent scaled to the pixel size, or raw units when pixels is None."""
        if pixels is None:
            return self.metrics.ascent
        return self.metrics.ascent * self.scale(pixels)

    def descent(self, pixels: Optional[float] = None) -> float:
        """Descent scaled to the pixel size, or raw units when pixels is None."""
        if pixels is None:
            return self.metrics.descent
        return self.metrics.descent * self.scale(pixels)

    def max_box(
        self, pixels: Optional[float] = None
    ) -> Tuple[float, float, float, float]:
        """Box that would hold the largest glyph of the font."""
        if pixels is None:
            return self.metrics.max_box
        scale = self.scale(pixels)
        x_min, y_min, x_max, y_max = self.metrics.max_box
        return (x_min * scale, y_min * scale, x_max * scale, y_max * scale)

    def supported(self, source: TextSource) -> bool:
        """True if the font has its own glyph for every codepoint."""
        return all(cp in self.metrics.advances for cp in to_codepoints(source))

    # --- Width ---

    def width(
        self,
        source: TextSource,
        pixels: Optional[float] = None,
        opts: OptionsInput = None,
    ) -> float:
        """
        Width of a string, codepoint list or single codepoint.
        Strings spanning several lines report the width of the widest line.
        """
        options = coerce_options(opts, QueryOptions)
        codepoints = to_codepoints(source)
        if not codepoints:
            return 0

        scale = self.scale(pixels)
        walker = AdvanceWalker(self.metrics, options.kern)

        if isinstance(source, str):
            widest = max(walker.total(line) for line in split_lines(codepoints))
        else:
            widest = walker.total(codepoints)

        return widest * scale

    # --- Shorten ---

    def shorten(
        self,
        source: Union[str, Sequence[int]],
        max_width: float,
        pixels: Optional[float] = None,
        opts: OptionsInput = None,
    ) -> Union[str, List[int]]:
        """
        Shortens text to fit ``max_width`` pixels, ending it with the
        terminator when anything was cut. Each line of a string is shortened
        on its own. Codepoint lists come back as codepoint lists.
        """
        options = coerce_options(opts, ShortenOptions)
        if max_width < 0:
            raise InvalidArgumentError(
                f"max width must not be negative, got {max_width}"
            )

        scale = self.scale(pixels)
        walker = AdvanceWalker(self.metrics, options.kern)
        terminator = to_codepoints(options.terminator)

        if isinstance(source, str):
            return "\n".join(
                from_codepoints(
                    self._shorten_line(
                        to_codepoints(line), max_width, scale, walker, terminator
                    )
                )
                for line in source.split("\n")
            )

        return self._shorten_line(
            to_codepoints(source), max_width, scale, walker, terminator
        )

    def _shorten_line(
        self,
        line: List[int],
        max_width: float,
        scale: float,
        walker: AdvanceWalker,
        terminator: List[int],
    ) -> List[int]:
        # pylint: disable=too-many-arguments, too-many-positional-arguments
        if walker.total(line) * scale <= max_width:
            return line

        # The terminator is measured on its own, never kerned against the text
        budget = max_width - walker.total(terminator) * scale
        if budget <= 0:
            return []

        kept, _ = walker.fit(line, budget / scale)
        if kept == 0:
            return []
        if kept == len(line):
            return line
        return line[:kept] + terminator

    # --- Gap / Position ---

    def nearest_gap(
        self,
        source: str,
        pos: Tuple[float, float],
        pixels: Optional[float] = None,
        opts: OptionsInput = None,
    ) -> Tuple[int, float, int]:
        """
        Finds the gap between characters closest to an (x, y) coordinate.

        Returns (character_index_in_line, x_position, line_index).
        """
        options = coerce_options(opts, GapOptions)
        x, y = pos
        scale = self.scale(pixels)
        if y < 0:
            return 0, 0.0, 0

        line_height = options.line_height
        if line_height is None:
            line_height = pixels if pixels is not None else self.metrics.units_per_em

        walker = AdvanceWalker(self.metrics, options.kern)
        lines = split_lines(to_codepoints(source))
        line_no = int(y // line_height)

        if line_no >= len(lines):
            # Past the last line: the caret goes to its end
            last = lines[-1]
            return len(last), walker.total(last) * scale, len(lines) - 1

        index, raw_x = self._gap_in_line(lines[line_no], x / scale, walker)
        return index, raw_x * scale, line_no

    @staticmethod
    def _gap_in_line(
        line: List[int], x: float, walker: AdvanceWalker
    ) -> Tuple[int, float]:
        if x <= 0:
            return 0, 0.0

        total = 0.0
        for step in walker.steps(line):
            if step.after > x:
                # Round to the nearer side of the glyph that straddles x
                midpoint = step.before + step.advance / 2
                if midpoint < x:
                    return step.index + 1, step.after
                return step.index, step.before
            total = step.after

        return len(line), total

    def position_at(
        self,
        source: str,
        index: int,
        pixels: Optional[float] = None,
        opts: OptionsInput = None,
    ) -> Tuple[float, int]:
        """
        Returns (x_position, line_index) just before character ``index``.
        Newlines count as characters and start a new line at x = 0.
        """
        options = coerce_options(opts, QueryOptions)
        scale = self.scale(pixels)
        walker = AdvanceWalker(self.metrics, options.kern)

        total = 0.0
        line_no = 0
        prev: Optional[int] = None
        remaining = index

        for cp in to_codepoints(source):
            if remaining <= 0:
                break
            if cp == NEWLINE:
                total = 0.0
                line_no += 1
                prev = None
            else:
                total += walker.step_advance(prev, cp)
                prev = cp
            remaining -= 1

        return total * scale, line_no

    # --- Wrap ---

    def wrap(
        self,
        source: str,
        max_width: float,
        pixels: Optional[float] = None,
        opts: OptionsInput = None,
    ) -> str:
        """
        Inserts line breaks so no line is wider than ``max_width`` pixels.

        Existing newlines always break. A word (or, in char mode, a single
        codepoint) that is wider than the limit by itself gets its own line.
        """
        options = coerce_options(opts, WrapOptions)
        if max_width <= 0:
            raise InvalidArgumentError(f"max width must be positive, got {max_width}")

        limit = max_width / self.scale(pixels)
        walker = AdvanceWalker(self.metrics, options.kern)
        indent = to_codepoints(options.indent)

        wrap_paragraph = (
            self._wrap_words if options.mode == WrapMode.WORD else self._wrap_chars
        )

        out: List[List[int]] = []
        for paragraph in source.split("\n"):
            out.extend(wrap_paragraph(paragraph, limit, indent, walker))

        return "\n".join(from_codepoints(line) for line in out)

    @staticmethod
    def _wrap_words(
        paragraph: str, limit: float, indent: List[int], walker: AdvanceWalker
    ) -> List[List[int]]:
        words = [to_codepoints(word) for word in paragraph.split()]
        if not words:
            return [[]]

        indent_width, indent_prev = walker.extend(0.0, None, indent)

        lines: List[List[int]] = []
        current = list(words[0])
        width, prev = walker.extend(0.0, None, current)

        for word in words[1:]:
            candidate_width, candidate_prev = walker.extend(width, prev, [SPACE] + word)
            if candidate_width <= limit:
                current.append(SPACE)
                current.extend(word)
                width, prev = candidate_width, candidate_prev
                continue

            lines.append(current)
            current = indent + word
            width, prev = walker.extend(indent_width, indent_prev, word)

        lines.append(current)
        return lines

    @staticmethod
    def _wrap_chars(
        paragraph: str, limit: float, indent: List[int], walker: AdvanceWalker
    ) -> List[List[int]]:
        codepoints = to_codepoints(paragraph)
        if not codepoints:
            return [[]]

        indent_width, indent_prev = walker.extend(0.0, None, indent)

        lines: List[List[int]] = []
        current: List[int] = []
        width = 0.0
        prev: Optional[int] = None
        # Only wrap once the line holds at least one glyph besides the indent
        has_glyph = False

        for cp in codepoints:
            adv = walker.step_advance(prev, cp)
            if has_glyph and width + adv > limit:
                lines.append(current)
                current = list(indent)
                width, prev = indent_width, indent_prev
                adv = walker.step_advance(prev, cp)
            current.append(cp)
            width += adv
            prev = cp
            has_glyph = True

        lines.append(current)
        return lines
