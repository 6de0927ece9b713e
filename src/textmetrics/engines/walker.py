# src/textmetrics/engines/walker.py
"""
Shared primitives for every text query:
1. Resolving the pixel scale for a metrics table.
2. Walking a codepoint sequence and accumulating advances (plus kerning).

All accumulation happens in raw font units. Callers multiply by the scale
only when producing pixel-space output, so every query sees the same total
for the same run of codepoints.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..errors import InvalidArgumentError
from ..models import FontMetrics

logger = logging.getLogger(__name__)

NEWLINE = 10

TextSource = Union[str, int, Sequence[int]]


def resolve_scale(pixels: Optional[float], units_per_em: int) -> float:
    """
    Returns the multiplier that converts font units to pixels.
    An absent pixel size means results stay in raw font units.
    """
    if pixels is None:
        return 1.0
    if pixels <= 0:
        raise InvalidArgumentError(f"pixel size must be positive, got {pixels}")
    return pixels / units_per_em


def to_codepoints(source: TextSource) -> List[int]:
    """Normalizes a string, a single codepoint or a codepoint list."""
    if isinstance(source, str):
        return [ord(char) for char in source]
    if isinstance(source, int):
        return [source]
    return list(source)


@dataclass(frozen=True)
class WalkStep:
    """One glyph placed by the walker."""

    index: int
    codepoint: int
    before: float
    advance: float

    @property
    def after(self) -> float:
        return self.before + self.advance


class AdvanceWalker:
    """
    Accumulates advances over codepoints for one metrics table.

    With kerning enabled, the adjustment for the pair (prev, cp) lives in the
    gap between the two glyphs and is counted when ``cp`` is placed. The
    running total after k glyphs is therefore the width of those k glyphs on
    their own, and a trailing glyph never picks up an adjustment.
    """

    def __init__(self, metrics: FontMetrics, kern: bool = False):
        self.metrics = metrics
        self.kern = kern

    def step_advance(self, prev: Optional[int], codepoint: int) -> float:
        """Advance of ``codepoint`` including its kerning against ``prev``."""
        adv = self.metrics.advance(codepoint)
        if self.kern and prev is not None:
            adv += self.metrics.kern(prev, codepoint)
        return adv

    def steps(
        self,
        codepoints: Iterable[int],
        start: float = 0.0,
        prev: Optional[int] = None,
    ) -> Iterator[WalkStep]:
        """
        Yields each glyph with the running total before it. Callers stop
        iterating whenever their own halting condition is met.
        """
        total = start
        for index, cp in enumerate(codepoints):
            adv = self.step_advance(prev, cp)
            yield WalkStep(index=index, codepoint=cp, before=total, advance=adv)
            total += adv
            prev = cp

    def extend(
        self, total: float, prev: Optional[int], codepoints: Iterable[int]
    ) -> Tuple[float, Optional[int]]:
        """Continues a walk that ended at ``total`` after glyph ``prev``."""
        for step in self.steps(codepoints, start=total, prev=prev):
            total = step.after
            prev = step.codepoint
        return total, prev

    def total(self, codepoints: Iterable[int]) -> float:
        """Raw width of a single run of codepoints."""
        total, _ = self.extend(0.0, None, codepoints)
        return total

    def fit(self, codepoints: Sequence[int], ceiling: float) -> Tuple[int, float]:
        """
        Returns how many leading codepoints fit strictly under ``ceiling``
        and their raw width.
        """
        kept = 0
        width = 0.0
        for step in self.steps(codepoints):
            if step.after >= ceiling:
                logger.debug(
                    "Halting at index %d: %.2f >= %.2f", step.index, step.after, ceiling
                )
                break
            kept = step.index + 1
            width = step.after
        return kept, width


def split_lines(codepoints: Sequence[int]) -> List[List[int]]:
    """Splits a codepoint sequence on newlines, keeping empty lines."""
    lines: List[List[int]] = [[]]
    for cp in codepoints:
        if cp == NEWLINE:
            lines.append([])
        else:
            lines[-1].append(cp)
    return lines
