# src/textmetrics/core.py
"""
Module-level query functions.

Each call takes the metrics table explicitly and is a pure function of its
arguments. They are thin shims over TextMetricsEngine, which callers can
hold directly when they query the same table repeatedly.
"""

from typing import List, Optional, Sequence, Tuple, Union

from textmetrics.engines.metrics_engine import OptionsInput, TextMetricsEngine
from textmetrics.engines.walker import TextSource
from textmetrics.models import FontMetrics

# CSS reference: 1pt = 1/72in, 1px = 1/96in
POINT_TO_PIXEL_RATIO = 4 / 3


def points_to_pixels(points: float) -> float:
    """Converts a point size to pixels."""
    return points * POINT_TO_PIXEL_RATIO


def supported(source: TextSource, metrics: FontMetrics) -> bool:
    """True if every codepoint has its own entry in the advance table."""
    return TextMetricsEngine(metrics).supported(source)


def ascent(pixels: Optional[float], metrics: FontMetrics) -> float:
    return TextMetricsEngine(metrics).ascent(pixels)


def descent(pixels: Optional[float], metrics: FontMetrics) -> float:
    return TextMetricsEngine(metrics).descent(pixels)


def max_box(
    pixels: Optional[float], metrics: FontMetrics
) -> Tuple[float, float, float, float]:
    return TextMetricsEngine(metrics).max_box(pixels)


def width(
    source: TextSource,
    pixels: Optional[float],
    metrics: FontMetrics,
    opts: OptionsInput = None,
) -> float:
    """Width of the text (widest line for multi-line strings)."""
    return TextMetricsEngine(metrics).width(source, pixels, opts)


def shorten(
    source: Union[str, Sequence[int]],
    max_width: float,
    pixels: Optional[float],
    metrics: FontMetrics,
    opts: OptionsInput = None,
) -> Union[str, List[int]]:
    """Shortens each line to fit max_width, appending the terminator if cut."""
    return TextMetricsEngine(metrics).shorten(source, max_width, pixels, opts)


def nearest_gap(
    source: str,
    pos: Tuple[float, float],
    pixels: Optional[float],
    metrics: FontMetrics,
    opts: OptionsInput = None,
) -> Tuple[int, float, int]:
    """Returns (character_index, x_position, line_index) nearest to pos."""
    return TextMetricsEngine(metrics).nearest_gap(source, pos, pixels, opts)


def position_at(
    source: str,
    index: int,
    pixels: Optional[float],
    metrics: FontMetrics,
    opts: OptionsInput = None,
) -> Tuple[float, int]:
    """Returns (x_position, line_index) just before character index."""
    return TextMetricsEngine(metrics).position_at(source, index, pixels, opts)


def wrap(
    source: str,
    max_width: float,
    pixels: Optional[float],
    metrics: FontMetrics,
    opts: OptionsInput = None,
) -> str:
    """Inserts line breaks so that lines fit max_width."""
    return TextMetricsEngine(metrics).wrap(source, max_width, pixels, opts)
