# src/textmetrics/ranges.py
"""
Helpers for known Unicode ranges.

A range set is a list of inclusive (start, finish) tuples. Named ranges and
reversed tuples are normalized by interpret().
"""

import logging
from typing import Dict, Iterable, List, Tuple, Union

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

CodepointRange = Tuple[int, int]
RangeSpec = Union[str, CodepointRange, Iterable]

MAX_CODEPOINT = 0x10FFFF

NAMED_RANGES: Dict[str, List[CodepointRange]] = {
    "numbers": [(0x002C, 0x002D), (0x0030, 0x0039)],
    "numbers_extended": [(0x0020, 0x0040)],
    "control": [(0x0000, 0x0019), (0x007F, 0x009F), (0xFFF9, 0xFFFF)],
    "latin_1": [(0x0020, 0x007F)],
    "latin_1_supplement": [(0x0080, 0x00FF)],
    "latin_extended_a": [(0x0100, 0x017F)],
    "latin_extended_b": [(0x0180, 0x024F)],
    "ipa_extensions": [(0x0250, 0x02AF)],
    "greek_coptic": [(0x0370, 0x03FF)],
    "cyrillic": [(0x0400, 0x04FF)],
    "cyrillic_supplement": [(0x0500, 0x052F)],
    "armenian": [(0x0530, 0x058F)],
    "hebrew": [(0x0590, 0x05FF)],
    "arabic": [(0x0600, 0x06FF)],
}

COMPOSITE_RANGES: Dict[str, List[str]] = {
    "latin": ["latin_1", "latin_1_supplement"],
    "latin_extended": [
        "latin_1",
        "latin_1_supplement",
        "latin_extended_a",
        "latin_extended_b",
    ],
}


def interpret(spec: RangeSpec) -> List[CodepointRange]:
    """
    Flattens a range name, a (start, finish) tuple or a list of either into
    a list of ordered tuples.
    """
    if isinstance(spec, str):
        if spec in COMPOSITE_RANGES:
            return interpret(COMPOSITE_RANGES[spec])
        if spec in NAMED_RANGES:
            return list(NAMED_RANGES[spec])
        raise InvalidArgumentError(f"Unknown unicode range name: {spec}")

    # Pairs decoded from JSON arrive as lists
    if isinstance(spec, (tuple, list)) and len(spec) == 2 and all(
        isinstance(v, int) for v in spec
    ):
        start, finish = spec
        if start <= finish:
            return [(start, finish)]
        return [(finish, start)]

    if not isinstance(spec, Iterable):
        raise InvalidArgumentError(f"Not a unicode range: {spec!r}")

    ranges: List[CodepointRange] = []
    for item in spec:
        ranges.extend(interpret(item))
    return ranges


def simplify(spec: RangeSpec) -> List[CodepointRange]:
    """Sorts ranges and merges any that overlap or touch."""
    simplified: List[CodepointRange] = []
    for start, finish in sorted(interpret(spec)):
        if simplified and start <= simplified[-1][1] + 1:
            prev_start, prev_finish = simplified[-1]
            simplified[-1] = (prev_start, max(prev_finish, finish))
        else:
            simplified.append((start, finish))
    return simplified


def intersect(spec_a: RangeSpec, spec_b: RangeSpec) -> List[CodepointRange]:
    """Returns the ranges covered by both range sets."""
    ranges_a = simplify(spec_a)
    ranges_b = simplify(spec_b)

    overlap: List[CodepointRange] = []
    for a_start, a_finish in ranges_a:
        for b_start, b_finish in ranges_b:
            if b_start > a_finish:
                # Sorted, so no later range can overlap either
                break
            if b_finish < a_start:
                continue
            overlap.append((max(a_start, b_start), min(a_finish, b_finish)))
    return overlap


def is_control(codepoint: int) -> bool:
    return (
        codepoint < 0x20
        or 0x7F <= codepoint <= 0x9F
        or 0xFFF9 <= codepoint <= 0xFFFF
        or codepoint > MAX_CODEPOINT
    )


def to_codepoints(spec: RangeSpec, include_control: bool = False) -> List[int]:
    """Expands ranges into codepoints, dropping control characters by default."""
    codepoints = []
    for start, finish in simplify(spec):
        for cp in range(start, finish + 1):
            if include_control or not is_control(cp):
                codepoints.append(cp)
    logger.debug("Expanded %r into %d codepoints", spec, len(codepoints))
    return codepoints
