# src/textmetrics/models.py
"""
Data models for font metrics tables and per-query options.
"""

import logging
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    PositiveFloat,
    PositiveInt,
    field_validator,
)

logger = logging.getLogger(__name__)

# Codepoint used as the "missing glyph" entry of every advance table
FALLBACK_CODEPOINT = 0

# U+00A0, used when an indent is given as a count
NO_BREAK_SPACE = "\u00a0"

DEFAULT_TERMINATOR = "..."


def _to_kerning_map(v: Any) -> Dict[Tuple[int, int], float]:
    """
    Accepts either a mapping keyed by (left, right) pairs or the wire form
    [[left, right, value], ...] and returns the pair-keyed mapping.
    """
    if not v:
        return {}

    if isinstance(v, dict):
        return {(int(a), int(b)): float(val) for (a, b), val in v.items()}

    kerning = {}
    for entry in v:
        if len(entry) != 3:
            raise ValueError(
                f"Kerning entry must be [left, right, value], got {entry!r}"
            )
        a, b, val = entry
        kerning[(int(a), int(b))] = float(val)
    return kerning


def _kerning_to_wire(kerning: Dict[Tuple[int, int], float]) -> List[list]:
    return [[a, b, val] for (a, b), val in sorted(kerning.items())]


# Pair keys don't survive JSON, so the table travels as a list of triples
KerningTable = Annotated[
    Dict[Tuple[int, int], float],
    BeforeValidator(_to_kerning_map),
    PlainSerializer(_kerning_to_wire, return_type=list),
]


class FontMetrics(BaseModel):
    """
    Pre-computed, read-only metrics for a single font.

    All widths and adjustments are in font design units. Queries convert
    them to pixels with ``value * pixels / units_per_em``.
    """

    units_per_em: PositiveInt
    ascent: int
    descent: int
    max_box: Tuple[int, int, int, int]
    advances: Dict[int, float]
    kerning: KerningTable = Field(default_factory=dict)

    # Informational header fields copied from the font
    direction: Optional[int] = None
    smallest_ppem: Optional[int] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("advances")
    @classmethod
    def require_fallback_entry(cls, v: Dict[int, float]) -> Dict[int, float]:
        """Every table needs a width for codepoints the font does not cover."""
        if FALLBACK_CODEPOINT not in v:
            raise ValueError("advances must contain an entry for codepoint 0")
        return v

    @property
    def fallback_advance(self) -> float:
        return self.advances[FALLBACK_CODEPOINT]

    def advance(self, codepoint: int) -> float:
        """Raw advance of a codepoint, using the fallback glyph when unmapped."""
        width = self.advances.get(codepoint)
        if width is None:
            logger.debug("U+%04X not in advance table, using fallback", codepoint)
            return self.advances[FALLBACK_CODEPOINT]
        return width

    def kern(self, left: int, right: int) -> float:
        """Raw kerning adjustment between two adjacent codepoints."""
        return self.kerning.get((left, right), 0)


class WrapMode(str, Enum):
    """Line-break granularity for wrapping."""

    WORD = "word"
    CHAR = "char"


class QueryOptions(BaseModel):
    """Options shared by every text query."""

    kern: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class ShortenOptions(QueryOptions):
    """Options for shortening text to a width."""

    terminator: str = DEFAULT_TERMINATOR


class GapOptions(QueryOptions):
    """Options for mapping a pixel coordinate to a gap."""

    line_height: Optional[PositiveFloat] = None


class WrapOptions(QueryOptions):
    """Options for wrapping text to a width."""

    mode: WrapMode = WrapMode.WORD
    indent: Union[int, str] = ""

    @field_validator("indent")
    @classmethod
    def expand_indent(cls, v: Union[int, str]) -> str:
        """An integer indent means that many no-break spaces."""
        if isinstance(v, int):
            if v < 0:
                raise ValueError("indent count must not be negative")
            return NO_BREAK_SPACE * v
        return v
