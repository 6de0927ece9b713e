# src/textmetrics/font_utils.py
"""Builds metrics tables from font files"""
import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from fontTools.ttLib import TTFont, TTLibError

from . import ranges as unicode_ranges
from .errors import FontLoadError
from .models import FALLBACK_CODEPOINT, FontMetrics

logger = logging.getLogger(__name__)


class FontWrapper:
    """
    Wrapper around fontTools.TTFont that extracts raw advance and kerning
    data in font design units.
    """

    def __init__(self, font_path: Union[str, Path]):
        self.path = str(font_path)
        try:
            self.ttfont = TTFont(font_path)
        except TTLibError as e:
            raise FontLoadError(self.path, str(e)) from e

        # Tables are parsed lazily, so a damaged font only fails here
        try:
            self.cmap = self.ttfont.getBestCmap() or {}
            self.hmtx = self.ttfont["hmtx"]
            self.head = self.ttfont["head"]

            # GID 0 is always the missing glyph, whatever it happens to be named
            self.fallback_glyph_name = self.ttfont.getGlyphOrder()[0]
        except (TTLibError, KeyError) as e:
            self.ttfont.close()
            raise FontLoadError(self.path, str(e)) from e

    @property
    def units_per_em(self) -> int:
        """Returns the unitsPerEm value from the head table."""
        return self.head.unitsPerEm

    @property
    def fallback_advance(self) -> int:
        """Advance of the missing glyph."""
        raw_width, _ = self.hmtx[self.fallback_glyph_name]
        return raw_width

    def get_advance(self, codepoint: int) -> int:
        """
        Returns the raw advance width of a codepoint in font units.
        """
        glyph_name = self.cmap.get(codepoint)

        if not glyph_name:
            logger.warning(
                "U+%04X not found in %s. Using %s",
                codepoint,
                self.path,
                self.fallback_glyph_name,
            )
            glyph_name = self.fallback_glyph_name

        try:
            raw_width, _ = self.hmtx[glyph_name]
            return raw_width
        except KeyError:
            logger.error("Metric lookup failed for glyph: %s", glyph_name)
            return self.fallback_advance

    def kerning_pairs(self, codepoints: Iterable[int]) -> Dict[Tuple[int, int], int]:
        """
        Reads pair adjustments from the legacy 'kern' table (format 0) and
        maps them back to codepoints. GPOS kerning is not read.
        """
        if "kern" not in self.ttfont:
            logger.debug("%s has no kern table", self.path)
            return {}

        glyph_to_codepoints: Dict[str, List[int]] = defaultdict(list)
        for cp in codepoints:
            glyph_name = self.cmap.get(cp)
            if glyph_name:
                glyph_to_codepoints[glyph_name].append(cp)

        pairs: Dict[Tuple[int, int], int] = {}
        for subtable in self.ttfont["kern"].kernTables:
            table_format = getattr(subtable, "format", None)
            if table_format != 0:
                logger.debug("Skipping kern subtable format %s", table_format)
                continue

            for (left, right), value in subtable.kernTable.items():
                if not value:
                    continue
                for left_cp in glyph_to_codepoints.get(left, []):
                    for right_cp in glyph_to_codepoints.get(right, []):
                        pairs[(left_cp, right_cp)] = value

        logger.debug("Read %d kerning pairs from %s", len(pairs), self.path)
        return pairs

    def to_metrics(
        self, ranges: Optional[unicode_ranges.RangeSpec] = None
    ) -> FontMetrics:
        """
        Materializes a FontMetrics table for every mapped codepoint, or only
        for those inside ``ranges`` when given.
        """
        if ranges is None:
            codepoints = sorted(self.cmap)
        else:
            codepoints = [
                cp for cp in unicode_ranges.to_codepoints(ranges) if cp in self.cmap
            ]

        advances: Dict[int, float] = {FALLBACK_CODEPOINT: self.fallback_advance}
        for cp in codepoints:
            if cp == FALLBACK_CODEPOINT:
                continue
            advances[cp] = self.get_advance(cp)

        hhea = self.ttfont["hhea"]
        head = self.head

        logger.info(
            "Extracted %d advances from %s (unitsPerEm=%d)",
            len(advances),
            self.path,
            self.units_per_em,
        )

        return FontMetrics(
            units_per_em=self.units_per_em,
            ascent=hhea.ascent,
            descent=hhea.descent,
            max_box=(head.xMin, head.yMin, head.xMax, head.yMax),
            advances=advances,
            kerning=self.kerning_pairs(codepoints),
            direction=head.fontDirectionHint,
            smallest_ppem=head.lowestRecPPEM,
        )

    def close(self):
        """Closes the underlying TTFont resource."""
        self.ttfont.close()


def load_metrics(
    path: Union[str, Path], ranges: Optional[unicode_ranges.RangeSpec] = None
) -> FontMetrics:
    """
    Loads a metrics table from a JSON dump, or builds one from a font file.
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        logger.debug("Reading metrics JSON %s", path)
        return FontMetrics.model_validate_json(path.read_text(encoding="utf-8"))

    wrapper = FontWrapper(path)
    try:
        return wrapper.to_metrics(ranges)
    finally:
        wrapper.close()


def dump_metrics(metrics: FontMetrics, path: Union[str, Path]) -> None:
    """Writes a metrics table as JSON."""
    Path(path).write_text(metrics.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Wrote metrics to %s", path)
