import pytest

from textmetrics.models import FontMetrics


@pytest.fixture
def simple_metrics():
    """
    Three-glyph table at 2048 units per em. Anything that is not a, b or c
    falls back to the 500 unit missing glyph.
    """
    return FontMetrics(
        units_per_em=2048,
        ascent=1900,
        descent=-500,
        max_box=(-1509, -555, 2352, 2163),
        advances={97: 600, 98: 600, 99: 600, 0: 500},
    )


@pytest.fixture
def mono_metrics():
    """
    Monospaced printable ASCII at 1000 units per em: every glyph (and the
    fallback) is 100 units wide, so widths are easy to reason about.
    """
    advances = {cp: 100 for cp in range(32, 127)}
    advances[0] = 100
    return FontMetrics(
        units_per_em=1000,
        ascent=800,
        descent=-200,
        max_box=(0, -200, 100, 800),
        advances=advances,
    )


@pytest.fixture
def kerned_metrics():
    """
    Small table with kerning: A and V pull together more in one direction
    than the other.
    """
    return FontMetrics(
        units_per_em=1000,
        ascent=900,
        descent=-250,
        max_box=(-50, -250, 1100, 950),
        advances={0: 500, 32: 250, 65: 600, 86: 600, 97: 500, 98: 500},
        kerning={(65, 86): -100, (86, 65): -50},
    )


@pytest.fixture
def ascii_metrics():
    """
    Proportional printable ASCII with a few kerning pairs, shaped roughly
    like a real sans-serif.
    """
    advances = {0: 600, 32: 250}
    for cp in range(33, 127):
        char = chr(cp)
        if char in "ijlt.,:;'!|":
            advances[cp] = 250
        elif char in "mwMW":
            advances[cp] = 850
        elif char.isupper():
            advances[cp] = 650
        else:
            advances[cp] = 520
    return FontMetrics(
        units_per_em=1000,
        ascent=930,
        descent=-240,
        max_box=(-100, -270, 1200, 1000),
        advances=advances,
        kerning=[[84, 111, -60], [65, 86, -80], [86, 65, -80], [76, 84, -90]],
    )
