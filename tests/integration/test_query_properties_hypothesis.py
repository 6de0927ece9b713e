import pytest
from hypothesis import given
from hypothesis import strategies as st

from textmetrics.core import nearest_gap, position_at, shorten, width, wrap
from textmetrics.models import FontMetrics

# --- Metrics ---

MONO = FontMetrics(
    units_per_em=1000,
    ascent=800,
    descent=-200,
    max_box=(0, -200, 100, 800),
    advances={0: 100, **{cp: 100 for cp in range(32, 127)}},
)

PROPORTIONAL = FontMetrics(
    units_per_em=2048,
    ascent=1900,
    descent=-500,
    max_box=(-200, -500, 2000, 1900),
    advances={0: 1000, 32: 512, 65: 1366, 86: 1366, 97: 1139, 98: 1139, 105: 455},
    kerning={(65, 86): -150, (86, 65): -150, (86, 97): -80},
)

# --- Strategies ---

single_lines = st.text(alphabet="abiAV ", max_size=40)
multi_lines = st.text(alphabet="abiAV \n", max_size=40)
pixel_sizes = st.floats(min_value=1, max_value=200)
widths = st.integers(min_value=1, max_value=60000)


@given(text=multi_lines, kern=st.booleans())
def test_width_is_deterministic(text, kern):
    opts = {"kern": kern}
    assert width(text, None, PROPORTIONAL, opts) == width(text, None, PROPORTIONAL, opts)


@given(text=multi_lines, pixels=pixel_sizes, kern=st.booleans())
def test_width_scales_linearly(text, pixels, kern):
    opts = {"kern": kern}
    raw = width(text, None, PROPORTIONAL, opts)
    scaled = width(text, pixels, PROPORTIONAL, opts)
    assert scaled == pytest.approx(raw * pixels / 2048)


@given(text=single_lines, max_width=widths)
def test_shorten_result_fits(text, max_width):
    result = shorten(text, max_width, None, PROPORTIONAL)
    assert width(result, None, PROPORTIONAL) <= max_width


@given(text=single_lines, max_width=widths)
def test_shorten_is_idempotent(text, max_width):
    once = shorten(text, max_width, None, PROPORTIONAL)
    assert shorten(once, max_width, None, PROPORTIONAL) == once


@given(text=single_lines, max_width=widths)
def test_shorten_keeps_a_prefix(text, max_width):
    result = shorten(text, max_width, None, PROPORTIONAL)
    if result.endswith("..."):
        assert text.startswith(result[:-3])
    else:
        assert result in (text, "")


@given(text=single_lines, max_width=widths)
def test_shorten_keeps_the_longest_prefix(text, max_width):
    result = shorten(text, max_width, None, PROPORTIONAL)
    if not result.endswith("...") or result == text:
        return

    kept = len(result) - 3
    one_more = text[: kept + 1] + "..."
    assert width(one_more, None, PROPORTIONAL) >= max_width


@given(text=single_lines, max_width=widths, kern=st.booleans())
def test_word_wrap_only_moves_whitespace(text, max_width, kern):
    result = wrap(text, max_width, None, PROPORTIONAL, {"kern": kern})
    assert " ".join(result.split()) == " ".join(text.split())


@given(text=single_lines, max_width=widths)
def test_word_wrap_lines_fit_unless_a_word_is_too_long(text, max_width):
    for line in wrap(text, max_width, None, PROPORTIONAL).split("\n"):
        if " " in line:
            assert width(line, None, PROPORTIONAL) <= max_width


@given(text=single_lines, max_width=widths, kern=st.booleans())
def test_char_wrap_keeps_every_codepoint(text, max_width, kern):
    opts = {"mode": "char", "kern": kern}
    result = wrap(text, max_width, None, PROPORTIONAL, opts)
    lines = result.split("\n")

    assert "".join(lines) == text
    for line in lines:
        if len(line) > 1:
            assert width(line, None, PROPORTIONAL, {"kern": kern}) <= max_width


@given(text=single_lines, kern=st.booleans())
def test_position_after_the_text_is_its_width(text, kern):
    opts = {"kern": kern}
    x, line = position_at(text, len(text), None, PROPORTIONAL, opts)
    assert line == 0
    assert x == width(text, None, PROPORTIONAL, opts)


@given(data=st.data())
def test_nearest_gap_at_a_position_returns_that_index(data):
    text = data.draw(st.text(alphabet="abc xyz", max_size=30))
    index = data.draw(st.integers(min_value=0, max_value=len(text)))

    x, _ = position_at(text, index, None, MONO)
    assert nearest_gap(text, (x, 0), None, MONO) == (index, x, 0)


@given(text=multi_lines, max_width=widths, kern=st.booleans())
def test_shorten_leaves_text_that_fits_unchanged(text, max_width, kern):
    opts = {"kern": kern}
    if width(text, None, PROPORTIONAL, opts) <= max_width:
        assert shorten(text, max_width, None, PROPORTIONAL, opts) == text


@given(text=single_lines, kern=st.booleans())
def test_shorten_to_the_text_width_is_a_no_op(text, kern):
    opts = {"kern": kern}
    fitted = width(text, None, PROPORTIONAL, opts)
    assert shorten(text, fitted, None, PROPORTIONAL, opts) == text
