"""
Tests for statistics, palettes and pixel-buffer rendering.
"""
import math

import numpy as np
import pytest

from flir_thermal_reader.models import ThermalImage
from flir_thermal_reader.palettes import DARKHOT, FAKEBOW, WHITEHOT, WIDEBOW, get_palette, gradient
from flir_thermal_reader.parsers import FFFParser
from flir_thermal_reader.rendering import (
    Stats,
    Toolkit,
    analyze,
    apply_palette,
    argb_to_rgba,
    histogram,
    levels,
    palette_index,
    ycbcr_to_argb,
)

OVER = 0x77FF0000
UNDER = 0x770000FF


def _image(values, width, height):
    return ThermalImage(creator="test", width=width, height=height, raw_values=values)


def test_stats_extremes_and_percentiles():
    """Percentile 0/1 give min/max; nearest rank in between."""
    stats = Stats([50, 10, 40, 20, 30])
    assert stats.min == 10
    assert stats.max == 50
    assert stats.percentile_value(0) == stats.min
    assert stats.percentile_value(1) == stats.max
    assert stats.percentile_value(0.5) == 30
    assert stats.percentile_value(0.3) == 20      # floor(0.3 * 4) == 1
    assert stats.percentile_value(-2) == 10
    assert stats.percentile_value(7) == 50
    assert stats.percentile_offset(0.5) == pytest.approx(0.5)
    assert stats.percentile_offset(1) == 1.0


def test_stats_flat_image():
    """A flat image has no spread: offsets are NaN."""
    stats = Stats([5, 5, 5])
    assert stats.percentile_value(0.5) == 5
    assert math.isnan(stats.percentile_offset(0.5))


def test_stats_empty_raises():
    """Analyzing an image without raw values fails."""
    with pytest.raises(ValueError, match="No raw values"):
        analyze(_image([], 0, 0))


def test_analyze_does_not_mutate_image():
    """Statistics are computed from a sorted copy."""
    image = _image([3, 1, 2], 3, 1)
    stats = analyze(image)
    assert stats.sorted.tolist() == [1, 2, 3]
    assert image.raw_values.tolist() == [3, 1, 2]


def test_levels():
    """Levels are normalized between min and max."""
    assert levels([10, 15, 20, 30], 20, 10).tolist() == [0.0, 0.5, 1.0, 2.0]


def test_palette_index_bounds():
    """Level 0 maps to the first entry, 1 to the last, halves round up."""
    assert palette_index(0.0, 256) == 0
    assert palette_index(1.0, 256) == 255
    assert palette_index(0.5, 3) == 1
    assert palette_index(0.25, 3) == 1             # 0.5 rounds up


def test_apply_palette_over_and_under():
    """Out-of-range levels take the over/under colors."""
    palette = [0xFF000001, 0xFF000002, 0xFF000003]
    colors = apply_palette(np.array([-0.1, 0.0, 0.5, 1.0, 1.1, np.nan]), palette, OVER, UNDER)
    assert colors.dtype == np.uint32
    assert colors.tolist() == [UNDER, 0xFF000001, 0xFF000002, 0xFF000003, OVER, 0xFF000001]


def test_ycbcr_gray_is_unchanged():
    """(128, 128, 128) is opaque mid gray."""
    assert ycbcr_to_argb((128, 128, 128)) == 0xFF808080


def test_ycbcr_clamps_channels():
    """Saturated inputs clamp to 0-255 and stay opaque."""
    argb = ycbcr_to_argb((255, 255, 0))
    assert argb >> 24 == 0xFF
    assert (argb >> 16) & 0xFF == 255
    assert (argb >> 8) & 0xFF == 208
    assert argb & 0xFF == 28


def test_histogram_counts_in_range_samples():
    """Bucket counts sum to the number of samples with level in [0, 1]."""
    raw = np.array([0, 25, 50, 75, 100])
    hist = histogram(raw, 5, 100, 0)
    assert hist.tolist() == [1, 1, 1, 1, 1]
    assert hist.sum() == raw.size


def test_histogram_ignores_out_of_range_samples():
    """Samples below min or above max are not counted."""
    raw = np.array([-50, 0, 50, 100, 150, 400])
    hist = histogram(raw, 3, 100, 0)
    assert hist.tolist() == [1, 1, 1]
    assert hist.sum() == 3


def test_gradient_ends_on_last_color():
    """Each segment has `steps` entries; the final color is appended verbatim."""
    g = gradient([0xFF000000, 0xFF0000FF], 4)
    assert g.tolist() == [0xFF000000, 0xFF000040, 0xFF000080, 0xFF0000BF, 0xFF0000FF]


def test_builtin_palettes():
    """Built-in palettes have the expected sizes and endpoints."""
    assert len(WHITEHOT) == 255 and WHITEHOT[0] == 0xFF000000 and WHITEHOT[-1] == 0xFFFEFEFE
    assert len(DARKHOT) == 255 and DARKHOT[0] == 0xFFFFFFFF
    assert len(FAKEBOW) == 8 * 64 + 1 and FAKEBOW[0] == 0xFF00000A and FAKEBOW[-1] == 0xFFFFFFF6
    assert len(WIDEBOW) == 9 * 127 + 1 and WIDEBOW[-1] == 0xFFFFFFFF
    assert get_palette("WideBow") is WIDEBOW
    with pytest.raises(ValueError, match="Unknown palette"):
        get_palette("rainbow")


def test_render_palette_with_custom_range():
    """Rendering uses the given range and fills over/under colors."""
    image = _image([0, 10, 20, 30], 2, 2)
    palette = [0xFF000000, 0xFFFFFFFF]
    buffer = Toolkit(image).render_palette(palette, max_value=20, min_value=10,
                                           over_color=OVER, under_color=UNDER)
    assert buffer.tolist() == [UNDER, 0xFF000000, 0xFFFFFFFF, OVER]


def test_toolkit_on_decoded_image(sample_fff):
    """Default rendering uses the embedded palette over the observed range."""
    image = FFFParser().parse(sample_fff)
    toolkit = Toolkit(image)
    assert toolkit.stats is toolkit.stats
    assert toolkit.stats.min == 14000
    assert toolkit.stats.max == 15100

    palette = toolkit.default_palette()
    assert palette.tolist() == [0xFF101010, 0xFF808080, 0xFFEBEBEB]

    buffer = toolkit.render_default()
    assert buffer.shape == (12,)
    assert buffer[0] == palette[0]
    assert buffer[-1] == palette[-1]
    assert toolkit.histogram(3).sum() == 12

    temps = toolkit.temperatures()
    assert temps.shape == (3, 4)
    assert temps[0, 0] < temps[-1, -1]


def test_default_palette_missing():
    """An image without an embedded palette cannot use the default rendering."""
    with pytest.raises(ValueError, match="no embedded palette"):
        Toolkit(_image([1, 2], 2, 1)).render_default()


def test_to_image_and_colorbar():
    """ARGB buffers convert to RGBA Pillow images."""
    toolkit = Toolkit(_image([0, 1], 2, 1))
    buffer = np.array([0xFF102030, 0x80FFFFFF], dtype=np.uint32)
    rgba = argb_to_rgba(buffer, 2, 1)
    assert rgba[0, 0].tolist() == [0x10, 0x20, 0x30, 0xFF]
    assert rgba[0, 1].tolist() == [0xFF, 0xFF, 0xFF, 0x80]
    img = toolkit.to_image(buffer)
    assert img.mode == "RGBA"
    assert img.size == (2, 1)
    assert Toolkit.colorbar(WHITEHOT).shape == (255,)


def test_extra_samples_beyond_image_are_ignored(make_fff, make_raw, make_camera):
    """Samples past width*height are dropped for conversion and rendering."""
    image = FFFParser().parse(make_fff([
        (0x20, 0x00, make_camera()),
        (0x01, 0x02, make_raw(2, 1, [14000, 15000, 0], "<")),
    ]))
    assert image.raw_values.size == 3
    toolkit = Toolkit(image)
    temps = toolkit.temperatures()
    assert temps.shape == (1, 2)
    assert np.all(np.isfinite(temps))
    buffer = toolkit.render_palette([0xFF000000, 0xFFFFFFFF], max_value=15000, min_value=14000)
    assert buffer.tolist() == [0xFF000000, 0xFFFFFFFF]
    assert toolkit.to_image(buffer).size == (2, 1)


def test_too_few_samples_raise():
    """An image with fewer samples than pixels cannot be shaped."""
    with pytest.raises(ValueError, match="do not fill"):
        _image([1, 2, 3], 2, 2).get_raw_array()
