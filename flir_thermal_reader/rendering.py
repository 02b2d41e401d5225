"""
Statistics, palette mapping and pixel-buffer synthesis for decoded images.

Pixel buffers are flat uint32 arrays of 0xAARRGGBB values, row-major.
"""

from functools import cached_property
from typing import Callable, Optional, Sequence

import numpy as np
from PIL import Image

from .models import ThermalImage
from .radiometry import CalibrationParameters, raw_to_temperature


class Stats:
    """Order statistics over the raw counts of an image."""

    def __init__(self, values):
        values = np.asarray(values)
        if values.size == 0:
            raise ValueError("No raw values to analyze")
        self.sorted = np.sort(values.reshape(-1)).astype(np.int64)
        self.sorted.flags.writeable = False

    @property
    def min(self) -> int:
        return int(self.sorted[0])

    @property
    def max(self) -> int:
        return int(self.sorted[-1])

    def percentile_value(self, percentile: float) -> int:
        """
        The raw value at the given fractional percentile (nearest rank, no interpolation).

        percentile: 0 - 1.00 (ie: 0.25 == 25%), clamped to that range.
        """
        p = max(0.0, min(1.0, percentile))
        return int(self.sorted[int(np.floor(p * (self.sorted.size - 1)))])

    def percentile_offset(self, percentile: float) -> float:
        """Position 0 - 1.00 of the percentile value between min and max; NaN when max == min."""
        span = self.max - self.min
        if span == 0:
            return float("nan")
        return (self.percentile_value(percentile) - self.min) / span


def analyze(image: ThermalImage) -> Stats:
    """Compute order statistics for an image's raw counts."""
    return Stats(image.raw_values)


def levels(raw, max_value: float, min_value: float) -> np.ndarray:
    """Normalize raw counts to 0 - 1 between min_value and max_value."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return (np.asarray(raw, dtype=np.float64) - min_value) / (float(max_value) - min_value)


def palette_index(level, palette_length: int):
    """Index of a level in [0, 1] into a palette, rounding half up."""
    level = np.clip(np.nan_to_num(np.asarray(level, dtype=np.float64), nan=0.0), -1.0, 2.0)
    return np.floor((palette_length - 1) * level + 0.5).astype(np.int64)


def apply_palette(level, palette: Sequence[int], over_color: int = 0, under_color: int = 0) -> np.ndarray:
    """
    Map levels to palette colors.

    Levels below 0 take under_color, above 1 take over_color; NaN levels take the first color.
    """
    palette = np.asarray(palette, dtype=np.uint32)
    level = np.asarray(level, dtype=np.float64)
    index = np.clip(palette_index(level, len(palette)), 0, len(palette) - 1)
    colors = palette[index]
    colors = np.where(level < 0, np.uint32(under_color), colors)
    colors = np.where(level > 1, np.uint32(over_color), colors)
    return colors.astype(np.uint32)


def ycbcr_to_argb(triple) -> int:
    """Convert an embedded palette entry (Y, Cb, Cr) to opaque ARGB."""
    y, cb, cr = (int(c) for c in triple)
    r = int(y + 1.40200 * (cb - 0x80))
    g = int(y - 0.34414 * (cr - 0x80) - 0.71414 * (cb - 0x80))
    b = int(y + 1.77200 * (cr - 0x80))
    r, g, b = (max(0, min(255, c)) for c in (r, g, b))
    return 0xFF000000 | (r << 16) | (g << 8) | b


def argb_to_rgba(buffer, width: int, height: int) -> np.ndarray:
    """Split ARGB values into an (height, width, 4) uint8 RGBA array."""
    argb = np.asarray(buffer, dtype=np.uint32).reshape(height, width)
    return np.stack(
        [(argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF, (argb >> 24) & 0xFF], axis=-1
    ).astype(np.uint8)


def to_pil_image(buffer, width: int, height: int) -> Image.Image:
    """Wrap an ARGB pixel buffer as an RGBA Pillow image."""
    return Image.fromarray(argb_to_rgba(buffer, width, height))


def histogram(raw, buckets: int, max_value: float, min_value: float) -> np.ndarray:
    """
    Count raw values per bucket, using the palette index of their level.

    Only values whose level lies in [0, 1] are counted.
    """
    level = levels(raw, max_value, min_value).reshape(-1)
    in_range = level[(level >= 0) & (level <= 1)]
    return np.bincount(palette_index(in_range, buckets), minlength=buckets)[:buckets]


class Toolkit:
    """Rendering and conversion helpers bound to one image; statistics computed once."""

    def __init__(self, image: ThermalImage):
        self.image = image

    @cached_property
    def stats(self) -> Stats:
        return analyze(self.image)

    @property
    def data(self) -> np.ndarray:
        return self.image.raw_values

    def temperatures(self, fahrenheit: bool = False) -> np.ndarray:
        """Temperatures shaped (height, width), from the image's Camera calibration."""
        cal = CalibrationParameters.from_image(self.image)
        return raw_to_temperature(self.image.get_raw_array(), cal, fahrenheit=fahrenheit)

    def default_palette(self) -> np.ndarray:
        """The embedded palette converted from YCbCr to ARGB."""
        if not self.image.palette:
            raise ValueError("Image has no embedded palette")
        return np.array([ycbcr_to_argb(c) for c in self.image.palette], dtype=np.uint32)

    def transform(self, transformer: Callable[[np.ndarray, np.ndarray], np.ndarray],
                  max_value: Optional[float] = None, min_value: Optional[float] = None) -> np.ndarray:
        """Apply transformer(levels, raw) to the whole image, row-major."""
        max_value = self.stats.max if max_value is None else max_value
        min_value = self.stats.min if min_value is None else min_value
        raw = self.image.get_raw_array().reshape(-1)
        return np.asarray(transformer(levels(raw, max_value, min_value), raw))

    def render_palette(self, palette: Sequence[int], max_value: Optional[float] = None,
                       min_value: Optional[float] = None, over_color: int = 0, under_color: int = 0) -> np.ndarray:
        """Render with any palette; defaults to the observed raw range."""
        return self.transform(
            lambda level, raw: apply_palette(level, palette, over_color, under_color),
            max_value, min_value,
        ).astype(np.uint32)

    def render_default(self) -> np.ndarray:
        """Render with the embedded palette over the observed raw range."""
        return self.render_palette(self.default_palette())

    def histogram(self, buckets: int, max_value: Optional[float] = None,
                  min_value: Optional[float] = None) -> np.ndarray:
        max_value = self.stats.max if max_value is None else max_value
        min_value = self.stats.min if min_value is None else min_value
        return histogram(self.image.raw_values, buckets, max_value, min_value)

    @staticmethod
    def colorbar(palette: Sequence[int]) -> np.ndarray:
        """A 1-pixel-high buffer with one pixel per palette entry."""
        return np.asarray(palette, dtype=np.uint32).copy()

    def to_image(self, buffer) -> Image.Image:
        return to_pil_image(buffer, self.image.width, self.image.height)
