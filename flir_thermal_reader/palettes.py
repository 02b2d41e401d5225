"""Built-in false-color palettes as uint32 ARGB arrays."""

from typing import Dict, Sequence

import numpy as np


def _channels(color: int) -> np.ndarray:
    return np.array([(color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF], dtype=np.int64)


def gradient(colors: Sequence[int], steps: int) -> np.ndarray:
    """
    Interpolate ARGB control colors, `steps` entries per segment.

    Channels are rounded half-up; the last control color is appended as is.
    """
    out = []
    fractions = np.arange(steps) / float(steps)
    for c1, c2 in zip(colors[:-1], colors[1:]):
        a, b = _channels(c1), _channels(c2)
        mixed = a + np.floor((b - a)[None, :] * fractions[:, None] + 0.5).astype(np.int64)
        out.append((mixed[:, 0] << 24) | (mixed[:, 1] << 16) | (mixed[:, 2] << 8) | mixed[:, 3])
    out.append(np.array([colors[-1]], dtype=np.int64))
    return np.concatenate(out).astype(np.uint32)


WHITEHOT = (np.arange(255, dtype=np.uint32) * 0x010101) | np.uint32(0xFF000000)
DARKHOT = ((255 - np.arange(255, dtype=np.uint32)) * 0x010101) | np.uint32(0xFF000000)
FAKEBOW = gradient([
    0xFF00000A,
    0xFF3B0091,
    0xFF98009B,
    0xFFCC1582,
    0xFFE94D0D,
    0xFFF78500,
    0xFFFEC100,
    0xFFFFEF63,
    0xFFFFFFF6,
], 64)
WIDEBOW = gradient([
    0xFF000000,
    0xFF000080,
    0xFF0000FF,
    0xFF8000FF,
    0xFFFF0080,
    0xFFFF0000,
    0xFFFF8000,
    0xFFFFFF00,
    0xFFFFFF80,
    0xFFFFFFFF,
], 127)

for _palette in (WHITEHOT, DARKHOT, FAKEBOW, WIDEBOW):
    _palette.flags.writeable = False
del _palette

PALETTES: Dict[str, np.ndarray] = {
    "whitehot": WHITEHOT,
    "darkhot": DARKHOT,
    "fakebow": FAKEBOW,
    "widebow": WIDEBOW,
}


def get_palette(name: str) -> np.ndarray:
    """Return a built-in palette by (case-insensitive) name."""
    try:
        return PALETTES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown palette: {name}. Available: {', '.join(PALETTES)}"
        ) from None
