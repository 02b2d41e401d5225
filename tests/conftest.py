"""
Fixtures that synthesize FFF containers for the tests.
"""
import io
import struct

import numpy as np
import pytest
from PIL import Image

from flir_thermal_reader.format_catalog import (
    CAMERA_PROPERTIES,
    PALETTE_DATA,
    PALETTE_PROPERTIES,
    PropertyType,
)

# Typical calibration of a FLIR E-series camera (temperatures in Kelvin).
CALIBRATION = {
    "Emissivity": 0.95,
    "ObjectDistance": 1.0,
    "ReflectedApparentTemperature": 293.15,
    "AtmosphericTemperature": 293.15,
    "IRWindowTemperature": 293.15,
    "IRWindowTransmission": 1.0,
    "RelativeHumidity": 0.5,
    "PlanckR1": 21106.77,
    "PlanckB": 1501.0,
    "PlanckF": 1.0,
    "PlanckO": -7340,
    "PlanckR2": 0.012545258,
    "AtmosphericTransAlpha1": 0.006569,
    "AtmosphericTransAlpha2": 0.01262,
    "AtmosphericTransBeta1": -0.002276,
    "AtmosphericTransBeta2": -0.00667,
    "AtmosphericTransX": 1.9,
}

_PACK = {
    PropertyType.INT32: "<i",
    PropertyType.INT16S: "<h",
    PropertyType.INT16U: "<H",
    PropertyType.FLOAT: "<f",
    PropertyType.BYTE1: "<B",
}


def _fill(table, size, values):
    content = bytearray(size)
    by_name = {d.name: d for d in table}
    for name, value in values.items():
        d = by_name[name]
        if d.type in (PropertyType.STR16, PropertyType.STR32):
            raw = value.encode("utf-8")[:d.type.width]
            content[d.offset:d.offset + len(raw)] = raw
        elif d.type is PropertyType.COLOR:
            content[d.offset:d.offset + 3] = bytes(value)
        else:
            struct.pack_into(_PACK[d.type], content, d.offset, value)
    return bytes(content)


def build_fff(records, creator=b"MTX IR", magic=b"FFF\x00", count=None):
    """Assemble a container: 0x40-byte header, directory, then record contents."""
    directory_offset = 0x40
    data_offset = directory_offset + 0x20 * len(records)
    directory = bytearray()
    body = bytearray()
    for kind, subtype, content in records:
        offset = data_offset + len(body) if content else 0
        entry = struct.pack(">HHiiiiiII", kind, subtype, 100, len(directory) // 0x20,
                            offset, len(content), 0, 0, 0)
        directory += entry
        body += content
    header = bytearray(0x40)
    header[0:4] = magic
    header[4:4 + len(creator)] = creator
    struct.pack_into(">iii", header, 0x14, 100, directory_offset,
                     len(records) if count is None else count)
    return bytes(header + directory + body)


def raw_content(width, height, values, order=">"):
    """Raw record content: dimensions at 0x02/0x04, samples from 0x20."""
    head = bytearray(0x20)
    struct.pack_into(order + "HH", head, 0x02, width, height)
    return bytes(head) + np.asarray(values, dtype=order + "u2").tobytes()


def png_raw_content(values):
    """Raw record content holding a 16-bit PNG with byte-swapped samples."""
    stored = np.asarray(values, dtype=np.uint16).byteswap()
    buf = io.BytesIO()
    Image.fromarray(stored).save(buf, format="PNG")
    return bytes(0x20) + buf.getvalue()


def camera_content(**values):
    props = dict(CALIBRATION)
    props.update(values)
    return _fill(CAMERA_PROPERTIES, 0x468, props)


def palette_content(colors, **values):
    props = {"PaletteColors": len(colors), "PaletteName": "Iron"}
    props.update(values)
    content = bytearray(_fill(PALETTE_PROPERTIES, PALETTE_DATA, props))
    for c in colors:
        content += bytes(c)
    return bytes(content)


@pytest.fixture
def make_fff():
    return build_fff


@pytest.fixture
def make_raw():
    return raw_content


@pytest.fixture
def make_png_raw():
    return png_raw_content


@pytest.fixture
def make_camera():
    return camera_content


@pytest.fixture
def make_palette():
    return palette_content


@pytest.fixture
def calibration_values():
    return dict(CALIBRATION)


@pytest.fixture
def sample_fff():
    """A 4x3 little-endian image with Camera, Palette and PiP records."""
    raw = list(range(14000, 14000 + 12 * 100, 100))
    pip = struct.pack("<fhhhhhh", 1.5, -3, 4, 0, 159, 0, 119)
    palette = [(16, 128, 128), (128, 128, 128), (235, 128, 128)]
    return build_fff([
        (0x00, 0x00, b""),
        (0x20, 0x00, camera_content(CameraModel="FLIR E6")),
        (0x22, 0x00, palette_content(palette)),
        (0x2A, 0x00, pip),
        (0x01, 0x02, raw_content(4, 3, raw, "<")),
    ])
