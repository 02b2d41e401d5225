"""Decode typed property values from record content."""

import struct
from typing import List, Sequence, Tuple, Union

from .errors import FormatError
from .format_catalog import (
    PROPERTY_BYTE_ORDER,
    TEXT_ENCODING,
    PropertyDescriptor,
    PropertyType,
)
from .models import DecodedProperty

PropertyValue = Union[int, float, str, Tuple[int, int, int]]

_STRUCT_FORMATS = {
    PropertyType.INT32: "i",
    PropertyType.INT16S: "h",
    PropertyType.INT16U: "H",
    PropertyType.FLOAT: "f",
    PropertyType.BYTE1: "B",
}


def decode_text(raw: bytes) -> str:
    """Decode a fixed-length text field, dropping trailing NUL and space padding."""
    return raw.decode(TEXT_ENCODING, errors="replace").rstrip("\x00 ")


def decode_property(content: bytes, descriptor: PropertyDescriptor) -> PropertyValue:
    """Read one property from little-endian record content."""
    start = descriptor.offset
    end = start + descriptor.type.width
    if start < 0 or end > len(content):
        raise FormatError(
            f"Property {descriptor.name} at 0x{start:X} ({descriptor.type.width} bytes) "
            f"exceeds record content of {len(content)} bytes"
        )
    field = content[start:end]
    if descriptor.type in (PropertyType.STR16, PropertyType.STR32):
        return decode_text(field)
    if descriptor.type is PropertyType.COLOR:
        return (field[0] & 0xFF, field[1] & 0xFF, field[2] & 0xFF)
    return struct.unpack(PROPERTY_BYTE_ORDER + _STRUCT_FORMATS[descriptor.type], field)[0]


def decode_properties(
    content: bytes, table: Sequence[PropertyDescriptor], category: str
) -> List[DecodedProperty]:
    """Decode every descriptor of a table; any out-of-range field fails the whole table."""
    return [
        DecodedProperty(d.name, category, d.type, decode_property(content, d))
        for d in table
    ]
