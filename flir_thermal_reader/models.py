"""
Data models for decoded FFF containers.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple
import numpy as np

from .format_catalog import PropertyType, RECORD_KIND_EMPTY


@dataclass(frozen=True)
class Header:
    """Container header."""

    magic: bytes
    creator: str
    version: int
    directory_offset: int
    directory_count: int


@dataclass(frozen=True)
class RecordEntry:
    """One 32-byte entry of the record directory."""

    kind: int
    subtype: int
    version: int
    index: int
    offset: int
    length: int
    parent: int
    object_number: int
    checksum: int

    @property
    def is_empty(self) -> bool:
        return self.kind == RECORD_KIND_EMPTY


@dataclass(frozen=True)
class DecodedProperty:
    """A property value read from a record, tagged with its type."""

    name: str
    category: str
    type: PropertyType
    value: Any


@dataclass(frozen=True, eq=False)
class ThermalImage:
    """A decoded radiometric image: raw counts, properties and embedded palette."""

    creator: str
    width: int
    height: int
    raw_values: np.ndarray
    properties: Mapping[str, DecodedProperty] = field(default_factory=dict)
    palette: Optional[Tuple[Tuple[int, int, int], ...]] = None

    def __post_init__(self):
        raw = np.array(self.raw_values, dtype=np.uint16)
        raw.flags.writeable = False
        object.__setattr__(self, "raw_values", raw)
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        if self.palette is not None:
            object.__setattr__(self, "palette", tuple(tuple(c) for c in self.palette))

    def __eq__(self, other):
        if not isinstance(other, ThermalImage):
            return NotImplemented
        return (
            self.creator == other.creator
            and self.width == other.width
            and self.height == other.height
            and np.array_equal(self.raw_values, other.raw_values)
            and dict(self.properties) == dict(other.properties)
            and self.palette == other.palette
        )

    __hash__ = object.__hash__

    def get_image_shape(self) -> tuple:
        """Return the image dimensions (rows, columns)."""
        return (self.height, self.width)

    def get_property(self, name: str) -> Any:
        """Return the value of a decoded property; KeyError when absent."""
        return self.properties[name].value

    def get_raw_array(self) -> np.ndarray:
        """Return the raw counts shaped (height, width).

        Samples beyond width*height are ignored; too few is an error.
        """
        count = self.width * self.height
        if self.raw_values.size < count:
            raise ValueError(
                f"{self.raw_values.size} raw values do not fill a "
                f"{self.width}x{self.height} image"
            )
        return self.raw_values[:count].reshape(self.height, self.width)

    def get_raw_value_at_pixel(self, x: int, y: int) -> int:
        """Return the raw count at the given pixel."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self.raw_values[y * self.width + x])
        raise IndexError(f"Pixel coordinates ({x}, {y}) out of image bounds")
