"""
Binary layout of the FLIR FFF container embedded in radiometric JPEGs.

Offsets, record kinds and per-record property tables, as documented by
ExifTool (lib/Image/ExifTool/FLIR.pm). Every table is plain data: an ordered
tuple of (name, offset, type) descriptors per record kind.

To add a property: append a PropertyDescriptor to the table of its record kind.
Offsets are relative to the start of the record content.
"""
from enum import Enum
from typing import Dict, NamedTuple, Tuple


class PropertyType(Enum):
    """Type tags for record properties; the value is the field width in bytes."""

    INT32 = ("INT32", 4)
    INT16S = ("INT16S", 2)
    INT16U = ("INT16U", 2)
    FLOAT = ("FLOAT", 4)
    STR16 = ("STR16", 16)
    STR32 = ("STR32", 32)
    BYTE1 = ("BYTE1", 1)
    COLOR = ("COLOR", 3)

    @property
    def width(self) -> int:
        return self.value[1]


class PropertyDescriptor(NamedTuple):
    """Where a named property lives inside a record and how to read it."""

    name: str
    offset: int
    type: PropertyType


# -----------------------------------------------------------------------------
# JPEG side: APP1 segments carrying the container
# -----------------------------------------------------------------------------
APP1_SIGNATURE = b"FLIR"
APP1_HEADER_LENGTH = 0x08          # "FLIR\0" + marker + chunk index + chunk count
APP1_CHUNK_INDEX = 0x06

# -----------------------------------------------------------------------------
# Container header (integers are big-endian)
# -----------------------------------------------------------------------------
HEADER_BYTE_ORDER = ">"
HEADER_MAGIC = b"FFF\x00"
HEADER_LENGTH = 0x40

HEADER_FORMAT = 0x00               # File format = HEADER_MAGIC
HEADER_CREATOR = 0x04              # Creator: seen "\0", "MTX IR\0", "CAMCTRL\0"
HEADER_CREATOR_LENGTH = 16
HEADER_VERSION = 0x14              # File format version = 100
HEADER_RECORD_OFFSET = 0x18        # Offset to record directory
HEADER_RECORD_COUNT = 0x1C         # Number of entries in record directory
HEADER_INDEX_ID = 0x20             # Next free index ID = 2
HEADER_SWAP_PATTERN = 0x24         # Swap pattern = 0 (?)
HEADER_SPARES = 0x28
HEADER_RESERVED = 0x34
HEADER_CHECKSUM = 0x3C             # Not validated

# -----------------------------------------------------------------------------
# Record directory entry (32 bytes, big-endian)
# -----------------------------------------------------------------------------
RECORD_ENTRY_LENGTH = 0x20

RECORD_TYPE = 0x00
RECORD_SUBTYPE = 0x02
RECORD_VERSION = 0x04
RECORD_INDEX = 0x08
RECORD_OFFSET = 0x0C               # Offset from start of the container
RECORD_LENGTH = 0x10
RECORD_PARENT = 0x14
RECORD_OBJECT_NUMBER = 0x18
RECORD_CHECKSUM = 0x1C             # 0 for no checksum; not validated

# Record kinds
RECORD_KIND_EMPTY = 0x00
RECORD_KIND_RAW = 0x01
RECORD_KIND_CAMERA = 0x20
RECORD_KIND_PALETTE = 0x22
RECORD_KIND_PIP = 0x2A

RECORD_KIND_NAMES: Dict[int, str] = {
    RECORD_KIND_RAW: "Raw",
    RECORD_KIND_CAMERA: "Camera",
    RECORD_KIND_PALETTE: "Palette",
    RECORD_KIND_PIP: "PiP",
}

# Raw record subtypes
RAW_SUBTYPE_BE = 0x01
RAW_SUBTYPE_LE = 0x02
RAW_SUBTYPE_PNG = 0x03

RAW_BYTE_ORDERS = {
    RAW_SUBTYPE_BE: ">",
    RAW_SUBTYPE_LE: "<",
}

# -----------------------------------------------------------------------------
# Record content (properties are little-endian)
# -----------------------------------------------------------------------------
PROPERTY_BYTE_ORDER = "<"
TEXT_ENCODING = "utf-8"

RAW_WIDTH = 0x02
RAW_HEIGHT = 0x04
RAW_DATA = 0x20                    # Pixel data runs to the end of the record

PALETTE_COLORS = 0x00
PALETTE_DATA = 0x70
PALETTE_ENTRY_LENGTH = 3

P = PropertyDescriptor
T = PropertyType

CAMERA_PROPERTIES: Tuple[PropertyDescriptor, ...] = (
    P("Emissivity", 0x020, T.FLOAT),
    P("ObjectDistance", 0x024, T.FLOAT),
    P("ReflectedApparentTemperature", 0x028, T.FLOAT),
    P("AtmosphericTemperature", 0x02C, T.FLOAT),
    P("IRWindowTemperature", 0x030, T.FLOAT),
    P("IRWindowTransmission", 0x034, T.FLOAT),
    P("RelativeHumidity", 0x03C, T.FLOAT),
    P("PlanckR1", 0x058, T.FLOAT),
    P("PlanckB", 0x05C, T.FLOAT),
    P("PlanckF", 0x060, T.FLOAT),
    P("PlanckO", 0x308, T.INT32),
    P("PlanckR2", 0x30C, T.FLOAT),
    P("AtmosphericTransAlpha1", 0x070, T.FLOAT),
    P("AtmosphericTransAlpha2", 0x074, T.FLOAT),
    P("AtmosphericTransBeta1", 0x078, T.FLOAT),
    P("AtmosphericTransBeta2", 0x07C, T.FLOAT),
    P("AtmosphericTransX", 0x080, T.FLOAT),
    P("CameraTemperatureRangeMax", 0x090, T.FLOAT),
    P("CameraTemperatureRangeMin", 0x094, T.FLOAT),
    P("CameraTemperatureMaxClip", 0x098, T.FLOAT),
    P("CameraTemperatureMinClip", 0x09C, T.FLOAT),
    P("CameraTemperatureMaxWarn", 0x0A0, T.FLOAT),
    P("CameraTemperatureMinWarn", 0x0A4, T.FLOAT),
    P("CameraTemperatureMaxSaturated", 0x0A8, T.FLOAT),
    P("CameraTemperatureMinSaturated", 0x0AC, T.FLOAT),
    P("CameraModel", 0x0D4, T.STR32),
    P("CameraPartNumber", 0x0F4, T.STR16),
    P("CameraSerialNumber", 0x104, T.STR16),
    P("CameraSoftware", 0x114, T.STR16),
    P("LensModel", 0x170, T.STR32),
    P("LensPartNumber", 0x190, T.STR16),
    P("LensSerialNumber", 0x1A0, T.STR16),
    P("FieldOfView", 0x1B4, T.FLOAT),
    P("FilterModel", 0x1EC, T.STR16),
    P("FilterPartNumber", 0x1FC, T.STR32),
    P("FilterSerialNumber", 0x21C, T.STR32),
    P("RawValueRangeMin", 0x310, T.INT16U),
    P("RawValueRangeMax", 0x312, T.INT16U),
    P("RawValueMedian", 0x338, T.INT32),
    P("RawValueRange", 0x33C, T.INT32),
    P("DateTimeOriginal", 0x384, T.INT32),
    P("FocusStepCount", 0x390, T.INT32),
    P("FocusDistance", 0x45C, T.FLOAT),
    P("FrameRate", 0x464, T.INT16U),
)

PALETTE_PROPERTIES: Tuple[PropertyDescriptor, ...] = (
    P("PaletteColors", 0x000, T.INT32),
    P("AboveColor", 0x006, T.COLOR),
    P("BelowColor", 0x009, T.COLOR),
    P("OverflowColor", 0x00C, T.COLOR),
    P("UnderflowColor", 0x00F, T.COLOR),
    P("Isotherm1Color", 0x012, T.COLOR),
    P("Isotherm2Color", 0x015, T.COLOR),
    P("PaletteMethod", 0x01A, T.BYTE1),
    P("PaletteStretch", 0x01B, T.BYTE1),
    P("PaletteFileName", 0x030, T.STR32),
    P("PaletteName", 0x050, T.STR32),
)

PIP_PROPERTIES: Tuple[PropertyDescriptor, ...] = (
    P("Real2IR", 0x000, T.FLOAT),
    P("OffsetX", 0x004, T.INT16S),
    P("OffsetY", 0x006, T.INT16S),
    P("X1", 0x008, T.INT16S),
    P("X2", 0x00A, T.INT16S),
    P("Y1", 0x00C, T.INT16S),
    P("Y2", 0x00E, T.INT16S),
)

del P, T

# Record kinds whose content is a property table. Raw uses fixed offsets instead.
PROPERTY_TABLES: Dict[int, Tuple[PropertyDescriptor, ...]] = {
    RECORD_KIND_CAMERA: CAMERA_PROPERTIES,
    RECORD_KIND_PALETTE: PALETTE_PROPERTIES,
    RECORD_KIND_PIP: PIP_PROPERTIES,
}


def get_property_table(kind: int) -> Tuple[PropertyDescriptor, ...]:
    """Return the property table of a record kind; empty for kinds without one."""
    return PROPERTY_TABLES.get(kind, ())


def record_kind_name(kind: int) -> str:
    """Category name used for properties of the given record kind."""
    return RECORD_KIND_NAMES.get(kind, f"0x{kind:02X}")
