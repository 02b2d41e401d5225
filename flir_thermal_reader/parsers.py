"""Parse FLIR FFF containers (header, record directory, Camera/Palette/PiP/Raw records)."""

import io
import logging
import struct
from typing import Any, Dict, List

import numpy as np
from PIL import Image, UnidentifiedImageError

from .decoders import decode_properties, decode_text
from .errors import FormatError, InvalidHeaderError, UnsupportedSubtypeError
from .format_catalog import (
    HEADER_BYTE_ORDER,
    HEADER_CREATOR,
    HEADER_CREATOR_LENGTH,
    HEADER_FORMAT,
    HEADER_LENGTH,
    HEADER_MAGIC,
    HEADER_RECORD_COUNT,
    HEADER_RECORD_OFFSET,
    HEADER_VERSION,
    PALETTE_COLORS,
    PALETTE_DATA,
    PALETTE_ENTRY_LENGTH,
    PROPERTY_BYTE_ORDER,
    RAW_BYTE_ORDERS,
    RAW_DATA,
    RAW_HEIGHT,
    RAW_SUBTYPE_PNG,
    RAW_WIDTH,
    RECORD_CHECKSUM,
    RECORD_ENTRY_LENGTH,
    RECORD_INDEX,
    RECORD_KIND_PALETTE,
    RECORD_KIND_RAW,
    RECORD_LENGTH,
    RECORD_OBJECT_NUMBER,
    RECORD_OFFSET,
    RECORD_PARENT,
    RECORD_SUBTYPE,
    RECORD_TYPE,
    RECORD_VERSION,
    get_property_table,
    record_kind_name,
)
from .models import Header, RecordEntry, ThermalImage

logger = logging.getLogger(__name__)


def _read_int(buffer: bytes, offset: int, fmt: str, order: str = HEADER_BYTE_ORDER) -> int:
    size = struct.calcsize(fmt)
    if offset < 0 or offset + size > len(buffer):
        raise FormatError(f"Cannot read {size} bytes at 0x{offset:X}: buffer is {len(buffer)} bytes")
    return struct.unpack_from(order + fmt, buffer, offset)[0]


class FFFParser:
    """Parse an FFF container: header, record directory, then one pass over the records."""

    def parse(self, data: bytes) -> ThermalImage:
        """Decode container bytes into an immutable ThermalImage."""
        data = bytes(data)
        header = self.read_header(data)
        ir: Dict[str, Any] = {
            "creator": header.creator,
            "width": 0,
            "height": 0,
            "raw_values": np.empty(0, dtype=np.uint16),
            "properties": {},
            "palette": None,
        }
        for entry in self.read_directory(data, header):
            if entry.is_empty:
                continue
            content = self._slice_record(data, entry)
            if entry.kind == RECORD_KIND_RAW:
                self._read_raw(ir, entry, content)
            elif get_property_table(entry.kind):
                self._read_property_record(ir, entry, content)
            else:
                logger.debug("Skipping record %d of unsupported kind 0x%02X", entry.index, entry.kind)
        return ThermalImage(**ir)

    def read_header(self, data: bytes) -> Header:
        """Validate the magic and read the header fields; InvalidHeaderError when unusable."""
        if len(data) < HEADER_LENGTH:
            raise InvalidHeaderError(
                f"Content is {len(data)} bytes, shorter than the {HEADER_LENGTH}-byte FFF header."
            )
        magic = data[HEADER_FORMAT:HEADER_FORMAT + len(HEADER_MAGIC)]
        if magic != HEADER_MAGIC:
            raise InvalidHeaderError(
                f"Content does not appear to be a valid FFF based on the header (magic {magic!r})."
            )
        header = Header(
            magic=magic,
            creator=decode_text(data[HEADER_CREATOR:HEADER_CREATOR + HEADER_CREATOR_LENGTH]),
            version=_read_int(data, HEADER_VERSION, "i"),
            directory_offset=_read_int(data, HEADER_RECORD_OFFSET, "i"),
            directory_count=_read_int(data, HEADER_RECORD_COUNT, "i"),
        )
        logger.debug(
            "FFF header: creator=%r version=%d directory at 0x%X with %d entries",
            header.creator, header.version, header.directory_offset, header.directory_count,
        )
        return header

    def read_directory(self, data: bytes, header: Header) -> List[RecordEntry]:
        """Read every 32-byte directory entry; FormatError when the directory is truncated."""
        entries = []
        for i in range(max(0, header.directory_count)):
            start = header.directory_offset + i * RECORD_ENTRY_LENGTH
            if start < 0 or start + RECORD_ENTRY_LENGTH > len(data):
                raise FormatError(
                    f"Directory entry {i} at 0x{start:X} lies outside the {len(data)}-byte container"
                )
            raw = data[start:start + RECORD_ENTRY_LENGTH]
            entries.append(RecordEntry(
                kind=_read_int(raw, RECORD_TYPE, "H"),
                subtype=_read_int(raw, RECORD_SUBTYPE, "H"),
                version=_read_int(raw, RECORD_VERSION, "i"),
                index=_read_int(raw, RECORD_INDEX, "i"),
                offset=_read_int(raw, RECORD_OFFSET, "i"),
                length=_read_int(raw, RECORD_LENGTH, "i"),
                parent=_read_int(raw, RECORD_PARENT, "i"),
                object_number=_read_int(raw, RECORD_OBJECT_NUMBER, "i"),
                checksum=_read_int(raw, RECORD_CHECKSUM, "I"),
            ))
        return entries

    def _slice_record(self, data: bytes, entry: RecordEntry) -> bytes:
        if entry.offset < 0 or entry.length < 0 or entry.offset + entry.length > len(data):
            raise FormatError(
                f"Record of kind 0x{entry.kind:02X} spans [0x{entry.offset:X}, "
                f"0x{entry.offset + entry.length:X}) outside the {len(data)}-byte container"
            )
        return data[entry.offset:entry.offset + entry.length]

    def _read_property_record(self, ir: Dict[str, Any], entry: RecordEntry, content: bytes):
        """Decode a Camera/Palette/PiP record; a malformed record is logged and skipped."""
        category = record_kind_name(entry.kind)
        try:
            decoded = decode_properties(content, get_property_table(entry.kind), category)
            duplicates = [p.name for p in decoded if p.name in ir["properties"]]
            if duplicates:
                raise FormatError(f"Duplicate properties: {', '.join(duplicates)}")
            palette = self._read_palette(content) if entry.kind == RECORD_KIND_PALETTE else None
        except FormatError as e:
            logger.warning("Skipping %s record at 0x%X: %s", category, entry.offset, e)
            return
        for prop in decoded:
            ir["properties"][prop.name] = prop
        if palette is not None:
            ir["palette"] = palette

    def _read_palette(self, content: bytes) -> tuple:
        """Read the inline YCbCr color table of a Palette record."""
        count = _read_int(content, PALETTE_COLORS, "i", PROPERTY_BYTE_ORDER)
        end = PALETTE_DATA + max(0, count) * PALETTE_ENTRY_LENGTH
        if count < 0 or end > len(content):
            raise FormatError(
                f"Palette of {count} colors does not fit in {len(content)} bytes of record content"
            )
        table = content[PALETTE_DATA:end]
        return tuple(
            (table[n], table[n + 1], table[n + 2])
            for n in range(0, len(table), PALETTE_ENTRY_LENGTH)
        )

    def _read_raw(self, ir: Dict[str, Any], entry: RecordEntry, content: bytes):
        """Read raw counts from a Raw record, normalized to native uint16."""
        if len(content) < RAW_DATA:
            raise FormatError(
                f"Raw record is {len(content)} bytes, shorter than its {RAW_DATA}-byte header"
            )
        payload = content[RAW_DATA:]
        if entry.subtype == RAW_SUBTYPE_PNG:
            width, height, raw = self._decode_png(payload)
        elif entry.subtype in RAW_BYTE_ORDERS:
            order = RAW_BYTE_ORDERS[entry.subtype]
            width = _read_int(content, RAW_WIDTH, "H", order)
            height = _read_int(content, RAW_HEIGHT, "H", order)
            usable = len(payload) - len(payload) % 2
            raw = np.frombuffer(payload[:usable], dtype=np.dtype(order + "u2")).astype(np.uint16)
        else:
            raise UnsupportedSubtypeError(
                f"Raw record subtype 0x{entry.subtype:02X} is not supported "
                f"(expected big-endian, little-endian or PNG).",
                subtype=entry.subtype,
            )
        logger.debug("Raw record: %dx%d, %d samples", width, height, raw.size)
        ir["width"], ir["height"], ir["raw_values"] = width, height, raw

    def _decode_png(self, payload: bytes) -> tuple:
        """Decode a 16-bit grayscale PNG payload; samples are stored byte-swapped."""
        try:
            with Image.open(io.BytesIO(payload)) as png:
                width, height = png.size
                pixels = np.asarray(png, dtype=np.uint16).reshape(-1)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise FormatError(f"Cannot decode PNG raw payload: {e}") from e
        return width, height, pixels.byteswap()
