"""Read FLIR radiometric JPEGs and bare FFF containers into ThermalImage objects."""

import io
import logging
from pathlib import Path
from typing import List, Union

from PIL import Image

from .errors import NoThermalDataError
from .format_catalog import APP1_CHUNK_INDEX, APP1_HEADER_LENGTH, APP1_SIGNATURE
from .models import ThermalImage
from .parsers import FFFParser

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, bytearray]

JPEG_SUFFIXES = (".jpg", ".jpeg")
FFF_SUFFIXES = (".fff",)


def _load(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_bytes()


def extract_fff_from_jpeg(source: Source) -> bytes:
    """Join the FFF chunks carried in a JPEG's FLIR APP1 segments, in chunk order."""
    with Image.open(io.BytesIO(_load(source))) as jpg:
        segments = [
            payload for marker, payload in getattr(jpg, "applist", [])
            if marker == "APP1" and payload[:len(APP1_SIGNATURE)] == APP1_SIGNATURE
        ]
    if not segments:
        raise NoThermalDataError("No thermal data present in file.")
    segments.sort(key=lambda s: s[APP1_CHUNK_INDEX] if len(s) > APP1_CHUNK_INDEX else 0)
    logger.debug("Found %d FLIR APP1 segments", len(segments))
    return b"".join(s[APP1_HEADER_LENGTH:] for s in segments)


def read_fff(source: Source) -> ThermalImage:
    """Decode a bare FFF container from a path or bytes."""
    return FFFParser().parse(_load(source))


def read_jpg(source: Source) -> ThermalImage:
    """Decode the FFF container embedded in a radiometric JPEG."""
    return FFFParser().parse(extract_fff_from_jpeg(source))


class FlirReader:
    """Read radiometric JPEGs (.jpg) and FFF containers (.fff)."""

    def __init__(self):
        self.parser = FFFParser()

    def read_file(self, file_path: Union[str, Path]) -> ThermalImage:
        """Read a file, choosing the decoder from its extension."""
        file_path = Path(file_path)
        file_extension = file_path.suffix.lower()
        if file_extension in JPEG_SUFFIXES:
            return self.parser.parse(extract_fff_from_jpeg(file_path))
        elif file_extension in FFF_SUFFIXES:
            return self.parser.parse(_load(file_path))
        raise ValueError(f"Unsupported file format: {file_extension}")

    def read_directory(self, directory_path: Union[str, Path], recursive: bool = False) -> List[ThermalImage]:
        """Return images for every readable .jpg/.fff in directory; unreadable files are logged."""
        directory_path = Path(directory_path)
        if not directory_path.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory_path}")
        out = []
        pattern = "**/*" if recursive else "*"
        for file_path in sorted(directory_path.glob(pattern)):
            if file_path.suffix.lower() in self.get_supported_formats():
                try:
                    out.append(self.read_file(file_path))
                except (OSError, ValueError) as e:
                    logger.warning("Skipping %s: %s", file_path, e)
        return out

    def get_supported_formats(self) -> List[str]:
        return list(JPEG_SUFFIXES + FFF_SUFFIXES)

    def validate_file(self, file_path: Union[str, Path]) -> bool:
        """Return True if file can be read without error."""
        try:
            self.read_file(file_path)
            return True
        except (OSError, ValueError):
            return False
