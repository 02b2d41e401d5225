"""
flir_thermal_reader - read FLIR radiometric JPEG / FFF files

Decodes the FFF container embedded in FLIR radiometric JPEGs into raw sensor
counts and camera properties, converts counts to temperatures and renders
false-color images.

Main usage:
    from flir_thermal_reader import read_jpg, Toolkit

    image = read_jpg("IR_0001.jpg")
    toolkit = Toolkit(image)
    temperatures = toolkit.temperatures()
    print(f"Max temperature: {temperatures.max():.2f}°C")
"""

__version__ = "0.1.0"

from .errors import (
    FormatError,
    InvalidHeaderError,
    MissingPropertyError,
    NoThermalDataError,
    UnsupportedSubtypeError,
)
from .models import DecodedProperty, Header, RecordEntry, ThermalImage
from .parsers import FFFParser
from .radiometry import CalibrationParameters, raw_to_temperature, temperature_to_raw
from .reader import FlirReader, extract_fff_from_jpeg, read_fff, read_jpg
from .rendering import Stats, Toolkit, analyze

__all__ = [
    "read_jpg",
    "read_fff",
    "extract_fff_from_jpeg",
    "FlirReader",
    "FFFParser",
    "ThermalImage",
    "DecodedProperty",
    "Header",
    "RecordEntry",
    "CalibrationParameters",
    "raw_to_temperature",
    "temperature_to_raw",
    "Stats",
    "Toolkit",
    "analyze",
    "FormatError",
    "InvalidHeaderError",
    "MissingPropertyError",
    "NoThermalDataError",
    "UnsupportedSubtypeError",
]
