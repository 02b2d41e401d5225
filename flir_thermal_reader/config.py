"""
Configuration settings for the reader and command-line renderer.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Union

from .palettes import PALETTES


def _env(name: str, default: str):
    return field(default_factory=lambda: os.getenv(name, default))


def _color(name: str, value: Union[str, int]) -> int:
    if isinstance(value, int):
        return value & 0xFFFFFFFF
    try:
        return int(value, 16) & 0xFFFFFFFF
    except ValueError:
        raise ValueError(f"{name} must be a hex ARGB color, got {value!r}") from None


@dataclass
class Settings:
    """Settings loaded from environment variables when instantiated."""

    # Logging
    log_level: str = _env("FLIR_READER_LOG_LEVEL", "WARNING")

    # Rendering: "embedded" uses the palette stored in the file
    palette: str = _env("FLIR_READER_PALETTE", "embedded")
    over_color: Union[str, int] = _env("FLIR_READER_OVER_COLOR", "0x00000000")
    under_color: Union[str, int] = _env("FLIR_READER_UNDER_COLOR", "0x00000000")

    # Temperature unit for reports: C or F
    unit: str = _env("FLIR_READER_UNIT", "C")

    def __post_init__(self) -> None:
        """Normalize and validate configuration after initialization."""
        self.log_level = self.log_level.upper()
        self.palette = self.palette.lower()
        self.unit = self.unit.upper()
        self.over_color = _color("Over color", self.over_color)
        self.under_color = _color("Under color", self.under_color)

        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        if self.palette != "embedded" and self.palette not in PALETTES:
            raise ValueError(
                f"Unknown palette: {self.palette} "
                f"(choose embedded, {', '.join(PALETTES)})"
            )
        if self.unit not in ("C", "F"):
            raise ValueError(f"Temperature unit must be C or F, got {self.unit}")

    @property
    def fahrenheit(self) -> bool:
        return self.unit == "F"
