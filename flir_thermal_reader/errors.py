"""Exceptions raised while reading FFF containers and converting their data."""

from typing import Iterable, Optional


class FormatError(ValueError):
    """Raised when the container bytes do not match the expected layout."""


class InvalidHeaderError(FormatError):
    """Raised when the container header (magic) is missing or wrong."""


class NoThermalDataError(FormatError):
    """Raised when a JPEG carries no FLIR APP1 segments."""


class UnsupportedSubtypeError(FormatError):
    """Raised when a Raw record declares a subtype this library cannot decode."""

    def __init__(self, message: str, subtype: Optional[int] = None):
        self.subtype = subtype
        super().__init__(message)


class MissingPropertyError(KeyError):
    """Raised when calibration properties needed for a conversion are absent."""

    def __init__(self, names: Iterable[str]):
        self.names = tuple(names)
        super().__init__(f"Missing calibration properties: {', '.join(self.names)}")

    def __str__(self):
        return self.args[0]
