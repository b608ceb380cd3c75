"""Exceptions raised by the tile converter."""
from __future__ import annotations


class ConversionError(Exception):
    """Custom exception for conversion errors."""


class SourceError(ConversionError):
    """Raised when the input image cannot be opened or read."""


class FormatOverflowError(ConversionError):
    """Raised when a value does not fit the packed output format."""

    def __init__(self, message: str, value: int, limit: int, location: str = ""):
        super().__init__(message)
        self.value = value
        self.limit = limit
        self.location = location


class TransparencyAliasWarning(RuntimeWarning):
    """Alpha-transparent pixels were mapped to palette 0 without a reserved color."""
