from __future__ import annotations


class ExtractionError(Exception):
    """Base class for extraction pipeline errors."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class InvalidInputError(ExtractionError):
    """Missing or empty page source or URL; extraction does not start."""


class ParseError(ExtractionError):
    """HTML parsed but a downstream engine failed to produce a value."""


__all__ = [
    "ExtractionError",
    "InvalidInputError",
    "ParseError",
]
