"""Domain exceptions raised while loading and rendering a site."""

from __future__ import annotations

from pathlib import Path


class ContentError(Exception):
    """A content or data file could not be parsed or failed validation."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class EmptySequenceError(ValueError):
    """Raised when a random pick is requested from an empty sequence."""


class OutputConflictError(Exception):
    """Two pages resolved to the same output file."""

    def __init__(self, output: Path, first: Path, second: Path) -> None:
        super().__init__(f"{first} and {second} both write {output}")
        self.output = output
        self.sources = (first, second)


class InvalidDateError(ValueError):
    """A template asked to format a value that is not a date."""


class ImageError(ValueError):
    """The image shortcode could not process its source."""

    def __init__(self, src: Path, message: str) -> None:
        super().__init__(f"{src}: {message}")
        self.src = src
        self.message = message
