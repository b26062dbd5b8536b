"""
Error types raised by the IMF format engine.

Every error is a ValueError carrying the stage that failed (e.g. "Dimensions",
"Map", "Header") and, where known, the offset into the input.
"""

from __future__ import annotations

__all__ = [
    "IMFError",
    "IOUnavailable",
    "MalformedHeader",
    "GrammarMismatch",
    "CountMismatch",
    "InvalidNumber",
    "UnknownTag",
    "Truncated",
    "OutOfRange",
    "UnsupportedVersion",
    "IncompatibleGrid",
]


class IMFError(ValueError):
    """Base class for all format engine errors."""

    def __init__(self, stage: str, detail: str, position: int | None = None) -> None:
        self.stage = stage
        self.detail = detail
        self.position = position
        message = f"{stage}: {detail}"
        if position is not None:
            message += f" (at offset {position})"
        super().__init__(message)


class IOUnavailable(IMFError):
    """The input could not be read."""


class MalformedHeader(IMFError):
    """Missing or unrecognized version marker, or a bad binary header."""


class GrammarMismatch(IMFError):
    """A required part of a text document was not found."""


class CountMismatch(IMFError):
    """The number of cells does not match width * height."""

    def __init__(
        self,
        stage: str,
        expected: int,
        actual: int,
        detail: str | None = None,
        position: int | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        self.direction = "many" if actual > expected else "few"
        if detail is None:
            detail = f"Too {self.direction} numbers in list (expected {expected}, got {actual})"
        super().__init__(stage, detail, position)


class InvalidNumber(IMFError):
    """A token that should be an integer is not one, or is out of range."""


class UnknownTag(IMFError):
    """A binary cell tag byte is not a known cell variant."""

    def __init__(self, tag: int, position: int) -> None:
        self.tag = tag
        super().__init__("Cell", f"Unknown cell tag {tag}", position)


class Truncated(IMFError):
    """The binary buffer ended before the declared structure did."""

    def __init__(self, stage: str, needed: int, available: int, position: int) -> None:
        self.needed = needed
        self.available = available
        super().__init__(
            stage,
            f"Unexpected end of data (needed {needed} bytes, {available} left)",
            position,
        )


class OutOfRange(IMFError, IndexError):
    """Coordinate, index or layer outside the grid."""


class UnsupportedVersion(IMFError):
    """Serialization was requested for a version with no writer."""


class IncompatibleGrid(IMFError):
    """The grid cannot be represented in the requested dialect."""
