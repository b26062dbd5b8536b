"""
Small recursive-descent scanner for the text dialects.

Each rule method tries to match at the current position and returns None
(leaving the position untouched) when it does not apply. `search` runs a rule
from every offset in turn and returns the first match together with where it
started, so callers can report the stage and position of a failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

__all__ = ["Scanner", "Match", "IntToken", "LegendEntry"]

T = TypeVar("T")

_INLINE_SPACE = " \t"


@dataclass(frozen=True)
class Match(Generic[T]):
    """A successful rule match: its value and the span it covered."""

    value: T
    start: int
    end: int


@dataclass(frozen=True)
class IntToken:
    """An integer literal as written, with its offset."""

    text: str
    position: int


@dataclass(frozen=True)
class LegendEntry:
    """One `key(body)` group; the body is decoded by the caller."""

    key: IntToken
    body: str
    body_position: int


class Scanner:
    """Cursor over a flattened text document."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_space(self) -> None:
        while self.peek() and self.peek() in _INLINE_SPACE:
            self.pos += 1

    def literal(self, expected: str, ignore_case: bool = False) -> bool:
        chunk = self.text[self.pos : self.pos + len(expected)]
        if ignore_case:
            matched = chunk.lower() == expected.lower()
        else:
            matched = chunk == expected
        if matched:
            self.pos += len(expected)
        return matched

    def digits(self) -> str | None:
        start = self.pos
        while self.peek().isdigit() and self.peek().isascii():
            self.pos += 1
        if self.pos == start:
            return None
        return self.text[start : self.pos]

    def integer(self, signed: bool = False) -> IntToken | None:
        start = self.pos
        if signed and self.peek() and self.peek() in "+-":
            self.pos += 1
        if self.digits() is None:
            self.pos = start
            return None
        return IntToken(self.text[start : self.pos], start)

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def version_tag(self) -> int | None:
        """`[vN]`, case-insensitive."""
        start = self.pos
        if self.literal("[") and self.literal("v", ignore_case=True):
            number = self.digits()
            if number is not None and self.literal("]"):
                return int(number)
        self.pos = start
        return None

    def dimensions(self) -> tuple[IntToken, IntToken] | None:
        """`width,height` followed by optional spaces and `;` (not consumed)."""
        start = self.pos
        width = self.integer()
        if width is not None and self.literal(","):
            height = self.integer()
            if height is not None:
                after = self.pos
                self.skip_space()
                if self.peek() == ";":
                    self.pos = after
                    return (width, height)
        self.pos = start
        return None

    def legend_entry(self) -> LegendEntry | None:
        """`key(body)` where body runs up to the next `)`."""
        start = self.pos
        key = self.integer()
        if key is not None and self.literal("("):
            body_start = self.pos
            close = self.text.find(")", body_start)
            if close != -1 and "(" not in self.text[body_start:close]:
                self.pos = close + 1
                return LegendEntry(key, self.text[body_start:close], body_start)
        self.pos = start
        return None

    def legend(self) -> list[LegendEntry] | None:
        """One or more consecutive legend entries."""
        entries: list[LegendEntry] = []
        while True:
            entry = self.legend_entry()
            if entry is None:
                break
            entries.append(entry)
        return entries or None

    def int_list(self) -> list[IntToken] | None:
        """`[` signed integers separated by commas, optional trailing comma `]`."""
        start = self.pos
        if not self.literal("["):
            return None
        values: list[IntToken] = []
        while True:
            self.skip_space()
            token = self.integer(signed=True)
            if token is None:
                break
            values.append(token)
            self.skip_space()
            if not self.literal(","):
                break
        self.skip_space()
        if values and self.literal("]"):
            return values
        self.pos = start
        return None

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(self, rule: Callable[[Scanner], T | None]) -> Match[T] | None:
        """Find the first offset from the current position where rule matches."""
        for start in range(self.pos, len(self.text)):
            self.pos = start
            value = rule(self)
            if value is not None:
                return Match(value, start, self.pos)
        self.pos = len(self.text)
        return None
