# core/text.py
"""
Tools for locating and rewriting text without a full parser.

A Span is a window over a backing string. Every operation that moves a
span returns a new one over the same backing string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


class SpanError(Exception):
    """Base class for span failures."""


class OutOfRangeError(SpanError):
    def __init__(self, start: int, end: int, size: int):
        self.start = start
        self.end = end
        self.size = size
        super().__init__(f"bounds [{start}, {end}) are out of range for text of length {size}")


class KeyphraseNotFoundError(SpanError):
    def __init__(self, keyphrase: str):
        self.keyphrase = keyphrase
        super().__init__(f"keyphrase '{keyphrase}' not found in span")


class DelimiterNotFoundError(SpanError):
    def __init__(self, delimiters: str):
        self.delimiters = delimiters
        super().__init__(f"no matching '{delimiters}' delimiters found in span")


class UnbalancedDelimitersError(SpanError):
    def __init__(self, close: str, position: int):
        self.close = close
        self.position = position
        super().__init__(f"unexpected closing '{close}' at offset {position}")


class ReplaceLengthMismatchError(SpanError):
    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            "replacement text length does not match span length: "
            f"expected {expected}, found {found}"
        )


@dataclass(frozen=True)
class Span:
    text: str = field(repr=False)
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.start > self.end or self.end > len(self.text):
            raise OutOfRangeError(self.start, self.end, len(self.text))

    @classmethod
    def from_text(cls, text: str) -> "Span":
        return cls(text, 0, len(text))

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return self.as_str()

    def as_str(self) -> str:
        return self.text[self.start:self.end]

    def slice(self, start_offset: int, end_offset: int) -> "Span":
        """Narrow the window; offsets are relative to this span's start."""
        if start_offset < 0 or end_offset < 0:
            raise OutOfRangeError(
                self.start + start_offset, self.start + end_offset, len(self.text)
            )
        return Span(self.text, self.start + start_offset, self.start + end_offset)

    def find(self, keyphrase: str) -> "Span":
        """
        Fast-forward the start to just past the first occurrence of keyphrase.

        The end is left where it was, so finds can be chained to descend
        into a document without backtracking.
        """
        pos = self.text.find(keyphrase, self.start, self.end)
        if pos < 0:
            raise KeyphraseNotFoundError(keyphrase)
        return Span(self.text, pos + len(keyphrase), self.end)

    def matching_delimiters(self, open_char: str, close_char: str) -> Optional["Span"]:
        """
        Return the span from the window start through the close_char that
        balances the first open_char, or None if the window ends first.

        A close_char seen before any open_char raises UnbalancedDelimitersError.
        """
        depth = 0
        for i in range(self.start, self.end):
            c = self.text[i]
            if c == open_char:
                depth += 1
            elif c == close_char:
                if depth == 0:
                    raise UnbalancedDelimitersError(close_char, i)
                depth -= 1
                if depth == 0:
                    return Span(self.text, self.start, i + 1)
        return None

    def inner_delimiter(self, delimiter: str) -> Optional["Span"]:
        """Return the text strictly between the first two occurrences of delimiter."""
        first = self.text.find(delimiter, self.start, self.end)
        if first < 0:
            return None
        inner_start = first + len(delimiter)
        second = self.text.find(delimiter, inner_start, self.end)
        if second < 0:
            return None
        return Span(self.text, inner_start, second)

    def replace(self, new_text: str) -> str:
        """
        Build a new string with this span's contents swapped for new_text.

        new_text must encode to the same number of UTF-8 bytes as the span,
        so the byte length of the whole document never changes.
        """
        old_bytes = len(self.as_str().encode("utf-8"))
        new_bytes = len(new_text.encode("utf-8"))
        if old_bytes != new_bytes:
            raise ReplaceLengthMismatchError(old_bytes, new_bytes)

        return "".join((self.text[:self.start], new_text, self.text[self.end:]))
