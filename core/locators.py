# core/locators.py

from __future__ import annotations

from core.text import DelimiterNotFoundError, Span


def locate_labeled_block(
    span: Span,
    label: str,
    open_char: str = "{",
    close_char: str = "}",
) -> Span:
    """
    Find the balanced block that follows label, e.g. `ultron = { ... }`.

    The returned span starts right after the label and ends on the
    closing delimiter (inclusive).
    """
    block = span.find(label).matching_delimiters(open_char, close_char)
    if block is None:
        raise DelimiterNotFoundError(open_char + close_char)
    return block


def locate_quoted_value(span: Span, label: str, quote_char: str = '"') -> Span:
    """Find the value inside the first pair of quotes after label, quotes excluded."""
    value = span.find(label).inner_delimiter(quote_char)
    if value is None:
        raise DelimiterNotFoundError(quote_char * 2)
    return value
