# core/flake.py
"""
Swap the pinned `rev` of one input in a flake.nix without parsing Nix.

The input block is found by its `<name> = ` label and balanced braces,
then the rev by its `rev = ` label and the first pair of quotes inside
that block. The new rev must be the same length as the old one.
"""

from __future__ import annotations

import logging

from core.locators import locate_labeled_block, locate_quoted_value
from core.text import (
    KeyphraseNotFoundError,
    ReplaceLengthMismatchError,
    Span,
    SpanError,
)

logger = logging.getLogger(__name__)

DEFAULT_INPUT = "ultron"
REV_LABEL = "rev = "


class RevUpdateError(Exception):
    """Base class for rev update failures."""


class EmptyDocumentError(RevUpdateError):
    def __init__(self):
        super().__init__("flake contents are empty")


class RevNotFoundError(RevUpdateError):
    def __init__(self, input_name: str, keyphrase: str):
        self.input_name = input_name
        self.keyphrase = keyphrase
        super().__init__(
            f"unable to find '{keyphrase.strip()}' for the '{input_name}' input"
        )


class BadRootError(RevUpdateError):
    def __init__(self, input_name: str):
        self.input_name = input_name
        super().__init__(f"the '{input_name}' input block is not a balanced {{ ... }} block")


class RevExtractFailedError(RevUpdateError):
    def __init__(self, input_name: str):
        self.input_name = input_name
        super().__init__(f"failed to extract a quoted rev from the '{input_name}' input")


class ReplaceFailedError(RevUpdateError):
    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            f"unable to replace rev: expected a value of length {expected}, found {found}"
        )


def _block_label(input_name: str) -> str:
    return f"{input_name} = "


def locate_input_block(root: Span, input_name: str = DEFAULT_INPUT) -> Span:
    """Get the `<input_name> = { ... }` block span."""
    label = _block_label(input_name)
    try:
        return locate_labeled_block(root, label, "{", "}")
    except KeyphraseNotFoundError as e:
        raise RevNotFoundError(input_name, label) from e
    except SpanError as e:
        raise BadRootError(input_name) from e


def locate_rev(block: Span, input_name: str = DEFAULT_INPUT) -> Span:
    """Get the span of the rev value (without quotes) inside an input block."""
    try:
        return locate_quoted_value(block, REV_LABEL, '"')
    except KeyphraseNotFoundError as e:
        raise RevNotFoundError(input_name, REV_LABEL) from e
    except SpanError as e:
        raise RevExtractFailedError(input_name) from e


def _rev_span(document_text: str, input_name: str) -> Span:
    if not document_text:
        raise EmptyDocumentError()
    block = locate_input_block(Span.from_text(document_text), input_name)
    return locate_rev(block, input_name)


def current_rev(document_text: str, input_name: str = DEFAULT_INPUT) -> str:
    return _rev_span(document_text, input_name).as_str()


def update_rev(document_text: str, new_rev: str, input_name: str = DEFAULT_INPUT) -> str:
    """
    Return a copy of document_text with the input's rev swapped for new_rev.

    Raises a RevUpdateError subclass describing the first step that failed.
    The input text is never modified.
    """
    rev_span = _rev_span(document_text, input_name)
    try:
        updated = rev_span.replace(new_rev)
    except ReplaceLengthMismatchError as e:
        raise ReplaceFailedError(e.expected, e.found) from e

    logger.debug(
        "Replaced %s rev %s -> %s at [%d:%d]",
        input_name,
        rev_span.as_str(),
        new_rev,
        rev_span.start,
        rev_span.end,
    )
    return updated
