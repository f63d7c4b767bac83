"""
Module: core.exceptions

Purpose:
    Exception hierarchy for page list operations. Every error is raised at
    the point of detection and propagates unmodified to the caller.

Key Classes:
    - PageListError: Base class for all page list failures
    - NoSuchPage: Index or ordinal outside the page range
    - NotAPage: Object failed the page capability check
    - LengthMismatch: Extended slice assigned a sequence of the wrong size
    - ConcurrentModification: Source page list changed during extend()
    - DocumentError: Document collaborator rejected an operation
    - DanglingPageError: Page content requested after its owner was freed

Used By:
    - core.pagelist: Sequence operations
    - backends.memory, backends.pymupdf: Collaborator failures
    - cli: Maps PageListError to exit status 1

Design Notes:
    Each concrete error also derives from the builtin exception Python
    sequences raise for the same condition, so callers written against
    plain lists (``except IndexError``) keep working.
"""

from __future__ import annotations


class PageListError(Exception):
    """Base class for page list failures."""
    pass


class NoSuchPage(PageListError, IndexError):
    """Index (after negative wraparound) or ordinal is out of range."""
    pass


class NotAPage(PageListError, TypeError):
    """Object presented for insertion or assignment is not a page."""
    pass


class LengthMismatch(PageListError, ValueError):
    """
    Extended slice assignment with a source of the wrong length.

    Attributes:
        actual: Number of pages supplied
        expected: Number of positions the extended slice visits
    """

    def __init__(self, actual: int, expected: int) -> None:
        super().__init__(
            f"attempt to assign sequence of length {actual} "
            f"to extended slice of size {expected}"
        )
        self.actual = actual
        self.expected = expected


class ConcurrentModification(PageListError, RuntimeError):
    """Source page list was modified while it was being copied."""
    pass


class DocumentError(PageListError):
    """The document collaborator rejected a page operation."""
    pass


class DanglingPageError(DocumentError):
    """A borrowed page's owning document no longer exists."""
    pass
