"""
Page List Core Package

Sequence semantics over a document's pages, independent of how the
document stores, encodes or writes them. Concrete documents live in
``pagelist_toolkit.backends``.
"""

from .config import PageListConfig
from .exceptions import (
    ConcurrentModification,
    DanglingPageError,
    DocumentError,
    LengthMismatch,
    NoSuchPage,
    NotAPage,
    PageListError,
)
from .ownership import OwnershipRegistry, ReleasePolicy, registry_for
from .pagelist import PageCursor, PageList
from .protocols import Document, PageHandle, require_page
from .slicing import ResolvedSlice, resolve_slice

__all__ = [
    # Sequence
    "PageList",
    "PageCursor",
    # Collaborators
    "Document",
    "PageHandle",
    "require_page",
    # Slicing
    "ResolvedSlice",
    "resolve_slice",
    # Ownership
    "OwnershipRegistry",
    "ReleasePolicy",
    "registry_for",
    # Config
    "PageListConfig",
    # Errors
    "PageListError",
    "NoSuchPage",
    "NotAPage",
    "LengthMismatch",
    "ConcurrentModification",
    "DocumentError",
    "DanglingPageError",
]
