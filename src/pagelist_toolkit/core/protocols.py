"""
Module: core.protocols

Purpose:
    Structural interfaces for the document collaborator. The page list
    only talks to documents and pages through these protocols and never
    knows how pages are stored, encoded, or written out.

Key Classes:
    - PageHandle: Opaque reference to a page-shaped object
    - Document: Owner of an ordered page collection

Key Functions:
    - require_page(): Capability check raising NotAPage

Dependencies:
    - typing.Protocol (std)

Used By:
    - core.pagelist: All page list operations
    - backends.memory, backends.pymupdf: Concrete collaborators
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, runtime_checkable

from .exceptions import NotAPage


@runtime_checkable
class PageHandle(Protocol):
    """
    Reference to an object inside some document's object graph.

    Handles are hashable and compare equal iff they denote the same
    underlying object (identity, not value).
    """

    def is_page(self) -> bool:
        """Return True if the referenced object is page-shaped."""
        ...

    def owning_document(self) -> Optional["Document"]:
        """Return the document whose object graph holds this object."""
        ...


@runtime_checkable
class Document(Protocol):
    """
    Container owning an ordered page collection.

    ``all_pages()`` is authoritative; the page list re-reads it on
    every call and never caches the result.
    """

    def all_pages(self) -> List[PageHandle]:
        ...

    def add_page(self, page: PageHandle, at_front: bool = False) -> None:
        """Add page at the head (at_front=True) or tail of the collection."""
        ...

    def add_page_before(
        self,
        page: PageHandle,
        at_front: bool,
        reference_page: PageHandle,
    ) -> None:
        """Add page immediately before (at_front=True) or after reference_page."""
        ...

    def remove_page(self, page: PageHandle) -> None:
        ...

    def duplicate(self, page: PageHandle) -> PageHandle:
        """
        Return a structural copy of page owned by this document, not yet
        in the page tree. page may belong to this or another document.
        """
        ...


def require_page(obj: Any) -> PageHandle:
    """
    Check that obj is a page handle whose object is a page.

    Args:
        obj: Any object offered for insertion or assignment.

    Returns:
        The same object, typed as a PageHandle.

    Raises:
        NotAPage: If obj is not a page handle, or refers to a non-page object.
    """
    if not isinstance(obj, PageHandle):
        raise NotAPage(f"only pages can be inserted, not {type(obj).__name__}")
    if not obj.is_page():
        raise NotAPage("only pages can be assigned to a page list")
    return obj
