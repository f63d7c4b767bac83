"""
Module: backends.memory

Purpose:
    Pure-Python document collaborator. Objects live in a per-document
    object store and handles refer back to their owner weakly, so a
    page borrowed into another document only stays readable while its
    owner is alive. This mirrors lazy foreign fetch in real PDF object
    graphs and is what the page list's ownership registry protects.

Key Classes:
    - MemoryDocument: Object store plus ordered page tree
    - MemoryObject: Handle to one object in a MemoryDocument

Dependencies:
    - weakref (std): Non-owning back-reference from handle to document
    - copy (std): Structural duplication

Used By:
    - tests: Reference collaborator for all page list behaviour
"""

from __future__ import annotations

import copy
import itertools
import logging
import weakref
from typing import Any, Dict, List, Optional, Sequence

from pagelist_toolkit.core.config import PageListConfig
from pagelist_toolkit.core.exceptions import DanglingPageError, DocumentError
from pagelist_toolkit.core.pagelist import PageList

logger = logging.getLogger(__name__)

US_LETTER = (0, 0, 612, 792)


class MemoryObject:
    """
    Handle to an object inside a MemoryDocument.

    Equality is identity: each document hands out exactly one handle per
    object id. Content is fetched from the owning document on every read.

    Attributes:
        objid: Object number, unique within the owning document
    """

    __slots__ = ("objid", "_owner", "__weakref__")

    def __init__(self, owner: "MemoryDocument", objid: int) -> None:
        self.objid = objid
        self._owner = weakref.ref(owner)

    def __repr__(self) -> str:
        owner = self._owner()
        name = owner.name if owner is not None else "<freed>"
        return f"<MemoryObject {name}:{self.objid}>"

    def owning_document(self) -> Optional["MemoryDocument"]:
        return self._owner()

    def is_page(self) -> bool:
        return self.content.get("/Type") == "/Page"

    @property
    def content(self) -> Dict[str, Any]:
        """
        The object's dictionary, read from the owning document.

        Raises:
            DanglingPageError: If the owning document has been freed.
        """
        owner = self._owner()
        if owner is None:
            raise DanglingPageError(
                f"object {self.objid} refers to a document that no longer exists"
            )
        return owner._objects[self.objid]


class MemoryDocument:
    """
    In-memory document with an ordered page tree.

    Example:
        >>> doc = MemoryDocument("a")
        >>> first = doc.new_page("A")
        >>> doc.new_page("B")
        >>> [p.content["/Contents"] for p in doc.pages]
        ['A', 'B']
    """

    def __init__(self, name: str = "memory", config: Optional[PageListConfig] = None) -> None:
        self.name = name
        self._config = config
        self._objects: Dict[int, Dict[str, Any]] = {}
        self._page_tree: List[MemoryObject] = []
        self._objids = itertools.count(1)

    def __repr__(self) -> str:
        return f"<MemoryDocument {self.name!r} pages={len(self._page_tree)}>"

    @property
    def pages(self) -> PageList:
        return PageList(self, self._config)

    # ─────────────────────────────────────────────────────────────────────────
    # Object creation
    # ─────────────────────────────────────────────────────────────────────────

    def _make(self, content: Dict[str, Any]) -> MemoryObject:
        objid = next(self._objids)
        self._objects[objid] = content
        return MemoryObject(self, objid)

    def new_object(self, type_name: str = "/Annot", **extra: Any) -> MemoryObject:
        """Create a detached object that is not a page."""
        return self._make({"/Type": type_name, **extra})

    def new_page(
        self,
        contents: str = "",
        *,
        mediabox: Sequence[float] = US_LETTER,
        append: bool = True,
    ) -> MemoryObject:
        """
        Create a page object, appended to the page tree unless append=False.

        Args:
            contents: Page content, used to tell pages apart.
            mediabox: Page bounds in points.
            append: Whether to add the page to the page tree.

        Returns:
            Handle to the new page.
        """
        page = self._make({"/Type": "/Page", "/MediaBox": list(mediabox), "/Contents": contents})
        if append:
            self._page_tree.append(page)
        return page

    # ─────────────────────────────────────────────────────────────────────────
    # Document collaborator interface
    # ─────────────────────────────────────────────────────────────────────────

    def all_pages(self) -> List[MemoryObject]:
        return list(self._page_tree)

    def add_page(self, page: MemoryObject, at_front: bool = False) -> None:
        self._check_insertable(page)
        if at_front:
            self._page_tree.insert(0, page)
        else:
            self._page_tree.append(page)

    def add_page_before(
        self,
        page: MemoryObject,
        at_front: bool,
        reference_page: MemoryObject,
    ) -> None:
        self._check_insertable(page)
        position = self._position(reference_page)
        self._page_tree.insert(position if at_front else position + 1, page)

    def remove_page(self, page: MemoryObject) -> None:
        del self._page_tree[self._position(page)]

    def duplicate(self, page: MemoryObject) -> MemoryObject:
        """Copy page's content into a fresh object owned by this document."""
        duplicate = self._make(copy.deepcopy(page.content))
        logger.debug(f"{self.name}: duplicated {page!r} as {duplicate!r}")
        return duplicate

    def snapshot(self) -> List[Dict[str, Any]]:
        """
        Read every page's content in order, as a writer would.

        Borrowed pages are read from their owning documents.

        Raises:
            DanglingPageError: If a borrowed page's owner has been freed.
        """
        return [copy.deepcopy(page.content) for page in self._page_tree]

    def _position(self, page: MemoryObject) -> int:
        for position, candidate in enumerate(self._page_tree):
            if candidate is page:
                return position
        raise DocumentError(f"{page!r} is not in the page tree of {self.name!r}")

    def _check_insertable(self, page: MemoryObject) -> None:
        if not page.is_page():
            raise DocumentError(f"{page!r} is not a page object")
        if any(candidate is page for candidate in self._page_tree):
            raise DocumentError(f"{page!r} is already in the page tree of {self.name!r}")
