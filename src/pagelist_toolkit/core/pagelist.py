"""
Module: core.pagelist

Purpose:
    Mutable, list-like view over the ordered pages of a document.
    Supports random access, simple and extended slice assignment,
    cross-document page transplantation and iteration, while keeping
    the document's object graph consistent.

Key Classes:
    - PageList: Sequence view bound to one host document
    - PageCursor: Single-use iteration state over a PageList

Dependencies:
    - core.protocols: Document / PageHandle collaborator interface
    - core.slicing: Slice resolution
    - core.ownership: Keep-alive for borrowed foreign pages

Used By:
    - backends.memory.MemoryDocument.pages
    - backends.pymupdf.FitzDocument.pages
    - cli: All page commands

Design Notes:
    The list holds no page state. Every call re-reads the host's page
    collection, so len() can never drift from the document.

    The document only offers "insert before a reference page" and
    "remove", so replacement is insert-then-delete and slice assignment
    is insert-all-then-delete-all. Composite operations validate their
    whole input before the first mutation, but are not atomic: a
    collaborator failure part way through leaves the intermediate state.
"""

from __future__ import annotations

import logging
import operator
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence, Union

from .config import PageListConfig
from .exceptions import ConcurrentModification, LengthMismatch, NoSuchPage
from .ownership import OwnershipRegistry, registry_for
from .protocols import Document, PageHandle, require_page
from .slicing import resolve_slice

logger = logging.getLogger(__name__)


def _as_index(key: Any) -> int:
    try:
        return operator.index(key)
    except TypeError:
        raise TypeError(
            f"page indices must be integers or slices, not {type(key).__name__}"
        ) from None


class _Prepared(NamedTuple):
    """A page ready for placement, and the document it is borrowed from."""

    page: PageHandle
    borrowed_from: Optional[Any]


def _normalize(index: int, count: int, *, allow_end: bool = False) -> int:
    """Offset a negative index once by count and bounds-check it."""
    position = index + count if index < 0 else index
    upper = count + 1 if allow_end else count
    if not 0 <= position < upper:
        raise NoSuchPage(
            f"accessing nonexistent page index {index} (document has {count} pages)"
        )
    return position


class PageList:
    """
    List-like view over a host document's pages.

    Pages that already belong to the host are duplicated on insertion,
    since a page object may not appear twice in one document. Pages
    from another document are borrowed by reference and the other
    document is kept alive through the host's OwnershipRegistry.

    Attributes:
        document: Host document this list is bound to
        registry: Keep-alive registry shared by all lists over the host

    Example:
        >>> pages = PageList(doc)
        >>> len(pages)
        3
        >>> pages.append(other_doc.pages[0])
        >>> pages[1:3] = [pages[0]]
        >>> pages.reverse()
    """

    def __init__(self, document: Document, config: Optional[PageListConfig] = None) -> None:
        self._document = document
        policy = config.release_policy if config is not None else None
        self._registry = registry_for(document, policy)

    @property
    def document(self) -> Document:
        return self._document

    @property
    def registry(self) -> OwnershipRegistry:
        return self._registry

    def __repr__(self) -> str:
        return f"<PageList len={len(self)}>"

    # ─────────────────────────────────────────────────────────────────────────
    # Random access
    # ─────────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._document.all_pages())

    def __getitem__(self, key: Union[int, slice]) -> Union[PageHandle, List[PageHandle]]:
        if isinstance(key, slice):
            return self._get_pages(key)
        return self._get_page(_as_index(key))

    def p(self, ordinal: int) -> PageHandle:
        """
        Look up a page by 1-based ordinal; .p(1) is the first page.

        Raises:
            NoSuchPage: If ordinal is outside [1, len(self)].
        """
        ordinal = _as_index(ordinal)
        if ordinal == 0:
            raise NoSuchPage("can't access page 0 in 1-based indexing")
        if ordinal < 0:
            raise NoSuchPage(f"page ordinals start at 1, not {ordinal}")
        return self._get_page(ordinal - 1)

    def index(self, page: Any) -> int:
        """
        Return the position of page in the host.

        Raises:
            ValueError: If page is not in the host's page collection.
        """
        for position, candidate in enumerate(self._document.all_pages()):
            if candidate == page:
                return position
        raise ValueError("page is not in this page list")

    def __contains__(self, page: Any) -> bool:
        try:
            self.index(page)
        except ValueError:
            return False
        return True

    def _get_page(self, index: int) -> PageHandle:
        pages = self._document.all_pages()
        return pages[_normalize(index, len(pages))]

    def _get_pages(self, s: slice) -> List[PageHandle]:
        pages = self._document.all_pages()
        resolved = resolve_slice(s, len(pages))
        return [pages[i] for i in resolved.indices()]

    # ─────────────────────────────────────────────────────────────────────────
    # Assignment
    # ─────────────────────────────────────────────────────────────────────────

    def __setitem__(self, key: Union[int, slice], value: Any) -> None:
        if isinstance(key, slice):
            self._set_pages(key, value)
        else:
            self._set_page(_as_index(key), value)

    def _set_page(self, index: int, page: Any) -> None:
        page = require_page(page)
        # Validate before inserting so an out of range index never appends
        index = _normalize(index, len(self))
        self._replace(index, self._prepare([page])[0])

    def _replace(self, index: int, prepared: _Prepared) -> None:
        pages = self._place(index, prepared)
        if index + 1 < len(pages):
            self._remove(pages[index + 1])

    def _set_pages(self, s: slice, source: Iterable[Any]) -> None:
        resolved = resolve_slice(s, len(self))
        pages = [require_page(page) for page in source]

        if resolved.is_extended:
            if len(pages) != resolved.slicelength:
                raise LengthMismatch(len(pages), resolved.slicelength)
            for position, prepared in zip(resolved.indices(), self._prepare(pages)):
                self._replace(position, prepared)
            return

        # Insert everything first so no page still needed is removed early
        current = None
        for offset, prepared in enumerate(self._prepare(pages)):
            current = self._place(resolved.start + offset, prepared, current)
        if current is None:
            current = self._document.all_pages()
        delete_from = resolved.start + len(pages)
        for page in current[delete_from:delete_from + resolved.slicelength]:
            self._remove(page)

    # ─────────────────────────────────────────────────────────────────────────
    # Deletion and insertion
    # ─────────────────────────────────────────────────────────────────────────

    def __delitem__(self, key: Union[int, slice]) -> None:
        if isinstance(key, slice):
            for page in self._get_pages(key):
                self._remove(page)
        else:
            self._delete_page(_as_index(key))

    def remove(self, *, p: int) -> None:
        """Delete the page at 1-based ordinal p."""
        page = self.p(p)
        self._remove(page)

    def _delete_page(self, index: int) -> None:
        self._remove(self._get_page(index))

    def _remove(self, page: PageHandle) -> None:
        self._document.remove_page(page)
        if self._registry.release(page):
            logger.debug(f"Removed borrowed page {page!r}")
        else:
            logger.debug(f"Removed page {page!r}")

    def insert(self, index: int, page: Any) -> None:
        """
        Insert page before position index (index == len(self) appends).

        Raises:
            NotAPage: If page is not a page handle.
            NoSuchPage: If index is outside [-len(self), len(self)].
        """
        page = require_page(page)
        position = _normalize(_as_index(index), len(self), allow_end=True)
        self._insert_page(position, page)

    def _insert_page(self, index: int, page: PageHandle) -> None:
        self._place(index, self._prepare([page])[0])

    def _prepare(self, pages: Sequence[PageHandle]) -> List[_Prepared]:
        """
        Make every required duplicate before the page tree is touched.

        A page already in the host, or repeated within pages, is
        duplicated since a page object may appear only once per
        document. Any other page is borrowed: its content stays with
        the owner and is fetched when the host is written.
        """
        host = self._document
        resident = set(host.all_pages())
        prepared = []
        for page in pages:
            owner = page.owning_document()
            if owner is host or page in resident:
                duplicate = host.duplicate(page)
                logger.debug(f"Duplicated {page!r} as {duplicate!r}")
                prepared.append(_Prepared(duplicate, None))
            else:
                prepared.append(_Prepared(page, owner))
            resident.add(page)
        return prepared

    def _place(
        self,
        index: int,
        prepared: _Prepared,
        pages: Optional[List[PageHandle]] = None,
    ) -> List[PageHandle]:
        """
        Put a prepared page at index and return the resulting page collection.

        pages, when given, must be the host's current page collection; it
        saves a re-read when placing several pages in a row.
        """
        host = self._document
        if pages is None:
            pages = host.all_pages()
        if index == len(pages):
            host.add_page(prepared.page, at_front=False)
        else:
            host.add_page_before(prepared.page, True, pages[index])

        placed = host.all_pages()
        if prepared.borrowed_from is not None:
            self._registry.borrow(prepared.borrowed_from, placed[index])
            logger.debug(f"Borrowed page from {prepared.borrowed_from!r} at {index}")
        return placed

    # ─────────────────────────────────────────────────────────────────────────
    # Composite operations
    # ─────────────────────────────────────────────────────────────────────────

    def append(self, page: Any) -> None:
        self._insert_page(len(self), require_page(page))

    def extend(self, source: Union["PageList", Iterable[Any]]) -> None:
        """
        Append every page of source.

        A PageList source is walked by index over the length captured
        before the loop; it may not change while being copied.

        Raises:
            ConcurrentModification: If a PageList source changes length.
            NotAPage: If an iterable source holds a non-page; nothing is
                appended in that case.
        """
        if isinstance(source, PageList):
            source_count = len(source)
            for i in range(source_count):
                if len(source) != source_count:
                    raise ConcurrentModification("source page list modified during iteration")
                self._insert_page(len(self), source._get_page(i))
            return

        pages = [require_page(page) for page in source]
        current = self._document.all_pages()
        for prepared in self._prepare(pages):
            current = self._place(len(current), prepared, current)

    def reverse(self) -> None:
        reversed_pages = self._get_pages(slice(None, None, -1))
        self._set_pages(slice(0, len(self)), reversed_pages)

    def __iter__(self) -> "PageCursor":
        return PageCursor(self)


class PageCursor:
    """
    Iteration state over a PageList: the list plus a position.

    Bounds are re-read from the document on every step. A cursor is
    not restartable once exhausted; iterate the PageList again instead.
    """

    __slots__ = ("pages", "position", "_exhausted")

    def __init__(self, pages: PageList, position: int = 0) -> None:
        self.pages = pages
        self.position = position
        self._exhausted = False

    def __iter__(self) -> "PageCursor":
        return self

    def __next__(self) -> PageHandle:
        if not self._exhausted and self.position < len(self.pages):
            page = self.pages[self.position]
            self.position += 1
            return page
        self._exhausted = True
        raise StopIteration
