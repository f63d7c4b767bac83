"""
Module: backends.pymupdf

Purpose:
    Document collaborator over a PyMuPDF document, so page lists can
    rearrange, merge and split real PDF files.

Key Classes:
    - FitzDocument: Wrapper implementing the Document protocol
    - FitzPage: Handle to a page object, identified by xref

Dependencies:
    - fitz (PyMuPDF): PDF object graph and page tree

Used By:
    - cli: All file based commands
    - utils.render: Page rendering

Design Notes:
    PyMuPDF copies foreign pages eagerly (insert_pdf), so a page taken
    from another FitzDocument becomes a host object on insertion. The
    page list still records the borrow; here that keep-alive is merely
    conservative.

    PyMuPDF cannot create a page object outside the page tree, so
    duplicate() appends a copy at the tail (fullcopy_page for own pages,
    insert_pdf for foreign ones) and hides it from all_pages() until
    add_page()/add_page_before() moves it into place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Union

import fitz

from pagelist_toolkit.core.config import PageListConfig
from pagelist_toolkit.core.exceptions import DocumentError
from pagelist_toolkit.core.pagelist import PageList

logger = logging.getLogger(__name__)

A4_WIDTH_PT = 595
A4_HEIGHT_PT = 842


@dataclass(frozen=True, eq=True)
class FitzPage:
    """
    Handle to a page object of a FitzDocument.

    Two handles are equal iff they name the same xref in the same
    document. The xref survives moves and deletions of other pages.

    Attributes:
        document: Document holding the object
        xref: PDF object number of the page dictionary
    """

    document: "FitzDocument"
    xref: int

    def __repr__(self) -> str:
        return f"<FitzPage xref={self.xref}>"

    def is_page(self) -> bool:
        try:
            kind = self.document.raw.xref_get_key(self.xref, "Type")
        except (RuntimeError, ValueError):
            return False
        return kind == ("name", "/Page")

    def owning_document(self) -> "FitzDocument":
        return self.document

    @property
    def number(self) -> int:
        """Current 0-based position of this page in its document."""
        return self.document.pages.index(self)

    def load(self) -> fitz.Page:
        """Load the PyMuPDF page object for rendering or text extraction."""
        return self.document.raw[self.document._number(self)]


class FitzDocument:
    """
    Document protocol implementation backed by fitz.Document.

    Example:
        >>> with FitzDocument.open("in.pdf") as doc:
        ...     doc.pages.reverse()
        ...     doc.save("out.pdf")
    """

    def __init__(self, raw: fitz.Document, config: Optional[PageListConfig] = None) -> None:
        self._raw = raw
        self._config = config
        self._staged: Set[int] = set()

    @classmethod
    def open(cls, path: Union[str, Path], config: Optional[PageListConfig] = None) -> "FitzDocument":
        """
        Open a PDF file.

        Raises:
            DocumentError: If the file cannot be opened as a PDF.
        """
        try:
            raw = fitz.open(str(path))
        except (OSError, RuntimeError, ValueError) as e:
            raise DocumentError(f"cannot open {path}: {e}") from e
        if not raw.is_pdf:
            raw.close()
            raise DocumentError(f"{path} is not a PDF document")
        return cls(raw, config)

    @classmethod
    def new(cls, config: Optional[PageListConfig] = None) -> "FitzDocument":
        return cls(fitz.open(), config)

    def __repr__(self) -> str:
        return f"<FitzDocument {self._raw.name or '(new)'}>"

    def __enter__(self) -> "FitzDocument":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def raw(self) -> fitz.Document:
        return self._raw

    @property
    def pages(self) -> PageList:
        return PageList(self, self._config)

    def new_page(
        self,
        width: float = A4_WIDTH_PT,
        height: float = A4_HEIGHT_PT,
        text: Optional[str] = None,
    ) -> FitzPage:
        """Append a blank page, optionally with a line of text at the top left."""
        page = self._raw.new_page(-1, width=width, height=height)
        if text:
            page.insert_text((72, 72), text)
        return FitzPage(self, page.xref)

    def save(self, path: Union[str, Path], *, garbage: int = 3, deflate: bool = True) -> None:
        """Write the document, dropping any duplicate that was never placed."""
        self._discard_staged()
        self._raw.save(str(path), garbage=garbage, deflate=deflate)
        logger.info(f"Saved {len(self._raw)} pages to {path}")

    def close(self) -> None:
        self._raw.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Document collaborator interface
    # ─────────────────────────────────────────────────────────────────────────

    def all_pages(self) -> List[FitzPage]:
        return [FitzPage(self, xref) for xref in self._xrefs() if xref not in self._staged]

    def add_page(self, page: FitzPage, at_front: bool = False) -> None:
        self._place(page, 0 if at_front else -1)

    def add_page_before(self, page: FitzPage, at_front: bool, reference_page: FitzPage) -> None:
        reference = self._number(reference_page)
        self._place(page, reference if at_front else reference + 1)

    def remove_page(self, page: FitzPage) -> None:
        if page.document is not self:
            raise DocumentError(f"{page!r} belongs to another document")
        self._raw.delete_page(self._number(page))

    def duplicate(self, page: FitzPage) -> FitzPage:
        if not isinstance(page, FitzPage):
            raise DocumentError(f"cannot copy {page!r} from a different backend")
        if page.document is self:
            self._raw.fullcopy_page(self._number(page))
        else:
            source = page.document
            number = source._number(page)
            self._raw.insert_pdf(source.raw, from_page=number, to_page=number)
        xref = self._raw.page_xref(self._raw.page_count - 1)
        self._staged.add(xref)
        logger.debug(f"Staged duplicate of {page!r} as xref {xref}")
        return FitzPage(self, xref)

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _xrefs(self) -> List[int]:
        return [self._raw.page_xref(pno) for pno in range(self._raw.page_count)]

    def _number(self, page: FitzPage) -> int:
        """Raw page number of page, staged duplicates included."""
        try:
            return self._xrefs().index(page.xref)
        except ValueError:
            raise DocumentError(f"{page!r} is not in the page tree") from None

    def _place(self, page: FitzPage, target: int) -> None:
        """Put page before raw page number target (-1 or past the end appends)."""
        if not isinstance(page, FitzPage):
            raise DocumentError(f"cannot add {page!r} from a different backend")
        count = self._raw.page_count
        if target >= count:
            target = -1

        if page.document is self:
            if page.xref not in self._staged:
                raise DocumentError(f"{page!r} is already in the page tree")
            number = self._number(page)
            self._staged.discard(page.xref)
            if target == -1:
                if number != count - 1:
                    self._raw.move_page(number, -1)
            elif target != number:
                self._raw.move_page(number, target)
            return

        source = page.document
        number = source._number(page)
        self._raw.insert_pdf(source.raw, from_page=number, to_page=number, start_at=target)

    def _discard_staged(self) -> None:
        for xref in list(self._staged):
            self._raw.delete_page(self._number(FitzPage(self, xref)))
            self._staged.discard(xref)
