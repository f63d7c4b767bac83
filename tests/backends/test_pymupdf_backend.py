"""
Tests for backends.pymupdf using real in-memory PDFs.
"""

import pytest

from pagelist_toolkit.backends.memory import MemoryDocument
from pagelist_toolkit.backends.pymupdf import FitzDocument, FitzPage
from pagelist_toolkit.core.exceptions import DocumentError, NoSuchPage


def _texts(doc):
    return [page.load().get_text("text").strip() for page in doc.pages]


@pytest.fixture
def pdf_factory():
    """Factory for new FitzDocuments with one text page per label."""
    created = []

    def _create(*labels):
        doc = FitzDocument.new()
        for label in labels:
            doc.new_page(text=label)
        created.append(doc)
        return doc

    yield _create
    for doc in created:
        if not doc.raw.is_closed:
            doc.close()


class TestFitzPage:
    """Tests for FitzPage handles."""

    def test_new_page_when_created_then_handle_matches_page_list(self, pdf_factory):
        doc = pdf_factory("A")

        page = doc.new_page(text="B")

        assert doc.pages[-1] == page
        assert page.number == 1
        assert page.owning_document() is doc

    def test_is_page_when_page_xref_then_true(self, pdf_factory):
        doc = pdf_factory("A")

        assert doc.pages[0].is_page()

    def test_is_page_when_catalog_xref_then_false(self, pdf_factory):
        doc = pdf_factory("A")

        assert not FitzPage(doc, doc.raw.pdf_catalog()).is_page()

    def test_handles_when_same_xref_then_equal_and_hashable(self, pdf_factory):
        doc = pdf_factory("A")

        first, second = doc.pages[0], doc.pages[0]

        assert first == second
        assert len({first, second}) == 1


class TestFitzDocumentPageList:
    """Page list operations over PyMuPDF documents."""

    def test_reverse_when_called_then_reverses_pages(self, pdf_factory):
        doc = pdf_factory("A", "B", "C")

        doc.pages.reverse()

        assert _texts(doc) == ["C", "B", "A"]
        assert doc.raw.page_count == 3

    def test_insert_when_same_document_then_distinct_copy(self, pdf_factory):
        # Arrange
        doc = pdf_factory("A", "B", "C")
        original = doc.pages[2]

        # Act
        doc.pages.insert(0, original)

        # Assert
        assert _texts(doc) == ["C", "A", "B", "C"]
        assert doc.pages[0] != original
        assert doc.raw.page_count == len(doc.pages)

    def test_append_when_same_document_then_copy_at_end(self, pdf_factory):
        doc = pdf_factory("A", "B")

        doc.pages.append(doc.pages[0])

        assert _texts(doc) == ["A", "B", "A"]

    def test_append_when_foreign_then_copied_and_borrow_recorded(self, pdf_factory):
        # Arrange
        host = pdf_factory("A")
        source = pdf_factory("X", "Y")

        # Act
        host.pages.append(source.pages[1])

        # Assert
        assert _texts(host) == ["A", "Y"]
        assert host.pages[-1].owning_document() is host
        assert host.pages.registry.borrowed_count(source) == 1
        assert _texts(source) == ["X", "Y"]

    def test_setitem_when_slice_then_replaces_range(self, pdf_factory):
        host = pdf_factory("A", "B", "C", "D")
        source = pdf_factory("X", "Y", "Z")

        host.pages[1:3] = source.pages[:]

        assert _texts(host) == ["A", "X", "Y", "Z", "D"]

    def test_setitem_when_extended_slice_then_replaces_positions(self, pdf_factory):
        host = pdf_factory("A", "B", "C")
        source = pdf_factory("X", "Y")

        host.pages[::2] = source.pages[:]

        assert _texts(host) == ["X", "B", "Y"]

    def test_delitem_when_foreign_page_deleted_then_released(self, pdf_factory):
        host = pdf_factory("A")
        source = pdf_factory("X")
        host.pages.append(source.pages[0])

        del host.pages[1]

        assert _texts(host) == ["A"]
        assert host.pages.registry.borrowed_count(source) == 0

    def test_delitem_when_out_of_range_then_raises(self, pdf_factory):
        doc = pdf_factory("A")

        with pytest.raises(NoSuchPage):
            del doc.pages[1]

    def test_extend_when_several_sources_then_merges(self, pdf_factory):
        merged = pdf_factory()

        merged.pages.extend(pdf_factory("A", "B").pages)
        merged.pages.extend(pdf_factory("C").pages)

        assert _texts(merged) == ["A", "B", "C"]

    def test_extend_when_foreign_page_repeated_then_copied_twice(self, pdf_factory):
        # Arrange
        host = pdf_factory("A")
        source = pdf_factory("X", "Y")
        page = source.pages[1]

        # Act
        host.pages.extend([page, page])

        # Assert
        assert _texts(host) == ["A", "Y", "Y"]
        assert host.raw.page_count == 3
        assert host.pages[1] != host.pages[2]
        assert _texts(source) == ["X", "Y"]

    def test_setitem_when_slice_repeats_foreign_page_then_replaces_all(self, pdf_factory):
        host = pdf_factory("A", "B")
        source = pdf_factory("X")
        page = source.pages[0]

        host.pages[:] = [page, page]

        assert _texts(host) == ["X", "X"]
        assert host.raw.page_count == 2

    def test_save_when_reopened_then_order_persists(self, pdf_factory, tmp_path):
        doc = pdf_factory("A", "B", "C")
        doc.pages[0:3:2] = [doc.pages[2], doc.pages[0]]
        out = tmp_path / "out.pdf"

        doc.save(out)

        with FitzDocument.open(out) as reopened:
            assert _texts(reopened) == ["C", "B", "A"]


class TestFitzDocumentPrimitives:
    """Tests for the collaborator primitives and file handling."""

    def test_duplicate_when_not_placed_then_hidden_and_dropped_on_save(self, pdf_factory, tmp_path):
        # Arrange
        doc = pdf_factory("A", "B")

        # Act
        doc.duplicate(doc.pages[0])

        # Assert
        assert len(doc.pages) == 2
        assert doc.raw.page_count == 3
        doc.save(tmp_path / "out.pdf")
        assert doc.raw.page_count == 2

    def test_add_page_when_already_placed_then_raises(self, pdf_factory):
        doc = pdf_factory("A")

        with pytest.raises(DocumentError, match="already in the page tree"):
            doc.add_page(doc.pages[0])

    def test_add_page_when_other_backend_then_raises(self, pdf_factory):
        doc = pdf_factory("A")
        memory_page = MemoryDocument().new_page("M")

        with pytest.raises(DocumentError, match="different backend"):
            doc.add_page(memory_page)

    def test_remove_page_when_other_document_then_raises(self, pdf_factory):
        doc = pdf_factory("A")
        other = pdf_factory("B")

        with pytest.raises(DocumentError):
            doc.remove_page(other.pages[0])

    def test_open_when_missing_file_then_raises_document_error(self, tmp_path):
        with pytest.raises(DocumentError, match="cannot open"):
            FitzDocument.open(tmp_path / "missing.pdf")

    def test_context_manager_closes_document(self, pdf_factory):
        doc = pdf_factory("A")

        with doc:
            pass

        assert doc.raw.is_closed
