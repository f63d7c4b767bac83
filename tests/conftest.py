import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import pagelist_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from pagelist_toolkit.backends.memory import MemoryDocument  # noqa: E402


@pytest.fixture
def make_doc():
    """Factory for memory documents with one page per content label."""
    def _create(*labels, name="host", config=None):
        doc = MemoryDocument(name, config=config)
        for label in labels:
            doc.new_page(label)
        return doc
    return _create


@pytest.fixture
def abcde(make_doc):
    """Host document with pages A-E."""
    return make_doc("A", "B", "C", "D", "E")


@pytest.fixture
def foreign(make_doc):
    """Second document with pages X-Z."""
    return make_doc("X", "Y", "Z", name="foreign")
