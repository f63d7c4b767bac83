"""
Document collaborators for page lists.

- memory: pure-Python object graph (no dependencies)
- pymupdf: PDF files through PyMuPDF (import ``pagelist_toolkit.backends.pymupdf``)
"""

from .memory import MemoryDocument, MemoryObject

__all__ = ["MemoryDocument", "MemoryObject"]
