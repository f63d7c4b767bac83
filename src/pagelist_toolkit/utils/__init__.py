"""Rendering helpers for PyMuPDF-backed pages."""
