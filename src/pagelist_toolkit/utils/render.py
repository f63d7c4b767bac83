"""
Module: utils.render

Purpose:
    Page rendering and text extraction for PyMuPDF-backed page handles.
    Used to preview pages after rearranging them.

Key Functions:
    - render_page(): Render a page to a grayscale image
    - extract_text(): Extract plain text from a page
    - get_page_dimensions(): Get page dimensions in pixels

Dependencies:
    - fitz (PyMuPDF): PDF rendering
    - PIL.Image: Image handling
    - numpy: Whitespace detection

Used By:
    - cli: preview and info commands
"""

from __future__ import annotations

import logging
from typing import Tuple

import fitz
import numpy as np
from PIL import Image

from pagelist_toolkit.backends.pymupdf import FitzPage

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_DPI = 150
DEFAULT_TRIM_PADDING = 12
TRIM_PERCENTILE = 98  # Percentile for whitespace detection threshold
MIN_WHITE_THRESHOLD = 200
DYNAMIC_TRIM_DIVISOR = 100
MIN_CROP_WIDTH_RATIO = 0.5


def render_page(
    page: FitzPage,
    dpi: int = DEFAULT_DPI,
    *,
    trim_whitespace: bool = False,
    padding: int = DEFAULT_TRIM_PADDING,
) -> Image.Image:
    """
    Render a whole page to a grayscale image.

    Args:
        page: Page handle from a FitzDocument.
        dpi: Resolution for rendering. Defaults to 150.
        trim_whitespace: Whether to trim whitespace margins. Defaults to False.
        padding: Pixels of padding to keep around content. Defaults to 12.

    Returns:
        Grayscale PIL image.

    Raises:
        ValueError: If dpi is not positive.

    Example:
        >>> image = render_page(doc.pages.p(1), dpi=72)
        >>> image.size
        (595, 842)
    """
    if dpi <= 0:
        raise ValueError(f"dpi must be positive: {dpi}")

    matrix = fitz.Matrix(dpi / 72.0, dpi / 72.0)
    pix = page.load().get_pixmap(matrix=matrix, alpha=False, colorspace=fitz.csGRAY)
    image = Image.frombytes("L", (pix.width, pix.height), pix.samples)

    if trim_whitespace:
        image, _ = _trim_whitespace(image, padding=padding)
    return image


def extract_text(page: FitzPage) -> str:
    """
    Extract plain text from a page.

    Returns:
        Extracted text, empty string on error.
    """
    try:
        return page.load().get_text("text") or ""
    except (RuntimeError, ValueError) as e:
        logger.warning(f"Failed to extract text from {page!r}: {e}")
        return ""


def get_page_dimensions(page: FitzPage, dpi: int = DEFAULT_DPI) -> Tuple[int, int]:
    """
    Get page dimensions in pixels at the specified DPI.

    Example:
        >>> get_page_dimensions(page, dpi=72)
        (595, 842)
    """
    rect = page.load().rect
    scale = dpi / 72.0
    return int(rect.width * scale), int(rect.height * scale)


def _trim_whitespace(
    image: Image.Image,
    *,
    padding: int = DEFAULT_TRIM_PADDING,
) -> Tuple[Image.Image, Tuple[int, int]]:
    """
    Crop an image to its non-white content plus padding.

    Returns:
        Tuple of (cropped_image, (left_offset, top_offset)).
    """
    arr = np.array(image)
    if arr.ndim != 2:
        return image, (0, 0)

    thr = max(MIN_WHITE_THRESHOLD, int(np.percentile(arr, TRIM_PERCENTILE)))
    mask = arr < thr
    if not mask.any():
        return image, (0, 0)

    ys, xs = np.where(mask)
    y0, y1 = int(ys.min()), int(ys.max())
    x0, x1 = int(xs.min()), int(xs.max())

    dyn = max(padding, image.width // DYNAMIC_TRIM_DIVISOR)
    left = max(0, x0 - dyn)
    right = min(image.width, x1 + dyn)
    top = max(0, y0 - dyn)
    bottom = min(image.height, y1 + dyn)

    # Keep narrow content at full width
    if right - left < image.width * MIN_CROP_WIDTH_RATIO:
        left = 0
        right = image.width

    return image.crop((left, top, right, bottom)), (left, top)
