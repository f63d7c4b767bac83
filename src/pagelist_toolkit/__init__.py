"""Top-level package for the page list toolkit.

Provides subpackages:
- pagelist_toolkit.core – PageList sequence view, slicing, ownership registry
- pagelist_toolkit.backends – document collaborators (memory, PyMuPDF)
- pagelist_toolkit.utils – page rendering helpers
- pagelist_toolkit.cli – command line front end
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            for line in pyproject.read_text().splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("pagelist-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()

from .core import (  # noqa: E402
    ConcurrentModification,
    LengthMismatch,
    NoSuchPage,
    NotAPage,
    PageList,
    PageListConfig,
    PageListError,
    ReleasePolicy,
)

__all__: list[str] = [
    "__version__",
    "PageList",
    "PageListConfig",
    "ReleasePolicy",
    "PageListError",
    "NoSuchPage",
    "NotAPage",
    "LengthMismatch",
    "ConcurrentModification",
]
