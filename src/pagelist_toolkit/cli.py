"""
Module: cli

Purpose:
    Command line front end for rearranging PDF pages through PageList.

Commands:
    - info FILE: Page count and first text line per page
    - reverse IN OUT: Write IN with its pages in reverse order
    - merge OUT IN [IN ...]: Concatenate the pages of several files
    - select IN OUT SPEC: Keep the pages named by an index or slice (0-based)
    - preview IN PAGE OUT: Render 1-based page PAGE to an image

Used By:
    - ``pagelist`` console script, ``python -m pagelist_toolkit``
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pagelist_toolkit.backends.pymupdf import FitzDocument
from pagelist_toolkit.core.config import PageListConfig
from pagelist_toolkit.core.exceptions import PageListError
from pagelist_toolkit.core.ownership import ReleasePolicy

logger = logging.getLogger(__name__)


def parse_page_spec(text: str) -> Union[int, slice]:
    """
    Parse an index ("3", "-1") or slice ("1:5", "::2", "::-1").

    Raises:
        ValueError: If text is not an integer or slice expression.
    """
    parts = text.strip().split(":")
    if len(parts) == 1:
        return int(parts[0])
    if len(parts) > 3:
        raise ValueError(f"invalid page slice: {text!r}")
    values = [int(part) if part.strip() else None for part in parts]
    return slice(*values)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pagelist", description="Rearrange PDF pages")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--release-policy",
        choices=[p.value for p in ReleasePolicy],
        help="When to release source documents of borrowed pages "
             "(default: $PAGELIST_RELEASE_POLICY or deferred)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Show page count and first line of each page")
    info.add_argument("input", type=Path)

    reverse = sub.add_parser("reverse", help="Reverse page order")
    reverse.add_argument("input", type=Path)
    reverse.add_argument("output", type=Path)

    merge = sub.add_parser("merge", help="Concatenate PDFs")
    merge.add_argument("output", type=Path)
    merge.add_argument("inputs", type=Path, nargs="+")

    select = sub.add_parser("select", help="Keep pages by 0-based index or slice")
    select.add_argument("input", type=Path)
    select.add_argument("output", type=Path)
    select.add_argument("spec", help='Index or slice, e.g. "0", "-1", "1:5", "::2"')

    preview = sub.add_parser("preview", help="Render one page to an image")
    preview.add_argument("input", type=Path)
    preview.add_argument("page", type=int, help="1-based page number")
    preview.add_argument("output", type=Path)
    preview.add_argument("--dpi", type=int, default=150)
    preview.add_argument("--trim", action="store_true", help="Trim whitespace margins")

    return parser


def _cmd_info(args: argparse.Namespace, config: PageListConfig) -> None:
    from pagelist_toolkit.utils.render import extract_text

    with FitzDocument.open(args.input, config) as doc:
        pages = doc.pages
        print(f"{args.input}: {len(pages)} pages")
        for number, page in enumerate(pages, start=1):
            lines = extract_text(page).strip().splitlines()
            print(f"  {number:>4}  {lines[0] if lines else ''}")


def _cmd_reverse(args: argparse.Namespace, config: PageListConfig) -> None:
    with FitzDocument.open(args.input, config) as doc:
        doc.pages.reverse()
        doc.save(args.output)


def _cmd_merge(args: argparse.Namespace, config: PageListConfig) -> None:
    sources: List[FitzDocument] = []
    try:
        with FitzDocument.new(config) as merged:
            for path in args.inputs:
                source = FitzDocument.open(path, config)
                sources.append(source)
                merged.pages.extend(source.pages)
                logger.debug(f"Merged {len(source.pages)} pages from {path}")
            merged.save(args.output)
    finally:
        for source in sources:
            source.close()


def _cmd_select(args: argparse.Namespace, config: PageListConfig) -> None:
    spec = parse_page_spec(args.spec)
    with FitzDocument.open(args.input, config) as source, FitzDocument.new(config) as selected:
        chosen = source.pages[spec]
        selected.pages.extend(chosen if isinstance(chosen, list) else [chosen])
        selected.save(args.output)


def _cmd_preview(args: argparse.Namespace, config: PageListConfig) -> None:
    from pagelist_toolkit.utils.render import render_page

    with FitzDocument.open(args.input, config) as doc:
        image = render_page(doc.pages.p(args.page), dpi=args.dpi, trim_whitespace=args.trim)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    image.save(args.output)
    logger.info(f"Rendered page {args.page} to {args.output} ({image.width}x{image.height})")


_COMMANDS = {
    "info": _cmd_info,
    "reverse": _cmd_reverse,
    "merge": _cmd_merge,
    "select": _cmd_select,
    "preview": _cmd_preview,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s | %(message)s",
    )

    try:
        if args.release_policy:
            config = PageListConfig(release_policy=ReleasePolicy(args.release_policy))
        else:
            config = PageListConfig.from_env()
        if args.command == "select":
            parse_page_spec(args.spec)
    except ValueError as e:
        parser.error(str(e))

    try:
        _COMMANDS[args.command](args, config)
    except PageListError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0
