"""Command-line interface for docx2html.

Usage::

    docx2html template.docx                     # HTML to stdout
    docx2html template.docx -o template.html    # explicit output path
    docx2html https://example.com/t.docx        # download, then convert
    docx2html template.docx --list-entries      # list package entries
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from docx2html import __version__
from docx2html.config import get_settings
from docx2html.container import ContainerReader
from docx2html.converter import DocxConverter
from docx2html.errors import DocxParseError
from docx2html.fetch import TemplateFetchError, fetch_template


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docx2html",
        description="Convert DOCX templates to HTML.",
    )
    parser.add_argument(
        "source",
        help="Path or http(s) URL of the .docx file to convert.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output HTML file path. Defaults to stdout.",
    )
    parser.add_argument(
        "--list-entries",
        action="store_true",
        help="List the files inside the package and exit.",
    )
    parser.add_argument(
        "--no-heading-aliases",
        action="store_true",
        help="Only recognise Heading1..Heading3 style ids.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print progress information.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _load(source: str) -> bytes:
    settings = get_settings()
    if _is_url(source):
        return fetch_template(
            source,
            timeout=settings.fetch_timeout_s,
            max_bytes=settings.max_file_size_bytes,
        )
    return Path(source).read_bytes()


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not _is_url(args.source) and not Path(args.source).is_file():
        print(f"Error: file not found: {args.source}", file=sys.stderr)
        return 1

    try:
        data = _load(args.source)
        if args.list_entries:
            for entry in ContainerReader(data).iter_entries():
                print(f"{entry.uncompressed_size:>10}  {entry.name}")
            return 0
        aliases = {} if args.no_heading_aliases else settings.heading_aliases
        html = DocxConverter(heading_aliases=aliases).convert_bytes(data)

        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(html, encoding="utf-8")
            print(f"Converted: {output_path}", file=sys.stderr)
        else:
            print(html)
    except (TemplateFetchError, DocxParseError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
