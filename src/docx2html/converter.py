"""High-level DOCX-to-HTML conversion orchestrator.

Ties together the container reader, the region scanner, the run formatter
and the paragraph assembler into a single public API.  Conversion is a
single synchronous pass over one input buffer; instances hold only their
configuration and can be shared between threads.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Mapping, Optional

from docx2html.assembler import (
    DEFAULT_HEADING_ALIASES,
    assemble,
    build_alias_table,
    parse_paragraph,
)
from docx2html.container import BytesLike, ContainerReader
from docx2html.errors import DocumentBodyNotFound, EntryNotFound
from docx2html.scanner import iter_regions

logger = logging.getLogger(__name__)

DOCUMENT_BODY = "word/document.xml"
EMPTY_DOCUMENT_HTML = "<p></p>"


class DocxConverter:
    """Convert ``.docx`` content to HTML.

    Usage::

        converter = DocxConverter()
        html = converter.convert_file("template.docx")

        # or from bytes already in memory
        html = converter.convert_bytes(data)

    *heading_aliases* maps extra paragraph style ids to heading levels;
    pass ``{}`` to recognise only ``Heading1`` .. ``Heading3``.
    """

    def __init__(self, heading_aliases: Optional[Mapping[str, int]] = None) -> None:
        if heading_aliases is None:
            heading_aliases = DEFAULT_HEADING_ALIASES
        self.heading_aliases = build_alias_table(heading_aliases)

    def convert_bytes(self, data: BytesLike) -> str:
        """Convert a complete ``.docx`` byte buffer to an HTML string.

        Raises:
            DocxParseError: any container-level failure, including
                :class:`DocumentBodyNotFound`.
        """
        logger.debug("DOCX file size: %d bytes", len(data))
        body = self.read_document_body(data)
        logger.debug("document.xml length: %d", len(body))

        html = self.convert_document_xml(body)
        logger.info("Converted DOCX to %d characters of HTML", len(html))
        return html

    def convert_stream(self, stream: BinaryIO) -> str:
        """Read *stream* to the end and convert its content."""
        return self.convert_bytes(stream.read())

    def convert_file(self, input_path: str | Path) -> str:
        """Read a ``.docx`` file from disk and convert it."""
        return self.convert_bytes(Path(input_path).read_bytes())

    def read_document_body(self, data: BytesLike) -> str:
        reader = ContainerReader(data)
        try:
            return reader.read_text(DOCUMENT_BODY)
        except EntryNotFound as exc:
            logger.warning("Available files in DOCX: %s", list(exc.available))
            raise DocumentBodyNotFound(
                f"Could not find {DOCUMENT_BODY} in DOCX"
            ) from exc

    def convert_document_xml(self, document_xml: str) -> str:
        """Convert the text of a ``document.xml`` part to HTML."""
        paragraphs = (
            parse_paragraph(region.text, self.heading_aliases)
            for region in iter_regions(document_xml, "w:p")
        )
        return assemble(paragraphs) or EMPTY_DOCUMENT_HTML


def convert_docx(data: BytesLike) -> str:
    """Convert *data* with default settings."""
    return DocxConverter().convert_bytes(data)


__all__ = ["DOCUMENT_BODY", "DocxConverter", "convert_docx"]
