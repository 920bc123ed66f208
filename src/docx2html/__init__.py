"""docx2html: convert DOCX contract templates to HTML."""

from __future__ import annotations

__version__ = "0.1.0"

from docx2html.converter import DOCUMENT_BODY, DocxConverter, convert_docx
from docx2html.errors import (
    ContainerEntryCorrupt,
    DocumentBodyNotFound,
    DocxParseError,
    EntryNotFound,
    InvalidContainerFormat,
    UnsupportedCompressionMethod,
)

__all__ = [
    "__version__",
    "DOCUMENT_BODY",
    "DocxConverter",
    "convert_docx",
    "DocxParseError",
    "InvalidContainerFormat",
    "EntryNotFound",
    "DocumentBodyNotFound",
    "UnsupportedCompressionMethod",
    "ContainerEntryCorrupt",
]
