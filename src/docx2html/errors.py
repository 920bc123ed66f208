"""Exception hierarchy for DOCX parsing.

Every error raised by the parsing core derives from :class:`DocxParseError`
and carries a stable ``code`` for logs.  The message (``str(exc)``) is the
human-readable text surfaced to callers.
"""

from __future__ import annotations


class DocxParseError(Exception):
    """Base class for all parsing failures."""

    code = "DOCX_PARSE_ERROR"


class InvalidContainerFormat(DocxParseError):
    """The input is not a ZIP container."""

    code = "INVALID_CONTAINER_FORMAT"


class EntryNotFound(DocxParseError):
    """A named entry is absent from an otherwise valid container."""

    code = "ENTRY_NOT_FOUND"

    def __init__(self, name: str, available: tuple[str, ...] = ()) -> None:
        super().__init__(f"Entry not found in container: {name}")
        self.name = name
        self.available = available


class DocumentBodyNotFound(DocxParseError):
    """Valid ZIP, but not a word-processing document."""

    code = "DOCUMENT_BODY_NOT_FOUND"


class UnsupportedCompressionMethod(DocxParseError):
    code = "UNSUPPORTED_COMPRESSION_METHOD"

    def __init__(self, name: str, method: int) -> None:
        super().__init__(
            f"Entry {name!r} uses unsupported compression method {method}"
        )
        self.name = name
        self.method = method


class ContainerEntryCorrupt(DocxParseError):
    """Decompression failed or the payload does not match its header."""

    code = "CONTAINER_ENTRY_CORRUPT"


__all__ = [
    "DocxParseError",
    "InvalidContainerFormat",
    "EntryNotFound",
    "DocumentBodyNotFound",
    "UnsupportedCompressionMethod",
    "ContainerEntryCorrupt",
]
