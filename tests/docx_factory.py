"""Builders for WordprocessingML snippets and in-memory .docx packages."""

from __future__ import annotations

import io
import zipfile
from typing import Optional
from xml.sax.saxutils import escape

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)

ROOT_RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="word/document.xml"/>'
    "</Relationships>"
)


def run(
    text: str = "",
    *,
    bold: bool = False,
    italic: bool = False,
    underline: bool = False,
    props: str = "",
) -> str:
    """Return a ``<w:r>`` element; *props* is appended to the run properties."""
    parts = []
    if bold:
        parts.append("<w:b/>")
    if italic:
        parts.append("<w:i/>")
    if underline:
        parts.append('<w:u w:val="single"/>')
    parts.append(props)
    rpr = "".join(parts)
    rpr_xml = f"<w:rPr>{rpr}</w:rPr>" if rpr else ""
    text_xml = f'<w:t xml:space="preserve">{escape(text)}</w:t>' if text else ""
    return f"<w:r>{rpr_xml}{text_xml}</w:r>"


def para(*runs: str, style: Optional[str] = None, numbered: bool = False) -> str:
    """Return a ``<w:p>`` element holding *runs*."""
    ppr = ""
    if style:
        ppr += f'<w:pStyle w:val="{style}"/>'
    if numbered:
        ppr += '<w:numPr><w:ilvl w:val="0"/><w:numId w:val="1"/></w:numPr>'
    ppr_xml = f"<w:pPr>{ppr}</w:pPr>" if ppr else ""
    return f'<w:p w:rsidR="00A1B2C3">{ppr_xml}{"".join(runs)}</w:p>'


def document(*paragraphs: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>'
        + "".join(paragraphs)
        + '<w:sectPr><w:pgSz w:w="11906" w:h="16838"/></w:sectPr>'
        "</w:body></w:document>"
    )


def build_zip(
    files: dict[str, str | bytes],
    compression: int = zipfile.ZIP_DEFLATED,
) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


def build_docx(
    document_xml: Optional[str] = None,
    *,
    compression: int = zipfile.ZIP_DEFLATED,
) -> bytes:
    """Return a minimal .docx package; ``None`` omits ``word/document.xml``."""
    files: dict[str, str | bytes] = {
        "[Content_Types].xml": CONTENT_TYPES,
        "_rels/.rels": ROOT_RELS,
    }
    if document_xml is not None:
        files["word/document.xml"] = document_xml
    return build_zip(files, compression=compression)


class _WriteOnly:
    """A sink without tell()/seek(), forcing zipfile to stream entries."""

    def __init__(self) -> None:
        self.buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        return self.buffer.write(data)

    def flush(self) -> None:
        pass


def build_streamed_zip(
    files: dict[str, str | bytes],
    compression: int = zipfile.ZIP_DEFLATED,
) -> bytes:
    """Like :func:`build_zip` but every entry uses a trailing data descriptor."""
    sink = _WriteOnly()
    with zipfile.ZipFile(sink, "w", compression=compression) as zf:  # type: ignore[arg-type]
        for name, content in files.items():
            zf.writestr(name, content)
    return sink.buffer.getvalue()
