"""Paragraph classification and HTML block assembly.

Each ``<w:p>`` becomes exactly one HTML block.  Classification precedence
is list item, then heading, then plain paragraph; a paragraph with no
visible text is an empty paragraph and keeps its vertical space as
``<p><br></p>``.  Two passes then run over the whole document: list items
are grouped into ``<ul>`` blocks and long runs of blank paragraphs are
collapsed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional

from docx2html.formatter import FormattedRun, format_run
from docx2html.scanner import has_element, iter_regions

EMPTY_PARAGRAPH = "<p><br></p>"
NBSP = "&nbsp;"

# Word writes style ids with non-ASCII characters removed, so the
# Portuguese "Título 1" style is referenced as "Ttulo1".
DEFAULT_HEADING_ALIASES: Mapping[str, int] = {
    "Ttulo1": 1,
    "Ttulo2": 2,
    "Ttulo3": 3,
}

_HEADING_STYLE_RE = re.compile(r"heading([1-3])")
_PSTYLE_RE = re.compile(r"""<w:pStyle\s[^>]*?\bw:val\s*=\s*(["'])(.*?)\1""", re.DOTALL)
_STYLE_SEPARATORS_RE = re.compile(r"[\s_-]+")

_LIST_ITEM_RUN_RE = re.compile(r"(?:<ul>)?(?:<li>.*?</li>)+(?:</ul>)?", re.DOTALL)
_EMPTY_RUN_RE = re.compile(r"(?:" + re.escape(EMPTY_PARAGRAPH) + r"){3,}")


class ParagraphKind(Enum):
    HEADING1 = "h1"
    HEADING2 = "h2"
    HEADING3 = "h3"
    LIST_ITEM = "li"
    PARAGRAPH = "p"
    EMPTY_PARAGRAPH = "empty"

    @classmethod
    def heading(cls, level: int) -> ParagraphKind:
        return {1: cls.HEADING1, 2: cls.HEADING2, 3: cls.HEADING3}[level]


@dataclass
class Paragraph:
    kind: ParagraphKind
    runs: list[FormattedRun] = field(default_factory=list)

    @property
    def inner_html(self) -> str:
        return "".join(run.to_html() for run in self.runs)

    def to_html(self) -> str:
        return render_paragraph(self.kind, self.inner_html)


def _normalize_style(style: str) -> str:
    return _STYLE_SEPARATORS_RE.sub("", style).lower()


def build_alias_table(aliases: Optional[Mapping[str, int]]) -> dict[str, int]:
    """Normalize alias keys; levels outside 1..3 are rejected."""
    table: dict[str, int] = {}
    for name, level in (aliases or {}).items():
        if level not in (1, 2, 3):
            raise ValueError(f"Heading alias {name!r} has invalid level {level}")
        table[_normalize_style(name)] = level
    return table


def paragraph_style(paragraph_xml: str) -> str:
    match = _PSTYLE_RE.search(paragraph_xml)
    return match.group(2) if match else ""


def heading_level(style: str, aliases: Optional[Mapping[str, int]] = None) -> Optional[int]:
    """Map a paragraph style id to a heading level 1..3, or ``None``.

    *aliases* must already be normalized with :func:`build_alias_table`.
    """
    if not style:
        return None
    normalized = _normalize_style(style)
    match = _HEADING_STYLE_RE.fullmatch(normalized)
    if match:
        return int(match.group(1))
    if aliases:
        return aliases.get(normalized)
    return None


def classify_paragraph(
    paragraph_xml: str,
    runs: Iterable[FormattedRun],
    aliases: Optional[Mapping[str, int]] = None,
) -> ParagraphKind:
    if has_element(paragraph_xml, "w:numPr"):
        return ParagraphKind.LIST_ITEM
    level = heading_level(paragraph_style(paragraph_xml), aliases)
    if level is not None:
        return ParagraphKind.heading(level)
    if any(run.text for run in runs):
        return ParagraphKind.PARAGRAPH
    return ParagraphKind.EMPTY_PARAGRAPH


def render_paragraph(kind: ParagraphKind, inner_html: str) -> str:
    if kind is ParagraphKind.LIST_ITEM:
        return f"<li>{inner_html or NBSP}</li>"
    if kind is ParagraphKind.EMPTY_PARAGRAPH:
        return EMPTY_PARAGRAPH
    tag = kind.value
    return f"<{tag}>{inner_html}</{tag}>"


def parse_paragraph(
    paragraph_xml: str, aliases: Optional[Mapping[str, int]] = None
) -> Paragraph:
    """Format the runs of one ``<w:p>`` region and classify it."""
    runs = [format_run(region.text) for region in iter_regions(paragraph_xml, "w:r")]
    return Paragraph(kind=classify_paragraph(paragraph_xml, runs, aliases), runs=runs)


def wrap_list_items(html: str) -> str:
    """Wrap each maximal run of adjacent ``<li>`` blocks in one ``<ul>``."""

    def _wrap(match: re.Match[str]) -> str:
        block = match.group(0)
        if block.startswith("<ul>") and block.endswith("</ul>"):
            return block
        items = block.removeprefix("<ul>").removesuffix("</ul>")
        return f"<ul>{items}</ul>"

    return _LIST_ITEM_RUN_RE.sub(_wrap, html)


def collapse_empty_paragraphs(html: str) -> str:
    """Reduce three or more consecutive blank paragraphs to two."""
    return _EMPTY_RUN_RE.sub(EMPTY_PARAGRAPH * 2, html)


def postprocess(html: str) -> str:
    return collapse_empty_paragraphs(wrap_list_items(html))


def assemble(paragraphs: Iterable[Paragraph]) -> str:
    """Render *paragraphs* in order and apply the document-level passes."""
    return postprocess("".join(p.to_html() for p in paragraphs))


__all__ = [
    "DEFAULT_HEADING_ALIASES",
    "EMPTY_PARAGRAPH",
    "Paragraph",
    "ParagraphKind",
    "assemble",
    "build_alias_table",
    "classify_paragraph",
    "collapse_empty_paragraphs",
    "heading_level",
    "paragraph_style",
    "parse_paragraph",
    "postprocess",
    "render_paragraph",
    "wrap_list_items",
]
