"""Run-level formatting: bold / italic / underline detection and text.

A run (``<w:r>``) carries optional properties (``<w:rPr>``) and any number
of text nodes (``<w:t>``).  A toggle element in the properties turns its
format on unless it explicitly says otherwise through ``w:val``, so a bare
``<w:b/>`` means bold while ``<w:b w:val="0"/>`` does not.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from functools import lru_cache

from docx2html.scanner import first_region, iter_regions

# ST_OnOff values that switch a toggle property off.
_OFF_VALUES = frozenset({"0", "false", "off"})
# w:u carries an underline *type*; "none" removes the underline.
_UNDERLINE_OFF_VALUES = _OFF_VALUES | {"none"}

_TEXT_RE = re.compile(r"<w:t(?:\s[^>]*)?(?<!/)>(.*?)</w:t\s*>", re.DOTALL)
_VAL_RE = re.compile(r"""\bw:val\s*=\s*(["'])(.*?)\1""", re.DOTALL)


@lru_cache(maxsize=None)
def _element_re(tag: str) -> re.Pattern[str]:
    # Captures the attribute part of <tag ...> / <tag .../>
    return re.compile(r"<" + re.escape(tag) + r"(?=[\s>/])([^>]*)>")


@dataclass(frozen=True)
class RunFormatting:
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True)
class FormattedRun:
    """Visible text of one run (unescaped) and its formatting."""

    text: str
    formatting: RunFormatting = field(default_factory=RunFormatting)

    def to_html(self) -> str:
        """Escape the text and wrap it: underline innermost, bold outermost."""
        if not self.text:
            return ""
        out = escape_html(self.text)
        if self.formatting.underline:
            out = f"<u>{out}</u>"
        if self.formatting.italic:
            out = f"<em>{out}</em>"
        if self.formatting.bold:
            out = f"<strong>{out}</strong>"
        return out


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>``, ampersand first."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def toggle_state(properties: str, tag: str, off_values: frozenset[str] = _OFF_VALUES) -> bool:
    """Return whether toggle element *tag* is switched on in *properties*.

    Absent element: off.  Present without ``w:val``: on.  Present with a
    value in *off_values*: off.
    """
    match = _element_re(tag).search(properties)
    if match is None:
        return False
    val = _VAL_RE.search(match.group(1))
    if val is None:
        return True
    return val.group(2).strip().lower() not in off_values


def _current_properties(properties: str) -> str:
    # Drop tracked-change history; <w:rPrChange> holds the previous formatting.
    kept, last = [], 0
    for change in iter_regions(properties, "w:rPrChange"):
        kept.append(properties[last:change.start])
        last = change.end
    kept.append(properties[last:])
    return "".join(kept)


def read_formatting(run_xml: str) -> RunFormatting:
    properties = first_region(run_xml, "w:rPr")
    if properties is None:
        return RunFormatting()
    inner = _current_properties(properties.inner)
    return RunFormatting(
        bold=toggle_state(inner, "w:b"),
        italic=toggle_state(inner, "w:i"),
        underline=toggle_state(inner, "w:u", _UNDERLINE_OFF_VALUES),
    )


def extract_text(run_xml: str) -> str:
    """Concatenate every ``<w:t>`` node in document order, entity-decoded."""
    return "".join(html.unescape(m.group(1)) for m in _TEXT_RE.finditer(run_xml))


def format_run(run_xml: str) -> FormattedRun:
    return FormattedRun(text=extract_text(run_xml), formatting=read_formatting(run_xml))


__all__ = [
    "RunFormatting",
    "FormattedRun",
    "escape_html",
    "toggle_state",
    "read_formatting",
    "extract_text",
    "format_run",
]
