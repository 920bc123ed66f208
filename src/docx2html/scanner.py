"""Balanced tag-region scanning over flat XML text.

WordprocessingML bodies are scanned directly as text rather than parsed
into a tree.  :func:`find_region` is a pure function: it takes an explicit
cursor and returns the next region together with the cursor to resume
from.  :func:`iter_regions` wraps it in a lazy generator, and because the
cursor is never shared, a region's text can be scanned again on its own
(runs inside one paragraph) without disturbing the outer scan.

Malformed input never raises.  A region whose close tag is missing is cut
at the end of the text and flagged with ``closed=False``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional


@dataclass(frozen=True)
class Region:
    """One element, open tag to close tag inclusive."""

    text: str
    start: int
    end: int
    closed: bool = True

    @property
    def self_closing(self) -> bool:
        return self.closed and self.text.endswith("/>") and "</" not in self.text

    @property
    def inner(self) -> str:
        """Content between the open tag and the close tag."""
        head_end = self.text.find(">")
        if head_end == -1 or self.self_closing:
            return ""
        if not self.closed:
            return self.text[head_end + 1:]
        close_start = self.text.rfind("</")
        return self.text[head_end + 1:close_start]


@lru_cache(maxsize=None)
def _open_re(tag: str) -> re.Pattern[str]:
    # The name must end the token: "w:p" never matches "w:pPr" or "w:pStyle".
    return re.compile(r"<" + re.escape(tag) + r"(?=[\s>/])")


@lru_cache(maxsize=None)
def _close_re(tag: str) -> re.Pattern[str]:
    return re.compile(r"</" + re.escape(tag) + r"\s*>")


def find_region(
    text: str, tag: str, cursor: int = 0
) -> tuple[Optional[Region], int]:
    """Return ``(region, next_cursor)`` for the first *tag* at or after *cursor*.

    Same-named elements nested inside the region are counted so the region
    is not cut at an inner close tag.  When no further open tag exists the
    result is ``(None, len(text))``.
    """
    open_re = _open_re(tag)
    close_re = _close_re(tag)

    opener = open_re.search(text, cursor)
    if opener is None:
        return None, len(text)
    start = opener.start()

    head_end = text.find(">", opener.end())
    if head_end == -1:
        return Region(text[start:], start, len(text), closed=False), len(text)
    if text[head_end - 1] == "/":
        end = head_end + 1
        return Region(text[start:end], start, end), end

    depth = 1
    pos = head_end + 1
    while True:
        next_close = close_re.search(text, pos)
        if next_close is None:
            end = len(text)
            return Region(text[start:end], start, end, closed=False), end

        next_open = open_re.search(text, pos, next_close.start())
        if next_open is not None:
            nested_end = text.find(">", next_open.end())
            if text[nested_end - 1] != "/":
                depth += 1
            pos = nested_end + 1
            continue

        depth -= 1
        pos = next_close.end()
        if depth == 0:
            return Region(text[start:pos], start, pos), pos


def iter_regions(text: str, tag: str, cursor: int = 0) -> Iterator[Region]:
    """Lazily yield every top-level *tag* region of *text* in document order."""
    while cursor < len(text):
        region, cursor = find_region(text, tag, cursor)
        if region is None:
            return
        yield region


def first_region(text: str, tag: str) -> Optional[Region]:
    region, _ = find_region(text, tag)
    return region


def has_element(text: str, tag: str) -> bool:
    """True when an element named *tag* opens anywhere in *text*."""
    return _open_re(tag).search(text) is not None


__all__ = ["Region", "find_region", "iter_regions", "first_region", "has_element"]
