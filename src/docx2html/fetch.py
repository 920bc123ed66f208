"""Download ``.docx`` templates by URL.

Fetching happens before parsing and its failures are kept apart from
:class:`~docx2html.errors.DocxParseError`: a :class:`TemplateFetchError`
means the bytes never arrived, not that they were unreadable.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class TemplateFetchError(Exception):
    """The template could not be downloaded."""

    code = "TEMPLATE_FETCH_FAILED"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _check_response(response: httpx.Response, max_bytes: Optional[int]) -> bytes:
    if response.is_error:
        raise TemplateFetchError(
            f"Failed to fetch DOCX: {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )
    content = response.content
    if max_bytes is not None and len(content) > max_bytes:
        raise TemplateFetchError(
            f"Failed to fetch DOCX: file exceeds {max_bytes} bytes"
        )
    return content


def fetch_template(
    url: str,
    *,
    timeout: float = 30.0,
    max_bytes: Optional[int] = None,
    client: Optional[httpx.Client] = None,
) -> bytes:
    """Download *url* synchronously and return its body."""
    logger.info("Fetching DOCX from: %s", url)
    try:
        if client is not None:
            response = client.get(url)
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
                response = owned.get(url)
    except httpx.RequestError as exc:
        raise TemplateFetchError(f"Failed to fetch DOCX: {exc}") from exc
    return _check_response(response, max_bytes)


async def fetch_template_async(
    url: str,
    client: httpx.AsyncClient,
    *,
    max_bytes: Optional[int] = None,
) -> bytes:
    """Download *url* with an existing async client and return its body."""
    logger.info("Fetching DOCX from: %s", url)
    try:
        response = await client.get(url)
    except httpx.RequestError as exc:
        raise TemplateFetchError(f"Failed to fetch DOCX: {exc}") from exc
    return _check_response(response, max_bytes)


__all__ = ["TemplateFetchError", "fetch_template", "fetch_template_async"]
