"""FastAPI web service for DOCX to HTML conversion.

Endpoints::

    POST /parse-docx         JSON {"template_url": ...} -> {"html": ...}
    POST /parse-docx/upload  Upload a .docx file, receive {"html": ...}
    GET  /health             Health check.

Failures are reported as ``{"error": message}``: 400 for a bad request,
413 for oversized uploads, 502 when the template could not be downloaded
and 500 when it could not be parsed.

Run::

    uvicorn docx2html.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

import httpx
from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from docx2html import __version__
from docx2html.config import Settings, get_settings
from docx2html.converter import DocxConverter
from docx2html.errors import DocxParseError
from docx2html.fetch import TemplateFetchError, fetch_template_async

logger = logging.getLogger(__name__)


class ParseRequest(BaseModel):
    template_url: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        timeout=settings.fetch_timeout_s, follow_redirects=True
    ) as client:
        yield client


def get_converter(settings: Settings = Depends(get_settings)) -> DocxConverter:
    return DocxConverter(heading_aliases=settings.heading_aliases)


async def _convert(converter: DocxConverter, data: bytes) -> JSONResponse:
    try:
        html = await run_in_threadpool(converter.convert_bytes, data)
    except DocxParseError as exc:
        logger.error("Error parsing DOCX [%s]: %s", exc.code, exc)
        return _error(500, str(exc))
    logger.info("Successfully extracted HTML content, length: %d", len(html))
    return JSONResponse(content={"html": html})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="docx2html",
        description="DOCX to HTML conversion service",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report unreadable or mistyped request bodies as ``{"error": ...}``."""
        problems = exc.errors()
        if problems:
            first = problems[0]
            loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{loc}: {first['msg']}" if loc else first["msg"]
        else:
            message = "Invalid request"
        logger.warning("Rejected request to %s: %s", request.url.path, message)
        return _error(400, f"Invalid request body: {message}")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/parse-docx")
    async def parse_docx(
        payload: ParseRequest,
        client: httpx.AsyncClient = Depends(get_http_client),
        converter: DocxConverter = Depends(get_converter),
        settings: Settings = Depends(get_settings),
    ) -> JSONResponse:
        """Download the template at ``template_url`` and convert it."""
        if not payload.template_url:
            return _error(400, "template_url is required")

        logger.info("Parsing DOCX from URL: %s", payload.template_url)
        try:
            data = await fetch_template_async(
                payload.template_url,
                client,
                max_bytes=settings.max_file_size_bytes,
            )
        except TemplateFetchError as exc:
            logger.error("Error fetching DOCX [%s]: %s", exc.code, exc)
            return _error(502, str(exc))
        return await _convert(converter, data)

    @app.post("/parse-docx/upload")
    async def parse_docx_upload(
        file: UploadFile = File(...),
        converter: DocxConverter = Depends(get_converter),
        settings: Settings = Depends(get_settings),
    ) -> JSONResponse:
        """Upload a ``.docx`` file and receive its HTML."""
        data = await file.read()
        if len(data) > settings.max_file_size_bytes:
            return _error(413, f"File exceeds {settings.max_file_size_mb} MB limit")
        logger.info("Parsing uploaded DOCX: %s", file.filename or "<unnamed>")
        return await _convert(converter, data)

    return app


app = create_app()
