"""
docsan HTTP service.

Endpoints:
    POST /docsan    HTML body -> document JSON
    POST /sanitize  HTML body -> HTML with scripts and stylesheets commented out
    GET  /health    health check for container orchestration

Every request runs with a correlation ID, taken from the ``X-Correlation-ID``
request header or generated, and echoed in the response header.
"""

import logging
from datetime import datetime, timezone

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from docsan.config import DocsanSettings
from docsan.correlation import reset_correlation_id, set_correlation_id
from docsan.exceptions import DocsanError, generate_correlation_id
from docsan.services.document import DocumentService

LOGGER = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestTooLarge(Exception):
    """Raised when a request body exceeds the configured limit."""


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind a correlation ID to each request and echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        corr_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        token = set_correlation_id(corr_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers[CORRELATION_HEADER] = corr_id
        return response


async def read_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, refusing anything larger than ``limit`` bytes.

    Raises:
        RequestTooLarge: If the declared or actual size exceeds the limit.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise RequestTooLarge(f"Request body of {declared} bytes exceeds {limit} bytes")

    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            raise RequestTooLarge(f"Request body exceeds {limit} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


def error_response(message: str, status_code: int, correlation_id: str | None = None) -> JSONResponse:
    """Build a structured JSON error response."""
    return JSONResponse({"error": message, "correlation_id": correlation_id}, status_code=status_code)


def create_app(settings: DocsanSettings | None = None) -> Starlette:
    """
    Create the docsan Starlette application.

    Args:
        settings: Service settings. Defaults to settings loaded from the environment.

    Returns:
        ASGI application.
    """
    from docsan import __version__

    settings = settings or DocsanSettings()
    service = DocumentService(settings)
    start_time = datetime.now(timezone.utc)

    async def convert_endpoint(request: Request) -> Response:
        try:
            markup = await read_body(request, settings.max_body_bytes)
        except RequestTooLarge as e:
            LOGGER.warning(str(e))
            return error_response(str(e), 413)
        try:
            record = await run_in_threadpool(service.convert, markup)
        except DocsanError as e:
            LOGGER.error(f"Conversion failed: {e.message}")
            return error_response(e.message, 400, e.correlation_id)
        return Response(record.to_json(pretty=settings.json_pretty), media_type="application/json")

    async def sanitize_endpoint(request: Request) -> Response:
        try:
            markup = await read_body(request, settings.max_body_bytes)
        except RequestTooLarge as e:
            LOGGER.warning(str(e))
            return error_response(str(e), 413)
        try:
            sanitized = await run_in_threadpool(service.sanitize, markup)
        except DocsanError as e:
            LOGGER.error(f"Sanitizing failed: {e.message}")
            return error_response(e.message, 400, e.correlation_id)
        return Response(sanitized, media_type="text/html")

    async def health_endpoint(request: Request) -> JSONResponse:
        uptime = (datetime.now(timezone.utc) - start_time).total_seconds()
        return JSONResponse(
            {
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "server": "docsan",
                "version": __version__,
                "uptime_seconds": round(uptime, 1),
            }
        )

    routes = [
        Route("/docsan", convert_endpoint, methods=["POST"]),
        Route("/sanitize", sanitize_endpoint, methods=["POST"]),
        Route("/health", health_endpoint, methods=["GET"]),
    ]
    app = Starlette(routes=routes, middleware=[Middleware(CorrelationIdMiddleware)])
    app.state.settings = settings
    return app


def serve(settings: DocsanSettings, host: str | None = None, port: int | None = None) -> None:
    """
    Run the HTTP service with uvicorn until interrupted.

    Args:
        settings: Service settings.
        host: Host override.
        port: Port override.
    """
    import uvicorn

    host = host or settings.host
    port = port or settings.port
    LOGGER.info(f"Starting docsan on {host}:{port}")
    # log_config=None keeps the logging configured by docsan
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
