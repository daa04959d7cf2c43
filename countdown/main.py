"""Main FastAPI application: hardened static file server."""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, Response

from .config import settings
from .server.models import StatusResponse
from .server.security import (
    ALLOWED_METHODS,
    SECURITY_HEADERS,
    ForbiddenPath,
    RateLimiter,
    cache_control_for,
    content_type_for,
    resolve_static_path,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def plain_response(status_code: int, text: str, headers: Optional[dict] = None) -> Response:
    """Plain text error response with an exact Content-Type."""
    return Response(
        content=text,
        status_code=status_code,
        headers={"Content-Type": "text/plain", **(headers or {})},
    )


def create_app(
    static_dir: str = settings.static_dir,
    rate_limiter: Optional[RateLimiter] = None,
    dashboard_image: str = settings.dashboard_image,
) -> FastAPI:
    """
    Build the static file server.

    Args:
        static_dir: Directory whose files are served
        rate_limiter: Per-client limiter (defaults from settings)
        dashboard_image: Image the driving loop rewrites, relative to static_dir

    Returns:
        Configured FastAPI app
    """
    static_root = Path(static_dir)
    no_cache = {(static_root / dashboard_image).resolve()}
    limiter = rate_limiter or RateLimiter(
        max_requests=settings.rate_limit_requests,
        window=settings.rate_limit_window,
    )

    app = FastAPI(
        title="Countdown Dashboard",
        description="Static file server for the countdown dashboard",
        version=VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def harden(request: Request, call_next):
        """Rate limit, method allow-list and security headers for every request."""
        logger.info(f"{request.method} {request.url.path}")

        client = request.client.host if request.client else "unknown"

        if not limiter.allow(client):
            logger.warning(f"Rate limit exceeded for {client}")
            response = plain_response(
                429,
                "429 Too Many Requests",
                {"Retry-After": str(limiter.retry_after(client))},
            )
        elif request.method not in ALLOWED_METHODS:
            response = plain_response(
                405,
                "405 Method Not Allowed",
                {"Allow": ", ".join(ALLOWED_METHODS)},
            )
        else:
            response = await call_next(request)

        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response

    @app.get("/status", response_model=StatusResponse)
    async def status():
        """Server status endpoint."""
        return StatusResponse(
            version=VERSION,
            timestamp=datetime.now(),
            static_dir=str(static_root),
            index_present=(static_root / "index.html").is_file(),
        )

    @app.api_route("/{file_path:path}", methods=list(ALLOWED_METHODS))
    async def serve_file(request: Request, file_path: str):
        """Serve a file from the static directory."""
        raw_path = (request.scope.get("raw_path") or b"").decode("latin-1") or request.url.path
        raw_path = raw_path.split("?", 1)[0]

        try:
            full_path = resolve_static_path(static_root, raw_path)
        except ForbiddenPath as e:
            logger.warning(f"Forbidden: {e}")
            return plain_response(403, "403 Forbidden")

        if not full_path.is_file():
            return plain_response(404, "404 Not Found")

        try:
            stat_result = full_path.stat()
            if not os.access(full_path, os.R_OK):
                raise PermissionError(f"Permission denied: {full_path}")
        except OSError as e:
            logger.error(f"Could not read {full_path}: {e}")
            return plain_response(500, "500 Internal Server Error")

        content_type = content_type_for(full_path)
        return FileResponse(
            full_path,
            media_type=content_type,
            stat_result=stat_result,
            headers={
                "Content-Type": content_type,
                "Cache-Control": cache_control_for(full_path, no_cache),
            },
        )

    app.add_middleware(GZipMiddleware, minimum_size=500)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
