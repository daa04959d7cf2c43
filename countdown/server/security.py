"""Request hardening for the static file server."""

import logging
import time
from pathlib import Path, PurePosixPath
from typing import Callable, Collection
from urllib.parse import unquote

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "HEAD")

MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}

ALLOWED_EXTENSIONS = frozenset(MIME_TYPES)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data:; font-src 'self'; connect-src 'self'; frame-ancestors 'none'"
    ),
}

HTML_CACHE_CONTROL = "no-cache"
ASSET_CACHE_CONTROL = "public, max-age=86400"


class ForbiddenPath(Exception):
    """Requested path is not allowed to be served."""


def resolve_static_path(root: Path, raw_path: str) -> Path:
    """
    Map a request path onto a file under root.

    The path is percent-decoded twice so double-encoded traversal is caught.
    Rejected: "..", "//", backslashes, NUL bytes, dot-file segments,
    extensions outside the allow-list and anything resolving outside root.
    "/" maps to index.html.

    Args:
        root: Static directory
        raw_path: Request path as sent (query string already removed)

    Returns:
        Absolute path of the file to serve (it may not exist)

    Raises:
        ForbiddenPath: If the path must not be served
    """
    if "//" in raw_path:
        raise ForbiddenPath(f"double slash in {raw_path!r}")

    decoded = unquote(unquote(raw_path))

    if ".." in decoded or "//" in decoded or "\\" in decoded or "\x00" in decoded:
        raise ForbiddenPath(f"traversal attempt in {raw_path!r}")

    if decoded in ("", "/"):
        decoded = "/index.html"

    relative = PurePosixPath(decoded.lstrip("/"))
    if any(part.startswith(".") for part in relative.parts):
        raise ForbiddenPath(f"hidden file in {raw_path!r}")

    if relative.suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ForbiddenPath(f"extension not allowed in {raw_path!r}")

    base = root.resolve()
    full_path = (base / relative).resolve()
    if not full_path.is_relative_to(base):
        raise ForbiddenPath(f"{raw_path!r} resolves outside static root")

    return full_path


def content_type_for(path: Path) -> str:
    return MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")


def cache_control_for(path: Path, no_cache: Collection[Path] = ()) -> str:
    """HTML and regenerated files must be revalidated, other assets are cached for a day."""
    if path.suffix.lower() == ".html" or path in no_cache:
        return HTML_CACHE_CONTROL
    return ASSET_CACHE_CONTROL


class RateLimiter:
    """Naive fixed-window request counter per client."""

    def __init__(
        self,
        max_requests: int = 100,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Requests allowed per client per window
            window: Window length in seconds
            clock: Monotonic time source in seconds
        """
        self.max_requests = max_requests
        self.window = window
        self.clock = clock
        self._clients: dict[str, tuple[int, float]] = {}

    def allow(self, client: str) -> bool:
        """Count a request and say whether it is within the limit."""
        now = self.clock()
        count, reset_at = self._clients.get(client, (0, now + self.window))

        if now > reset_at:
            count, reset_at = 0, now + self.window

        if count >= self.max_requests:
            self._clients[client] = (count, reset_at)
            return False

        self._clients[client] = (count + 1, reset_at)

        if len(self._clients) > 1024:
            self.prune()

        return True

    def retry_after(self, client: str) -> int:
        """Seconds until the client's window resets."""
        _, reset_at = self._clients.get(client, (0, self.clock()))
        return max(0, int(reset_at - self.clock()) + 1)

    def prune(self):
        """Forget clients whose window has expired."""
        now = self.clock()
        expired = [client for client, (_, reset_at) in self._clients.items() if now > reset_at]
        for client in expired:
            del self._clients[client]
        if expired:
            logger.debug(f"Pruned {len(expired)} rate limit entries")
