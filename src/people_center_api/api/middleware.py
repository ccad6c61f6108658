"""HTTP middleware: CORS for the web client, response hardening headers and
a per-client request budget on the ``/api`` routes."""

import time
from collections import deque
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from people_center_api.core.config import Settings

# Checked in this order; the first non-empty value wins.
_DEFAULT_TRUSTED_HEADERS = ["CF-Connecting-IP", "X-Forwarded-For", "X-Real-IP"]

RATE_WINDOW_SECONDS = 60.0

_SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


def get_client_ip(request: Request, trusted_headers: list[str] | None = None) -> str:
    """Identify the caller for rate limiting.

    Args:
        request: The incoming request.
        trusted_headers: Proxy headers to consult; ``None`` means the
            Cloudflare / X-Forwarded-For / X-Real-IP defaults and an empty
            list means only the socket peer is used.

    Returns:
        The client address, or ``"unknown"`` when there is none.
    """
    for header in _DEFAULT_TRUSTED_HEADERS if trusted_headers is None else trusted_headers:
        value = request.headers.get(header, "").strip()
        if value and header.lower() == "x-forwarded-for":
            # "client, proxy1, proxy2"
            return value.partition(",")[0].strip()
        if value:
            return value
    return request.client.host if request.client else "unknown"


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the configured frontend origins, with credentials."""
    options: dict[str, Any] = {"allow_credentials": True, "allow_methods": ["*"], "allow_headers": ["*"]}
    if settings.cors_origin_list:
        options["allow_origins"] = settings.cors_origin_list
    if settings.cors_origin_regex.strip():
        options["allow_origin_regex"] = settings.cors_origin_regex.strip()
    app.add_middleware(CORSMiddleware, **options)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(_SECURITY_HEADERS)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute request budget per client address, kept in memory.

    Requests outside ``path_prefix`` (health probes, ``/uploads`` images)
    neither count nor get rejected. Over budget, the client receives a 429
    ``RATE_LIMITED`` error envelope.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: int = 200,
        trusted_proxy_headers: list[str] | None = None,
        path_prefix: str = "/api",
    ) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.trusted_proxy_headers = trusted_proxy_headers
        self.path_prefix = path_prefix
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = 0.0

    def _sweep(self, now: float) -> None:
        """Forget clients with no hits left in the window, at most once per window."""
        if now - self._last_sweep < RATE_WINDOW_SECONDS:
            return
        self._last_sweep = now
        cutoff = now - RATE_WINDOW_SECONDS
        for client_ip in [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[client_ip]

    def _allow(self, client_ip: str, now: float) -> bool:
        self._sweep(now)
        hits = self._hits.setdefault(client_ip, deque())
        while hits and hits[0] <= now - RATE_WINDOW_SECONDS:
            hits.popleft()
        if len(hits) >= self.requests_per_minute:
            return False
        hits.append(now)
        return True

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = get_client_ip(request, self.trusted_proxy_headers)
        if self._allow(client_ip, time.time()):
            return await call_next(request)

        logger.bind(json_output=True, client_ip=client_ip, path=request.url.path).warning("Rate limit exceeded")
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "error": {
                    "message": "Too many requests from this IP, please try again later",
                    "code": "RATE_LIMITED",
                },
            },
        )
