#!/usr/bin/env python3
"""
Reverse proxy - forwards one request to a backend and relays its response.

Method, full path, query string, body and end-to-end headers go through
unchanged. The backend's status, headers and body come back unchanged
except for hop-by-hop headers and ones httpx has already acted on.
"""

import logging
from typing import Optional

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from web.gateway.routes import Route

logger = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = {
    'connection',
    'keep-alive',
    'proxy-authenticate',
    'proxy-authorization',
    'te',
    'trailer',
    'trailers',
    'transfer-encoding',
    'upgrade',
}

# recomputed by httpx for the outbound request
REQUEST_EXCLUDED_HEADERS = HOP_BY_HOP_HEADERS | {'host', 'content-length'}

# httpx has already decoded the body
RESPONSE_EXCLUDED_HEADERS = HOP_BY_HOP_HEADERS | {'content-encoding', 'content-length'}


def forwardable_request_headers(request: Request) -> list:
    return [
        (name, value)
        for name, value in request.headers.items()
        if name.lower() not in REQUEST_EXCLUDED_HEADERS
    ]


def raw_target(request: Request) -> str:
    """
    Path and query exactly as the client sent them.

    `request.url.path` is percent-decoded, which would turn %2F into a
    path separator and %3F into the start of the query.
    """
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


def relayable_response_headers(response: httpx.Response) -> list:
    return [
        (name, value)
        for name, value in response.headers.multi_items()
        if name.lower() not in RESPONSE_EXCLUDED_HEADERS
    ]


class ReverseProxy:
    """
    Forwards requests with a shared httpx.AsyncClient.

    Args:
        timeout_seconds: per-request upstream timeout
        transport: optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(self, timeout_seconds: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
            follow_redirects=False
        )

    async def forward(self, request: Request, route: Route) -> Response:
        url = route.backend_url + raw_target(request)
        body = await request.body()

        try:
            upstream = await self.client.request(
                request.method,
                url,
                content=body or None,
                headers=forwardable_request_headers(request)
            )
        except httpx.TimeoutException as e:
            logger.error(f"Upstream timeout: {request.method} {url} ({e.__class__.__name__})")
            return JSONResponse(
                status_code=504,
                content={"error": "Gateway timeout", "details": f"{route.prefix} did not respond in time"}
            )
        except httpx.RequestError as e:
            logger.error(f"Upstream unreachable: {request.method} {url}: {e}")
            return JSONResponse(
                status_code=502,
                content={"error": "Bad gateway", "details": f"{route.prefix} is unavailable"}
            )

        response = Response(content=upstream.content, status_code=upstream.status_code)
        # append keeps repeated headers such as set-cookie
        for name, value in relayable_response_headers(upstream):
            response.headers.append(name, value)
        return response

    async def aclose(self) -> None:
        await self.client.aclose()
