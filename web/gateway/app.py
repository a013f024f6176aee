#!/usr/bin/env python3
"""
TalentMatch API Gateway - FastAPI Application

Single entry point for clients. Every request is rate limited per client
IP, matched against the route table by longest prefix, authenticated when
the route requires it, and forwarded to the owning backend service.

Usage:
    python main.py gateway
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from core.auth import AuthVerifier
from core.config_loader import AppConfig, get_config
from core.exceptions import NotFound
from web.gateway.proxy import ReverseProxy
from web.gateway.routes import RouteTable
from web.shared.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # sync: SlowAPIMiddleware may call the handler without awaiting it
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests", "details": str(exc.detail)}
    )


def add_rate_limit(app: FastAPI, rate_limit: str) -> Limiter:
    """Attach a global fixed-window limit applied before routing."""
    limiter = Limiter(
        key_func=get_remote_address,
        application_limits=[rate_limit],
        strategy="fixed-window"
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter


def create_app(
    config: Optional[AppConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the gateway app.

    Args:
        config: application config (defaults to get_config())
        transport: httpx transport for upstream calls, for tests
    """
    config = config or get_config()
    route_table = RouteTable.from_config(config)
    reverse_proxy = ReverseProxy(config.gateway.upstream_timeout_seconds, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for route in route_table.routes:
            logger.info(
                f"Route {route.prefix} -> {route.backend_url}"
                f"{' (auth)' if route.auth_required else ''}"
            )
        yield
        await reverse_proxy.aclose()

    app = FastAPI(
        title="TalentMatch Gateway",
        description="Authenticating reverse proxy for the TalentMatch services",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.auth_verifier = AuthVerifier(config.auth.jwt_secret, config.auth.algorithm)
    app.state.route_table = route_table
    app.state.proxy = reverse_proxy

    register_exception_handlers(app)
    add_rate_limit(app, config.gateway.rate_limit)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"{request.method} {request.url.path} -> 500 ({elapsed_ms:.1f} ms)")
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms) client={get_remote_address(request)}"
        )
        return response

    @app.get("/")
    def health_check():
        """Gateway health check."""
        return {"status": "healthy", "service": "gateway"}

    @app.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request, path: str):
        route = route_table.resolve(request.url.path)
        if route is None:
            raise NotFound("Route not found", details=request.url.path)
        if route.auth_required:
            app.state.auth_verifier.verify_header(request.headers.get("authorization"))
        return await reverse_proxy.forward(request, route)

    return app
