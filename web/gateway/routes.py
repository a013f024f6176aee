#!/usr/bin/env python3
"""
Gateway route table - maps path prefixes to backend base URLs.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from core.config_loader import AppConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    prefix: str
    backend_url: str
    auth_required: bool = False

    def matches(self, path: str) -> bool:
        # "/matches" covers "/matches" and "/matches/x", never "/matchesx"
        return path == self.prefix or path.startswith(self.prefix + "/")


class RouteTable:
    """Resolves a request path to the route with the longest matching prefix."""

    def __init__(self, routes: Iterable[Route]):
        self.routes: List[Route] = sorted(
            (Route(r.prefix.rstrip("/") or "/", r.backend_url.rstrip("/"), r.auth_required) for r in routes),
            key=lambda r: len(r.prefix),
            reverse=True
        )
        prefixes = [r.prefix for r in self.routes]
        if len(prefixes) != len(set(prefixes)):
            raise ValueError(f"Duplicate gateway route prefixes: {prefixes}")

    @classmethod
    def from_config(cls, config: AppConfig) -> "RouteTable":
        return cls(
            Route(
                prefix=route.prefix,
                backend_url=config.service_url(route.backend),
                auth_required=route.auth_required
            )
            for route in config.gateway.routes
        )

    def resolve(self, path: str) -> Optional[Route]:
        for route in self.routes:
            if route.prefix == "/" or route.matches(path):
                return route
        return None
