"""Typed HTTP clients for peer services."""
from core.clients.base import (
    PeerClient, PeerServiceError, UpstreamUnavailable, NotFound, UpstreamError
)
from core.clients.profile_fetcher import ProfileFetcher
from core.clients.job_fetcher import JobFetcher

__all__ = [
    'PeerClient', 'PeerServiceError', 'UpstreamUnavailable', 'NotFound', 'UpstreamError',
    'ProfileFetcher', 'JobFetcher',
]
