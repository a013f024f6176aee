"""Shared HTTP plumbing for calls to peer services."""

import logging
from typing import Optional, Dict, Any

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception,
    before_sleep_log
)

logger = logging.getLogger(__name__)


class PeerServiceError(Exception):
    """Base class for failed peer-service calls."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class UpstreamUnavailable(PeerServiceError):
    """Peer unreachable or timed out."""
    pass


class NotFound(PeerServiceError):
    """Peer answered 404."""
    pass


class UpstreamError(PeerServiceError):
    """Peer answered with any other non-200 status or an unreadable body."""
    pass


def _is_retryable_error(exc: BaseException) -> bool:
    """
    Only retries on timeouts, connection errors and 5xx responses.

    Does NOT retry on client errors (4xx).
    """
    if isinstance(exc, (requests.Timeout, requests.ConnectionError)):
        return True
    if isinstance(exc, requests.HTTPError):
        response = getattr(exc, 'response', None)
        return response is None or response.status_code >= 500
    return False


class PeerClient:
    """
    Client for one peer service, owning a requests.Session for connection reuse.

    Subclasses call _get_json(); every outcome other than a 200 with a
    JSON body becomes a PeerServiceError subclass.
    """

    service_name = "peer"

    def __init__(
        self,
        base_url: str,
        request_timeout_seconds: float = 15.0,
        max_attempts: int = 3,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.request_timeout_seconds = request_timeout_seconds
        self.max_attempts = max_attempts
        self.session = session or requests.Session()

    def _send(self, path: str, token: Optional[str], params: Optional[Dict[str, Any]]) -> requests.Response:
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(0.5),
            retry=retry_if_exception(_is_retryable_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        def _attempt() -> requests.Response:
            response = self.session.get(
                f"{self.base_url}{path}",
                headers=headers,
                params=params,
                timeout=self.request_timeout_seconds
            )
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        return _attempt()

    def _get_json(
        self,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            response = self._send(path, token, params)
        except (requests.Timeout, requests.ConnectionError) as e:
            raise UpstreamUnavailable(self.service_name, f"unreachable: {e}") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise UpstreamError(self.service_name, f"HTTP {status}", status_code=status) from e
        except requests.RequestException as e:
            raise UpstreamUnavailable(self.service_name, str(e)) from e

        if response.status_code == 404:
            raise NotFound(self.service_name, f"{path} not found", status_code=404)
        if response.status_code != 200:
            raise UpstreamError(
                self.service_name,
                f"HTTP {response.status_code} from {path}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(self.service_name, f"invalid JSON from {path}", status_code=200) from e
