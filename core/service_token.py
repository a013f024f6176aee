"""
Process-wide cache of the match service's own bearer token.

The token is fetched from the resume service and reused until it is 23
hours old. When the resume service cannot be reached at refresh time a
token is signed locally with the shared secret instead.
"""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import requests

from core.auth import AuthVerifier, Role

logger = logging.getLogger(__name__)

FALLBACK_SUBJECT = "match-service-fallback"
FALLBACK_EMAIL = "match-service@internal.com"
SERVICE_NAME = "match-service"


class ServiceTokenCache:
    """
    Lazily refreshed {token, expiry} pair behind a lock.

    Callers only ever use get_token(); invalidate() forces the next call
    to refresh, e.g. after a peer rejected the token.
    """

    def __init__(
        self,
        token_url: str,
        verifier: AuthVerifier,
        ttl: timedelta = timedelta(hours=23),
        request_timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.token_url = token_url
        self.verifier = verifier
        self.ttl = ttl
        self.request_timeout_seconds = request_timeout_seconds
        self.session = session or requests.Session()
        self._clock = clock

        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._expires_at: Optional[datetime] = None

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._expires_at

    @property
    def is_cached(self) -> bool:
        return self._token is not None

    def get_token(self) -> str:
        with self._lock:
            if self._token and self._expires_at and self._clock() < self._expires_at:
                return self._token
            self._token = self._fetch_or_sign()
            self._expires_at = self._clock() + self.ttl
            return self._token

    def invalidate(self) -> None:
        with self._lock:
            self._token = None
            self._expires_at = None

    def _fetch_or_sign(self) -> str:
        try:
            response = self.session.get(self.token_url, timeout=self.request_timeout_seconds)
            response.raise_for_status()
            payload = response.json()
            token = payload.get("token") if isinstance(payload, dict) else None
            if not token:
                raise ValueError("token endpoint returned no token")
            logger.info("Service token fetched from %s", self.token_url)
            return token
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Could not fetch service token from {self.token_url}, signing locally: {e}")
            return self.verifier.issue(
                FALLBACK_SUBJECT,
                Role.SERVICE,
                lifetime=timedelta(hours=24),
                userId=FALLBACK_SUBJECT,
                email=FALLBACK_EMAIL,
                service=SERVICE_NAME,
            )
