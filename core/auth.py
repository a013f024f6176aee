"""
Auth Verifier - HS256 bearer token signing and verification.

Tokens are issued by the user service (login) and by the match service
(service-to-service fallback token). Every service verifies them against
the same shared secret; nothing is looked up in a store.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

import jwt

from core.exceptions import InvalidToken, MissingToken

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class Role(str, Enum):
    CANDIDATE = "candidate"
    RECRUITER = "recruiter"
    ADMIN = "admin"
    SERVICE = "service"


@dataclass(frozen=True)
class Claims:
    """Verified identity attributes carried by a bearer token."""
    subject_id: str
    role: Role
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    email: Optional[str] = None
    username: Optional[str] = None


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an `Authorization: Bearer <token>` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingToken()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingToken()
    return token


class AuthVerifier:
    """Verifies bearer tokens and issues new ones with the shared secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def verify(self, token: Optional[str]) -> Claims:
        """
        Verify a token's signature and expiry and return its claims.

        Raises:
            MissingToken: token is empty or absent.
            InvalidToken: bad signature, expired, or missing subject/role.
        """
        if not token:
            raise MissingToken()

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise InvalidToken(details="Token expired")
        except jwt.InvalidTokenError as e:
            raise InvalidToken(details=str(e))

        return self._to_claims(payload)

    def verify_header(self, authorization: Optional[str]) -> Claims:
        return self.verify(extract_bearer_token(authorization))

    def issue(
        self,
        subject_id: str,
        role: Role,
        lifetime: timedelta = timedelta(hours=24),
        **extra: Any,
    ) -> str:
        """Sign a token. `extra` keys are copied into the payload as-is."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "id": subject_id,
            "role": Role(role).value,
            "iat": now,
            "exp": now + lifetime,
        }
        payload.update(extra)
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    @staticmethod
    def _to_claims(payload: Dict[str, Any]) -> Claims:
        # user tokens carry `id`, service tokens `userId`
        subject = payload.get("id") or payload.get("userId") or payload.get("sub")
        if not subject:
            raise InvalidToken(details="Token has no subject")

        try:
            role = Role(payload.get("role"))
        except ValueError:
            raise InvalidToken(details=f"Unknown role: {payload.get('role')!r}")

        return Claims(
            subject_id=str(subject),
            role=role,
            issued_at=_timestamp(payload.get("iat")),
            expires_at=_timestamp(payload.get("exp")),
            email=payload.get("email"),
            username=payload.get("username"),
        )
