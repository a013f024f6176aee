#!/usr/bin/env python3
"""
Bearer-token dependencies for FastAPI routes.

The verifier lives on `app.state.auth_verifier`; each app sets it in its
factory so tests can swap secrets without touching module globals.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from core.auth import AuthVerifier, Claims, Role
from core.exceptions import Forbidden


def get_auth_verifier(request: Request) -> AuthVerifier:
    return request.app.state.auth_verifier


def require_claims(
    authorization: Optional[str] = Header(default=None),
    verifier: AuthVerifier = Depends(get_auth_verifier)
) -> Claims:
    """Verify the Authorization header; raises MissingToken / InvalidToken."""
    return verifier.verify_header(authorization)


def require_role(*roles: Role):
    """
    Dependency factory that admits only the given roles.

    Usage:
        @router.get("", dependencies=[Depends(require_role(Role.ADMIN))])
    """
    allowed = {Role(r) for r in roles}

    def _check(claims: Claims = Depends(require_claims)) -> Claims:
        if claims.role not in allowed:
            raise Forbidden()
        return claims

    return _check
