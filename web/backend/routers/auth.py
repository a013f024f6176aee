#!/usr/bin/env python3
"""
Service token endpoint - exposes the match service's cached peer token.
"""

from fastapi import APIRouter, Depends

from core.service_token import ServiceTokenCache, SERVICE_NAME
from ..dependencies import get_token_cache
from ..models.responses import ServiceTokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/token", response_model=ServiceTokenResponse)
def get_service_token(token_cache: ServiceTokenCache = Depends(get_token_cache)):
    """Current token used for calls to the resume and job services."""
    cached = token_cache.is_cached
    token = token_cache.get_token()
    return ServiceTokenResponse(
        token=token,
        authorization_header=f"Bearer {token}",
        service=SERVICE_NAME,
        cached=cached,
        expires_at=token_cache.expires_at,
    )
