#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

Everything is read from `app.state`, populated by create_app(), so tests
can build an app around a temporary database and fake collaborators.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from core.matcher import MatchOrchestrator
from core.service_token import ServiceTokenCache
from database.database import Database


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @router.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...
    """
    yield from get_database(request).get_session()


def get_orchestrator(request: Request) -> MatchOrchestrator:
    return request.app.state.orchestrator


def get_token_cache(request: Request) -> ServiceTokenCache:
    return request.app.state.token_cache
