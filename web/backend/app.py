#!/usr/bin/env python3
"""
TalentMatch Match Service - FastAPI Application

Runs auto-matching of resumes against open jobs and serves the stored
matches to reviewers.

Usage:
    python main.py matches

Then open:
    - http://localhost:4004/docs - API Documentation (Swagger UI)
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.auth import AuthVerifier
from core.clients import ProfileFetcher, JobFetcher
from core.config_loader import AppConfig, get_config
from core.llm import LLMProvider, OpenAIService
from core.matcher import MatchOrchestrator
from core.scorer import MatchScorer
from core.service_token import ServiceTokenCache
from database.database import Database
from database.uow import match_uow_factory
from web.shared.exceptions import register_exception_handlers
from .routers import matches_router, auth_router

logger = logging.getLogger(__name__)

SERVICE_NAME = "match-service"


def build_token_cache(config: AppConfig, verifier: AuthVerifier) -> ServiceTokenCache:
    return ServiceTokenCache(
        token_url=f"{config.services.resume_service_url.rstrip('/')}/auth/token",
        verifier=verifier,
        ttl=timedelta(hours=config.matching.service_token_ttl_hours),
        request_timeout_seconds=config.matching.request_timeout_seconds,
    )


def build_orchestrator(
    config: AppConfig,
    database: Database,
    oracle: LLMProvider,
    token_cache: ServiceTokenCache
) -> MatchOrchestrator:
    timeout = config.matching.request_timeout_seconds
    return MatchOrchestrator(
        profile_fetcher=ProfileFetcher(config.services.resume_service_url, request_timeout_seconds=timeout),
        job_fetcher=JobFetcher(config.services.job_service_url, request_timeout_seconds=timeout),
        scorer=MatchScorer(
            oracle,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
        ),
        match_uow=match_uow_factory(database),
        token_cache=token_cache,
        config=config.matching,
    )


def create_app(
    config: Optional[AppConfig] = None,
    database: Optional[Database] = None,
    orchestrator: Optional[MatchOrchestrator] = None,
    token_cache: Optional[ServiceTokenCache] = None,
    oracle: Optional[LLMProvider] = None
) -> FastAPI:
    """
    Build the match service app. Collaborators not passed in are built
    from `config`.
    """
    config = config or get_config()
    verifier = AuthVerifier(config.auth.jwt_secret, config.auth.algorithm)
    database = database or Database(config.database.url)
    oracle = oracle or OpenAIService.from_config(config.llm)
    token_cache = token_cache or build_token_cache(config, verifier)
    orchestrator = orchestrator or build_orchestrator(config, database, oracle, token_cache)

    app = FastAPI(
        title="TalentMatch Match Service",
        description="Candidate-to-job matching with an LLM scoring oracle",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.config = config
    app.state.auth_verifier = verifier
    app.state.database = database
    app.state.oracle = oracle
    app.state.token_cache = token_cache
    app.state.orchestrator = orchestrator

    register_exception_handlers(app)

    app.include_router(matches_router)
    app.include_router(auth_router)

    @app.get("/health")
    def health_check(request: Request):
        """
        Health check endpoint. 503 when the database is unreachable.

        An unavailable oracle leaves the service healthy, since scoring
        degrades to fallback results.
        """
        try:
            request.app.state.database.ping()
        except SQLAlchemyError as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "service": SERVICE_NAME, "error": "Database unavailable"}
            )
        oracle = request.app.state.oracle
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "database": "connected",
            "oracle": "available" if oracle.test_connection() else "unavailable",
            "oracle_model": getattr(oracle, "model_name", None),
        }

    return app
