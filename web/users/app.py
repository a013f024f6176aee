#!/usr/bin/env python3
"""
TalentMatch User Service - FastAPI Application

Usage:
    python main.py users
"""

import logging
from typing import Optional

from fastapi import FastAPI

from core.auth import AuthVerifier
from core.config_loader import AppConfig, get_config
from database.database import Database
from web.shared.exceptions import register_exception_handlers
from .router import router as users_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None, database: Optional[Database] = None) -> FastAPI:
    config = config or get_config()

    app = FastAPI(
        title="TalentMatch User Service",
        description="Registration, login and user administration",
        version="1.0.0"
    )
    app.state.config = config
    app.state.auth_verifier = AuthVerifier(config.auth.jwt_secret, config.auth.algorithm)
    app.state.database = database or Database(config.database.url)

    register_exception_handlers(app)
    app.include_router(users_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "user-service"}

    return app
