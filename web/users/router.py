#!/usr/bin/env python3
"""
User endpoints - register, login, profile and admin listing.
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.auth import Claims, Role
from web.shared.security import require_claims, require_role
from .models import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UpdateUserRequest,
    UserDetail,
    UserListResponse,
    UserOut,
)
from .service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_db(request: Request):
    yield from request.app.state.database.get_session()


def get_user_service(request: Request, db: Session = Depends(get_db)) -> UserService:
    config = request.app.state.config
    return UserService(db, request.app.state.auth_verifier, config.auth.token_lifetime_hours)


@router.post("/register", response_model=UserOut, status_code=201)
def register(body: RegisterRequest, service: UserService = Depends(get_user_service)):
    """Create an account. Open to anonymous callers."""
    return service.register(body)


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, service: UserService = Depends(get_user_service)):
    return service.login(body.email, body.password)


@router.get("", response_model=UserListResponse, dependencies=[Depends(require_role(Role.ADMIN))])
def list_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    service: UserService = Depends(get_user_service)
):
    """Paginated user list, newest first. Admin only."""
    return service.list_users(page=page, limit=limit)


@router.get("/{user_id}", response_model=UserDetail, dependencies=[Depends(require_claims)])
def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return service.get_user(user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    body: UpdateUserRequest,
    claims: Claims = Depends(require_claims),
    service: UserService = Depends(get_user_service)
):
    return service.update_user(user_id, body, claims)
