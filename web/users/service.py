#!/usr/bin/env python3
"""
User service - account registration, credential checks and token issue.
"""

import logging
import math
from datetime import timedelta

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.auth import AuthVerifier, Claims, Role
from core.exceptions import Conflict, Forbidden, UserNotFound, ValidationFailed
from database.models import User
from database.repositories import UserRepository
from .models import (
    LoginResponse,
    RegisterRequest,
    UpdateUserRequest,
    UserDetail,
    UserListResponse,
    UserOut,
    UserPagination,
)

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def to_user_out(user: User) -> UserOut:
    return UserOut(id=user.id, username=user.username, email=user.email, role=user.role)


def to_user_detail(user: User) -> UserDetail:
    return UserDetail(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserService:
    """Service for user accounts."""

    def __init__(self, db: Session, verifier: AuthVerifier, token_lifetime_hours: int = 24):
        self.db = db
        self.repo = UserRepository(db)
        self.verifier = verifier
        self.token_lifetime = timedelta(hours=token_lifetime_hours)

    def register(self, request: RegisterRequest) -> UserOut:
        if self.repo.exists(request.email, request.username):
            raise Conflict(DUPLICATE_USER_MESSAGE)
        try:
            user = self.repo.create_user(
                username=request.username,
                email=request.email,
                password_hash=hash_password(request.password),
                role=request.role,
            )
            self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent registration
            self.db.rollback()
            raise Conflict(DUPLICATE_USER_MESSAGE)
        return to_user_out(user)

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Check credentials and issue a 24h token carrying id, username,
        email and role. Unknown email and wrong password look the same.
        """
        user = self.repo.get_by_email(email)
        if user is None or not check_password(password, user.password_hash):
            raise ValidationFailed("Invalid credentials")

        token = self.verifier.issue(
            user.id,
            Role(user.role),
            lifetime=self.token_lifetime,
            username=user.username,
            email=user.email,
        )
        logger.info(f"User {user.id} logged in")
        return LoginResponse(token=token, user=to_user_out(user))

    def get_user(self, user_id: str) -> UserDetail:
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound("User not found")
        return to_user_detail(user)

    def update_user(self, user_id: str, request: UpdateUserRequest, claims: Claims) -> UserOut:
        """Users may edit themselves; only admins may edit others or change roles."""
        is_admin = claims.role == Role.ADMIN
        if claims.subject_id != user_id and not is_admin:
            raise Forbidden()
        if request.role is not None and not is_admin:
            raise Forbidden()

        user = self.repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound("User not found")

        if request.username is not None:
            user.username = request.username
        if request.email is not None:
            user.email = request.email
        if request.role is not None:
            user.role = request.role
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict(DUPLICATE_USER_MESSAGE)
        return to_user_out(user)

    def list_users(self, page: int = 1, limit: int = 20) -> UserListResponse:
        users, total = self.repo.list_users(page=page, limit=limit)
        return UserListResponse(
            users=[to_user_detail(u) for u in users],
            pagination=UserPagination(
                current_page=page,
                per_page=limit,
                total_pages=math.ceil(total / limit) if limit else 0,
                total_users=total,
            )
        )
