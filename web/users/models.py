#!/usr/bin/env python3
"""
Request and response models for the user service.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    role: Literal["candidate", "recruiter", "admin"] = "candidate"

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class LoginRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class UpdateUserRequest(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    role: Optional[Literal["candidate", "recruiter", "admin"]] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_email(v) if v is not None else v


class UserOut(BaseModel):
    id: str
    username: str
    email: str
    role: str


class UserDetail(UserOut):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    token: str
    user: UserOut


class UserPagination(BaseModel):
    current_page: int
    per_page: int
    total_pages: int
    total_users: int


class UserListResponse(BaseModel):
    users: List[UserDetail]
    pagination: UserPagination
