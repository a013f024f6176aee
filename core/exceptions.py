#!/usr/bin/env python3
"""
Domain exceptions shared by the gateway, match and user services.

Each exception carries the HTTP status it maps to at the API boundary;
web/shared/exceptions.py turns them into `{"error": ..., "details": ...}`.
"""

from typing import Optional


class ServiceException(Exception):
    """Base exception for service layer errors."""
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class AuthError(ServiceException):
    """Bearer token could not be accepted."""
    status_code = 401


class MissingToken(AuthError):
    status_code = 401

    def __init__(self, message: str = "Missing token", details: Optional[str] = None):
        super().__init__(message, details)


class InvalidToken(AuthError):
    status_code = 403

    def __init__(self, message: str = "Invalid token", details: Optional[str] = None):
        super().__init__(message, details)


class Forbidden(AuthError):
    """Valid token, but the role is not allowed on this endpoint."""
    status_code = 403

    def __init__(self, message: str = "Forbidden: insufficient role", details: Optional[str] = None):
        super().__init__(message, details)


class ValidationFailed(ServiceException):
    """Malformed input; the caller must fix the request."""
    status_code = 400


class InvalidFilter(ValidationFailed):
    """Auto-match filters out of range."""
    pass


class Conflict(ServiceException):
    status_code = 400


class NotFound(ServiceException):
    status_code = 404


class MatchNotFound(NotFound):
    pass


class UserNotFound(NotFound):
    pass


class ProfileUnavailable(ServiceException):
    """Candidate profile could not be fetched; auto-match cannot proceed."""
    status_code = 400

    def __init__(
        self,
        message: str = "Unable to fetch candidate profile",
        details: Optional[str] = "Resume analysis may be required first",
    ):
        super().__init__(message, details)


class JobsUnavailable(ServiceException):
    """Job list could not be fetched from the job service."""
    status_code = 502

    def __init__(self, message: str = "Unable to fetch jobs", details: Optional[str] = None):
        super().__init__(message, details)
