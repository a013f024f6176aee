"""API route handlers."""

from .matches import router as matches_router
from .auth import router as auth_router
