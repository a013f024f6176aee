"""Pieces shared by the gateway, match and user FastAPI apps."""
