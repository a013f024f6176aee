"""Pydantic request/response models for the match service."""
