#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class AutoMatchRequest(BaseModel):
    """
    Request to run an auto-match for one resume.

    `filters` is validated by the orchestrator so that range errors surface
    as InvalidFilter with the same message whether the call comes over HTTP
    or from Python.
    """
    resume_id: str = Field(..., min_length=1, description="Resume to match against open jobs")
    filters: Optional[Dict[str, Any]] = Field(
        default=None,
        description="min_score_threshold, max_matches, categories, salary_range, locations"
    )


class StatusUpdate(BaseModel):
    """Reviewer status change."""
    status: Literal["pending", "analyzed", "reviewed", "shortlisted", "rejected"]
