#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SalaryRangeOut(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class MatchJobSummary(BaseModel):
    """Job snapshot captured when the match was created."""
    title: Optional[str] = None
    company: Any = None
    location: Any = None
    category: Any = None
    salary_range: SalaryRangeOut
    redirect_url: Optional[str] = None


class ScoreBreakdown(BaseModel):
    overall: float = Field(ge=0, le=1)
    skills: Optional[float] = None
    experience: Optional[float] = None
    education: Optional[float] = None
    location: Optional[float] = None
    salary: Optional[float] = None
    confidence: Optional[float] = None
    recommendation: str


class AutoMatchItem(BaseModel):
    match_id: str
    job: MatchJobSummary
    score: ScoreBreakdown
    strengths: List[str] = []
    concerns: List[str] = []
    model_version: Optional[str] = None
    analyzed_at: Optional[datetime] = None


class AutoMatchResponse(BaseModel):
    """Result of an auto-match run."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "resume_id": "r-123",
                "matches_found": 1,
                "jobs_analyzed": 5,
                "filters_applied": {"min_score_threshold": 0.6, "max_matches": 5},
                "matches": [{
                    "match_id": "match_3f1c2a9b7d10",
                    "job": {
                        "title": "Backend Engineer",
                        "company": {"display_name": "Acme"},
                        "location": {"display_name": "London"},
                        "category": {"tag": "it-jobs", "label": "IT Jobs"},
                        "salary_range": {"min": 60000, "max": 80000},
                        "redirect_url": "https://example.com/jobs/1"
                    },
                    "score": {
                        "overall": 0.82, "skills": 0.9, "experience": 0.8,
                        "education": 0.7, "location": 1.0, "salary": 0.6,
                        "confidence": 0.85, "recommendation": "recommended"
                    },
                    "strengths": ["Strong Python background"],
                    "concerns": [],
                    "model_version": "gpt-4o-mini",
                    "analyzed_at": "2026-02-01T12:00:00Z"
                }],
                "generated_at": "2026-02-01T12:00:01Z"
            }
        }
    )

    resume_id: str
    matches_found: int
    jobs_analyzed: int
    filters_applied: Dict[str, Any]
    matches: List[AutoMatchItem]
    generated_at: datetime


class MatchRecord(BaseModel):
    """Full persisted match."""
    match_id: str
    resume_id: str
    job_id: str
    candidate: Dict[str, Any]
    job: Dict[str, Any]
    matchingScore: Dict[str, Any]
    status: str
    viewed: bool
    viewed_at: Optional[datetime] = None
    bookmarked: bool
    bookmarked_at: Optional[datetime] = None
    model_version: Optional[str] = None
    processing_time_ms: Optional[int] = None
    analyzed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total_pages: int
    total_matches: int


class MatchListResponse(BaseModel):
    matches: List[MatchRecord]
    pagination: Pagination


class DeleteMatchResponse(BaseModel):
    success: bool
    match_id: str


class ServiceTokenResponse(BaseModel):
    token: str
    authorization_header: str
    service: str
    cached: bool
    expires_at: Optional[datetime] = None
