"""Data Transfer Objects for the match orchestrator.

DTOs are used to transfer data outside of the Unit of Work context,
allowing ORM objects to be converted to plain Python objects that
can be safely used after the database session is closed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.models import Match


@dataclass
class MatchRecordDTO:
    """Persisted match, detached from its session."""
    match_id: str
    resume_id: str
    job_id: str
    candidate: Dict[str, Any]
    job: Dict[str, Any]
    overall_fit: float
    confidence: Optional[float]
    skills_match: Optional[float]
    experience_match: Optional[float]
    education_match: Optional[float]
    location_match: Optional[float]
    salary_compatibility: Optional[float]
    recommendation: str
    strengths: List[str] = field(default_factory=list)
    concerns: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    reasoning: Optional[str] = None
    key_insights: List[str] = field(default_factory=list)
    status: str = "analyzed"
    viewed: bool = False
    viewed_at: Optional[datetime] = None
    bookmarked: bool = False
    bookmarked_at: Optional[datetime] = None
    model_version: Optional[str] = None
    processing_time_ms: Optional[int] = None
    analyzed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, match: Match) -> "MatchRecordDTO":
        return cls(
            match_id=match.match_id,
            resume_id=match.resume_id,
            job_id=match.job_id,
            candidate=dict(match.candidate or {}),
            job=dict(match.job or {}),
            overall_fit=float(match.overall_fit),
            confidence=match.confidence,
            skills_match=match.skills_match,
            experience_match=match.experience_match,
            education_match=match.education_match,
            location_match=match.location_match,
            salary_compatibility=match.salary_compatibility,
            recommendation=match.recommendation or "consider",
            strengths=list(match.strengths or []),
            concerns=list(match.concerns or []),
            recommendations=list(match.recommendations or []),
            reasoning=match.reasoning,
            key_insights=list(match.key_insights or []),
            status=match.status,
            viewed=bool(match.viewed),
            viewed_at=match.viewed_at,
            bookmarked=bool(match.bookmarked),
            bookmarked_at=match.bookmarked_at,
            model_version=match.model_version,
            processing_time_ms=match.processing_time_ms,
            analyzed_at=match.analyzed_at,
            created_at=match.created_at,
        )


@dataclass
class AutoMatchResult:
    """Outcome of one auto-match run."""
    resume_id: str
    matches: List[MatchRecordDTO]
    jobs_analyzed: int
    filters_applied: Dict[str, Any]
    newly_created: int = 0
    reused: int = 0
    failed: int = 0

    @property
    def matches_found(self) -> int:
        return len(self.matches)
