import hashlib
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Text, String, Float, Boolean, Integer, DateTime, JSON, UniqueConstraint, Index

from .base import Base


def _utcnow():
    return datetime.now(timezone.utc)


def generate_match_id(resume_id: str, job_id: str) -> str:
    """Deterministic public id for a (resume, job) pair."""
    digest = hashlib.sha256(f"{resume_id}-{job_id}".encode('utf-8')).hexdigest()
    return f"match_{digest[:12]}"


class Match(Base):
    """
    Compatibility analysis between one resume and one job posting.

    Candidate and job summaries are snapshots taken at match time and are
    not kept in sync with their source services. Exactly one row exists
    per (resume_id, job_id).
    """
    __tablename__ = 'match'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    match_id = Column(String(64), nullable=False, unique=True)
    resume_id = Column(Text, nullable=False)
    job_id = Column(Text, nullable=False)

    # Snapshots: {name, email, resume_filename} / {title, company, location, category, salary_min, salary_max, redirect_url}
    candidate = Column(JSON, default=dict)
    job = Column(JSON, default=dict)

    # matchingScore, flattened so it can be filtered and sorted on
    overall_fit = Column(Float, nullable=False)
    confidence = Column(Float)
    skills_match = Column(Float)
    experience_match = Column(Float)
    education_match = Column(Float)
    location_match = Column(Float)
    salary_compatibility = Column(Float)
    recommendation = Column(String(32), default='consider')
    strengths = Column(JSON, default=list)
    concerns = Column(JSON, default=list)
    recommendations = Column(JSON, default=list)
    reasoning = Column(Text)
    key_insights = Column(JSON, default=list)

    status = Column(String(32), nullable=False, default='analyzed')
    viewed = Column(Boolean, nullable=False, default=False)
    viewed_at = Column(DateTime(timezone=True))
    bookmarked = Column(Boolean, nullable=False, default=False)
    bookmarked_at = Column(DateTime(timezone=True))

    model_version = Column(Text)
    processing_time_ms = Column(Integer)

    analyzed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint('resume_id', 'job_id', name='uq_match_resume_job'),
        Index('idx_match_resume', 'resume_id'),
        Index('idx_match_job', 'job_id'),
        Index('idx_match_overall_fit', 'overall_fit'),
        Index('idx_match_recommendation', 'recommendation'),
        Index('idx_match_status', 'status'),
        Index('idx_match_created', 'created_at'),
        Index('idx_match_analyzed', 'analyzed_at'),
    )

    @property
    def matching_score(self) -> dict:
        return {
            'overallFit': self.overall_fit,
            'confidence': self.confidence,
            'skillsMatch': self.skills_match,
            'experienceMatch': self.experience_match,
            'educationMatch': self.education_match,
            'locationMatch': self.location_match,
            'salaryCompatibility': self.salary_compatibility,
            'recommendation': self.recommendation,
            'strengths': list(self.strengths or []),
            'concerns': list(self.concerns or []),
            'recommendations': list(self.recommendations or []),
            'reasoning': self.reasoning,
            'keyInsights': list(self.key_insights or []),
        }
