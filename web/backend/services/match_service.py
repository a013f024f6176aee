#!/usr/bin/env python3
"""
Match service - business logic for stored match operations.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from core.exceptions import MatchNotFound
from core.matcher import AutoMatchResult, MatchRecordDTO
from database.models import Match
from database.repositories import MatchRepository
from ..models.responses import (
    AutoMatchItem,
    AutoMatchResponse,
    MatchJobSummary,
    MatchListResponse,
    MatchRecord,
    Pagination,
    SalaryRangeOut,
    ScoreBreakdown,
)

logger = logging.getLogger(__name__)


def to_match_record(match: Match) -> MatchRecord:
    return MatchRecord(
        match_id=match.match_id,
        resume_id=match.resume_id,
        job_id=match.job_id,
        candidate=dict(match.candidate or {}),
        job=dict(match.job or {}),
        matchingScore=match.matching_score,
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


def to_auto_match_item(match: MatchRecordDTO) -> AutoMatchItem:
    job = match.job
    return AutoMatchItem(
        match_id=match.match_id,
        job=MatchJobSummary(
            title=job.get('title'),
            company=job.get('company'),
            location=job.get('location'),
            category=job.get('category'),
            salary_range=SalaryRangeOut(min=job.get('salary_min'), max=job.get('salary_max')),
            redirect_url=job.get('redirect_url'),
        ),
        score=ScoreBreakdown(
            overall=match.overall_fit,
            skills=match.skills_match,
            experience=match.experience_match,
            education=match.education_match,
            location=match.location_match,
            salary=match.salary_compatibility,
            confidence=match.confidence,
            recommendation=match.recommendation,
        ),
        strengths=match.strengths,
        concerns=match.concerns,
        model_version=match.model_version,
        analyzed_at=match.analyzed_at,
    )


def to_auto_match_response(result: AutoMatchResult) -> AutoMatchResponse:
    return AutoMatchResponse(
        resume_id=result.resume_id,
        matches_found=result.matches_found,
        jobs_analyzed=result.jobs_analyzed,
        filters_applied=result.filters_applied,
        matches=[to_auto_match_item(m) for m in result.matches],
        generated_at=datetime.now(timezone.utc),
    )


class MatchService:
    """Service for reading and reviewing stored matches."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MatchRepository(db)

    def list_matches(
        self,
        resume_id: Optional[str] = None,
        job_id: Optional[str] = None,
        min_score: float = 0.0,
        max_score: float = 1.0,
        recommendation: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        sort_by: str = 'overallFit',
        sort_order: str = 'desc'
    ) -> MatchListResponse:
        """
        Filtered, sorted and paginated match listing.

        Unknown `sort_by` values fall back to newest first.
        """
        matches, total = self.repo.list_matches(
            resume_id=resume_id,
            job_id=job_id,
            min_score=min_score,
            max_score=max_score,
            recommendation=recommendation,
            status=status,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return MatchListResponse(
            matches=[to_match_record(m) for m in matches],
            pagination=Pagination(
                current_page=page,
                per_page=limit,
                total_pages=math.ceil(total / limit) if limit else 0,
                total_matches=total,
            )
        )

    def get_match(self, match_id: str) -> MatchRecord:
        match = self.repo.get_by_match_id(match_id)
        if match is None:
            raise MatchNotFound(f"Match not found: {match_id}")
        return to_match_record(match)

    def update_status(self, match_id: str, status: str) -> MatchRecord:
        match = self.repo.update_status(match_id, status)
        if match is None:
            raise MatchNotFound(f"Match not found: {match_id}")
        self.db.commit()
        logger.info(f"Match {match_id} status set to {status}")
        return to_match_record(match)

    def mark_viewed(self, match_id: str) -> MatchRecord:
        match = self.repo.mark_viewed(match_id)
        if match is None:
            raise MatchNotFound(f"Match not found: {match_id}")
        self.db.commit()
        return to_match_record(match)

    def toggle_bookmark(self, match_id: str) -> MatchRecord:
        match = self.repo.toggle_bookmark(match_id)
        if match is None:
            raise MatchNotFound(f"Match not found: {match_id}")
        self.db.commit()
        return to_match_record(match)

    def delete_match(self, match_id: str) -> None:
        if not self.repo.delete_match(match_id):
            raise MatchNotFound(f"Match not found: {match_id}")
        self.db.commit()
