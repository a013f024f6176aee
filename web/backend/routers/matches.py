#!/usr/bin/env python3
"""
Match endpoints - auto-match, listing and reviewer actions.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import Claims
from core.matcher import MatchOrchestrator
from web.shared.security import require_claims
from ..dependencies import get_db, get_orchestrator
from ..models.requests import AutoMatchRequest, StatusUpdate
from ..models.responses import (
    AutoMatchResponse,
    DeleteMatchResponse,
    MatchListResponse,
    MatchRecord,
)
from ..services.match_service import MatchService, to_auto_match_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["matches"], dependencies=[Depends(require_claims)])


@router.get("", response_model=MatchListResponse)
def get_matches(
    resume_id: Optional[str] = Query(default=None),
    job_id: Optional[str] = Query(default=None),
    min_score: float = Query(default=0.0, ge=0, le=1),
    max_score: float = Query(default=1.0, ge=0, le=1),
    recommendation: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    sort_by: str = Query(default="overallFit", description="overallFit or createdAt"),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db)
):
    """
    List stored matches.

    Filterable by resume, job, score range, recommendation and status;
    sorted by overall fit (default) or creation time.
    """
    return MatchService(db).list_matches(
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


@router.post("/auto-match", response_model=AutoMatchResponse)
def auto_match(
    body: AutoMatchRequest,
    claims: Claims = Depends(require_claims),
    orchestrator: MatchOrchestrator = Depends(get_orchestrator)
):
    """
    Find the best open jobs for a resume.

    Runs in a worker thread; the per-job oracle calls fan out on the
    orchestrator's own pool.
    """
    logger.info(f"Auto-match requested by {claims.subject_id} ({claims.role.value}) for resume {body.resume_id}")
    result = orchestrator.auto_match(body.resume_id, body.filters)
    return to_auto_match_response(result)


@router.get("/{match_id}", response_model=MatchRecord)
def get_match(match_id: str, db: Session = Depends(get_db)):
    return MatchService(db).get_match(match_id)


@router.patch("/{match_id}/status", response_model=MatchRecord)
def update_match_status(match_id: str, body: StatusUpdate, db: Session = Depends(get_db)):
    """Set the reviewer status of a match."""
    return MatchService(db).update_status(match_id, body.status)


@router.post("/{match_id}/view", response_model=MatchRecord)
def mark_match_viewed(match_id: str, db: Session = Depends(get_db)):
    return MatchService(db).mark_viewed(match_id)


@router.post("/{match_id}/bookmark", response_model=MatchRecord)
def toggle_match_bookmark(match_id: str, db: Session = Depends(get_db)):
    """Toggle the bookmark flag. Returns the updated match."""
    return MatchService(db).toggle_bookmark(match_id)


@router.delete("/{match_id}", response_model=DeleteMatchResponse)
def delete_match(match_id: str, db: Session = Depends(get_db)):
    MatchService(db).delete_match(match_id)
    return DeleteMatchResponse(success=True, match_id=match_id)
