import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from database.models import Match
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    'overallFit': Match.overall_fit,
    'createdAt': Match.created_at,
}


class MatchRepository(BaseRepository):
    def get_existing_match(self, resume_id: str, job_id: str) -> Optional[Match]:
        stmt = select(Match).where(
            Match.resume_id == resume_id,
            Match.job_id == job_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_match_id(self, match_id: str) -> Optional[Match]:
        stmt = select(Match).where(Match.match_id == match_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_or_get(self, match: Match) -> Tuple[Match, bool]:
        """
        Insert `match` unless its (resume_id, job_id) pair already exists.

        The unique constraint decides: a duplicate-key error means another
        writer got there first, and that row is returned instead.

        Must be the only write in its unit of work, since a conflict
        rolls the session back.

        Returns:
            (match, created)
        """
        self.db.add(match)
        try:
            self.db.flush()
            return match, True
        except IntegrityError:
            self.db.rollback()
            existing = self.get_existing_match(match.resume_id, match.job_id)
            if existing is None:
                # conflict was on something other than the pair
                raise
            logger.info(
                f"Match for resume {match.resume_id} / job {match.job_id} already exists, reusing"
            )
            return existing, False

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
        sort_order: str = 'desc',
    ) -> Tuple[List[Match], int]:
        conditions = [
            Match.overall_fit >= min_score,
            Match.overall_fit <= max_score,
        ]
        if resume_id:
            conditions.append(Match.resume_id == resume_id)
        if job_id:
            conditions.append(Match.job_id == job_id)
        if recommendation:
            conditions.append(Match.recommendation == recommendation)
        if status:
            conditions.append(Match.status == status)

        total = self.db.execute(
            select(func.count()).select_from(Match).where(*conditions)
        ).scalar_one()

        column = SORT_COLUMNS.get(sort_by)
        if column is None:
            order = Match.created_at.desc()
        else:
            order = column.asc() if sort_order == 'asc' else column.desc()

        stmt = (
            select(Match)
            .where(*conditions)
            .order_by(order, Match.match_id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return self.db.execute(stmt).scalars().all(), total

    def update_status(self, match_id: str, status: str) -> Optional[Match]:
        match = self.get_by_match_id(match_id)
        if match is None:
            return None
        match.status = status
        self.db.flush()
        return match

    def mark_viewed(self, match_id: str) -> Optional[Match]:
        match = self.get_by_match_id(match_id)
        if match is None:
            return None
        if not match.viewed:
            match.viewed = True
            match.viewed_at = datetime.now(timezone.utc)
            self.db.flush()
        return match

    def toggle_bookmark(self, match_id: str) -> Optional[Match]:
        match = self.get_by_match_id(match_id)
        if match is None:
            return None
        match.bookmarked = not (match.bookmarked or False)
        match.bookmarked_at = datetime.now(timezone.utc) if match.bookmarked else None
        self.db.flush()
        return match

    def delete_match(self, match_id: str) -> bool:
        match = self.get_by_match_id(match_id)
        if match is None:
            return False
        self.db.delete(match)
        self.db.flush()
        logger.info(f"Deleted match {match_id}")
        return True
