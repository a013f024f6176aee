#!/usr/bin/env python3
"""
Match Orchestrator - the auto-match workflow.

For one resume:
1. Fetch the candidate profile (abort the run if unavailable)
2. Fetch up to `job_fetch_limit` jobs (an empty list is not an error)
3. Filter by category, salary overlap and location
4. Truncate to `max_matches` jobs, which caps oracle calls
5. Per job, concurrently: reuse an existing match, or score, drop below
   threshold, and find-or-create the Match row
6. Sort survivors by overall fit, descending and stable

One job failing never blocks its siblings; it is logged and left out.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.clients import ProfileFetcher, JobFetcher, PeerServiceError
from core.config_loader import MatchingConfig
from core.exceptions import ProfileUnavailable, JobsUnavailable, ValidationFailed
from core.matcher.dto import MatchRecordDTO, AutoMatchResult
from core.matcher.filters import AutoMatchFilters, parse_filters, apply_filters
from core.scorer import MatchScorer, ScoreResult
from database.models import Match, generate_match_id
from database.uow import MatchUowFactory

logger = logging.getLogger(__name__)


@dataclass
class _JobOutcome:
    match: Optional[MatchRecordDTO] = None
    reused: bool = False
    created: bool = False


def _candidate_snapshot(profile: Dict[str, Any]) -> Dict[str, Any]:
    personal = profile.get('personalInfo') if isinstance(profile.get('personalInfo'), dict) else {}
    return {
        'name': personal.get('name') or 'Unknown',
        'email': personal.get('email') or '',
        'resume_filename': profile.get('original_name') or '',
    }


def _job_snapshot(job: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'title': job.get('title'),
        'company': job.get('company') or {},
        'location': job.get('location') or {},
        'category': job.get('category') or {},
        'salary_min': job.get('salary_min'),
        'salary_max': job.get('salary_max'),
        'redirect_url': job.get('redirect_url'),
    }


def _unique_jobs(jobs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop jobs without an id and repeats of an id, keeping fetch order."""
    seen = set()
    unique = []
    for job in jobs:
        job_id = job.get('job_id')
        if not job_id:
            logger.warning("Skipping job without job_id")
            continue
        if str(job_id) in seen:
            logger.debug(f"Skipping repeated job {job_id}")
            continue
        seen.add(str(job_id))
        unique.append(job)
    return unique


def build_match(
    resume_id: str,
    job: Dict[str, Any],
    profile: Dict[str, Any],
    result: ScoreResult
) -> Match:
    """Assemble a new Match row from a score result."""
    score = result.matching_score
    job_id = str(job['job_id'])
    return Match(
        match_id=generate_match_id(resume_id, job_id),
        resume_id=resume_id,
        job_id=job_id,
        candidate=_candidate_snapshot(profile),
        job=_job_snapshot(job),
        overall_fit=score.overall_fit,
        confidence=score.confidence,
        skills_match=score.skills_match,
        experience_match=score.experience_match,
        education_match=score.education_match,
        location_match=score.location_match,
        salary_compatibility=score.salary_compatibility,
        recommendation=score.recommendation,
        strengths=score.strengths,
        concerns=score.concerns,
        recommendations=score.recommendations,
        reasoning=score.reasoning,
        key_insights=score.key_insights,
        status='analyzed',
        model_version=result.model_version,
        processing_time_ms=result.processing_time_ms,
        analyzed_at=datetime.now(timezone.utc),
    )


class MatchOrchestrator:
    """
    Coordinates profile retrieval, job retrieval and per-job scoring.

    Args:
        profile_fetcher: client for the resume service
        job_fetcher: client for the job service
        scorer: MatchScorer (never raises)
        match_uow: factory of per-unit-of-work MatchRepository scopes
        token_cache: object with get_token() and invalidate()
        config: MatchingConfig (job fetch limit, worker bound)
    """

    def __init__(
        self,
        profile_fetcher: ProfileFetcher,
        job_fetcher: JobFetcher,
        scorer: MatchScorer,
        match_uow: MatchUowFactory,
        token_cache,
        config: Optional[MatchingConfig] = None
    ):
        self.profile_fetcher = profile_fetcher
        self.job_fetcher = job_fetcher
        self.scorer = scorer
        self.match_uow = match_uow
        self.token_cache = token_cache
        self.config = config or MatchingConfig()

    def auto_match(self, resume_id: str, filters: Optional[Any] = None) -> AutoMatchResult:
        """
        Run one auto-match for `resume_id`.

        Raises:
            ValidationFailed / InvalidFilter: before any network call.
            ProfileUnavailable: the profile could not be fetched.
            JobsUnavailable: the job list could not be fetched.
        """
        if not isinstance(resume_id, str) or not resume_id.strip():
            raise ValidationFailed("resume_id is required")
        parsed = parse_filters(filters)

        profile = self._fetch_profile(resume_id)
        jobs = self._fetch_jobs()

        filtered = apply_filters(jobs, parsed)
        candidates = _unique_jobs(filtered)[:parsed.max_matches]

        logger.info(
            f"Auto-match for resume {resume_id}: {len(jobs)} jobs fetched, "
            f"{len(filtered)} after filters, {len(candidates)} to analyze"
        )

        result = AutoMatchResult(
            resume_id=resume_id,
            matches=[],
            jobs_analyzed=len(candidates),
            filters_applied=parsed.model_dump(exclude_none=True),
        )
        if not candidates:
            return result

        outcomes = self._process_all(resume_id, profile, candidates, parsed)

        for outcome in outcomes:
            if outcome is None:
                result.failed += 1
                continue
            if outcome.match is None:
                continue
            if outcome.reused:
                result.reused += 1
            elif outcome.created:
                result.newly_created += 1
            # reused matches may predate a stricter threshold
            if outcome.match.overall_fit >= parsed.min_score_threshold:
                result.matches.append(outcome.match)

        # stable: equal scores keep fetch order
        result.matches.sort(key=lambda m: m.overall_fit, reverse=True)

        logger.info(
            f"Auto-matching completed for resume {resume_id}: "
            f"{result.matches_found} matches ({result.newly_created} new, "
            f"{result.reused} reused, {result.failed} failed) from {result.jobs_analyzed} jobs"
        )
        return result

    def _fetch_profile(self, resume_id: str) -> Dict[str, Any]:
        try:
            return self.profile_fetcher.fetch_profile(resume_id, self.token_cache.get_token())
        except PeerServiceError as e:
            self._invalidate_on_auth_failure(e)
            logger.error(f"Failed to fetch candidate profile for resume {resume_id}: {e}")
            raise ProfileUnavailable() from e

    def _fetch_jobs(self) -> List[Dict[str, Any]]:
        try:
            return self.job_fetcher.fetch_jobs(
                self.token_cache.get_token(),
                limit=self.config.job_fetch_limit
            )
        except PeerServiceError as e:
            self._invalidate_on_auth_failure(e)
            logger.error(f"Failed to fetch jobs: {e}")
            raise JobsUnavailable(details=str(e)) from e

    def _invalidate_on_auth_failure(self, error: PeerServiceError) -> None:
        if error.status_code in (401, 403):
            self.token_cache.invalidate()

    def _process_all(
        self,
        resume_id: str,
        profile: Dict[str, Any],
        jobs: List[Dict[str, Any]],
        filters: AutoMatchFilters
    ) -> List[Optional[_JobOutcome]]:
        """Fan out one task per job; a failed task yields None in its slot."""
        workers = max(1, min(self.config.max_workers, len(jobs)))
        outcomes: List[Optional[_JobOutcome]] = []

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="auto-match") as pool:
            futures = [
                pool.submit(self._process_job, resume_id, profile, job, filters.min_score_threshold)
                for job in jobs
            ]
            for job, future in zip(jobs, futures):
                try:
                    outcomes.append(future.result())
                except Exception as e:
                    logger.error(
                        f"Error processing job match (resume_id={resume_id}, "
                        f"job_id={job.get('job_id')}): {e}",
                        exc_info=True
                    )
                    outcomes.append(None)

        return outcomes

    def _process_job(
        self,
        resume_id: str,
        profile: Dict[str, Any],
        job: Dict[str, Any],
        threshold: float
    ) -> _JobOutcome:
        job_id = str(job['job_id'])

        with self.match_uow() as repo:
            existing = repo.get_existing_match(resume_id, job_id)
            if existing is not None:
                return _JobOutcome(match=MatchRecordDTO.from_model(existing), reused=True)

        result = self.scorer.score(profile, job)
        if result.matching_score.overall_fit < threshold:
            logger.debug(
                f"Discarding job {job_id}: overall_fit {result.matching_score.overall_fit:.2f} "
                f"below threshold {threshold:.2f}"
            )
            return _JobOutcome()

        with self.match_uow() as repo:
            match, created = repo.create_or_get(build_match(resume_id, job, profile, result))
            return _JobOutcome(
                match=MatchRecordDTO.from_model(match),
                reused=not created,
                created=created
            )
