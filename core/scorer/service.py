#!/usr/bin/env python3
"""
Match Scorer - candidate/job compatibility via the scoring oracle.

Builds a structured prompt, asks the oracle for a JSON analysis, decodes
it against OracleAnalysis and clamps every dimension into [0, 1]. Any
failure (oracle error, timeout, unparseable or ill-typed reply) yields
the neutral fallback score tagged with model version "fallback"; score()
never raises.
"""

import json
import logging
import re
import time
from typing import Any, Dict, Optional

from pydantic import ValidationError

from core.llm.interfaces import LLMProvider
from core.scorer.models import (
    OracleAnalysis,
    MatchingScore,
    ScoreResult,
    FALLBACK_MODEL_VERSION,
)
from core.scorer.prompt import build_match_prompt

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class OracleReplyError(ValueError):
    """Oracle reply is not a JSON object matching OracleAnalysis."""
    pass


def strip_code_fence(text: str) -> str:
    """Remove an optional ```json ... ``` (or bare ```) wrapper."""
    cleaned = (text or "").strip()
    match = _CODE_FENCE.match(cleaned)
    return match.group(1).strip() if match else cleaned


def parse_oracle_reply(text: str) -> OracleAnalysis:
    """
    Decode an oracle reply.

    Raises:
        OracleReplyError: not JSON, not an object, or wrong field types.
    """
    try:
        data = json.loads(strip_code_fence(text))
    except (json.JSONDecodeError, TypeError) as e:
        raise OracleReplyError(f"reply is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise OracleReplyError(f"reply is a {type(data).__name__}, expected an object")
    try:
        return OracleAnalysis.model_validate(data)
    except ValidationError as e:
        raise OracleReplyError(f"reply does not match schema: {e.error_count()} errors") from e


class MatchScorer:
    """Scores one candidate profile against one job posting."""

    def __init__(
        self,
        oracle: LLMProvider,
        temperature: float = 0.2,
        max_tokens: int = 2000,
        model_version: Optional[str] = None
    ):
        self.oracle = oracle
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.model_version = model_version or getattr(oracle, 'model_name', None) or 'unknown'

    def score(self, candidate_profile: Dict[str, Any], job: Dict[str, Any]) -> ScoreResult:
        start = time.perf_counter()
        job_id = (job or {}).get('job_id')

        try:
            prompt = build_match_prompt(candidate_profile, job)
            reply = self.oracle.generate_response(
                prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )
            analysis = parse_oracle_reply(reply)
            score = MatchingScore.from_analysis(analysis)
            model_version = self.model_version
            error = None
        except OracleReplyError as e:
            logger.error(f"Failed to parse oracle reply for job {job_id}: {e}")
            score = MatchingScore.fallback("reply could not be parsed")
            model_version = FALLBACK_MODEL_VERSION
            error = str(e)
        except Exception as e:
            logger.error(f"Oracle scoring failed for job {job_id}: {e}", exc_info=True)
            score = MatchingScore.fallback("oracle call failed")
            model_version = FALLBACK_MODEL_VERSION
            error = str(e)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            f"Scored job {job_id}: overall_fit={score.overall_fit:.2f} "
            f"model={model_version} in {elapsed_ms}ms"
        )
        return ScoreResult(
            matching_score=score,
            model_version=model_version,
            processing_time_ms=elapsed_ms,
            error=error
        )
