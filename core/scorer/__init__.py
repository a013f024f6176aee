#!/usr/bin/env python3
"""
Scoring Module - oracle-backed candidate/job compatibility scoring.

Public API:
- MatchScorer: scores one profile against one job, never raises
- MatchingScore: normalized score, all dimensions in [0, 1]
- ScoreResult: score plus model version and processing time

- models.py: OracleAnalysis schema, MatchingScore, ScoreResult
- prompt.py: prompt construction from profile and job
- service.py: MatchScorer
"""

from core.scorer.models import MatchingScore, ScoreResult, OracleAnalysis, FALLBACK_MODEL_VERSION
from core.scorer.service import MatchScorer

__all__ = ['MatchScorer', 'MatchingScore', 'ScoreResult', 'OracleAnalysis', 'FALLBACK_MODEL_VERSION']
