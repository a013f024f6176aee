#!/usr/bin/env python3
"""
Scoring Models - Data structures for match scoring results.

OracleAnalysis is the strict schema an oracle reply must decode into;
MatchingScore is the normalized result every caller sees.
"""

import math
from typing import List, Optional
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator

RECOMMENDATIONS = ('highly_recommended', 'recommended', 'consider', 'not_recommended')

FALLBACK_MODEL_VERSION = "fallback"
MANUAL_REVIEW_MARKER = "Manual review required"


def clamp_unit(value: float) -> float:
    """Clamp into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


class OracleAnalysis(BaseModel):
    """
    Reply shape requested from the oracle.

    Missing numeric fields take neutral defaults; values of the wrong
    type fail validation, which sends the scorer down the fallback path.
    """
    model_config = ConfigDict(extra='ignore')

    overallFit: float = 0.5
    confidence: float = 0.7
    skillsMatch: float = 0.5
    experienceMatch: float = 0.5
    educationMatch: float = 0.5
    locationMatch: float = 0.5
    salaryCompatibility: float = 0.5
    recommendation: str = "consider"
    strengths: List[str] = Field(default_factory=list)
    concerns: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    reasoning: str = "Analysis completed"
    keyInsights: List[str] = Field(default_factory=list)

    @field_validator(
        'overallFit', 'confidence', 'skillsMatch', 'experienceMatch',
        'educationMatch', 'locationMatch', 'salaryCompatibility',
        mode='before'
    )
    @classmethod
    def _null_means_default(cls, v, info):
        if v is None:
            return cls.model_fields[info.field_name].default
        if isinstance(v, bool):
            raise ValueError("boolean is not a score")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("score must be finite")
        return v

    @field_validator('recommendation', mode='before')
    @classmethod
    def _known_recommendation(cls, v):
        if isinstance(v, str) and v.strip().lower() in RECOMMENDATIONS:
            return v.strip().lower()
        return "consider"

    @field_validator('strengths', 'concerns', 'recommendations', 'keyInsights', mode='before')
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v

    @field_validator('reasoning', mode='before')
    @classmethod
    def _null_reasoning(cls, v):
        return "Analysis completed" if v is None else v


class MatchingScore(BaseModel):
    """Normalized compatibility score; every dimension lies in [0, 1]."""
    overall_fit: float = Field(ge=0, le=1)
    confidence: float = Field(ge=0, le=1)
    skills_match: float = Field(ge=0, le=1)
    experience_match: float = Field(ge=0, le=1)
    education_match: float = Field(ge=0, le=1)
    location_match: float = Field(ge=0, le=1)
    salary_compatibility: float = Field(ge=0, le=1)
    recommendation: str = "consider"
    strengths: List[str] = Field(default_factory=list)
    concerns: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    reasoning: str = ""
    key_insights: List[str] = Field(default_factory=list)

    @classmethod
    def from_analysis(cls, analysis: OracleAnalysis) -> "MatchingScore":
        return cls(
            overall_fit=clamp_unit(analysis.overallFit),
            confidence=clamp_unit(analysis.confidence),
            skills_match=clamp_unit(analysis.skillsMatch),
            experience_match=clamp_unit(analysis.experienceMatch),
            education_match=clamp_unit(analysis.educationMatch),
            location_match=clamp_unit(analysis.locationMatch),
            salary_compatibility=clamp_unit(analysis.salaryCompatibility),
            recommendation=analysis.recommendation,
            strengths=list(analysis.strengths),
            concerns=list(analysis.concerns),
            recommendations=list(analysis.recommendations),
            reasoning=analysis.reasoning,
            key_insights=list(analysis.keyInsights),
        )

    @classmethod
    def fallback(cls, reason: str) -> "MatchingScore":
        """Neutral score used when the oracle fails or its reply is unusable."""
        return cls(
            overall_fit=0.5,
            confidence=0.3,
            skills_match=0.5,
            experience_match=0.5,
            education_match=0.5,
            location_match=0.5,
            salary_compatibility=0.5,
            recommendation="consider",
            strengths=["Profile available for review"],
            concerns=[MANUAL_REVIEW_MARKER],
            recommendations=["Conduct detailed manual assessment"],
            reasoning=f"Automated analysis unavailable ({reason}) - manual review required",
            key_insights=["Fallback scoring applied"],
        )


@dataclass
class ScoreResult:
    """Scorer output: the score plus how it was produced."""
    matching_score: MatchingScore
    model_version: str
    processing_time_ms: int
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.model_version == FALLBACK_MODEL_VERSION
