"""
Unit tests for the match scorer.

Tests verify:
- Oracle replies are decoded, code fences stripped and scores clamped
- Unparseable or failing oracle calls fall back to the neutral score
- The scorer never raises
"""
import json
from unittest.mock import MagicMock

import pytest

from core.scorer import MatchScorer, FALLBACK_MODEL_VERSION
from core.scorer.models import MANUAL_REVIEW_MARKER, MatchingScore
from core.scorer.service import OracleReplyError, parse_oracle_reply, strip_code_fence

PROFILE = {
    "coreCompetencies": [
        {"skill": "Python", "proficiencyLevel": "expert", "yearsOfExperience": 6},
        {"skill": "SQL", "proficiencyLevel": "advanced", "yearsOfExperience": 4},
        {"skill": "AWS", "proficiencyLevel": "intermediate", "yearsOfExperience": 2},
    ],
    "personalInfo": {"name": "Ada", "email": "ada@example.com"},
}

JOB = {
    "job_id": "j1",
    "title": "Backend Engineer",
    "description": "Build APIs",
    "company": {"display_name": "Acme"},
    "location": {"display_name": "London"},
    "category": {"tag": "it-jobs", "label": "IT Jobs"},
    "salary_min": 60000,
    "salary_max": 80000,
}

GOOD_REPLY = {
    "overallFit": 0.82,
    "confidence": 0.9,
    "skillsMatch": 0.88,
    "experienceMatch": 0.75,
    "educationMatch": 0.6,
    "locationMatch": 1.0,
    "salaryCompatibility": 0.7,
    "recommendation": "recommended",
    "strengths": ["Python depth"],
    "concerns": ["Limited AWS"],
    "recommendations": ["Probe cloud experience"],
    "reasoning": "Solid backend fit",
    "keyInsights": ["Strong API background"],
}


@pytest.fixture
def oracle():
    mock = MagicMock()
    mock.model_name = "gpt-4o-mini"
    mock.generate_response.return_value = json.dumps(GOOD_REPLY)
    return mock


@pytest.fixture
def scorer(oracle):
    return MatchScorer(oracle, temperature=0.2, max_tokens=2000)


class TestStripCodeFence:

    @pytest.mark.parametrize("text", [
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '  ```json {"a": 1} ```  ',
        '{"a": 1}',
    ])
    def test_variants(self, text):
        assert json.loads(strip_code_fence(text)) == {"a": 1}


class TestParseOracleReply:

    def test_not_json(self):
        with pytest.raises(OracleReplyError):
            parse_oracle_reply("I think this candidate is great!")

    def test_not_an_object(self):
        with pytest.raises(OracleReplyError):
            parse_oracle_reply("[0.8, 0.9]")

    def test_wrong_type(self):
        with pytest.raises(OracleReplyError):
            parse_oracle_reply(json.dumps({"overallFit": "very high"}))

    def test_boolean_score_rejected(self):
        with pytest.raises(OracleReplyError):
            parse_oracle_reply(json.dumps({"overallFit": True}))

    def test_missing_fields_take_defaults(self):
        analysis = parse_oracle_reply(json.dumps({"overallFit": 0.9}))

        assert analysis.overallFit == 0.9
        assert analysis.skillsMatch == 0.5
        assert analysis.confidence == 0.7
        assert analysis.recommendation == "consider"
        assert analysis.strengths == []

    def test_unknown_recommendation_becomes_consider(self):
        analysis = parse_oracle_reply(json.dumps({"recommendation": "hire immediately"}))

        assert analysis.recommendation == "consider"


class TestMatchScorer:

    def test_successful_score(self, scorer, oracle):
        result = scorer.score(PROFILE, JOB)

        assert result.model_version == "gpt-4o-mini"
        assert not result.is_fallback
        assert result.error is None
        assert result.processing_time_ms >= 0
        score = result.matching_score
        assert score.overall_fit == pytest.approx(0.82)
        assert score.skills_match == pytest.approx(0.88)
        assert score.recommendation == "recommended"
        assert score.strengths == ["Python depth"]
        assert score.key_insights == ["Strong API background"]

    def test_oracle_called_with_low_temperature_and_bounded_tokens(self, scorer, oracle):
        scorer.score(PROFILE, JOB)

        args, kwargs = oracle.generate_response.call_args
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 2000
        prompt = args[0]
        assert "Backend Engineer" in prompt
        assert "Python" in prompt
        assert "60000 - 80000" in prompt

    def test_fenced_reply_is_parsed(self, scorer, oracle):
        oracle.generate_response.return_value = "```json\n" + json.dumps(GOOD_REPLY) + "\n```"

        result = scorer.score(PROFILE, JOB)

        assert not result.is_fallback
        assert result.matching_score.overall_fit == pytest.approx(0.82)

    def test_out_of_range_values_are_clamped(self, scorer, oracle):
        oracle.generate_response.return_value = json.dumps({
            **GOOD_REPLY, "overallFit": 1.7, "skillsMatch": -0.4, "confidence": 12
        })

        score = scorer.score(PROFILE, JOB).matching_score

        assert score.overall_fit == 1.0
        assert score.skills_match == 0.0
        assert score.confidence == 1.0

    def test_unparseable_reply_falls_back(self, scorer, oracle):
        oracle.generate_response.return_value = "Sorry, I cannot help with that."

        result = scorer.score(PROFILE, JOB)

        assert result.model_version == FALLBACK_MODEL_VERSION
        assert result.is_fallback
        assert result.error
        score = result.matching_score
        assert score.overall_fit == 0.5
        assert score.confidence == 0.3
        assert score.recommendation == "consider"
        assert MANUAL_REVIEW_MARKER in score.concerns
        assert score.strengths

    def test_oracle_exception_falls_back(self, scorer, oracle):
        oracle.generate_response.side_effect = TimeoutError("oracle timed out")

        result = scorer.score(PROFILE, JOB)

        assert result.is_fallback
        assert result.matching_score.overall_fit == 0.5

    def test_malformed_inputs_never_raise(self, scorer):
        result = scorer.score(None, {"title": None, "company": "not-a-dict"})

        assert isinstance(result.matching_score, MatchingScore)

    def test_explicit_model_version(self, oracle):
        scorer = MatchScorer(oracle, model_version="azure/gpt-4o-2024")

        assert scorer.score(PROFILE, JOB).model_version == "azure/gpt-4o-2024"
