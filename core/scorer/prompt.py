"""Builds the oracle prompt from a candidate profile and a job posting."""

import json
from typing import Any, Dict, List

from core.llm.system_prompts import MATCH_ANALYSIS_PROMPT_TEMPLATE, EXPERIENCE_SUMMARY_TEMPLATE


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def extract_skills(profile: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Flatten coreCompetencies into {name, level, experience, evidence}."""
    skills = []
    for comp in profile.get("coreCompetencies") or []:
        if not isinstance(comp, dict):
            continue
        skills.append({
            "name": comp.get("skill"),
            "level": comp.get("proficiencyLevel"),
            "experience": comp.get("yearsOfExperience"),
            "evidence": comp.get("contextualEvidence"),
        })
    return skills


def experience_summary(profile: Dict[str, Any]) -> str:
    leadership = _as_dict(profile.get("leadershipProfile"))
    career = _as_dict(profile.get("careerProgression"))
    technical = _as_dict(profile.get("technicalDepth"))
    achievements = _as_dict(profile.get("achievementPatterns")).get("quantifiableImpacts") or []

    return EXPERIENCE_SUMMARY_TEMPLATE.format(
        has_leadership="Yes" if leadership.get("hasLeadershipExperience") else "No",
        leadership_style=leadership.get("leadershipStyle") or "N/A",
        seniority=career.get("seniorityTrajectory") or "Unknown",
        architectural="Yes" if technical.get("architecturalThinking") else "No",
        achievements=", ".join(str(a) for a in achievements) or "None listed",
    )


def job_requirements(job: Dict[str, Any]) -> List[Any]:
    """Explicit requirements, else the AI-derived required competencies."""
    if job.get("requirements"):
        return job["requirements"]
    analysis = _as_dict(job.get("jobAnalysis"))
    return analysis.get("requiredCompetencies") or []


def build_match_prompt(profile: Dict[str, Any], job: Dict[str, Any]) -> str:
    profile = _as_dict(profile)
    job = _as_dict(job)

    return MATCH_ANALYSIS_PROMPT_TEMPLATE.format(
        core_competencies=_dumps(profile.get("coreCompetencies") or []),
        leadership_profile=_dumps(profile.get("leadershipProfile") or {}),
        career_progression=_dumps(profile.get("careerProgression") or {}),
        technical_depth=_dumps(profile.get("technicalDepth") or {}),
        collaboration_style=_dumps(profile.get("collaborationStyle") or {}),
        achievement_patterns=_dumps(profile.get("achievementPatterns") or {}),
        experience_summary=experience_summary(profile),
        title=job.get("title") or "",
        description=job.get("description") or "",
        requirements=_dumps(job_requirements(job)),
        company=_dumps(job.get("company") or {}),
        location=_dumps(job.get("location") or {}),
        category=_dumps(job.get("category") or {}),
        salary_min=job.get("salary_min"),
        salary_max=job.get("salary_max"),
    )
