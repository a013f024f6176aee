"""
Auto-match filters: validation and client-side job filtering.

Filters are AND'ed; each list-valued filter OR's its values. Missing
salary bounds on either side are treated as unbounded.
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from core.exceptions import InvalidFilter


class SalaryRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class AutoMatchFilters(BaseModel):
    """Filters accepted by POST /matches/auto-match."""
    model_config = ConfigDict(extra='forbid')

    min_score_threshold: float = Field(default=0.6, ge=0, le=1)
    max_matches: int = Field(default=10, ge=1, le=50)
    categories: List[str] = Field(default_factory=list)
    salary_range: Optional[SalaryRange] = None
    locations: List[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def _salary_bounds_ordered(self):
        rng = self.salary_range
        if rng and rng.min is not None and rng.max is not None and rng.min > rng.max:
            raise ValueError("salary_range.min must not exceed salary_range.max")
        return self


def parse_filters(raw: Optional[Dict[str, Any]]) -> AutoMatchFilters:
    """
    Validate a raw filters object.

    Raises:
        InvalidFilter: any value out of range or of the wrong type.
    """
    if isinstance(raw, AutoMatchFilters):
        return raw
    try:
        return AutoMatchFilters.model_validate(raw or {})
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get('loc', ()))
        message = f"{location}: {first.get('msg')}" if location else first.get('msg')
        raise InvalidFilter(f"Invalid filters - {message}") from e


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def matches_category(job: Dict[str, Any], categories: List[str]) -> bool:
    category = _as_dict(job.get('category'))
    return category.get('tag') in categories or category.get('label') in categories


def _bound(value: Any, default: float) -> float:
    if value is None or value == '':
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def overlaps_salary(job: Dict[str, Any], salary_range: SalaryRange) -> bool:
    job_min = _bound(job.get('salary_min'), 0.0)
    job_max = _bound(job.get('salary_max'), math.inf)
    filter_min = salary_range.min if salary_range.min is not None else 0.0
    filter_max = salary_range.max if salary_range.max is not None else math.inf
    return job_max >= filter_min and job_min <= filter_max


def matches_location(job: Dict[str, Any], locations: List[str]) -> bool:
    location = _as_dict(job.get('location'))
    display_name = (location.get('display_name') or '').lower()
    areas = [str(a).lower() for a in (location.get('area') or location.get('areas') or [])]

    for wanted in locations:
        needle = wanted.lower()
        if needle in display_name or any(needle in area for area in areas):
            return True
    return False


def apply_filters(jobs: List[Dict[str, Any]], filters: AutoMatchFilters) -> List[Dict[str, Any]]:
    """Apply category, salary and location filters, preserving job order."""
    filtered = list(jobs)
    if filters.categories:
        filtered = [j for j in filtered if matches_category(j, filters.categories)]
    if filters.salary_range is not None:
        filtered = [j for j in filtered if overlaps_salary(j, filters.salary_range)]
    if filters.locations:
        filtered = [j for j in filtered if matches_location(j, filters.locations)]
    return filtered
