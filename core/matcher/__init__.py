"""Matcher Module - auto-match orchestration over peer services and the scorer."""
from core.matcher.filters import AutoMatchFilters, SalaryRange, parse_filters, apply_filters
from core.matcher.dto import MatchRecordDTO, AutoMatchResult
from core.matcher.service import MatchOrchestrator, build_match

__all__ = [
    'MatchOrchestrator', 'build_match',
    'AutoMatchFilters', 'SalaryRange', 'parse_filters', 'apply_filters',
    'MatchRecordDTO', 'AutoMatchResult',
]
