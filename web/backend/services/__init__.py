"""Business logic services for the match API."""
from .match_service import MatchService, to_auto_match_response

__all__ = ['MatchService', 'to_auto_match_response']
