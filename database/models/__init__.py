from .base import Base
from .match import Match, generate_match_id
from .user import User

__all__ = [
    'Base',
    'Match',
    'generate_match_id',
    'User',
]
