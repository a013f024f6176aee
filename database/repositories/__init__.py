from database.repositories.base import BaseRepository
from database.repositories.match import MatchRepository
from database.repositories.user import UserRepository

__all__ = [
    'BaseRepository',
    'MatchRepository',
    'UserRepository',
]
