import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_

from database.models import User
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, email: str, username: str) -> bool:
        stmt = select(User.id).where(or_(User.email == email, User.username == username))
        return self.db.execute(stmt).first() is not None

    def create_user(self, username: str, email: str, password_hash: str, role: str) -> User:
        user = User(username=username, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        self.db.flush()
        logger.info(f"Created user {user.id} ({role})")
        return user

    def list_users(self, page: int = 1, limit: int = 20) -> Tuple[List[User], int]:
        total = self.db.execute(select(func.count()).select_from(User)).scalar_one()
        stmt = (
            select(User)
            .order_by(User.created_at.desc(), User.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return self.db.execute(stmt).scalars().all(), total
