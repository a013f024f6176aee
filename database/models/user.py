import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Text, String, DateTime, Index

from .base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    """
    User account for login. Passwords are stored as bcrypt hashes.
    """
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(Text, nullable=False, unique=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    role = Column(String(16), nullable=False, default='candidate')

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index('idx_users_email', 'email'),
    )
