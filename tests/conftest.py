"""
Pytest configuration and fixtures.
"""

import pytest
from sqlalchemy import func, select

from core.auth import AuthVerifier, Role
from core.config_loader import AppConfig
from database.database import Database
from database.models import Match

TEST_SECRET = "test-secret"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests that use a SQLite database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def database(tmp_path):
    """File-backed SQLite database with all tables created."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.create_all()
    yield db
    db.engine.dispose()


@pytest.fixture
def app_config(tmp_path):
    return AppConfig(
        auth={"jwt_secret": TEST_SECRET},
        database={"url": f"sqlite:///{tmp_path / 'test.db'}"},
    )


@pytest.fixture
def verifier():
    return AuthVerifier(TEST_SECRET)


@pytest.fixture
def make_token(verifier):
    """Sign a token for the given role; extra kwargs go into the payload."""
    def _make(role=Role.CANDIDATE, subject_id="user-1", **extra):
        return verifier.issue(subject_id, role, **extra)
    return _make


@pytest.fixture
def auth_header(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def jwt_secret():
    return TEST_SECRET


@pytest.fixture
def count_matches(database):
    """Number of stored Match rows for a (resume_id, job_id) pair."""
    def _count(resume_id, job_id):
        with database.session_scope() as session:
            stmt = select(func.count()).select_from(Match).where(
                Match.resume_id == resume_id,
                Match.job_id == job_id
            )
            return session.execute(stmt).scalar_one()
    return _count
