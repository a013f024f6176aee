import contextlib
import logging
from typing import Callable, ContextManager

from database.database import Database
from database.repositories.match import MatchRepository

logger = logging.getLogger(__name__)

MatchUowFactory = Callable[[], ContextManager[MatchRepository]]


def match_uow_factory(db: Database) -> MatchUowFactory:
    """Build a per-unit-of-work scope bound to `db`.

    Each call yields a MatchRepository on a fresh Session. Commits on
    success, rolls back on exception, always closes. Safe to use from
    worker threads since nothing is shared between scopes.

    Usage:
        match_uow = match_uow_factory(db)
        with match_uow() as repo:
            match = repo.get_existing_match(resume_id, job_id)
    """
    @contextlib.contextmanager
    def match_uow():
        with db.session_scope() as session:
            yield MatchRepository(session)

    return match_uow
