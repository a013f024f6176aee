import logging
from typing import Optional

from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type, before_sleep_log

from database.database import Database, get_database

logger = logging.getLogger(__name__)


@retry(
    stop=stop_after_attempt(5),
    wait=wait_fixed(2),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True
)
def init_db(db: Optional[Database] = None) -> Database:
    """Create all tables, waiting for the database to come up."""
    db = db or get_database()
    db.ping()
    db.create_all()
    return db
