"""
Database session, engine and the write transaction scope.
"""
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker

from wol_availability.config import settings
from wol_availability.core.errors import TransactionError, is_retryable


def _engine_options(url: str) -> dict:
    # SQLite (tests, local tooling) uses its own pool; pool sizing applies to server databases only
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": 8,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_timeout": 30,
    }


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(
    session_factory: Callable[[], Session] | None = None,
    isolation_level: str | None = None,
) -> Iterator[Session]:
    """
    Scoped write transaction. Commits when the block exits normally, rolls back on any
    exception (cancellation included) and always closes the session.
    Retryable driver aborts surface as TransactionError; everything else propagates as-is.
    """
    db = (session_factory or SessionLocal)()
    try:
        with db.begin():
            if isolation_level:
                db.connection(execution_options={"isolation_level": isolation_level})
            yield db
    except DBAPIError as e:
        if is_retryable(e):
            raise TransactionError(f"Transaction aborted by a concurrent write: {e.orig}") from e
        raise
    finally:
        db.close()
