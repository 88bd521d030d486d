"""
Transaction scopes shared by the registration ledger and the match finalizer.

locked_transaction() is the only way the services write: one Session, one transaction,
commit on clean exit, rollback on any exception. Store failures that a retry can cure
are re-raised as TransientStoreError; business errors pass through unchanged.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import Session

from tournament_admin.database import BEGIN_IMMEDIATE
from tournament_admin.services.errors import TransientStoreError

logger = logging.getLogger(__name__)


def locking_engine(engine: Engine) -> Engine:
    """Engine view whose transactions take the SQLite write lock at BEGIN."""
    return engine.execution_options(**{BEGIN_IMMEDIATE: True})


@contextmanager
def _translate_store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (OperationalError, PoolTimeoutError) as exc:
        logger.warning("%s aborted by store failure: %s", operation, exc)
        raise TransientStoreError(f"{operation} failed: {exc}") from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            logger.warning("%s lost its connection: %s", operation, exc)
            raise TransientStoreError(f"{operation} failed: connection lost") from exc
        raise


@contextmanager
def locked_transaction(engine: Engine, operation: str) -> Iterator[Session]:
    """Yield a session inside one write transaction. `engine` should come from locking_engine()."""
    with _translate_store_errors(operation):
        with Session(engine, expire_on_commit=False) as session:
            with session.begin():
                yield session


@contextmanager
def read_session(engine: Engine, operation: str) -> Iterator[Session]:
    """Short-lived session for plain reads (no row locks, deferred BEGIN)."""
    with _translate_store_errors(operation):
        with Session(engine, expire_on_commit=False) as session:
            yield session
