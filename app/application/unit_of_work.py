"""
Explicit transaction scope for ordering mutations.

Every use case that touches positions runs its steps inside one ``UnitOfWork``:
commit when the block finishes, roll back wholesale when any step raises.
There is no partial commit, so a compaction is never persisted without the
allocation/update that goes with it.
"""
import logging
import time

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from app.application.errors import (
    ConflictError,
    DeadlineExceededError,
    KanbanError,
    TransientError,
)

logger = logging.getLogger(__name__)

# PostgreSQL "query_canceled", raised when statement_timeout fires
_QUERY_CANCELED = "57014"


class UnitOfWork:
    """
    Usage:
        with UnitOfWork(db, timeout_ms=5000) as uow:
            ...
            uow.checkpoint()   # before every statement group
            ...

    ``timeout_ms`` is a deadline for the whole block, not per statement.
    ``checkpoint()`` fails fast once it has passed and, on PostgreSQL,
    narrows ``statement_timeout`` to the remaining budget so a statement
    blocked on a row lock cannot outlive it.
    """

    def __init__(self, db: Session, timeout_ms: int | None = None):
        self.db = db
        self.timeout_ms = timeout_ms
        self._deadline: float | None = None

    def __enter__(self) -> "UnitOfWork":
        if self.timeout_ms is not None:
            self._deadline = time.monotonic() + self.timeout_ms / 1000
        self.checkpoint()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            try:
                self.db.commit()
            except DBAPIError as e:
                self._abort(e)
                raise self._translate(e) from e
            return False

        self._abort(exc)
        if isinstance(exc, DBAPIError):
            raise self._translate(exc) from exc
        return False

    def remaining_ms(self) -> int | None:
        if self._deadline is None:
            return None
        return int((self._deadline - time.monotonic()) * 1000)

    def checkpoint(self) -> None:
        remaining = self.remaining_ms()
        if remaining is None:
            return
        if remaining <= 0:
            raise DeadlineExceededError("transaction deadline exceeded")
        if self.db.get_bind().dialect.name == "postgresql":
            # SET does not take bind parameters; remaining is an int
            self.db.execute(text(f"SET LOCAL statement_timeout = {remaining}"))

    def _abort(self, exc: BaseException) -> None:
        self.db.rollback()
        if isinstance(exc, KanbanError) and not isinstance(exc, TransientError):
            logger.debug("Transaction rolled back: %s", exc)
        else:
            logger.warning("Transaction rolled back after %s: %s", type(exc).__name__, exc)

    @staticmethod
    def _translate(exc: DBAPIError) -> KanbanError:
        if isinstance(exc, IntegrityError):
            return ConflictError("conflicting record")
        if getattr(exc.orig, "sqlstate", None) == _QUERY_CANCELED:
            return DeadlineExceededError("transaction deadline exceeded")
        return TransientError("storage failure")
