"""
Storage Errors

Every failure reported by the relational store surfaces to callers as a
StorageError. The original SQLAlchemy exception is chained as __cause__ so
the driver detail is still available in tracebacks and logs.

"Not found" is never an error here: single-row lookups return None.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError


class StorageError(Exception):
    """Raised when the store rejects a statement or cannot be reached."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """
    Translate SQLAlchemy errors raised inside the block into StorageError.

    Works around awaited calls too, since the exception propagates out of the
    coroutine into the enclosing with-statement.

    Usage:
        with storage_errors("create author"):
            result = await conn.execute(stmt)

    Args:
        action: Short description of the operation, used in the message
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"{action} failed: {exc}") from exc
