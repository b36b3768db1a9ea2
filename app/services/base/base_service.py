"""
Base service class providing common functionality for all services.
"""

import functools
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from sqlalchemy.orm import Session

from app.core.logging import get_logger

F = TypeVar("F", bound=Callable[..., Any])


def track_performance(operation: str) -> Callable[[F], F]:
    """Log the wall-clock duration of a service call at debug level."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            started = time.perf_counter()
            try:
                return func(self, *args, **kwargs)
            finally:
                self._logger.debug(
                    f"{operation} finished",
                    extra={
                        "operation": operation,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    }
                )

        return wrapper  # type: ignore[return-value]

    return decorator


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Transaction management utilities

    Services raise ``app.core.exceptions`` types; the API layer renders them.
    """

    def __init__(self, db_session: Session):
        self.db: Session = db_session
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True) -> Iterator[Session]:
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.repository.create(entity, commit=False)
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception as e:
            self._rollback()
            self._logger.warning(f"Transaction failed: {e}", extra={"exception_type": type(e).__name__})
            raise

    def _commit(self) -> None:
        """Commit the current transaction."""
        self.db.commit()
        self._logger.debug("Transaction committed successfully")

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except Exception as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")
