"""
Background cleanup service.

Deletes closed records past their retention window:
- Contacts that are resolved or closed
- Bookings that are checked out or cancelled

Age is measured from the record's creation time. Running the job twice in
a row deletes nothing the second time.

Run on demand with::

    python -m app.services.background.cleanup_service
"""

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config.settings import Settings
from app.models.base.enums import BookingStatus, ContactStatus
from app.repositories.booking.booking_repository import BookingRepository
from app.repositories.contact.contact_repository import ContactRepository
from app.schemas.analytics.analytics import CleanupReport
from app.services.base import BaseService
from app.utils.date_utils import utcnow

CLOSED_CONTACT_STATUSES = (ContactStatus.RESOLVED, ContactStatus.CLOSED)
CLOSED_BOOKING_STATUSES = (BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED)


class CleanupTask(str, Enum):
    """Enumeration of available cleanup tasks."""
    CONTACTS = "contacts"
    BOOKINGS = "bookings"


@dataclass
class CleanupConfig:
    """Retention policy for cleanup operations."""
    contact_retention_days: int = 180
    booking_retention_days: int = 365

    @classmethod
    def from_settings(cls, settings: Settings) -> "CleanupConfig":
        return cls(
            contact_retention_days=settings.CLEANUP_CONTACT_RETENTION_DAYS,
            booking_retention_days=settings.CLEANUP_BOOKING_RETENTION_DAYS,
        )


@dataclass
class CleanupResult:
    """Result of a single cleanup task."""
    task: CleanupTask
    count: int
    duration_ms: float


class CleanupService(BaseService):
    """
    Runs the retention cleanup in a single transaction.

    Either every task's deletions are committed or none are.
    """

    def __init__(
        self,
        db_session: Session,
        config: Optional[CleanupConfig] = None,
        now: Callable[[], datetime] = utcnow,
        contact_repository: Optional[ContactRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db_session)
        self.config = config or CleanupConfig()
        self.now = now
        self.contacts = contact_repository or ContactRepository(db_session)
        self.bookings = booking_repository or BookingRepository(db_session)

    def run(self, tasks: Optional[List[CleanupTask]] = None) -> CleanupReport:
        """
        Execute cleanup tasks.

        Args:
            tasks: Specific tasks to run (all tasks if None)
        """
        tasks = tasks or list(CleanupTask)
        now = self.now()

        with self.transaction():
            results = [self._execute(task, now) for task in tasks]

        counts: Dict[CleanupTask, int] = {r.task: r.count for r in results}
        report = CleanupReport(
            contacts_removed=counts.get(CleanupTask.CONTACTS, 0),
            bookings_removed=counts.get(CleanupTask.BOOKINGS, 0),
        )
        self._logger.info(
            "Cleanup completed",
            extra={
                "contacts_removed": report.contacts_removed,
                "bookings_removed": report.bookings_removed,
                "tasks": {r.task.value: round(r.duration_ms, 2) for r in results},
            },
        )
        return report

    def _execute(self, task: CleanupTask, now: datetime) -> CleanupResult:
        started = time.perf_counter()
        if task == CleanupTask.CONTACTS:
            cutoff = now - timedelta(days=self.config.contact_retention_days)
            count = self.contacts.delete_closed_before(cutoff, CLOSED_CONTACT_STATUSES)
        else:
            cutoff = now - timedelta(days=self.config.booking_retention_days)
            count = self.bookings.delete_closed_before(cutoff, CLOSED_BOOKING_STATUSES)

        self._logger.debug(
            f"Cleanup task {task.value} removed {count} rows",
            extra={"task": task.value, "cutoff": cutoff.isoformat()},
        )
        return CleanupResult(task=task, count=count, duration_ms=(time.perf_counter() - started) * 1000)


def main() -> CleanupReport:
    from app.config.settings import settings
    from app.db.session import SessionLocal

    with SessionLocal() as db:
        return CleanupService(db, CleanupConfig.from_settings(settings)).run()


if __name__ == "__main__":
    result = main()
    print(f"Removed {result.contacts_removed} contacts and {result.bookings_removed} bookings")
