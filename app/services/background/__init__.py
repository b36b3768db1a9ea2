"""
Background Services Module

Maintenance jobs that run outside the request cycle.

Services:
    - CleanupService: Retention cleanup of closed contacts and bookings
"""

from app.services.background.cleanup_service import (
    CleanupConfig,
    CleanupResult,
    CleanupService,
    CleanupTask,
)

__all__ = ["CleanupConfig", "CleanupResult", "CleanupService", "CleanupTask"]
