"""
Custom Exceptions for the Hotel Reservation Application

This module defines custom exception classes used throughout the application
for better error handling and debugging. Every exception carries the HTTP
status it maps to, so the API layer can render it without extra lookups.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Business logic errors
    BOOKING_CONFLICT = "BOOKING_CONFLICT"
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    BOOKING_ALREADY_CANCELLED = "BOOKING_ALREADY_CANCELLED"
    BOOKING_COMPLETED = "BOOKING_COMPLETED"
    ROOM_HAS_ACTIVE_BOOKINGS = "ROOM_HAS_ACTIVE_BOOKINGS"

    # Resource specific errors
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    CONTACT_NOT_FOUND = "CONTACT_NOT_FOUND"
    ADMIN_NOT_FOUND = "ADMIN_NOT_FOUND"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 400
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class BusinessRuleError(BaseAppException):
    """Exception raised when a request is well-formed but violates a business rule"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_REQUEST,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400
    ):
        super().__init__(message, error_code, details, status_code)


class ConflictError(BaseAppException):
    """Exception raised when a write would conflict with existing state"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DUPLICATE_ENTRY,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details, 409)


class DatabaseError(BaseAppException):
    """Exception raised when the persistence layer is unreachable"""

    def __init__(self, message: str = "Database temporarily unavailable"):
        super().__init__(message, ErrorCode.CONNECTION_ERROR, {}, 503)


class RepositoryError(BaseAppException):
    """Exception raised when a repository operation fails unexpectedly"""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, ErrorCode.DATABASE_ERROR, {}, 500)


class EntityAlreadyExistsError(ConflictError):
    """Exception raised when a unique constraint rejects an insert"""

    def __init__(self, message: str = "Resource already exists", field: Optional[str] = None):
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY, {"field": field} if field else {})


# ========================================
# Resource Not Found Exceptions
# ========================================

class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
    ):
        if not message:
            message = f"{resource_type} not found"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, error_code, details, 404)


class RoomNotFoundError(ResourceNotFoundError):
    """Exception raised when a room is not found"""

    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room", room_id, error_code=ErrorCode.ROOM_NOT_FOUND)


class BookingNotFoundError(ResourceNotFoundError):
    """Exception raised when a booking is not found"""

    def __init__(self, booking_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__("Booking", booking_id, message, ErrorCode.BOOKING_NOT_FOUND)


class ContactNotFoundError(ResourceNotFoundError):
    """Exception raised when a contact submission is not found"""

    def __init__(self, contact_id: Optional[str] = None):
        super().__init__("Contact", contact_id, error_code=ErrorCode.CONTACT_NOT_FOUND)


class AdminNotFoundError(ResourceNotFoundError):
    """Exception raised when an admin user is not found"""

    def __init__(self, admin_id: Optional[str] = None):
        super().__init__("Admin user", admin_id, error_code=ErrorCode.ADMIN_NOT_FOUND)


# ========================================
# Authentication & Authorization Exceptions
# ========================================

class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(
        self,
        message: str = "Not authorized to access this route",
        error_code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
    ):
        super().__init__(message, error_code, {}, 401)


class TokenExpiredError(AuthenticationError):
    """Exception raised when a bearer token has expired"""

    def __init__(self):
        super().__init__("Token expired", ErrorCode.TOKEN_EXPIRED)


class InvalidTokenError(AuthenticationError):
    """Exception raised when a bearer token cannot be decoded"""

    def __init__(self):
        super().__init__("Invalid token", ErrorCode.TOKEN_INVALID)


class PermissionDeniedError(BaseAppException):
    """Exception raised when the caller lacks a required permission"""

    def __init__(self, permission: Optional[str] = None):
        message = "Insufficient permissions"
        if permission:
            message = f"Permission '{permission}' required to access this route"
        super().__init__(
            message,
            ErrorCode.INSUFFICIENT_PERMISSIONS,
            {"required_permission": permission},
            403,
        )


class AccountLockedError(BaseAppException):
    """Exception raised when an account is locked after repeated failed logins"""

    def __init__(self, minutes_remaining: Optional[int] = None):
        message = "Account is temporarily locked due to too many failed login attempts"
        if minutes_remaining:
            message = f"Account is locked. Try again in {minutes_remaining} minutes."
        super().__init__(
            message,
            ErrorCode.ACCOUNT_LOCKED,
            {"minutes_remaining": minutes_remaining},
            423,
        )


# ========================================
# Booking Exceptions
# ========================================

class RoomUnavailableError(BusinessRuleError):
    """The room's availability flag is switched off"""

    def __init__(self, room_id: Optional[str] = None):
        super().__init__(
            "Room is not available",
            ErrorCode.ROOM_UNAVAILABLE,
            {"room_id": room_id},
        )


class InvalidDateRangeError(BusinessRuleError):
    """Check-in/check-out pair is unusable"""

    def __init__(self, message: str, check_in: Any = None, check_out: Any = None):
        super().__init__(
            message,
            ErrorCode.INVALID_DATE_RANGE,
            {"check_in": str(check_in), "check_out": str(check_out)},
        )


class OccupancyExceededError(BusinessRuleError):
    """More guests than the room accommodates"""

    def __init__(self, max_occupancy: int, requested: int):
        super().__init__(
            f"Room can accommodate maximum {max_occupancy} guests",
            ErrorCode.INSUFFICIENT_CAPACITY,
            {"max_occupancy": max_occupancy, "requested": requested},
        )


class RoomNotAvailableError(ConflictError):
    """Another booking already holds the room for some of the requested nights"""

    def __init__(self, room_id: Optional[str] = None, conflicts: int = 0):
        super().__init__(
            "Room is not available for the selected dates",
            ErrorCode.BOOKING_CONFLICT,
            {"room_id": room_id, "conflicting_bookings": conflicts},
        )


class InvalidStatusTransitionError(BusinessRuleError):
    """Requested booking status is not reachable from the current one"""

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change booking status from {current} to {requested}",
            ErrorCode.INVALID_STATUS_TRANSITION,
            {"current_status": current, "requested_status": requested},
        )


class BookingAlreadyCancelledError(BusinessRuleError):
    def __init__(self):
        super().__init__("Booking is already cancelled", ErrorCode.BOOKING_ALREADY_CANCELLED)


class BookingCompletedError(BusinessRuleError):
    def __init__(self):
        super().__init__("Cannot cancel completed booking", ErrorCode.BOOKING_COMPLETED)


class RoomHasActiveBookingsError(ConflictError):
    def __init__(self, room_id: str, active: int):
        super().__init__(
            "Cannot delete room with active bookings",
            ErrorCode.ROOM_HAS_ACTIVE_BOOKINGS,
            {"room_id": room_id, "active_bookings": active},
        )
