"""
Database enums shared by the models and the API schemas.
"""

import enum


class RoomType(str, enum.Enum):
    """Room category."""
    SINGLE = "single"
    DOUBLE = "double"
    SUITE = "suite"
    DELUXE = "deluxe"
    PRESIDENTIAL = "presidential"


class BedType(str, enum.Enum):
    SINGLE = "single"
    DOUBLE = "double"
    QUEEN = "queen"
    KING = "king"
    TWIN = "twin"


class RoomWing(str, enum.Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    CENTRAL = "central"


class RoomView(str, enum.Enum):
    CITY = "city"
    OCEAN = "ocean"
    GARDEN = "garden"
    POOL = "pool"
    MOUNTAIN = "mountain"
    COURTYARD = "courtyard"


class BookingStatus(str, enum.Enum):
    """Booking lifecycle status."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that hold the room for their nights
BLOCKING_BOOKING_STATUSES = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.CHECKED_IN,
)

# Statuses that count as a stay in progress for occupancy and room deletion
ACTIVE_BOOKING_STATUSES = (
    BookingStatus.CONFIRMED,
    BookingStatus.CHECKED_IN,
)

TERMINAL_BOOKING_STATUSES = (
    BookingStatus.CHECKED_OUT,
    BookingStatus.CANCELLED,
    BookingStatus.NO_SHOW,
)


class PaymentStatus(str, enum.Enum):
    """Payment processing status."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"


class RefundStatus(str, enum.Enum):
    PENDING = "pending"
    NOT_APPLICABLE = "not_applicable"


class InquiryType(str, enum.Enum):
    """Contact form inquiry category."""
    GENERAL_INQUIRY = "general_inquiry"
    BOOKING_ASSISTANCE = "booking_assistance"
    ROOM_INFORMATION = "room_information"
    SERVICES_AMENITIES = "services_amenities"
    EVENT_PLANNING = "event_planning"
    COMPLAINT = "complaint"
    FEEDBACK = "feedback"
    PARTNERSHIP = "partnership"
    MEDIA_PRESS = "media_press"
    OTHER = "other"


class ContactPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ContactStatus(str, enum.Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ContactMethod(str, enum.Enum):
    EMAIL = "email"
    PHONE = "phone"
    EITHER = "either"


class ContactTime(str, enum.Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"


class ContactSource(str, enum.Enum):
    WEBSITE_CONTACT_FORM = "website_contact_form"
    HOMEPAGE_QUICK_CONTACT = "homepage_quick_contact"
    PHONE = "phone"
    EMAIL = "email"
    CHAT = "chat"


class AdminRole(str, enum.Enum):
    """Admin account role."""
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


class Permission(str, enum.Enum):
    MANAGE_ROOMS = "manage_rooms"
    MANAGE_BOOKINGS = "manage_bookings"
    MANAGE_PAYMENTS = "manage_payments"
    MANAGE_CONTACTS = "manage_contacts"
    DELETE_CONTACTS = "delete_contacts"
    VIEW_ANALYTICS = "view_analytics"
    VIEW_REPORTS = "view_reports"
    MANAGE_USERS = "manage_users"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_CONTENT = "manage_content"


ROLE_PERMISSIONS = {
    AdminRole.ADMIN: [p for p in Permission],
    AdminRole.MANAGER: [
        Permission.MANAGE_ROOMS,
        Permission.MANAGE_BOOKINGS,
        Permission.MANAGE_PAYMENTS,
        Permission.MANAGE_CONTACTS,
        Permission.VIEW_ANALYTICS,
        Permission.VIEW_REPORTS,
    ],
    AdminRole.STAFF: [
        Permission.MANAGE_BOOKINGS,
        Permission.MANAGE_CONTACTS,
    ],
}
