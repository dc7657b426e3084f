"""Status enumerations shared by models, schemas and services."""

import enum


class RecordStatus(str, enum.Enum):
    """Soft-delete status carried by every entity."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class RoleName(str, enum.Enum):
    MANAGER = "MANAGER"
    WAITER = "WAITER"
    HOST = "HOST"
    KITCHEN = "KITCHEN"
    CASHIER = "CASHIER"
    ACCOUNTANT = "ACCOUNTANT"
    EMPLOYEE = "EMPLOYEE"
    CUSTOMER = "CUSTOMER"
    SUPPORT = "SUPPORT"
    SYSTEM_ADMIN = "SYSTEM_ADMIN"


MANAGER_ROLES = {RoleName.MANAGER.value, RoleName.SYSTEM_ADMIN.value}


class BookingStatus(str, enum.Enum):
    BOOKED = "BOOKED"
    DEPOSIT_PAID = "DEPOSIT_PAID"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Bookings in these states hold their tables
BLOCKING_BOOKING_STATUSES = (BookingStatus.BOOKED.value, BookingStatus.DEPOSIT_PAID.value)


class PaymentType(str, enum.Enum):
    CASH = "cash"
    BANKING = "banking"


class PreOrderType(str, enum.Enum):
    DINE_IN = "dine-in"
    TAKEAWAY = "takeaway"


class WaitlistStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"  # waiting for a table
    NOTIFIED = "NOTIFIED"  # table held, waiting for the deposit
    CONVERTED = "CONVERTED"  # deposit paid, booking confirmed
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class ShiftStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    CONFLICTED = "CONFLICTED"
    REQUEST_CHANGE = "REQUEST_CHANGE"
    APPROVED_LEAVE_VALID = "APPROVED_LEAVE_VALID"
    APPROVED_LEAVE_EXCEEDED = "APPROVED_LEAVE_EXCEEDED"


# Staff shifts in these states occupy the employee's time
WORKING_SHIFT_STATUSES = (
    ShiftStatus.DRAFT.value,
    ShiftStatus.PENDING.value,
    ShiftStatus.PUBLISHED.value,
    ShiftStatus.CONFLICTED.value,
)

# Staff shifts a manager may hand over to a colleague
REPLACEABLE_SHIFT_STATUSES = (ShiftStatus.CONFLICTED.value, ShiftStatus.REQUEST_CHANGE.value)


class ScheduledShiftStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class ScheduleLockStatus(str, enum.Enum):
    LOCKED = "LOCKED"
    UNLOCKED = "UNLOCKED"


class RequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class NotificationType(str, enum.Enum):
    SHIFT_ASSIGNED = "SHIFT_ASSIGNED"
    SHIFT_PUBLISHED = "SHIFT_PUBLISHED"
    SHIFT_CANCELLED = "SHIFT_CANCELLED"
    SHIFT_FEEDBACK = "SHIFT_FEEDBACK"
    SHIFT_REPLACEMENT = "SHIFT_REPLACEMENT"
    LEAVE_APPROVED = "LEAVE_APPROVED"
    SWAP_REQUEST = "SWAP_REQUEST"
    EMERGENCY_SHIFT = "EMERGENCY_SHIFT"
    SCHEDULE_PUBLISHED = "SCHEDULE_PUBLISHED"
    GENERAL = "GENERAL"


class DisplayType(str, enum.Enum):
    RADIO = "RADIO"
    SELECT = "SELECT"
    COLOR = "COLOR"
    CHECKBOX = "CHECKBOX"
    TEXTBOX = "TEXTBOX"


class VariantCreationMode(str, enum.Enum):
    INSTANTLY = "INSTANTLY"
    DYNAMICALLY = "DYNAMICALLY"
    NEVER = "NEVER"


WEEK_DAYS = ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]
