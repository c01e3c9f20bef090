from enum import Enum


class UserRole(str, Enum):
    MANAGER = "manager"
    TENANT = "tenant"


class ApplicationStatus(str, Enum):
    PENDING = "Pending"
    DENIED = "Denied"
    APPROVED = "Approved"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    PARTIALLY_PAID = "PartiallyPaid"
    OVERDUE = "Overdue"


class PaymentType(str, Enum):
    RENT = "Rent"
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


class PropertyType(str, Enum):
    ROOMS = "Rooms"
    TINYHOUSE = "Tinyhouse"
    APARTMENT = "Apartment"
    VILLA = "Villa"
    TOWNHOUSE = "Townhouse"
    COTTAGE = "Cottage"


class NotificationKind(str, Enum):
    MESSAGE = "Message"
    ALERT = "Alert"
