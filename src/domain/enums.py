from enum import Enum


class UserRole(str, Enum):
    EXHIBITOR = "exhibitor"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class BoothStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    MAINTENANCE = "maintenance"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DRAFT = "draft"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit-card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank-transfer"
