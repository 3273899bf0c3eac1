# data_models.py
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import List


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"


class EquipmentStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    MAINTENANCE = "MAINTENANCE"
    BOOKED = "BOOKED"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    # No transition produces these two yet.
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class NotificationStatus(str, enum.Enum):
    QUEUED = "QUEUED"
    SENDING = "SENDING"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


@dataclass
class Equipment:
    """A piece of lab equipment in the inventory."""
    id: str
    name: str
    category: str
    lab_name: str
    status: EquipmentStatus
    description: str = ""
    specifications: List[str] = field(default_factory=list)
    hourly_rate: int = 0
    image: str = ""
    total_usage_hours: int = 0


@dataclass
class Requester:
    """Who is asking for the equipment."""
    user_id: str
    name: str
    department: str


@dataclass
class Booking:
    """Represents a single reservation of one piece of equipment."""
    id: str
    equipment_id: str
    user_id: str
    faculty_name: str
    department: str
    contact: str
    start_time: datetime
    end_time: datetime
    purpose: str
    status: BookingStatus
    requested_at: datetime

    @property
    def short_id(self) -> str:
        return self.id[-6:]


@dataclass
class NotificationRecord:
    """One outbound message in the gateway log."""
    id: str
    to: str
    message: str
    timestamp: datetime
    status: NotificationStatus
    link: str = ""


@dataclass
class Banner:
    """Transient view of the most recently sent notification."""
    notification_id: str
    to: str
    message: str
    status: NotificationStatus
    link: str
