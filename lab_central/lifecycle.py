# lifecycle.py
import logging
import math
from datetime import datetime
from typing import Callable, List, Optional

from lab_central.config import MAX_BOOKING_DAYS
from lab_central.data_models import Booking, BookingStatus, NotificationStatus, Requester
from lab_central.exceptions import BookingNotFoundError, BookingValidationError, EquipmentNotFoundError
from lab_central.fines import ONE_DAY
from lab_central.gateway import NotificationGateway
from lab_central.store import LabStore
from lab_central.utils import ensure_utc, new_id, utcnow

logger = logging.getLogger(__name__)

DECISIONS = (BookingStatus.APPROVED, BookingStatus.REJECTED)


def validate_window(start_time: datetime, end_time: datetime, max_days: int = MAX_BOOKING_DAYS) -> None:
    """Raise BookingValidationError unless the window is usable."""
    if end_time < start_time:
        raise BookingValidationError("end before start")
    # Any started day counts in full.
    if math.ceil((end_time - start_time) / ONE_DAY) > max_days:
        raise BookingValidationError("exceeds max duration")


class BookingLifecycleManager:
    """Creates booking requests and applies admin decisions to them."""

    def __init__(self, store: LabStore, gateway: NotificationGateway, clock: Callable = utcnow):
        self.store = store
        self.gateway = gateway
        self.clock = clock

    def create_booking(
        self,
        equipment_id: str,
        requester: Requester,
        start_time: datetime,
        end_time: datetime,
        purpose: str,
        contact: str,
    ) -> Booking:
        item = self.store.get_equipment(equipment_id)
        if item is None:
            raise EquipmentNotFoundError(equipment_id)

        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)
        validate_window(start_time, end_time)

        booking = Booking(
            id=new_id("bk-"),
            equipment_id=item.id,
            user_id=requester.user_id,
            faculty_name=requester.name,
            department=requester.department,
            contact=contact,
            start_time=start_time,
            end_time=end_time,
            purpose=purpose,
            status=BookingStatus.PENDING,
            requested_at=self.clock(),
        )
        self.store.add_booking(booking)
        logger.info("Booking %s requested for %s by %s", booking.id, item.name, requester.name)

        self.gateway.send(
            contact,
            f"System: Request for {item.name} received. Waiting for admin approval.",
            entry_status=NotificationStatus.QUEUED,
            id_prefix="wa-",
        )
        return booking

    def decide(self, booking_id: str, decision: BookingStatus) -> Booking:
        """Approve or reject a PENDING booking; decisions are final."""
        if decision not in DECISIONS:
            raise BookingValidationError(f"decision must be APPROVED or REJECTED, not {decision.value}")

        booking = self.store.update_booking_status(booking_id, decision, expected=BookingStatus.PENDING)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        logger.info("Booking %s %s", booking.id, decision.value)

        if decision == BookingStatus.APPROVED:
            item = self.store.get_equipment(booking.equipment_id)
            equipment_name = item.name if item else "Unknown equipment"
            self.gateway.send(
                booking.contact,
                f"LabCentral Alert: Hi {booking.faculty_name}, your request for {equipment_name} "
                f"from {booking.start_time:%Y-%m-%d} to {booking.end_time:%Y-%m-%d} has been APPROVED. "
                f"Use ID: {booking.short_id}.",
            )
        return booking

    def list_bookings(self, user_id: Optional[str] = None) -> List[Booking]:
        return self.store.list_bookings(user_id=user_id)
