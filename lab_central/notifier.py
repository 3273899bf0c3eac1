# notifier.py
import logging
from datetime import datetime
from typing import List

from lab_central.data_models import Booking, NotificationRecord
from lab_central.fines import booking_fine
from lab_central.gateway import NotificationGateway
from lab_central.store import LabStore

logger = logging.getLogger(__name__)


def overdue_message(booking: Booking, equipment_name: str, fine: int) -> str:
    return (
        f"⚠️ OVERDUE ALERT: Hi {booking.faculty_name}, your access to {equipment_name} has expired. "
        f"A fine of ${fine} has been generated. "
        "Please return it immediately to avoid further charges."
    )


class OverdueNotifier:
    """Sends one WhatsApp alert per booking the first time it is seen overdue."""

    def __init__(self, store: LabStore, gateway: NotificationGateway):
        self.store = store
        self.gateway = gateway

    def tick(self, now: datetime) -> List[NotificationRecord]:
        sent = []
        names = {item.id: item.name for item in self.store.list_equipment()}
        for booking in self.store.list_bookings():
            fine = booking_fine(booking, now)
            if fine <= 0:
                continue
            # Claim the booking before sending; a second claim returns False.
            if not self.store.mark_overdue_alerted(booking.id, now):
                continue
            equipment_name = names.get(booking.equipment_id, "Unknown equipment")
            logger.info("Booking %s is overdue, fine %d", booking.id, fine)
            try:
                record = self.gateway.send(booking.contact, overdue_message(booking, equipment_name, fine))
            except Exception:
                # Let a later tick retry.
                self.store.release_overdue_alert(booking.id)
                raise
            sent.append(record)
        return sent
