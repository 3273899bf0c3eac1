# availability.py
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from lab_central.data_models import Booking, BookingStatus, Equipment, EquipmentStatus


def find_active_booking(equipment_id: str, bookings: Iterable[Booking], now: datetime) -> Optional[Booking]:
    """First approved booking for the item whose window contains ``now`` (bounds inclusive)."""
    for booking in bookings:
        if (
            booking.equipment_id == equipment_id
            and booking.status == BookingStatus.APPROVED
            and booking.start_time <= now <= booking.end_time
        ):
            return booking
    return None


def resolve_status(item: Equipment, bookings: Sequence[Booking], now: datetime) -> EquipmentStatus:
    # Maintenance is only ever lifted by hand.
    if item.status == EquipmentStatus.MAINTENANCE:
        return item.status
    if find_active_booking(item.id, bookings, now):
        return EquipmentStatus.IN_USE
    return EquipmentStatus.AVAILABLE


def resolve_availability(equipment: Iterable[Equipment], bookings: Iterable[Booking], now: datetime) -> List[Equipment]:
    """Return the inventory with every status recomputed for ``now``."""
    bookings = list(bookings)
    return [replace(item, status=resolve_status(item, bookings, now)) for item in equipment]
