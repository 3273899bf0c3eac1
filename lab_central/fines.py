# fines.py
from datetime import datetime, timedelta

from lab_central.config import FINE_PER_DAY
from lab_central.data_models import Booking, BookingStatus

ONE_DAY = timedelta(days=1)


def calculate_fine(end_time: datetime, status: BookingStatus, now: datetime) -> int:
    """Fine owed on a booking at ``now``.

    Only approved bookings accrue fines. Once ``now`` is strictly past the end
    time, every started day costs ``FINE_PER_DAY``: whole days overdue are
    floored, then one is added for the day in progress.
    """
    if status != BookingStatus.APPROVED:
        return 0
    if now > end_time:
        days_overdue = (now - end_time) // ONE_DAY
        return (days_overdue + 1) * FINE_PER_DAY
    return 0


def booking_fine(booking: Booking, now: datetime) -> int:
    return calculate_fine(booking.end_time, booking.status, now)


def is_overdue(booking: Booking, now: datetime) -> bool:
    return booking_fine(booking, now) > 0
