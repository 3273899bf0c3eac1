from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from lab_central.data_models import BookingStatus
from lab_central.fines import calculate_fine

END = datetime(2024, 1, 8, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "status",
    [BookingStatus.PENDING, BookingStatus.REJECTED, BookingStatus.COMPLETED, BookingStatus.CANCELLED],
)
def test_only_approved_bookings_accrue_fines(status) -> None:
    assert calculate_fine(END, status, END + timedelta(days=30)) == 0


def test_not_overdue_at_exact_end_time() -> None:
    assert calculate_fine(END, BookingStatus.APPROVED, END) == 0


def test_not_overdue_before_end_time() -> None:
    assert calculate_fine(END, BookingStatus.APPROVED, END - timedelta(hours=3)) == 0


def test_first_started_day_is_charged() -> None:
    assert calculate_fine(END, BookingStatus.APPROVED, END + timedelta(seconds=1)) == 50


def test_whole_days_are_floored_then_one_added() -> None:
    assert calculate_fine(END, BookingStatus.APPROVED, END + timedelta(days=1)) == 100
    assert calculate_fine(END, BookingStatus.APPROVED, END + timedelta(days=1, seconds=1)) == 100
    assert calculate_fine(END, BookingStatus.APPROVED, END + timedelta(days=2)) == 150
