"""Booking report export and analytics projections."""

import csv
import io
from datetime import datetime
from typing import Dict, Iterable, List, Sequence

from lab_central.data_models import Booking, Equipment
from lab_central.fines import booking_fine

REPORT_TITLE = "LabCentral Reservation Report"

COLUMNS: Sequence[str] = ("ID", "Equipment", "Researcher", "Dept", "Period", "Status", "Fine")

# Reference line drawn next to each bar on the utilization chart.
AVERAGE_USAGE_HOURS = 2000


def _format_fine(amount: int) -> str:
    return f"${amount}"


def report_rows(bookings: Iterable[Booking], equipment: Iterable[Equipment], now: datetime) -> List[List[str]]:
    names = {item.id: item.name for item in equipment}
    rows = []
    for booking in bookings:
        rows.append([
            booking.short_id,
            names.get(booking.equipment_id, "Unknown"),
            booking.faculty_name,
            booking.department,
            f"{booking.start_time:%Y-%m-%d} - {booking.end_time:%Y-%m-%d}",
            booking.status.value,
            _format_fine(booking_fine(booking, now)),
        ])
    return rows


def report_filename(now: datetime, extension: str = "csv") -> str:
    return f"LabCentral_Report_{int(now.timestamp() * 1000)}.{extension}"


def render_csv(bookings: Iterable[Booking], equipment: Iterable[Equipment], now: datetime) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([REPORT_TITLE])
    writer.writerow([f"Generated on: {now:%Y-%m-%d %H:%M:%S} UTC"])
    writer.writerow(COLUMNS)
    writer.writerows(report_rows(bookings, equipment, now))
    return buffer.getvalue()


def utilization_chart(equipment: Iterable[Equipment]) -> List[Dict]:
    return [
        {"name": item.name.split(" ")[0], "usage": item.total_usage_hours, "avg": AVERAGE_USAGE_HOURS}
        for item in equipment
    ]
