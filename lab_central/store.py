# store.py
import logging
import threading
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

import sqlalchemy

from lab_central.config import DATABASE_URL
from lab_central.data_models import (
    Booking,
    BookingStatus,
    Equipment,
    EquipmentStatus,
    NotificationRecord,
    NotificationStatus,
)
from lab_central.database import create_store_engine, metadata
from lab_central.exceptions import BookingStateError
from lab_central.models import bookings, equipment, notifications, overdue_alerts

logger = logging.getLogger(__name__)


def _to_db(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None)


def _from_db(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def _equipment_from_row(row) -> Equipment:
    return Equipment(
        id=row.id,
        name=row.name,
        category=row.category,
        lab_name=row.lab_name,
        status=row.status,
        description=row.description or "",
        specifications=list(row.specifications or []),
        hourly_rate=row.hourly_rate or 0,
        image=row.image or "",
        total_usage_hours=row.total_usage_hours or 0,
    )


def _booking_from_row(row) -> Booking:
    return Booking(
        id=row.id,
        equipment_id=row.equipment_id,
        user_id=row.user_id,
        faculty_name=row.faculty_name,
        department=row.department,
        contact=row.contact,
        start_time=_from_db(row.start_time),
        end_time=_from_db(row.end_time),
        purpose=row.purpose,
        status=row.status,
        requested_at=_from_db(row.requested_at),
    )


def _notification_from_row(row) -> NotificationRecord:
    return NotificationRecord(
        id=row.id,
        to=row.to,
        message=row.message,
        timestamp=_from_db(row.timestamp),
        status=row.status,
        link=row.link or "",
    )


class LabStore:
    """Single owner of the equipment, booking, notification and overdue-alert collections.

    Every read and write goes through this object and is serialized by one lock,
    so callers on other threads cannot interleave a check with its write.
    """

    def __init__(self, url: str = DATABASE_URL, seed: Optional[Iterable[Equipment]] = None):
        self.engine = create_store_engine(url)
        metadata.create_all(bind=self.engine)
        self._lock = threading.RLock()
        if seed is not None:
            self.seed_equipment(seed)

    def seed_equipment(self, items: Iterable[Equipment]) -> int:
        """Insert the catalog once; returns how many items were added."""
        with self._lock, self.engine.begin() as conn:
            count = conn.execute(sqlalchemy.select(sqlalchemy.func.count()).select_from(equipment)).scalar()
            if count:
                return 0
            rows = [dict(asdict(item), position=position) for position, item in enumerate(items)]
            if rows:
                conn.execute(equipment.insert(), rows)
        logger.info("Seeded %d equipment items", len(rows))
        return len(rows)

    # Equipment

    def list_equipment(self) -> List[Equipment]:
        with self._lock, self.engine.connect() as conn:
            rows = conn.execute(equipment.select().order_by(equipment.c.position)).fetchall()
        return [_equipment_from_row(row) for row in rows]

    def get_equipment(self, equipment_id: str) -> Optional[Equipment]:
        with self._lock, self.engine.connect() as conn:
            row = conn.execute(equipment.select().where(equipment.c.id == equipment_id)).first()
        return _equipment_from_row(row) if row else None

    def set_equipment_status(self, equipment_id: str, status: EquipmentStatus) -> None:
        with self._lock, self.engine.begin() as conn:
            conn.execute(equipment.update().where(equipment.c.id == equipment_id).values(status=status))

    # Bookings

    def add_booking(self, booking: Booking) -> Booking:
        values = asdict(booking)
        for key in ("start_time", "end_time", "requested_at"):
            values[key] = _to_db(values[key])
        with self._lock, self.engine.begin() as conn:
            conn.execute(bookings.insert().values(**values))
        return booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        with self._lock, self.engine.connect() as conn:
            row = conn.execute(bookings.select().where(bookings.c.id == booking_id)).first()
        return _booking_from_row(row) if row else None

    def list_bookings(self, user_id: Optional[str] = None) -> List[Booking]:
        query = bookings.select().order_by(bookings.c.seq)
        if user_id is not None:
            query = query.where(bookings.c.user_id == user_id)
        with self._lock, self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_booking_from_row(row) for row in rows]

    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        expected: Optional[BookingStatus] = None,
    ) -> Optional[Booking]:
        """Set a booking's status; returns None if the id is unknown.

        With ``expected`` set, raises BookingStateError unless the booking is
        currently in that status. The check and the write share one lock.
        """
        with self._lock, self.engine.begin() as conn:
            row = conn.execute(bookings.select().where(bookings.c.id == booking_id)).first()
            if row is None:
                return None
            if expected is not None and row.status != expected:
                raise BookingStateError(booking_id, row.status)
            conn.execute(bookings.update().where(bookings.c.id == booking_id).values(status=status))
            row = conn.execute(bookings.select().where(bookings.c.id == booking_id)).first()
        return _booking_from_row(row)

    # Notification log

    def add_notification(self, record: NotificationRecord) -> NotificationRecord:
        values = asdict(record)
        values["timestamp"] = _to_db(values["timestamp"])
        with self._lock, self.engine.begin() as conn:
            conn.execute(notifications.insert().values(**values))
        return record

    def update_notification_status(self, notification_id: str, status: NotificationStatus) -> Optional[NotificationRecord]:
        with self._lock, self.engine.begin() as conn:
            result = conn.execute(
                notifications.update().where(notifications.c.id == notification_id).values(status=status)
            )
            if result.rowcount == 0:
                return None
            row = conn.execute(notifications.select().where(notifications.c.id == notification_id)).first()
        return _notification_from_row(row)

    def get_notification(self, notification_id: str) -> Optional[NotificationRecord]:
        with self._lock, self.engine.connect() as conn:
            row = conn.execute(notifications.select().where(notifications.c.id == notification_id)).first()
        return _notification_from_row(row) if row else None

    def list_notifications(self) -> List[NotificationRecord]:
        """Newest first."""
        with self._lock, self.engine.connect() as conn:
            rows = conn.execute(notifications.select().order_by(notifications.c.seq.desc())).fetchall()
        return [_notification_from_row(row) for row in rows]

    # Overdue de-duplication set

    def mark_overdue_alerted(self, booking_id: str, at: datetime) -> bool:
        """Record that ``booking_id`` got its overdue alert.

        Returns True only for the first call per booking id.
        """
        with self._lock, self.engine.begin() as conn:
            exists = conn.execute(
                sqlalchemy.select(overdue_alerts.c.booking_id).where(overdue_alerts.c.booking_id == booking_id)
            ).first()
            if exists:
                return False
            conn.execute(overdue_alerts.insert().values(booking_id=booking_id, alerted_at=_to_db(at)))
        return True

    def release_overdue_alert(self, booking_id: str) -> None:
        """Undo a claim whose alert never went out."""
        with self._lock, self.engine.begin() as conn:
            conn.execute(overdue_alerts.delete().where(overdue_alerts.c.booking_id == booking_id))

    def overdue_alerted_ids(self) -> Set[str]:
        with self._lock, self.engine.connect() as conn:
            rows = conn.execute(sqlalchemy.select(overdue_alerts.c.booking_id)).fetchall()
        return {row.booking_id for row in rows}

    def dispose(self) -> None:
        self.engine.dispose()
