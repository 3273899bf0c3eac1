# models.py
import sqlalchemy

from lab_central.data_models import BookingStatus, EquipmentStatus, NotificationStatus
from lab_central.database import metadata

# 'equipment' table
equipment = sqlalchemy.Table(
    "equipment",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.String, primary_key=True),
    sqlalchemy.Column("name", sqlalchemy.String, nullable=False),
    sqlalchemy.Column("category", sqlalchemy.String, index=True),
    sqlalchemy.Column("lab_name", sqlalchemy.String),
    sqlalchemy.Column("status", sqlalchemy.Enum(EquipmentStatus), nullable=False),
    sqlalchemy.Column("description", sqlalchemy.Text, default=""),
    sqlalchemy.Column("specifications", sqlalchemy.JSON, default=list),
    sqlalchemy.Column("hourly_rate", sqlalchemy.Integer, default=0),
    sqlalchemy.Column("image", sqlalchemy.String, default=""),
    sqlalchemy.Column("total_usage_hours", sqlalchemy.Integer, default=0),
    # keeps catalog order stable
    sqlalchemy.Column("position", sqlalchemy.Integer, nullable=False),
)

# Times are stored as naive UTC; the store re-attaches the timezone.
bookings = sqlalchemy.Table(
    "bookings",
    metadata,
    sqlalchemy.Column("seq", sqlalchemy.Integer, primary_key=True, autoincrement=True),
    sqlalchemy.Column("id", sqlalchemy.String, unique=True, nullable=False),
    sqlalchemy.Column("equipment_id", sqlalchemy.String, sqlalchemy.ForeignKey("equipment.id")),
    sqlalchemy.Column("user_id", sqlalchemy.String),
    sqlalchemy.Column("faculty_name", sqlalchemy.String),
    sqlalchemy.Column("department", sqlalchemy.String),
    sqlalchemy.Column("contact", sqlalchemy.String),
    sqlalchemy.Column("start_time", sqlalchemy.DateTime),
    sqlalchemy.Column("end_time", sqlalchemy.DateTime),
    sqlalchemy.Column("purpose", sqlalchemy.Text),
    sqlalchemy.Column("status", sqlalchemy.Enum(BookingStatus), nullable=False),
    sqlalchemy.Column("requested_at", sqlalchemy.DateTime),
)

notifications = sqlalchemy.Table(
    "notifications",
    metadata,
    sqlalchemy.Column("seq", sqlalchemy.Integer, primary_key=True, autoincrement=True),
    sqlalchemy.Column("id", sqlalchemy.String, unique=True, nullable=False),
    sqlalchemy.Column("to", sqlalchemy.String),
    sqlalchemy.Column("message", sqlalchemy.Text),
    sqlalchemy.Column("timestamp", sqlalchemy.DateTime),
    sqlalchemy.Column("status", sqlalchemy.Enum(NotificationStatus), nullable=False),
    sqlalchemy.Column("link", sqlalchemy.String),
)

# Booking ids that already received their overdue alert.
overdue_alerts = sqlalchemy.Table(
    "overdue_alerts",
    metadata,
    sqlalchemy.Column("booking_id", sqlalchemy.String, primary_key=True),
    sqlalchemy.Column("alerted_at", sqlalchemy.DateTime),
)
