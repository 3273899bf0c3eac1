# exceptions.py


class LabCentralError(Exception):
    """Base class for errors raised by the booking engine."""


class BookingValidationError(LabCentralError, ValueError):
    """The requested booking window is not acceptable."""


class BookingNotFoundError(LabCentralError, LookupError):
    def __init__(self, booking_id: str):
        super().__init__(f"Booking {booking_id} not found.")
        self.booking_id = booking_id


class EquipmentNotFoundError(LabCentralError, LookupError):
    def __init__(self, equipment_id: str):
        super().__init__(f"Equipment {equipment_id} not found.")
        self.equipment_id = equipment_id


class BookingStateError(LabCentralError):
    """The booking has already left PENDING and cannot be decided again."""

    def __init__(self, booking_id: str, status):
        super().__init__(f"Booking {booking_id} is already {status.value}.")
        self.booking_id = booking_id
        self.status = status
