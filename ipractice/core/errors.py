"""Domain-layer error definitions."""

from datetime import datetime


class DomainError(Exception):
    """Base class for domain-layer errors."""


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""


class PsychologistNotFoundError(NotFoundError):
    def __init__(self, key: int | str) -> None:
        super().__init__(f"Psychologist '{key}' not found.")
        self.key = key


class ClientNotFoundError(NotFoundError):
    def __init__(self, key: int | str) -> None:
        super().__init__(f"Client '{key}' not found.")
        self.key = key


class TimeSlotNotFoundError(NotFoundError):
    """Raised when a slot id is not among a psychologist's available slots."""

    def __init__(self, slot_id: str) -> None:
        super().__init__(f"Available time slot '{slot_id}' not found.")
        self.slot_id = slot_id


class AppointmentNotFoundError(NotFoundError):
    """Raised when an appointment id is not among an aggregate's booked appointments."""

    def __init__(self, appointment_id: str) -> None:
        super().__init__(f"Appointment '{appointment_id}' not found.")
        self.appointment_id = appointment_id


class InvalidTimeRangeError(DomainError):
    """Raised when a time range does not start strictly before it ends."""

    def __init__(self, start_time: datetime, end_time: datetime) -> None:
        super().__init__(
            f"Time range start {start_time.isoformat()} must be before end {end_time.isoformat()}."
        )
        self.start_time = start_time
        self.end_time = end_time


class ConcurrencyConflictError(DomainError):
    """Raised when an aggregate was changed by another request since it was loaded."""

    def __init__(self, detail: str = "") -> None:
        message = "The record was modified by another request. Reload and try again."
        super().__init__(f"{message} ({detail})" if detail else message)


class SimulatedFailureError(DomainError):
    """Raised by an enabled fault injector."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Internal server error occurred while {operation}. Please try again."
        )
        self.operation = operation


class CommentWriteError(DomainError):
    """Raised when an appointment comment could not be written."""

    def __init__(self, client_id: int, appointment_id: str) -> None:
        super().__init__(
            f"Could not store comment for appointment '{appointment_id}' of client {client_id}."
        )
        self.client_id = client_id
        self.appointment_id = appointment_id
