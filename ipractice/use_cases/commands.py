"""Commands: requests that change one or both aggregates."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class RegisterPsychologist(Command):
    name: str
    initial_client_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class AssignClientToPsychologist(Command):
    psychologist_id: int
    client_id: int


@dataclass(frozen=True)
class CreateAvailableTimeSlot(Command):
    psychologist_id: int
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class UpdateAvailableTimeSlot(Command):
    psychologist_id: int
    time_slot_id: str
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class DeleteAvailableTimeSlot(Command):
    psychologist_id: int
    time_slot_id: str


@dataclass(frozen=True)
class RegisterClient(Command):
    name: str
    initial_psychologist_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class BookAppointment(Command):
    client_id: int
    psychologist_id: int
    time_slot_id: str
    comment: str | None = None


@dataclass(frozen=True)
class CancelAppointment(Command):
    client_id: int
    appointment_id: str
