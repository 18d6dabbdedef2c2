"""Client aggregate and its appointment calendar."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import relationship

from ipractice.core.errors import AppointmentNotFoundError
from ipractice.database import Base
from ipractice.models.time_range import CancelledAppointment, TimeRange, utc_now


class Appointment(Base):
    """A booked appointment as seen from the client side."""
    __tablename__ = "client_appointments"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    psychologist_id = Column(Integer, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    comment = Column(String, nullable=True)

    def to_cancelled_appointment(self) -> CancelledAppointment:
        return CancelledAppointment(id=self.id, psychologist_id=self.psychologist_id)


class Calendar:
    """List-backed view over a client's booked appointments."""

    def __init__(self, appointments: list[Appointment]) -> None:
        self.appointments = appointments

    @classmethod
    def empty(cls) -> "Calendar":
        return cls([])

    def book_appointment(self, time_slot: TimeRange, psychologist_id: int, comment: str | None = None) -> Appointment:
        appointment = Appointment(
            id=time_slot.id,
            psychologist_id=psychologist_id,
            start_time=time_slot.start_time,
            end_time=time_slot.end_time,
            comment=comment,
        )
        self.appointments.append(appointment)
        return appointment

    def cancel_appointment(self, appointment_id: str) -> CancelledAppointment:
        appointment = self.find(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)

        self.appointments.remove(appointment)
        return appointment.to_cancelled_appointment()

    def find(self, appointment_id: str) -> Appointment | None:
        return next((item for item in self.appointments if item.id == appointment_id), None)


class Client(Base):
    """Owns the appointments a client has booked."""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    assigned_psychologist_ids = Column(MutableList.as_mutable(JSON), nullable=False)
    version = Column(Integer, nullable=False)
    updated_at = Column(DateTime)

    appointments = relationship(
        "Appointment",
        cascade="all, delete-orphan",
        order_by="Appointment.pk",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @classmethod
    def create(cls, name: str, initial_psychologist_ids: list[int]) -> "Client":
        return cls(
            name=name,
            assigned_psychologist_ids=list(dict.fromkeys(initial_psychologist_ids)),
            appointments=[],
            updated_at=utc_now(),
        )

    @property
    def calendar(self) -> Calendar:
        return Calendar(self.appointments)

    def assign_new_psychologist(self, psychologist_id: int) -> None:
        if psychologist_id not in self.assigned_psychologist_ids:
            self.assigned_psychologist_ids.append(psychologist_id)
        self._touch()

    def book_appointment(self, time_slot: TimeRange, psychologist_id: int, comment: str | None = None) -> Appointment:
        appointment = self.calendar.book_appointment(time_slot, psychologist_id, comment)
        self._touch()
        return appointment

    def cancel_booked_appointment(self, appointment_id: str) -> CancelledAppointment:
        cancelled = self.calendar.cancel_appointment(appointment_id)
        self._touch()
        return cancelled

    def _touch(self) -> None:
        self.updated_at = utc_now()
