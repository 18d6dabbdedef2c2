"""Psychologist aggregate and its time slot collections."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import relationship

from ipractice.core.errors import AppointmentNotFoundError, TimeSlotNotFoundError
from ipractice.database import Base
from ipractice.models.time_range import TimeRange, new_time_slot_id, utc_now, validate_time_range


class AvailableTimeSlot(Base):
    """A time range a psychologist has opened for booking."""
    __tablename__ = "available_time_slots"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, index=True)
    psychologist_id = Column(Integer, ForeignKey("psychologists.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    def to_time_range(self) -> TimeRange:
        return TimeRange(id=self.id, start_time=self.start_time, end_time=self.end_time)


class BookedAppointment(Base):
    """A slot consumed by a client, kept under the slot's original id."""
    __tablename__ = "psychologist_booked_appointments"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, index=True)
    psychologist_id = Column(Integer, ForeignKey("psychologists.id"), nullable=False)
    client_id = Column(Integer, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    def to_time_range(self) -> TimeRange:
        return TimeRange(id=self.id, start_time=self.start_time, end_time=self.end_time)


class Psychologist(Base):
    """Owns its available slots and the appointments booked against them."""
    __tablename__ = "psychologists"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    assigned_client_ids = Column(MutableList.as_mutable(JSON), nullable=False)
    version = Column(Integer, nullable=False)
    updated_at = Column(DateTime)

    available_time_slots = relationship(
        "AvailableTimeSlot",
        cascade="all, delete-orphan",
        order_by="AvailableTimeSlot.pk",
        lazy="selectin",
    )
    booked_appointments = relationship(
        "BookedAppointment",
        cascade="all, delete-orphan",
        order_by="BookedAppointment.pk",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @classmethod
    def create(cls, name: str, initial_client_ids: list[int]) -> "Psychologist":
        return cls(
            name=name,
            assigned_client_ids=list(dict.fromkeys(initial_client_ids)),
            available_time_slots=[],
            booked_appointments=[],
            updated_at=utc_now(),
        )

    def assign_new_client(self, client_id: int) -> None:
        if client_id not in self.assigned_client_ids:
            self.assigned_client_ids.append(client_id)
        self._touch()

    def add_available_time_slot(self, start_time, end_time) -> AvailableTimeSlot:
        validate_time_range(start_time, end_time)
        time_slot = AvailableTimeSlot(id=new_time_slot_id(), start_time=start_time, end_time=end_time)
        self.available_time_slots.append(time_slot)
        self._touch()
        return time_slot

    def update_available_time_slot(self, time_slot_id: str, start_time, end_time) -> AvailableTimeSlot:
        time_slot = self._find_available_time_slot(time_slot_id)
        validate_time_range(start_time, end_time)
        time_slot.start_time = start_time
        time_slot.end_time = end_time
        self._touch()
        return time_slot

    def cancel_available_time_slot(self, time_slot_id: str) -> TimeRange:
        time_slot = self._find_available_time_slot(time_slot_id)
        self.available_time_slots.remove(time_slot)
        self._touch()
        return time_slot.to_time_range()

    def book_appointment(self, time_slot_id: str, client_id: int) -> BookedAppointment:
        """Move an available slot into the booked collection under the same id."""
        time_slot = self._find_available_time_slot(time_slot_id)
        self.available_time_slots.remove(time_slot)

        appointment = BookedAppointment(
            id=time_slot.id,
            client_id=client_id,
            start_time=time_slot.start_time,
            end_time=time_slot.end_time,
        )
        self.booked_appointments.append(appointment)
        self._touch()
        return appointment

    def cancel_booked_appointment(self, appointment_id: str) -> BookedAppointment:
        appointment = next((item for item in self.booked_appointments if item.id == appointment_id), None)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)

        self.booked_appointments.remove(appointment)
        self._touch()
        return appointment

    def _find_available_time_slot(self, time_slot_id: str) -> AvailableTimeSlot:
        time_slot = next((item for item in self.available_time_slots if item.id == time_slot_id), None)
        if time_slot is None:
            raise TimeSlotNotFoundError(time_slot_id)
        return time_slot

    def _touch(self) -> None:
        # Rewriting the parent row makes the version check cover child collection changes.
        self.updated_at = utc_now()
