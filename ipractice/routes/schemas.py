from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from ipractice.models.client import Appointment, Client
from ipractice.models.psychologist import Psychologist
from ipractice.models.time_range import TimeRange
from ipractice.use_cases.queries import PsychologistAvailability

MAX_NAME_LENGTH = 200
MAX_COMMENT_LENGTH = 600


class ApiModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _normalize_name(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('Name is required.')
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValueError(f'Name must be {MAX_NAME_LENGTH} characters or fewer.')
    return normalized


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CreatePsychologistRequest(ApiModel):
    name: str
    initial_clients: list[int] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _normalize_name(value)


class CreateClientRequest(ApiModel):
    name: str
    initial_psychologist_ids: list[int] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _normalize_name(value)


class AssignClientRequest(ApiModel):
    client_id: int


class TimeSlotRequest(ApiModel):
    start_time: datetime = Field(alias='from')
    end_time: datetime = Field(alias='to')

    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return _to_naive_utc(value)


class CreateBookingRequest(ApiModel):
    psychologist_id: int
    available_time_slot_id: str
    comment: str | None = None

    @field_validator('available_time_slot_id')
    @classmethod
    def validate_time_slot_id(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Time slot id is required.')
        return normalized

    @field_validator('comment')
    @classmethod
    def validate_comment(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > MAX_COMMENT_LENGTH:
            raise ValueError(f'Comment must be {MAX_COMMENT_LENGTH} characters or fewer.')

        return normalized


class TimeRangeResponse(ApiModel):
    id: str
    start_time: datetime = Field(alias='from')
    end_time: datetime = Field(alias='to')

    @classmethod
    def from_time_range(cls, time_range: TimeRange) -> 'TimeRangeResponse':
        return cls(id=time_range.id, start_time=time_range.start_time, end_time=time_range.end_time)


class BookedAppointmentResponse(TimeRangeResponse):
    client_id: int


class AppointmentResponse(TimeRangeResponse):
    psychologist_id: int
    comment: str | None = None

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> 'AppointmentResponse':
        return cls(
            id=appointment.id,
            start_time=appointment.start_time,
            end_time=appointment.end_time,
            psychologist_id=appointment.psychologist_id,
            comment=appointment.comment,
        )


class PsychologistSummaryResponse(ApiModel):
    id: int
    name: str


class PsychologistDetailsResponse(ApiModel):
    id: int
    name: str
    assigned_clients: list[int]
    available_time_slots: list[TimeRangeResponse]
    booked_appointments: list[BookedAppointmentResponse]

    @classmethod
    def from_psychologist(cls, psychologist: Psychologist) -> 'PsychologistDetailsResponse':
        return cls(
            id=psychologist.id,
            name=psychologist.name,
            assigned_clients=list(psychologist.assigned_client_ids),
            available_time_slots=[
                TimeRangeResponse.from_time_range(slot.to_time_range())
                for slot in psychologist.available_time_slots
            ],
            booked_appointments=[
                BookedAppointmentResponse(
                    id=appointment.id,
                    start_time=appointment.start_time,
                    end_time=appointment.end_time,
                    client_id=appointment.client_id,
                )
                for appointment in psychologist.booked_appointments
            ],
        )


class ClientSummaryResponse(ApiModel):
    id: int
    name: str


class ClientDetailsResponse(ApiModel):
    id: int
    name: str
    assigned_psychologists: list[int]
    booked_appointments: list[AppointmentResponse]

    @classmethod
    def from_client(cls, client: Client) -> 'ClientDetailsResponse':
        return cls(
            id=client.id,
            name=client.name,
            assigned_psychologists=list(client.assigned_psychologist_ids),
            booked_appointments=[AppointmentResponse.from_appointment(item) for item in client.appointments],
        )


class PsychologistAvailabilityResponse(ApiModel):
    psychologist_id: int
    psychologist_name: str
    available_time_slots: list[TimeRangeResponse]

    @classmethod
    def from_availability(cls, availability: PsychologistAvailability) -> 'PsychologistAvailabilityResponse':
        return cls(
            psychologist_id=availability.psychologist_id,
            psychologist_name=availability.psychologist_name,
            available_time_slots=[
                TimeRangeResponse.from_time_range(slot) for slot in availability.available_time_slots
            ],
        )
