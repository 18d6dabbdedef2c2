"""Value objects shared by the psychologist and client aggregates."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from ipractice.core.errors import InvalidTimeRangeError


@dataclass(frozen=True)
class TimeRange:
    id: str
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class CancelledAppointment:
    """What is left of an appointment after it was removed from a client's calendar."""

    id: str
    psychologist_id: int


def new_time_slot_id() -> str:
    return str(uuid.uuid4())


def validate_time_range(start_time: datetime, end_time: datetime) -> None:
    if start_time >= end_time:
        raise InvalidTimeRangeError(start_time, end_time)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
