"""Queries: read-only requests and the projections they return."""

from dataclasses import dataclass, field

from ipractice.models.time_range import TimeRange


@dataclass(frozen=True)
class Query:
    """Base class for all queries."""


@dataclass(frozen=True)
class GetAllPsychologists(Query):
    pass


@dataclass(frozen=True)
class GetPsychologist(Query):
    psychologist_id: int


@dataclass(frozen=True)
class GetPsychologistByName(Query):
    name: str


@dataclass(frozen=True)
class GetAllClients(Query):
    pass


@dataclass(frozen=True)
class GetClient(Query):
    client_id: int


@dataclass(frozen=True)
class GetClientByName(Query):
    name: str


@dataclass(frozen=True)
class GetAvailableTimeSlotsForClient(Query):
    client_id: int


@dataclass(frozen=True)
class PsychologistAvailability:
    psychologist_id: int
    psychologist_name: str
    available_time_slots: list[TimeRange] = field(default_factory=list)
