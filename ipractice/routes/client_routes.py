from fastapi import APIRouter, Depends, status

from ipractice.bootstrap import get_mediator
from ipractice.routes.schemas import (
    AppointmentResponse,
    ClientDetailsResponse,
    ClientSummaryResponse,
    CreateBookingRequest,
    CreateClientRequest,
    PsychologistAvailabilityResponse,
)
from ipractice.use_cases import commands, queries
from ipractice.use_cases.mediator import Mediator

router = APIRouter(tags=['clients'])


@router.get('', response_model=list[ClientSummaryResponse])
def get_all_clients(mediator: Mediator = Depends(get_mediator)):
    clients = mediator.send(queries.GetAllClients())
    return [ClientSummaryResponse(id=item.id, name=item.name) for item in clients]


@router.post('', response_model=ClientDetailsResponse, status_code=status.HTTP_201_CREATED)
def register_client(data: CreateClientRequest, mediator: Mediator = Depends(get_mediator)):
    client = mediator.send(
        commands.RegisterClient(name=data.name, initial_psychologist_ids=tuple(data.initial_psychologist_ids))
    )
    return ClientDetailsResponse.from_client(client)


@router.get('/by-name/{name}', response_model=ClientSummaryResponse)
def get_client_by_name(name: str, mediator: Mediator = Depends(get_mediator)):
    client = mediator.send(queries.GetClientByName(name=name))
    return ClientSummaryResponse(id=client.id, name=client.name)


@router.get('/{client_id}', response_model=ClientDetailsResponse)
def get_client(client_id: int, mediator: Mediator = Depends(get_mediator)):
    client = mediator.send(queries.GetClient(client_id=client_id))
    return ClientDetailsResponse.from_client(client)


@router.get('/{client_id}/available-timeslots', response_model=list[PsychologistAvailabilityResponse])
def get_available_time_slots(client_id: int, mediator: Mediator = Depends(get_mediator)):
    availability = mediator.send(queries.GetAvailableTimeSlotsForClient(client_id=client_id))
    return [PsychologistAvailabilityResponse.from_availability(item) for item in availability]


@router.post('/{client_id}/bookings', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    client_id: int,
    data: CreateBookingRequest,
    mediator: Mediator = Depends(get_mediator),
):
    appointment = mediator.send(
        commands.BookAppointment(
            client_id=client_id,
            psychologist_id=data.psychologist_id,
            time_slot_id=data.available_time_slot_id,
            comment=data.comment,
        )
    )
    return AppointmentResponse.from_appointment(appointment)


@router.delete('/{client_id}/bookings/{appointment_id}', response_model=ClientDetailsResponse)
def cancel_appointment(
    client_id: int,
    appointment_id: str,
    mediator: Mediator = Depends(get_mediator),
):
    client = mediator.send(commands.CancelAppointment(client_id=client_id, appointment_id=appointment_id))
    return ClientDetailsResponse.from_client(client)
