from fastapi import APIRouter, Depends, status

from ipractice.bootstrap import get_mediator
from ipractice.routes.schemas import (
    AssignClientRequest,
    CreatePsychologistRequest,
    PsychologistDetailsResponse,
    PsychologistSummaryResponse,
    TimeSlotRequest,
)
from ipractice.use_cases import commands, queries
from ipractice.use_cases.mediator import Mediator

router = APIRouter(tags=['psychologists'])


@router.get('', response_model=list[PsychologistSummaryResponse])
def get_all_psychologists(mediator: Mediator = Depends(get_mediator)):
    psychologists = mediator.send(queries.GetAllPsychologists())
    return [PsychologistSummaryResponse(id=item.id, name=item.name) for item in psychologists]


@router.post('', response_model=PsychologistDetailsResponse, status_code=status.HTTP_201_CREATED)
def register_psychologist(data: CreatePsychologistRequest, mediator: Mediator = Depends(get_mediator)):
    psychologist = mediator.send(
        commands.RegisterPsychologist(name=data.name, initial_client_ids=tuple(data.initial_clients))
    )
    return PsychologistDetailsResponse.from_psychologist(psychologist)


@router.get('/by-name/{name}', response_model=PsychologistSummaryResponse)
def get_psychologist_by_name(name: str, mediator: Mediator = Depends(get_mediator)):
    psychologist = mediator.send(queries.GetPsychologistByName(name=name))
    return PsychologistSummaryResponse(id=psychologist.id, name=psychologist.name)


@router.get('/{psychologist_id}', response_model=PsychologistDetailsResponse)
def get_psychologist(psychologist_id: int, mediator: Mediator = Depends(get_mediator)):
    psychologist = mediator.send(queries.GetPsychologist(psychologist_id=psychologist_id))
    return PsychologistDetailsResponse.from_psychologist(psychologist)


@router.post('/{psychologist_id}/clients', response_model=PsychologistDetailsResponse)
def assign_new_client(
    psychologist_id: int,
    data: AssignClientRequest,
    mediator: Mediator = Depends(get_mediator),
):
    psychologist = mediator.send(
        commands.AssignClientToPsychologist(psychologist_id=psychologist_id, client_id=data.client_id)
    )
    return PsychologistDetailsResponse.from_psychologist(psychologist)


@router.post('/{psychologist_id}/available-timeslots', response_model=PsychologistDetailsResponse)
def create_available_time_slot(
    psychologist_id: int,
    data: TimeSlotRequest,
    mediator: Mediator = Depends(get_mediator),
):
    psychologist = mediator.send(
        commands.CreateAvailableTimeSlot(
            psychologist_id=psychologist_id,
            start_time=data.start_time,
            end_time=data.end_time,
        )
    )
    return PsychologistDetailsResponse.from_psychologist(psychologist)


@router.patch('/{psychologist_id}/available-timeslots/{time_slot_id}', response_model=PsychologistDetailsResponse)
def update_available_time_slot(
    psychologist_id: int,
    time_slot_id: str,
    data: TimeSlotRequest,
    mediator: Mediator = Depends(get_mediator),
):
    psychologist = mediator.send(
        commands.UpdateAvailableTimeSlot(
            psychologist_id=psychologist_id,
            time_slot_id=time_slot_id,
            start_time=data.start_time,
            end_time=data.end_time,
        )
    )
    return PsychologistDetailsResponse.from_psychologist(psychologist)


@router.delete('/{psychologist_id}/available-timeslots/{time_slot_id}', response_model=PsychologistDetailsResponse)
def delete_available_time_slot(
    psychologist_id: int,
    time_slot_id: str,
    mediator: Mediator = Depends(get_mediator),
):
    psychologist = mediator.send(
        commands.DeleteAvailableTimeSlot(psychologist_id=psychologist_id, time_slot_id=time_slot_id)
    )
    return PsychologistDetailsResponse.from_psychologist(psychologist)
