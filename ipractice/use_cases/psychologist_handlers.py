"""Handlers for psychologist registration and availability management."""

import logging
from collections.abc import Callable

from ipractice.core.errors import ClientNotFoundError, PsychologistNotFoundError
from ipractice.models.psychologist import Psychologist
from ipractice.unit_of_work import SqlAlchemyUnitOfWork
from ipractice.use_cases import commands, queries

logger = logging.getLogger(__name__)


def register_psychologist(cmd: commands.RegisterPsychologist, uow: SqlAlchemyUnitOfWork) -> Psychologist:
    initial_client_ids = list(dict.fromkeys(cmd.initial_client_ids))

    with uow:
        clients = uow.clients.get_many_by_ids(initial_client_ids)
        missing_ids = set(initial_client_ids) - {client.id for client in clients}
        if missing_ids:
            raise ClientNotFoundError(min(missing_ids))

        psychologist = Psychologist.create(cmd.name, initial_client_ids)
        uow.psychologists.add(psychologist)

        for client in clients:
            client.assign_new_psychologist(psychologist.id)

        uow.commit()

    logger.info(
        'Registered psychologist %s (%s) with %d initial clients',
        psychologist.id,
        psychologist.name,
        len(initial_client_ids),
    )
    return psychologist


def assign_client_to_psychologist(
    cmd: commands.AssignClientToPsychologist, uow: SqlAlchemyUnitOfWork
) -> Psychologist:
    with uow:
        psychologist = uow.psychologists.get(cmd.psychologist_id)
        client = uow.clients.get(cmd.client_id)

        psychologist.assign_new_client(client.id)
        client.assign_new_psychologist(psychologist.id)

        uow.commit()

    logger.info('Assigned client %s to psychologist %s', cmd.client_id, cmd.psychologist_id)
    return psychologist


def create_available_time_slot(
    cmd: commands.CreateAvailableTimeSlot, uow: SqlAlchemyUnitOfWork
) -> Psychologist:
    with uow:
        psychologist = uow.psychologists.get(cmd.psychologist_id)
        time_slot = psychologist.add_available_time_slot(cmd.start_time, cmd.end_time)
        uow.commit()

    logger.info('Psychologist %s opened time slot %s', cmd.psychologist_id, time_slot.id)
    return psychologist


def update_available_time_slot(
    cmd: commands.UpdateAvailableTimeSlot, uow: SqlAlchemyUnitOfWork
) -> Psychologist:
    with uow:
        psychologist = uow.psychologists.get(cmd.psychologist_id)
        psychologist.update_available_time_slot(cmd.time_slot_id, cmd.start_time, cmd.end_time)
        uow.commit()

    return psychologist


def delete_available_time_slot(
    cmd: commands.DeleteAvailableTimeSlot, uow: SqlAlchemyUnitOfWork
) -> Psychologist:
    with uow:
        psychologist = uow.psychologists.get(cmd.psychologist_id)
        psychologist.cancel_available_time_slot(cmd.time_slot_id)
        uow.commit()

    logger.info('Psychologist %s removed time slot %s', cmd.psychologist_id, cmd.time_slot_id)
    return psychologist


def get_all_psychologists(query: queries.GetAllPsychologists, uow: SqlAlchemyUnitOfWork) -> list[Psychologist]:
    with uow:
        return uow.psychologists.list_all()


def get_psychologist(query: queries.GetPsychologist, uow: SqlAlchemyUnitOfWork) -> Psychologist:
    with uow:
        return uow.psychologists.get(query.psychologist_id)


def get_psychologist_by_name(query: queries.GetPsychologistByName, uow: SqlAlchemyUnitOfWork) -> Psychologist:
    with uow:
        psychologist = uow.psychologists.get_by_name(query.name)

    if psychologist is None:
        raise PsychologistNotFoundError(query.name)
    return psychologist


HANDLERS: dict[type, Callable] = {
    commands.RegisterPsychologist: register_psychologist,
    commands.AssignClientToPsychologist: assign_client_to_psychologist,
    commands.CreateAvailableTimeSlot: create_available_time_slot,
    commands.UpdateAvailableTimeSlot: update_available_time_slot,
    commands.DeleteAvailableTimeSlot: delete_available_time_slot,
    queries.GetAllPsychologists: get_all_psychologists,
    queries.GetPsychologist: get_psychologist,
    queries.GetPsychologistByName: get_psychologist_by_name,
}
