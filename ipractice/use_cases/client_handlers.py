"""Handlers for client registration, booking and cancellation.

Booking and cancellation touch both aggregates. Both are loaded before
either is mutated and a single commit persists the pair, so a failure at
any step leaves the stored psychologist and client untouched.
"""

import logging
from collections.abc import Callable

from ipractice.core.errors import ClientNotFoundError, PsychologistNotFoundError
from ipractice.core.fault_injection import FaultInjector
from ipractice.models.client import Appointment, Client
from ipractice.unit_of_work import SqlAlchemyUnitOfWork
from ipractice.use_cases import commands, queries

logger = logging.getLogger(__name__)


def register_client(cmd: commands.RegisterClient, uow: SqlAlchemyUnitOfWork) -> Client:
    initial_psychologist_ids = list(dict.fromkeys(cmd.initial_psychologist_ids))

    with uow:
        psychologists = uow.psychologists.get_many_by_ids(initial_psychologist_ids)
        missing_ids = set(initial_psychologist_ids) - {psychologist.id for psychologist in psychologists}
        if missing_ids:
            raise PsychologistNotFoundError(min(missing_ids))

        client = Client.create(cmd.name, initial_psychologist_ids)
        uow.clients.add(client)

        for psychologist in psychologists:
            psychologist.assign_new_client(client.id)

        uow.commit()

    logger.info(
        'Registered client %s (%s) with %d initial psychologists',
        client.id,
        client.name,
        len(initial_psychologist_ids),
    )
    return client


def book_appointment(cmd: commands.BookAppointment, uow: SqlAlchemyUnitOfWork) -> Appointment:
    with uow:
        psychologist = uow.psychologists.get(cmd.psychologist_id)
        client = uow.clients.get(cmd.client_id)

        booked = psychologist.book_appointment(cmd.time_slot_id, client.id)
        appointment = client.book_appointment(booked.to_time_range(), psychologist.id, cmd.comment)

        if cmd.comment:
            uow.clients.save()
            uow.clients.log_appointment_comment(client.id, appointment.id, cmd.comment)

        uow.commit()

    logger.info(
        'Client %s booked appointment %s with psychologist %s',
        cmd.client_id,
        appointment.id,
        cmd.psychologist_id,
    )
    return appointment


def cancel_appointment(
    cmd: commands.CancelAppointment,
    uow: SqlAlchemyUnitOfWork,
    fault_injector: FaultInjector,
) -> Client:
    fault_injector.maybe_fail('canceling appointment')

    with uow:
        client = uow.clients.get(cmd.client_id)
        cancelled = client.cancel_booked_appointment(cmd.appointment_id)

        psychologist = uow.psychologists.get(cancelled.psychologist_id)
        psychologist.cancel_booked_appointment(cancelled.id)

        uow.commit()

    logger.info(
        'Client %s cancelled appointment %s with psychologist %s',
        cmd.client_id,
        cancelled.id,
        cancelled.psychologist_id,
    )
    return client


def get_all_clients(query: queries.GetAllClients, uow: SqlAlchemyUnitOfWork) -> list[Client]:
    with uow:
        return uow.clients.list_all()


def get_client(query: queries.GetClient, uow: SqlAlchemyUnitOfWork) -> Client:
    with uow:
        return uow.clients.get(query.client_id)


def get_client_by_name(query: queries.GetClientByName, uow: SqlAlchemyUnitOfWork) -> Client:
    with uow:
        client = uow.clients.get_by_name(query.name)

    if client is None:
        raise ClientNotFoundError(query.name)
    return client


def get_available_time_slots_for_client(
    query: queries.GetAvailableTimeSlotsForClient, uow: SqlAlchemyUnitOfWork
) -> list[queries.PsychologistAvailability]:
    with uow:
        client = uow.clients.get(query.client_id)
        psychologists = uow.psychologists.get_many_by_ids(list(client.assigned_psychologist_ids))

    return [
        queries.PsychologistAvailability(
            psychologist_id=psychologist.id,
            psychologist_name=psychologist.name,
            available_time_slots=[slot.to_time_range() for slot in psychologist.available_time_slots],
        )
        for psychologist in psychologists
    ]


HANDLERS: dict[type, Callable] = {
    commands.RegisterClient: register_client,
    commands.BookAppointment: book_appointment,
    commands.CancelAppointment: cancel_appointment,
    queries.GetAllClients: get_all_clients,
    queries.GetClient: get_client,
    queries.GetClientByName: get_client_by_name,
    queries.GetAvailableTimeSlotsForClient: get_available_time_slots_for_client,
}
