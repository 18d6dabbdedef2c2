from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ipractice.bootstrap import build_mediator
from ipractice.core.errors import (
    ClientNotFoundError,
    ConcurrencyConflictError,
    PsychologistNotFoundError,
    TimeSlotNotFoundError,
)
from ipractice.core.fault_injection import NoFaultInjector
from ipractice.database import Base
from ipractice.unit_of_work import SqlAlchemyUnitOfWork
from ipractice.use_cases import commands, queries

SLOT_START = datetime(2026, 1, 5, 10, 0)
SLOT_END = datetime(2026, 1, 5, 11, 0)


def _setup_practice(mediator) -> tuple[int, int, str]:
    psychologist = mediator.send(commands.RegisterPsychologist(name='Dr. A'))
    psychologist = mediator.send(
        commands.CreateAvailableTimeSlot(psychologist_id=psychologist.id, start_time=SLOT_START, end_time=SLOT_END)
    )
    client = mediator.send(commands.RegisterClient(name='B', initial_psychologist_ids=(psychologist.id,)))
    return psychologist.id, client.id, psychologist.available_time_slots[0].id


def test_booking_moves_slot_and_mirrors_appointment(mediator, load_psychologist, load_client) -> None:
    psychologist_id, client_id, slot_id = _setup_practice(mediator)

    appointment = mediator.send(
        commands.BookAppointment(client_id=client_id, psychologist_id=psychologist_id, time_slot_id=slot_id)
    )

    psychologist = load_psychologist(psychologist_id)
    client = load_client(client_id)
    available_ids = [slot.id for slot in psychologist.available_time_slots]
    booked_ids = [item.id for item in psychologist.booked_appointments]

    assert appointment.id == slot_id
    assert available_ids == []
    assert booked_ids == [slot_id]
    assert psychologist.booked_appointments[0].client_id == client_id
    assert [item.id for item in client.appointments] == [slot_id]
    assert client.appointments[0].psychologist_id == psychologist_id
    assert client.appointments[0].comment is None


def test_booking_stores_comment(mediator, load_client) -> None:
    psychologist_id, client_id, slot_id = _setup_practice(mediator)

    appointment = mediator.send(
        commands.BookAppointment(
            client_id=client_id,
            psychologist_id=psychologist_id,
            time_slot_id=slot_id,
            comment="Robert'); DROP TABLE clients;--",
        )
    )

    assert appointment.comment == "Robert'); DROP TABLE clients;--"
    assert load_client(client_id).appointments[0].comment == "Robert'); DROP TABLE clients;--"


def test_booking_unknown_slot_leaves_both_aggregates_untouched(mediator, load_psychologist, load_client) -> None:
    psychologist_id, client_id, slot_id = _setup_practice(mediator)

    with pytest.raises(TimeSlotNotFoundError):
        mediator.send(
            commands.BookAppointment(client_id=client_id, psychologist_id=psychologist_id, time_slot_id='missing')
        )

    psychologist = load_psychologist(psychologist_id)
    assert [slot.id for slot in psychologist.available_time_slots] == [slot_id]
    assert psychologist.booked_appointments == []
    assert load_client(client_id).appointments == []


def test_booking_an_already_booked_slot_fails(mediator, load_client) -> None:
    psychologist_id, client_id, slot_id = _setup_practice(mediator)
    other_client = mediator.send(commands.RegisterClient(name='C'))
    mediator.send(commands.BookAppointment(client_id=client_id, psychologist_id=psychologist_id, time_slot_id=slot_id))

    with pytest.raises(TimeSlotNotFoundError):
        mediator.send(
            commands.BookAppointment(client_id=other_client.id, psychologist_id=psychologist_id, time_slot_id=slot_id)
        )

    assert load_client(other_client.id).appointments == []


def test_booking_for_unknown_client_does_not_consume_slot(mediator, load_psychologist) -> None:
    psychologist_id, _, slot_id = _setup_practice(mediator)

    with pytest.raises(ClientNotFoundError):
        mediator.send(commands.BookAppointment(client_id=999, psychologist_id=psychologist_id, time_slot_id=slot_id))

    psychologist = load_psychologist(psychologist_id)
    assert [slot.id for slot in psychologist.available_time_slots] == [slot_id]
    assert psychologist.booked_appointments == []


def test_booking_with_unknown_psychologist_fails(mediator) -> None:
    _, client_id, slot_id = _setup_practice(mediator)

    with pytest.raises(PsychologistNotFoundError):
        mediator.send(commands.BookAppointment(client_id=client_id, psychologist_id=999, time_slot_id=slot_id))


def test_updating_a_booked_slot_fails_with_not_found(mediator) -> None:
    psychologist_id, client_id, slot_id = _setup_practice(mediator)
    mediator.send(commands.BookAppointment(client_id=client_id, psychologist_id=psychologist_id, time_slot_id=slot_id))

    with pytest.raises(TimeSlotNotFoundError):
        mediator.send(
            commands.UpdateAvailableTimeSlot(
                psychologist_id=psychologist_id,
                time_slot_id=slot_id,
                start_time=SLOT_START,
                end_time=SLOT_END,
            )
        )


def test_available_time_slots_for_client_lists_assigned_psychologists(mediator) -> None:
    psychologist_id, client_id, slot_id = _setup_practice(mediator)
    mediator.send(commands.RegisterPsychologist(name='Dr. Unassigned'))

    availability = mediator.send(queries.GetAvailableTimeSlotsForClient(client_id=client_id))

    assert len(availability) == 1
    assert availability[0].psychologist_id == psychologist_id
    assert availability[0].psychologist_name == 'Dr. A'
    assert [slot.id for slot in availability[0].available_time_slots] == [slot_id]


def test_concurrent_bookings_of_one_slot_conflict(tmp_path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    mediator = build_mediator(session_factory=session_factory, fault_injector=NoFaultInjector())

    psychologist_id, client_id, slot_id = _setup_practice(mediator)
    other_client = mediator.send(commands.RegisterClient(name='C'))

    try:
        with SqlAlchemyUnitOfWork(session_factory) as slow_uow:
            psychologist = slow_uow.psychologists.get(psychologist_id)
            client = slow_uow.clients.get(other_client.id)

            mediator.send(
                commands.BookAppointment(client_id=client_id, psychologist_id=psychologist_id, time_slot_id=slot_id)
            )

            booked = psychologist.book_appointment(slot_id, client.id)
            client.book_appointment(booked.to_time_range(), psychologist.id)

            with pytest.raises(ConcurrencyConflictError):
                slow_uow.commit()

        stored = mediator.send(queries.GetPsychologist(psychologist_id=psychologist_id))
        assert [item.client_id for item in stored.booked_appointments] == [client_id]
        assert mediator.send(queries.GetClient(client_id=other_client.id)).appointments == []
    finally:
        engine.dispose()
