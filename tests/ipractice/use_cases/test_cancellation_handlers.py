import random
from datetime import datetime

import pytest

from ipractice.bootstrap import build_mediator
from ipractice.core.errors import AppointmentNotFoundError, ClientNotFoundError, SimulatedFailureError
from ipractice.core.fault_injection import RandomFaultInjector
from ipractice.use_cases import commands

SLOT_START = datetime(2026, 1, 5, 10, 0)
SLOT_END = datetime(2026, 1, 5, 11, 0)


@pytest.fixture
def booked(mediator) -> tuple[int, int, str]:
    psychologist = mediator.send(commands.RegisterPsychologist(name='Dr. A'))
    psychologist = mediator.send(
        commands.CreateAvailableTimeSlot(psychologist_id=psychologist.id, start_time=SLOT_START, end_time=SLOT_END)
    )
    client = mediator.send(commands.RegisterClient(name='B', initial_psychologist_ids=(psychologist.id,)))
    slot_id = psychologist.available_time_slots[0].id
    mediator.send(commands.BookAppointment(client_id=client.id, psychologist_id=psychologist.id, time_slot_id=slot_id))
    return psychologist.id, client.id, slot_id


def test_cancel_removes_appointment_from_both_sides(mediator, booked, load_psychologist, load_client) -> None:
    psychologist_id, client_id, appointment_id = booked

    client = mediator.send(commands.CancelAppointment(client_id=client_id, appointment_id=appointment_id))

    assert client.appointments == []
    assert load_client(client_id).appointments == []
    assert load_psychologist(psychologist_id).booked_appointments == []


def test_cancel_unknown_appointment_changes_nothing(mediator, booked, load_psychologist, load_client) -> None:
    psychologist_id, client_id, appointment_id = booked

    with pytest.raises(AppointmentNotFoundError):
        mediator.send(commands.CancelAppointment(client_id=client_id, appointment_id='missing'))

    assert [item.id for item in load_client(client_id).appointments] == [appointment_id]
    assert [item.id for item in load_psychologist(psychologist_id).booked_appointments] == [appointment_id]


def test_cancel_for_unknown_client_fails(mediator, booked) -> None:
    _, _, appointment_id = booked

    with pytest.raises(ClientNotFoundError):
        mediator.send(commands.CancelAppointment(client_id=999, appointment_id=appointment_id))


def test_cancel_twice_fails_the_second_time(mediator, booked) -> None:
    _, client_id, appointment_id = booked
    mediator.send(commands.CancelAppointment(client_id=client_id, appointment_id=appointment_id))

    with pytest.raises(AppointmentNotFoundError):
        mediator.send(commands.CancelAppointment(client_id=client_id, appointment_id=appointment_id))


def test_injected_failure_aborts_before_touching_storage(
    session_factory, mediator, booked, load_psychologist, load_client
) -> None:
    psychologist_id, client_id, appointment_id = booked
    failing_mediator = build_mediator(
        session_factory=session_factory,
        fault_injector=RandomFaultInjector(1.0, rng=random.Random(0)),
    )

    with pytest.raises(SimulatedFailureError):
        failing_mediator.send(commands.CancelAppointment(client_id=client_id, appointment_id=appointment_id))

    assert [item.id for item in load_client(client_id).appointments] == [appointment_id]
    assert [item.id for item in load_psychologist(psychologist_id).booked_appointments] == [appointment_id]


def test_disabled_fault_injector_never_blocks_cancellation(session_factory, booked, load_client) -> None:
    _, client_id, appointment_id = booked
    quiet_mediator = build_mediator(
        session_factory=session_factory,
        fault_injector=RandomFaultInjector(0.0, rng=random.Random(0)),
    )

    quiet_mediator.send(commands.CancelAppointment(client_id=client_id, appointment_id=appointment_id))

    assert load_client(client_id).appointments == []
