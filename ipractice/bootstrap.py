"""Wire handlers, session factory and fault injection into a mediator."""

from collections.abc import Callable
from functools import lru_cache

from sqlalchemy.orm import Session

from ipractice.core import config
from ipractice.core.fault_injection import FaultInjector, build_fault_injector
from ipractice.database import SessionLocal
from ipractice.unit_of_work import SqlAlchemyUnitOfWork
from ipractice.use_cases import client_handlers, psychologist_handlers
from ipractice.use_cases.mediator import Mediator

HANDLERS = {**psychologist_handlers.HANDLERS, **client_handlers.HANDLERS}


def build_mediator(
    session_factory: Callable[[], Session] = SessionLocal,
    fault_injector: FaultInjector | None = None,
) -> Mediator:
    if fault_injector is None:
        fault_injector = build_fault_injector(config.CANCEL_FAULT_PROBABILITY)

    return Mediator(
        uow_factory=lambda: SqlAlchemyUnitOfWork(session_factory),
        handlers=HANDLERS,
        fault_injector=fault_injector,
    )


@lru_cache(maxsize=1)
def get_mediator() -> Mediator:
    return build_mediator()
