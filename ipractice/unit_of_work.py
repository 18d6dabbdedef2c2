"""SQLAlchemy-backed unit of work spanning both aggregates.

One session carries the psychologist and client repositories, so a single
``commit`` persists changes to both aggregates or neither.
"""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ipractice.core.errors import ConcurrencyConflictError
from ipractice.database import SessionLocal
from ipractice.repositories.client_repository import ClientRepository
from ipractice.repositories.psychologist_repository import PsychologistRepository

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    clients: ClientRepository
    psychologists: PsychologistRepository

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self.session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self.session_factory()
        self.clients = ClientRepository(self.session)
        self.psychologists = PsychologistRepository(self.session)
        return self

    def __exit__(self, *args) -> None:
        # close() rolls back anything not committed and detaches loaded
        # aggregates without expiring them.
        self.session.close()

    def commit(self) -> None:
        try:
            self.session.commit()
        except StaleDataError as exc:
            self.session.rollback()
            logger.warning('Optimistic concurrency check failed: %s', exc)
            raise ConcurrencyConflictError(str(exc)) from exc

    def rollback(self) -> None:
        self.session.rollback()
